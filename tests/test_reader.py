"""StreamReader unit tests: pagination, ordering and failure handling."""

import asyncio

import httpx
import pytest
import respx
from helpers import (
    BASE_URL,
    atom_entry,
    atom_feed,
    atom_response,
    event_url,
    head_url,
    make_events,
    mock_stream,
    page_url,
)
from k1s0_event_store_client import (
    DecodeError,
    EntryResolver,
    EventEnvelope,
    EventStoreClientError,
    PageFetcher,
    StreamNotFoundError,
    StreamOrder,
    StreamReader,
    TransportError,
)


def make_reader(
    http: httpx.AsyncClient,
    page_size: int = 20,
    order: StreamOrder = StreamOrder.CHRONOLOGICAL,
    max_concurrent: int = 1,
) -> StreamReader:
    return StreamReader(
        PageFetcher(http),
        EntryResolver(http),
        base_url=BASE_URL,
        page_size=page_size,
        order=order,
        max_concurrent_resolutions=max_concurrent,
    )


async def read(stream_id: str, **kwargs) -> list[EventEnvelope]:
    async with httpx.AsyncClient() as http:
        return await make_reader(http, **kwargs).open_stream(stream_id)


async def test_head_url() -> None:
    async with httpx.AsyncClient() as http:
        reader = make_reader(http, page_size=5)
    assert reader.head_url("orders 1") == f"{BASE_URL}/streams/orders+1/head/backward/5"


@respx.mock
async def test_single_page_keeps_feed_order() -> None:
    """A stream that fits one page comes back in the page's entry order."""
    events = make_events(5)
    fake = mock_stream("orders", events, page_size=20)
    result = await read("orders", order=StreamOrder.FEED)
    assert result == list(reversed(events))
    assert fake.page_fetches == 1
    assert fake.entry_fetches == 5


@respx.mock
async def test_single_page_chronological() -> None:
    events = make_events(5)
    mock_stream("orders", events, page_size=20)
    assert await read("orders") == events


@respx.mock
async def test_exactly_page_size_events_fetches_one_page() -> None:
    """P events with page size P: no next link, one page fetch."""
    events = make_events(4)
    fake = mock_stream("orders", events, page_size=4)
    result = await read("orders", page_size=4)
    assert result == events
    assert fake.page_fetches == 1
    assert len(fake.page_routes) == 1


@pytest.mark.parametrize("count,page_size,pages", [(5, 2, 3), (9, 3, 3), (41, 20, 3), (21, 20, 2)])
@respx.mock
async def test_multi_page_stream_is_complete(count: int, page_size: int, pages: int) -> None:
    """N pages: N page fetches, one entry fetch per event, no gaps or duplicates."""
    events = make_events(count)
    fake = mock_stream("orders", events, page_size=page_size)
    result = await read("orders", page_size=page_size)
    assert fake.page_fetches == pages
    assert fake.entry_fetches == count
    assert all(route.call_count == 1 for route in fake.entry_routes)
    assert len(result) == count
    assert len({e.event_id for e in result}) == count
    assert result == events


@respx.mock
async def test_multi_page_feed_order_is_newest_first() -> None:
    events = make_events(7)
    mock_stream("orders", events, page_size=3)
    result = await read("orders", page_size=3, order=StreamOrder.FEED)
    assert [e.data["seq"] for e in result] == [6, 5, 4, 3, 2, 1, 0]


@respx.mock
async def test_empty_stream() -> None:
    fake = mock_stream("orders", [], page_size=20)
    assert await read("orders") == []
    assert fake.page_fetches == 1


@respx.mock
async def test_entry_failure_discards_partial_result() -> None:
    """An entry failure on page 2 of 3 aborts the read with context attached."""
    events = make_events(6)
    fake = mock_stream("orders", events, page_size=2)
    # Page 2 lists events 3 and 2; fail the second entry of that page.
    fake.entry_routes[2].mock(side_effect=httpx.ConnectError("Connection reset"))

    with pytest.raises(TransportError) as exc_info:
        await read("orders", page_size=2)

    error = exc_info.value
    assert error.page_index == 1
    assert error.entry_index == 1
    assert error.url == event_url("orders", 2)
    assert error.page_url == page_url("orders", 3, 2)
    assert "page_index=1" in str(error)
    # The third page is never requested.
    assert fake.page_routes[2].call_count == 0


@respx.mock
async def test_page_failure_aborts_read() -> None:
    events = make_events(4)
    fake = mock_stream("orders", events, page_size=2)
    fake.page_routes[1].mock(return_value=atom_response("<feed"))

    with pytest.raises(DecodeError) as exc_info:
        await read("orders", page_size=2)
    assert exc_info.value.page_index == 1
    assert exc_info.value.entry_index is None


@respx.mock
async def test_missing_stream() -> None:
    respx.get(head_url("missing", 20)).mock(return_value=httpx.Response(404))
    with pytest.raises(StreamNotFoundError) as exc_info:
        await read("missing")
    assert exc_info.value.page_index == 0


@respx.mock
async def test_entry_without_detail_link() -> None:
    body = atom_feed(["<entry><id>x</id><link href='http://es/x' rel='edit' /></entry>"], {})
    respx.get(head_url("orders", 20)).mock(return_value=atom_response(body))
    with pytest.raises(DecodeError) as exc_info:
        await read("orders")
    assert exc_info.value.entry_index == 0


@respx.mock
async def test_uses_alternate_link_not_position() -> None:
    """Entries whose alternate link comes first still resolve to the right event."""
    envelope = EventEnvelope(event_type="Created", data={"a": 1})
    body = atom_feed(
        [
            "<entry><id>x</id>"
            f'<link href="{event_url("orders", 0)}" rel="alternate" />'
            f'<link href="{BASE_URL}/wrong" rel="edit" />'
            "</entry>"
        ],
        {},
    )
    respx.get(head_url("orders", 20)).mock(return_value=atom_response(body))
    respx.get(event_url("orders", 0)).mock(return_value=httpx.Response(200, json=envelope.to_dict()))
    wrong = respx.get(f"{BASE_URL}/wrong").mock(return_value=httpx.Response(500))
    assert await read("orders") == [envelope]
    assert wrong.call_count == 0


@respx.mock
async def test_concurrent_resolution_preserves_index_order() -> None:
    """Entries resolved in parallel land in page order, not completion order."""
    events = make_events(6)
    entries = [atom_entry("orders", n, events[n].event_type) for n in range(5, -1, -1)]
    respx.get(head_url("orders", 20)).mock(return_value=atom_response(atom_feed(entries, {})))

    in_flight = 0
    peak = 0

    def responder(number: int):
        async def respond(request: httpx.Request) -> httpx.Response:
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            # Older events answer later, so completion order is reversed.
            await asyncio.sleep(0.01 * (6 - number))
            in_flight -= 1
            return httpx.Response(200, json=events[number].to_dict())

        return respond

    for n in range(6):
        respx.get(event_url("orders", n)).mock(side_effect=responder(n))

    result = await read("orders", order=StreamOrder.FEED, max_concurrent=3)
    assert result == list(reversed(events))
    assert peak == 3


@respx.mock
async def test_concurrent_resolution_failure_propagates() -> None:
    events = make_events(3)
    fake = mock_stream("orders", events, page_size=20)
    fake.entry_routes[1].mock(return_value=httpx.Response(200, text="garbage"))
    with pytest.raises(EventStoreClientError) as exc_info:
        await read("orders", max_concurrent=4)
    assert isinstance(exc_info.value, DecodeError)
    assert exc_info.value.entry_index == 1
    assert fake.page_fetches == 1
