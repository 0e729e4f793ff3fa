"""Test helpers: Atom documents and a respx-backed fake of the store's feed."""

from __future__ import annotations

from dataclasses import dataclass, field
from urllib.parse import quote_plus

import httpx
import respx
from k1s0_event_store_client import EventEnvelope

BASE_URL = "http://eventstore:2113"


def event_url(stream_id: str, number: int) -> str:
    return f"{BASE_URL}/streams/{quote_plus(stream_id)}/{number}"


def head_url(stream_id: str, page_size: int) -> str:
    return f"{BASE_URL}/streams/{quote_plus(stream_id)}/head/backward/{page_size}"


def page_url(stream_id: str, start: int, page_size: int) -> str:
    return f"{BASE_URL}/streams/{quote_plus(stream_id)}/{start}/backward/{page_size}"


def atom_entry(stream_id: str, number: int, event_type: str = "TestEvent") -> str:
    url = event_url(stream_id, number)
    return (
        "<entry>"
        f"<title>{number}@{stream_id}</title>"
        f"<id>{url}</id>"
        "<updated>2024-05-01T10:00:00Z</updated>"
        "<author><name>EventStore</name></author>"
        f"<summary>{event_type}</summary>"
        f'<link href="{url}" rel="edit" />'
        f'<link href="{url}" rel="alternate" />'
        "</entry>"
    )


def atom_feed(entries: list[str], links: dict[str, str]) -> str:
    link_xml = "".join(f'<link href="{href}" rel="{rel}" />' for rel, href in links.items())
    return (
        '<?xml version="1.0" encoding="utf-8"?>'
        '<feed xmlns="http://www.w3.org/2005/Atom">'
        "<title>Event stream</title>"
        "<id>urn:stream</id>"
        "<updated>2024-05-01T10:00:00Z</updated>"
        "<author><name>EventStore</name></author>"
        f"{link_xml}{''.join(entries)}"
        "</feed>"
    )


def atom_response(body: str) -> httpx.Response:
    return httpx.Response(200, text=body, headers={"Content-Type": "application/atom+xml"})


@dataclass
class FakeStream:
    """Routes registered for one stream, in the order the store serves pages."""

    stream_id: str
    events: list[EventEnvelope]
    page_routes: list[respx.Route] = field(default_factory=list)
    entry_routes: list[respx.Route] = field(default_factory=list)

    @property
    def page_fetches(self) -> int:
        return sum(route.call_count for route in self.page_routes)

    @property
    def entry_fetches(self) -> int:
        return sum(route.call_count for route in self.entry_routes)


def make_events(count: int, prefix: str = "Event") -> list[EventEnvelope]:
    return [
        EventEnvelope(event_type=f"{prefix}{i}", data={"seq": i, "nested": {"n": [i, i + 1]}})
        for i in range(count)
    ]


def mock_stream(stream_id: str, events: list[EventEnvelope], page_size: int) -> FakeStream:
    """Serve ``events`` (oldest first) as a backward paged feed.

    Pages list entries newest first. A ``next`` link is present only while
    older events remain. Must be called inside an active respx mock.
    """
    fake = FakeStream(stream_id=stream_id, events=events)
    for number, envelope in enumerate(events):
        fake.entry_routes.append(
            respx.get(event_url(stream_id, number)).mock(
                return_value=httpx.Response(200, json=envelope.to_dict())
            )
        )

    start = len(events) - 1
    url = head_url(stream_id, page_size)
    while True:
        numbers = list(range(start, max(start - page_size, -1), -1))
        links = {
            "self": f"{BASE_URL}/streams/{quote_plus(stream_id)}",
            "first": head_url(stream_id, page_size),
            "last": page_url(stream_id, page_size - 1, page_size),
        }
        older = start - page_size
        if older >= 0:
            links["next"] = page_url(stream_id, older, page_size)
        entries = [atom_entry(stream_id, n, events[n].event_type) for n in numbers]
        fake.page_routes.append(respx.get(url).mock(return_value=atom_response(atom_feed(entries, links))))
        if older < 0:
            break
        url = links["next"]
        start = older
    return fake
