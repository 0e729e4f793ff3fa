"""Stream Reader: rebuilds a stream's history from its backward feed."""

from __future__ import annotations

import asyncio
from urllib.parse import quote_plus

import structlog

from .config import DEFAULT_PAGE_SIZE, StreamOrder
from .exceptions import DecodeError, EventStoreClientError
from .fetcher import PageFetcher
from .models import EventEnvelope, FeedEntry, FeedPage
from .resolver import EntryResolver


class StreamReader:
    """Walks a stream's feed from the head page through every ``next`` link.

    Pages arrive newest first. Each page's entries are resolved into
    envelopes and stored by index, so entry order inside a page never
    depends on which fetch finished first. Any failure aborts the read and
    nothing collected so far is returned.

    With the default ``StreamOrder.CHRONOLOGICAL`` the result is oldest
    first, i.e. the reverse of the order entries appear in the feed pages.
    ``StreamOrder.FEED`` returns them exactly as the pages list them.
    """

    def __init__(
        self,
        fetcher: PageFetcher,
        resolver: EntryResolver,
        base_url: str,
        page_size: int = DEFAULT_PAGE_SIZE,
        order: StreamOrder = StreamOrder.CHRONOLOGICAL,
        max_concurrent_resolutions: int = 1,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._resolver = resolver
        self._base_url = base_url.rstrip("/")
        self._page_size = page_size
        self._order = order
        self._max_concurrent = max_concurrent_resolutions
        self._logger = (logger or structlog.get_logger(__name__)).bind(component="stream_reader")

    def head_url(self, event_source_id: str) -> str:
        stream_id = quote_plus(event_source_id)
        return f"{self._base_url}/streams/{stream_id}/head/backward/{self._page_size}"

    async def open_stream(self, event_source_id: str) -> list[EventEnvelope]:
        """Return every event of the stream, ordered according to ``order``.

        Oldest first by default; newest first, in page entry order, with
        ``StreamOrder.FEED``.

        Raises:
            EventStoreClientError: the first failure met, annotated with the
                page (and entry) it happened on.
        """
        log = self._logger.bind(stream_id=event_source_id)
        result: list[EventEnvelope] = []
        url: str | None = self.head_url(event_source_id)
        page_index = 0

        while url is not None:
            try:
                page = await self._fetcher.fetch_page(url)
                result.extend(await self._resolve_page(page))
            except EventStoreClientError as e:
                e.with_context(page_url=url, page_index=page_index)
                log.debug("stream read aborted", page_index=page_index, error=str(e))
                raise

            url = page.next_url
            if url is not None:
                page_index += 1
                log.debug("following next link", next=url, page_index=page_index)

        if self._order == StreamOrder.CHRONOLOGICAL:
            result.reverse()
        log.info("stream read", pages=page_index + 1, events=len(result), order=str(self._order))
        return result

    async def _resolve_page(self, page: FeedPage) -> list[EventEnvelope]:
        slots: list[EventEnvelope | None] = [None] * len(page.entries)

        async def resolve_into_slot(index: int, entry: FeedEntry) -> None:
            slots[index] = await self._resolve(index, entry)

        if self._max_concurrent == 1 or len(page.entries) <= 1:
            for index, entry in enumerate(page.entries):
                await resolve_into_slot(index, entry)
        else:
            semaphore = asyncio.Semaphore(self._max_concurrent)

            async def bounded(index: int, entry: FeedEntry) -> None:
                async with semaphore:
                    await resolve_into_slot(index, entry)

            tasks = [
                asyncio.create_task(bounded(index, entry))
                for index, entry in enumerate(page.entries)
            ]
            try:
                await asyncio.gather(*tasks)
            except BaseException:
                for task in tasks:
                    task.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)
                raise

        return [envelope for envelope in slots if envelope is not None]

    async def _resolve(self, index: int, entry: FeedEntry) -> EventEnvelope:
        detail_url = entry.detail_url
        if detail_url is None:
            raise DecodeError(f"feed entry {entry.id!r} has no detail link").with_context(
                entry_index=index
            )
        try:
            return await self._resolver.resolve_entry(detail_url)
        except EventStoreClientError as e:
            e.with_context(entry_index=index)
            raise
