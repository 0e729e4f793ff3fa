"""EventStoreClient abstract base class and its HTTP implementation."""

from __future__ import annotations

import asyncio
import uuid
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Sequence
from typing import TypeVar

import httpx
import structlog

from .config import EventStoreConfig
from .exceptions import DeadlineExceededError
from .fetcher import PageFetcher
from .models import EventEnvelope
from .reader import StreamReader
from .resolver import EntryResolver
from .writer import StreamWriter

T = TypeVar("T")


class EventStoreClient(ABC):
    """Event store client abstract base class."""

    @abstractmethod
    async def create_stream(
        self,
        stream_id: str | uuid.UUID,
        events: Sequence[EventEnvelope],
        timeout: float | None = None,
    ) -> str | None:
        """Create a stream holding ``events``. Returns the store's location for it, if any."""
        ...

    @abstractmethod
    async def open_stream(
        self,
        event_source_id: str | uuid.UUID,
        timeout: float | None = None,
    ) -> list[EventEnvelope]:
        """Read the whole history of a stream.

        Oldest first unless the config sets ``order=StreamOrder.FEED``, which
        keeps the feed's newest-first page order.
        """
        ...


class HttpEventStoreClient(EventStoreClient):
    """Event store client over the store's HTTP Atom API, built on httpx.

    Each call opens its own ``httpx.AsyncClient``; nothing is shared between
    calls. ``timeout`` bounds a whole call; requests still in flight when it
    expires are cancelled.
    """

    def __init__(
        self,
        config: EventStoreConfig,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._config = config
        self._logger = logger or structlog.get_logger(__name__)

    def _make_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._config.timeout_seconds,
            auth=self._config.auth,
        )

    def _reader(self, http: httpx.AsyncClient) -> StreamReader:
        cfg = self._config
        return StreamReader(
            PageFetcher(http, logger=self._logger, retry=cfg.retry),
            EntryResolver(http, logger=self._logger, retry=cfg.retry),
            base_url=cfg.base_url,
            page_size=cfg.page_size,
            order=cfg.order,
            max_concurrent_resolutions=cfg.max_concurrent_resolutions,
            logger=self._logger,
        )

    def _writer(self, http: httpx.AsyncClient) -> StreamWriter:
        return StreamWriter(http, self._config.base_url, logger=self._logger, retry=self._config.retry)

    async def create_stream(
        self,
        stream_id: str | uuid.UUID,
        events: Sequence[EventEnvelope],
        timeout: float | None = None,
    ) -> str | None:
        async with self._make_client() as http:
            writer = self._writer(http)
            stream_id = str(stream_id)
            return await _with_deadline(
                writer.create_stream(stream_id, events), timeout, writer.stream_url(stream_id)
            )

    async def open_stream(
        self,
        event_source_id: str | uuid.UUID,
        timeout: float | None = None,
    ) -> list[EventEnvelope]:
        async with self._make_client() as http:
            reader = self._reader(http)
            event_source_id = str(event_source_id)
            return await _with_deadline(
                reader.open_stream(event_source_id), timeout, reader.head_url(event_source_id)
            )


async def _with_deadline(call: Awaitable[T], timeout: float | None, url: str) -> T:
    if timeout is None:
        return await call
    try:
        return await asyncio.wait_for(call, timeout=timeout)
    except asyncio.TimeoutError:
        raise DeadlineExceededError(timeout, url=url) from None
