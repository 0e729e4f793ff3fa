"""Entry Resolver: fetches the full event behind a feed entry."""

from __future__ import annotations

import httpx
import structlog

from .codec import decode
from .exceptions import DecodeError
from .models import EventEnvelope
from .retry import RetryConfig, with_retry
from .transport import JSON_CONTENT_TYPE, check_read_status, send


class EntryResolver:
    """Resolves entry detail links into envelopes."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        logger: structlog.stdlib.BoundLogger | None = None,
        retry: RetryConfig | None = None,
    ) -> None:
        self._http = http
        self._logger = (logger or structlog.get_logger(__name__)).bind(component="entry_resolver")
        self._retry = retry

    async def resolve_entry(self, detail_url: str) -> EventEnvelope:
        """Fetch ``detail_url`` as JSON and decode it into an envelope."""
        return await with_retry(self._retry, lambda: self._resolve(detail_url), self._logger)

    async def _resolve(self, detail_url: str) -> EventEnvelope:
        resp = await send(self._http, "GET", detail_url, headers={"Accept": JSON_CONTENT_TYPE})
        check_read_status(resp, detail_url)
        try:
            return decode(resp.content)
        except DecodeError as e:
            e.url = detail_url
            raise
