"""Page Fetcher: downloads and parses one feed page."""

from __future__ import annotations

import httpx
import structlog

from .feed import parse_feed
from .models import FeedPage
from .retry import RetryConfig, with_retry
from .transport import ATOM_CONTENT_TYPE, check_read_status, send


class PageFetcher:
    """Fetches one page of a stream's Atom feed."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        logger: structlog.stdlib.BoundLogger | None = None,
        retry: RetryConfig | None = None,
    ) -> None:
        self._http = http
        self._logger = (logger or structlog.get_logger(__name__)).bind(component="page_fetcher")
        self._retry = retry

    async def fetch_page(self, url: str) -> FeedPage:
        """Return the entries and navigation links of the page at ``url``.

        Raises:
            TransportError: the request did not complete.
            StreamNotFoundError: the store answered 404.
            StreamDeletedError: the store answered 410.
            UnexpectedStatusError: any other non-2xx answer.
            DecodeError: the body is not an Atom feed.
        """
        return await with_retry(self._retry, lambda: self._fetch(url), self._logger)

    async def _fetch(self, url: str) -> FeedPage:
        resp = await send(self._http, "GET", url, headers={"Accept": ATOM_CONTENT_TYPE})
        check_read_status(resp, url)
        page = parse_feed(resp.content, url)
        for rel, href in page.links.items():
            self._logger.debug("feed link", rel=rel, href=href)
        return page
