"""httpx request helpers shared by the fetcher, resolver and writer."""

from __future__ import annotations

from typing import Any

import httpx

from .exceptions import (
    StreamDeletedError,
    StreamNotFoundError,
    TransportError,
    UnexpectedStatusError,
)

ATOM_CONTENT_TYPE = "application/atom+xml"
JSON_CONTENT_TYPE = "application/json"


async def send(http: httpx.AsyncClient, method: str, url: str, **kwargs: Any) -> httpx.Response:
    """Send one request, turning httpx failures into :class:`TransportError`."""
    try:
        return await http.request(method, url, **kwargs)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise TransportError(f"{method} {url} failed: {e}", cause=e, url=url) from e


def check_read_status(resp: httpx.Response, url: str) -> None:
    """Raise for any non-2xx answer to a read request."""
    if resp.status_code == 404:
        raise StreamNotFoundError(resp.status_code, resp.reason_phrase, url=url)
    if resp.status_code == 410:
        raise StreamDeletedError(resp.status_code, resp.reason_phrase, url=url)
    if not resp.is_success:
        raise UnexpectedStatusError(resp.status_code, resp.reason_phrase, url=url)
