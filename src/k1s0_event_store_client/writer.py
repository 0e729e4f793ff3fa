"""Stream Writer: creates a stream from a batch of events."""

from __future__ import annotations

from collections.abc import Sequence
from urllib.parse import quote_plus

import httpx
import structlog

from .codec import encode_body
from .exceptions import InvalidArgumentError, TransportError, UnexpectedStatusError
from .models import EventEnvelope
from .retry import RetryConfig, with_retry
from .transport import JSON_CONTENT_TYPE, send


class StreamWriter:
    """Posts a new stream to the store in a single request."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        base_url: str,
        logger: structlog.stdlib.BoundLogger | None = None,
        retry: RetryConfig | None = None,
    ) -> None:
        self._http = http
        self._base_url = base_url.rstrip("/")
        self._logger = (logger or structlog.get_logger(__name__)).bind(component="stream_writer")
        self._retry = retry

    def stream_url(self, stream_id: str) -> str:
        return f"{self._base_url}/streams/{quote_plus(stream_id)}"

    async def create_stream(self, stream_id: str, events: Sequence[EventEnvelope]) -> str | None:
        """Create ``stream_id`` holding ``events`` in order.

        Only ``201 Created`` counts as success. Returns the ``Location`` of
        the new stream when the store sends one.

        Raises:
            InvalidArgumentError: ``events`` is empty.
            TransportError: the request did not complete.
            UnexpectedStatusError: any status other than 201.
        """
        if not events:
            raise InvalidArgumentError(f"cannot create stream {stream_id!r} without events")

        url = self.stream_url(stream_id)
        body = encode_body(events)
        log = self._logger.bind(stream_id=stream_id)
        log.debug("creating new stream", url=url, events=len(events))

        try:
            resp = await with_retry(
                self._retry,
                lambda: send(
                    self._http,
                    "POST",
                    url,
                    content=body,
                    headers={"Content-Type": JSON_CONTENT_TYPE},
                ),
                log,
            )
        except TransportError as e:
            log.error("error while posting new stream request", error=str(e))
            raise

        if resp.status_code != httpx.codes.CREATED:
            error = UnexpectedStatusError(resp.status_code, resp.reason_phrase, url=url)
            log.error("stream creation rejected", status=resp.status_code, error=str(error))
            raise error

        location = resp.headers.get("location") or None
        if location:
            log.info("stream created", location=location)
        return location
