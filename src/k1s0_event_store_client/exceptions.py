"""Event store client exceptions."""

from __future__ import annotations


class EventStoreClientErrorCodes:
    """Error code constants for EventStoreClientError."""

    TRANSPORT_ERROR: str = "TRANSPORT_ERROR"
    DEADLINE_EXCEEDED: str = "DEADLINE_EXCEEDED"
    UNEXPECTED_STATUS: str = "UNEXPECTED_STATUS"
    STREAM_NOT_FOUND: str = "STREAM_NOT_FOUND"
    STREAM_DELETED: str = "STREAM_DELETED"
    DECODE_ERROR: str = "DECODE_ERROR"
    INVALID_ARGUMENT: str = "INVALID_ARGUMENT"


class EventStoreClientError(Exception):
    """Base error of the event store client.

    Besides the code and message, an error carries where in a read it
    happened: the request URL, the feed page (0-based index and URL) and
    the entry index within that page. Unknown parts stay ``None``.
    """

    def __init__(
        self,
        code: str,
        message: str,
        cause: Exception | None = None,
        url: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.url = url
        self.page_url: str | None = None
        self.page_index: int | None = None
        self.entry_index: int | None = None
        if cause is not None:
            self.__cause__ = cause

    def with_context(
        self,
        *,
        page_url: str | None = None,
        page_index: int | None = None,
        entry_index: int | None = None,
    ) -> EventStoreClientError:
        """Attach read-position context; already-set values are kept."""
        if self.page_url is None:
            self.page_url = page_url
        if self.page_index is None:
            self.page_index = page_index
        if self.entry_index is None:
            self.entry_index = entry_index
        return self

    def __str__(self) -> str:
        text = f"{self.code}: {super().__str__()}"
        context = [
            f"{name}={value}"
            for name, value in (
                ("page_index", self.page_index),
                ("entry_index", self.entry_index),
                ("url", self.url),
            )
            if value is not None
        ]
        if context:
            text += f" ({', '.join(context)})"
        return text


class TransportError(EventStoreClientError):
    """Connection, DNS or timeout failure in the HTTP layer."""

    def __init__(self, message: str, cause: Exception | None = None, url: str | None = None) -> None:
        super().__init__(EventStoreClientErrorCodes.TRANSPORT_ERROR, message, cause=cause, url=url)


class DeadlineExceededError(TransportError):
    """The caller-supplied deadline for a whole operation expired."""

    def __init__(self, timeout: float, url: str | None = None) -> None:
        super().__init__(f"operation did not complete within {timeout:.1f}s", url=url)
        self.code = EventStoreClientErrorCodes.DEADLINE_EXCEEDED
        self.timeout = timeout


class UnexpectedStatusError(EventStoreClientError):
    """The request went through but the store answered with an unexpected status."""

    def __init__(
        self,
        status_code: int,
        reason: str,
        url: str | None = None,
        code: str = EventStoreClientErrorCodes.UNEXPECTED_STATUS,
    ) -> None:
        super().__init__(
            code,
            f"Unexpected http status code in response: {status_code} {reason}".rstrip(),
            url=url,
        )
        self.status_code = status_code
        self.reason = reason


class StreamNotFoundError(UnexpectedStatusError):
    """The stream does not exist."""

    def __init__(self, status_code: int, reason: str, url: str | None = None) -> None:
        super().__init__(status_code, reason, url=url, code=EventStoreClientErrorCodes.STREAM_NOT_FOUND)


class StreamDeletedError(UnexpectedStatusError):
    """The stream has been deleted."""

    def __init__(self, status_code: int, reason: str, url: str | None = None) -> None:
        super().__init__(status_code, reason, url=url, code=EventStoreClientErrorCodes.STREAM_DELETED)


class DecodeError(EventStoreClientError):
    """A feed page or event body could not be parsed."""

    def __init__(self, message: str, cause: Exception | None = None, url: str | None = None) -> None:
        super().__init__(EventStoreClientErrorCodes.DECODE_ERROR, message, cause=cause, url=url)


class InvalidArgumentError(EventStoreClientError):
    """An argument was rejected before any request was made."""

    def __init__(self, message: str) -> None:
        super().__init__(EventStoreClientErrorCodes.INVALID_ARGUMENT, message)
