"""Event store client configuration."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from .retry import RetryConfig

DEFAULT_PAGE_SIZE = 20
MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 4096


class StreamOrder(StrEnum):
    """Order of the events returned by ``open_stream``."""

    # Oldest first; the backward feed is reversed once after the last page.
    CHRONOLOGICAL = "CHRONOLOGICAL"
    # Exactly as the backward feed lists them: newest first.
    FEED = "FEED"


@dataclass(frozen=True)
class EventStoreConfig:
    """Configuration for the event store client.

    Attributes:
        base_url: Store root, e.g. ``http://localhost:2113``.
        page_size: Entries per feed page requested from the head endpoint.
        timeout_seconds: Per-request timeout handed to httpx.
        order: Order of the events returned by ``open_stream``.
        max_concurrent_resolutions: Entry fetches in flight per page; 1 keeps
            reads strictly sequential.
        retry: Retry policy for transport failures, ``None`` to disable.
        username: Basic auth user, used together with ``password``.
        password: Basic auth password.
    """

    base_url: str
    page_size: int = DEFAULT_PAGE_SIZE
    timeout_seconds: float = 10.0
    order: StreamOrder = StreamOrder.CHRONOLOGICAL
    max_concurrent_resolutions: int = 1
    retry: RetryConfig | None = None
    username: str = ""
    password: str = ""

    def __post_init__(self) -> None:
        if not self.base_url:
            raise ValueError("base_url must not be empty")
        if self.page_size < MIN_PAGE_SIZE or self.page_size > MAX_PAGE_SIZE:
            raise ValueError(
                f"invalid page_size: {self.page_size} "
                f"(must be between {MIN_PAGE_SIZE} and {MAX_PAGE_SIZE})"
            )
        if self.timeout_seconds <= 0:
            raise ValueError(f"invalid timeout_seconds: {self.timeout_seconds}")
        if self.max_concurrent_resolutions < 1:
            raise ValueError(
                f"invalid max_concurrent_resolutions: {self.max_concurrent_resolutions}"
            )
        # Normalised once so URLs can be joined with a single "/".
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @property
    def auth(self) -> tuple[str, str] | None:
        if self.username:
            return (self.username, self.password)
        return None
