"""Retry policy applied at the client's network boundaries."""

from __future__ import annotations

import asyncio
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from .exceptions import TransportError

T = TypeVar("T")


@dataclass(frozen=True)
class RetryConfig:
    """Retry policy for transport failures."""

    max_attempts: int = 3
    initial_delay: float = 0.1
    max_delay: float = 30.0
    multiplier: float = 2.0
    jitter: bool = True

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"invalid max_attempts: {self.max_attempts} (must be at least 1)")

    def compute_delay(self, attempt: int) -> float:
        """Return the delay in seconds before retry number ``attempt + 1``."""
        base = self.initial_delay * (self.multiplier**attempt)
        capped = min(base, self.max_delay)
        if self.jitter:
            return capped * (0.9 + random.random() * 0.2)
        return capped


async def with_retry(
    config: RetryConfig | None,
    fn: Callable[[], Awaitable[T]],
    logger: Any,
) -> T:
    """Run ``fn``, retrying only on :class:`TransportError`.

    Status and decode errors are returned by the store deterministically and
    are raised on the first attempt. ``config=None`` means a single attempt.
    """
    if config is None:
        return await fn()

    attempt = 0
    while True:
        try:
            return await fn()
        except TransportError as e:
            attempt += 1
            if attempt >= config.max_attempts:
                raise
            delay = config.compute_delay(attempt - 1)
            logger.warning(
                "retrying after transport error",
                attempt=attempt,
                max_attempts=config.max_attempts,
                delay=round(delay, 3),
                error=str(e),
            )
            await asyncio.sleep(delay)
