"""structlog logger for the event store client."""

from __future__ import annotations

import logging
import sys

import structlog

LIBRARY_NAME = "k1s0_event_store_client"


def new_logger(level: str = "INFO", format: str = "json") -> structlog.stdlib.BoundLogger:
    """Return a structlog logger to inject into ``HttpEventStoreClient``.

    Events go to the stdlib logger named after the library, whose level is
    set to ``level``; anything below it is dropped before rendering. Every
    event carries ``library=k1s0_event_store_client`` next to the
    ``component`` the client's parts bind.

    Args:
        level: Log level ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
        format: Output format ("json" or "text")
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout)
    logging.getLogger(LIBRARY_NAME).setLevel(log_level)

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if format == "json":
        processors += [
            structlog.processors.StackInfoRenderer(),
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    return structlog.stdlib.get_logger(LIBRARY_NAME).bind(library=LIBRARY_NAME)
