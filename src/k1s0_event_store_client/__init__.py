"""k1s0 event_store_client library."""

from .client import EventStoreClient, HttpEventStoreClient
from .codec import decode, decode_record, encode, encode_body
from .config import EventStoreConfig, StreamOrder
from .exceptions import (
    DecodeError,
    DeadlineExceededError,
    EventStoreClientError,
    EventStoreClientErrorCodes,
    InvalidArgumentError,
    StreamDeletedError,
    StreamNotFoundError,
    TransportError,
    UnexpectedStatusError,
)
from .feed import parse_feed
from .fetcher import PageFetcher
from .logger import new_logger
from .models import Event, EventEnvelope, FeedEntry, FeedLink, FeedPage
from .reader import StreamReader
from .resolver import EntryResolver
from .retry import RetryConfig, with_retry
from .writer import StreamWriter

__all__ = [
    "DecodeError",
    "DeadlineExceededError",
    "EntryResolver",
    "Event",
    "EventEnvelope",
    "EventStoreClient",
    "EventStoreClientError",
    "EventStoreClientErrorCodes",
    "EventStoreConfig",
    "FeedEntry",
    "FeedLink",
    "FeedPage",
    "HttpEventStoreClient",
    "InvalidArgumentError",
    "PageFetcher",
    "RetryConfig",
    "StreamDeletedError",
    "StreamNotFoundError",
    "StreamOrder",
    "StreamReader",
    "StreamWriter",
    "TransportError",
    "UnexpectedStatusError",
    "decode",
    "decode_record",
    "encode",
    "encode_body",
    "new_logger",
    "parse_feed",
    "with_retry",
]
