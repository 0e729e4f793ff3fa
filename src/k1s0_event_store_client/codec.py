"""Wire encoding of event envelopes."""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from .exceptions import DecodeError
from .models import Event, EventEnvelope


def encode(events: Sequence[EventEnvelope]) -> list[dict[str, Any]]:
    """Return one wire record per envelope, in order. Payloads pass through untouched."""
    return [Event.from_envelope(e).to_dict() for e in events]


def encode_body(events: Sequence[EventEnvelope]) -> bytes:
    """Serialize a batch into the JSON array posted to the store."""
    return json.dumps(encode(events)).encode()


def decode(record: dict[str, Any] | str | bytes) -> EventEnvelope:
    """Decode an envelope document, as returned by the entry detail fetch.

    Raises:
        DecodeError: the record is not JSON or lacks the envelope fields.
    """
    obj = _load(record)
    event_id = _required_str(obj, "eventId")
    event_type = _required_str(obj, "eventType")
    data = obj.get("data")
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise DecodeError(f"'data' must be an object, got {type(data).__name__}")
    return EventEnvelope(event_id=event_id, event_type=event_type, data=data)


def decode_record(record: dict[str, Any] | str | bytes) -> Event:
    """Decode one element of an encoded batch back into its wire record."""
    obj = _load(record)
    event_id = _required_str(obj, "eventId")
    event_type = _required_str(obj, "eventType")
    if not isinstance(obj.get("data"), dict):
        raise DecodeError("'data' must be an envelope object")
    return Event(event_id=event_id, event_type=event_type, data=decode(obj["data"]))


def _load(record: dict[str, Any] | str | bytes) -> dict[str, Any]:
    if isinstance(record, (str, bytes)):
        try:
            record = json.loads(record)
        except ValueError as e:
            raise DecodeError(f"invalid JSON: {e}", cause=e) from e
    if not isinstance(record, dict):
        raise DecodeError(f"expected a JSON object, got {type(record).__name__}")
    return record


def _required_str(obj: dict[str, Any], key: str) -> str:
    value = obj.get(key)
    if not isinstance(value, str) or not value:
        raise DecodeError(f"missing or invalid '{key}'")
    return value
