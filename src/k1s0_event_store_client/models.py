"""Event store client data models."""

from __future__ import annotations

import copy
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

DETAIL_LINK_REL = "alternate"


@dataclass(frozen=True)
class EventEnvelope:
    """A domain event: identity, type name and opaque payload.

    ``data`` is deep-copied on construction and exposed read-only, so the
    envelope does not change when the caller's dict does. Envelopes hash by
    ``event_id``.

    Raises:
        ValueError: ``event_id`` or ``event_type`` is empty or not a string.
    """

    event_type: str
    data: Mapping[str, Any] = field(default_factory=dict)
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self) -> None:
        for name in ("event_id", "event_type"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value:
                raise ValueError(f"{name} must be a non-empty string, got {value!r}")
        object.__setattr__(self, "data", MappingProxyType(copy.deepcopy(dict(self.data))))

    def __hash__(self) -> int:
        return hash(self.event_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "eventId": self.event_id,
            "eventType": self.event_type,
            "data": copy.deepcopy(dict(self.data)),
        }


@dataclass(frozen=True)
class Event:
    """Wire record posted to the store for one envelope.

    The store keeps ``data`` as the event body, so the whole envelope is
    sent there and comes back from the entry detail fetch.
    """

    event_id: str
    event_type: str
    data: EventEnvelope

    @classmethod
    def from_envelope(cls, envelope: EventEnvelope) -> Event:
        return cls(
            event_id=envelope.event_id,
            event_type=envelope.event_type,
            data=envelope,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "eventId": self.event_id,
            "eventType": self.event_type,
            "data": self.data.to_dict(),
        }


@dataclass(frozen=True)
class FeedLink:
    """Atom link: relation name and target."""

    rel: str
    href: str


@dataclass
class FeedEntry:
    """One feed entry. It references its event but does not embed it."""

    id: str
    title: str = ""
    summary: str = ""
    updated: str = ""
    links: list[FeedLink] = field(default_factory=list)

    @property
    def detail_url(self) -> str | None:
        """URL of the full event.

        Chosen by the ``alternate`` relation. Stores that omit relation names
        list the detail link second, so that position is the fallback.
        """
        for link in self.links:
            if link.rel == DETAIL_LINK_REL:
                return link.href
        if len(self.links) > 1:
            return self.links[1].href
        return None


@dataclass
class FeedPage:
    """One page of a backward feed plus its navigation links."""

    url: str
    entries: list[FeedEntry] = field(default_factory=list)
    links: dict[str, str] = field(default_factory=dict)

    @property
    def next_url(self) -> str | None:
        """Next (older) page, ``None`` on the last page."""
        return self.links.get("next")
