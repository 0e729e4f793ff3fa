"""Atom feed page parsing."""

from __future__ import annotations

import xml.etree.ElementTree as ET

from .exceptions import DecodeError
from .models import FeedEntry, FeedLink, FeedPage

ATOM_NS = "http://www.w3.org/2005/Atom"
_NS = {"atom": ATOM_NS}

# RFC 4287: a link without rel is an alternate link.
_DEFAULT_REL = "alternate"


def parse_feed(content: bytes | str, url: str) -> FeedPage:
    """Parse one Atom feed document into a :class:`FeedPage`.

    Entries keep document order. Navigation links become a relation -> href
    map; when a relation repeats, the last one wins.

    Raises:
        DecodeError: the document is not well-formed XML or not an Atom feed.
    """
    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise DecodeError(f"invalid feed document: {e}", cause=e, url=url) from e

    if root.tag not in (f"{{{ATOM_NS}}}feed", "feed"):
        raise DecodeError(f"unexpected feed root element: {root.tag}", url=url)

    links = {link.rel: link.href for link in _links(root)}
    entries = [_parse_entry(entry) for entry in _findall(root, "entry")]
    return FeedPage(url=url, entries=entries, links=links)


def _parse_entry(element: ET.Element) -> FeedEntry:
    return FeedEntry(
        id=_text(element, "id"),
        title=_text(element, "title"),
        summary=_text(element, "summary"),
        updated=_text(element, "updated"),
        links=_links(element),
    )


def _links(element: ET.Element) -> list[FeedLink]:
    return [
        FeedLink(rel=link.get("rel") or _DEFAULT_REL, href=link.get("href", ""))
        for link in _findall(element, "link")
        if link.get("href")
    ]


def _findall(element: ET.Element, tag: str) -> list[ET.Element]:
    return element.findall(f"atom:{tag}", _NS) or element.findall(tag)


def _text(element: ET.Element, tag: str) -> str:
    child = element.find(f"atom:{tag}", _NS)
    if child is None:
        child = element.find(tag)
    if child is not None and child.text:
        return child.text.strip()
    return ""
