"""XML feed parsers for the BGG XML API v2.

Provides:
- parse_collection: collection feed bytes -> list[CollectionItem]
- parse_game_metadata: thing feed bytes -> GameMetadata
- CollectionItem, GameName, PollResult, Poll, GameMetadata: return types

Pure functions: bytes in, dataclasses out. Malformed XML and attributes
that should be integers but are not raise DecodeError. Missing integer
attributes read as 0.
"""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

from enricher.exceptions import DecodeError, InvalidOwner

logger = logging.getLogger(__name__)

SUGGESTED_PLAYERS_POLL = "suggested_numplayers"


@dataclass(frozen=True)
class CollectionItem:
    """One game owned by the collection owner."""

    object_id: str


@dataclass(frozen=True)
class GameName:
    """A name entry of a thing (``type`` is "primary" or "alternate")."""

    value: str
    type: str


@dataclass(frozen=True)
class PollResult:
    """One player-count row of a suggested-player-count poll.

    ``num_players`` keeps the raw label, which may end with "+".
    """

    num_players: str
    best: int
    recommended: int
    not_recommended: int


@dataclass(frozen=True)
class Poll:
    """A named poll with its result rows in feed order."""

    name: str
    total_votes: int
    results: list[PollResult] = field(default_factory=list)


@dataclass
class GameMetadata:
    """Decoded thing feed for a single game."""

    names: list[GameName]
    min_players: int
    max_players: int
    polls: list[Poll]

    @property
    def primary_name(self) -> str | None:
        """First name whose type is "primary", or None."""
        for name in self.names:
            if name.type == "primary":
                return name.value
        return None


def _fromstring(raw: bytes, what: str) -> ET.Element:
    try:
        return ET.fromstring(raw)
    except ET.ParseError as exc:
        raise DecodeError(f"Failed to decode {what} XML: {exc}") from exc


def _int_attr(elem: ET.Element | None, attr: str, what: str) -> int:
    """Integer attribute of ``elem``; 0 when the element or attribute is absent."""
    if elem is None:
        return 0
    value = elem.get(attr)
    if value is None or value == "":
        return 0
    try:
        return int(value)
    except ValueError as exc:
        raise DecodeError(f"{what}: {attr}={value!r} is not an integer") from exc


def parse_collection(raw: bytes) -> list[CollectionItem]:
    """Parse a collection feed into its items, in feed order.

    Raises:
        DecodeError: If the XML is malformed.
        InvalidOwner: If BGG returned an ``<errors>`` document (it does so
            with HTTP 200 for unknown usernames).
    """
    root = _fromstring(raw, "collection")

    if root.tag == "errors":
        messages = [m.text.strip() for m in root.iter("message") if m.text]
        raise InvalidOwner(
            "BGG rejected collection request: "
            + ("; ".join(messages) or "unknown error")
        )

    items = []
    for item in root.findall("item"):
        object_id = item.get("objectid")
        if not object_id:
            logger.debug("Skipping collection item without objectid")
            continue
        items.append(CollectionItem(object_id=object_id))
    return items


def _parse_poll(elem: ET.Element, strict: bool) -> Poll:
    """Decode one poll.

    Rows with fewer than three vote counts raise DecodeError when
    ``strict``; otherwise they are dropped.
    """
    name = elem.get("name", "")
    results = []
    for row in elem.findall("results"):
        label = row.get("numplayers", "")
        votes = [
            _int_attr(r, "numvotes", f"poll {name!r} row {label!r}")
            for r in row.findall("result")
        ]
        if len(votes) < 3:
            if strict:
                raise DecodeError(
                    f"poll {name!r} row {label!r}: expected 3 vote counts, got {len(votes)}"
                )
            logger.debug("Dropping short row %r of poll %r", label, name)
            continue
        results.append(
            PollResult(
                num_players=label,
                best=votes[0],
                recommended=votes[1],
                not_recommended=votes[2],
            )
        )
    return Poll(
        name=name,
        total_votes=_int_attr(elem, "totalvotes", f"poll {name!r}"),
        results=results,
    )


def _parse_polls(elems: list[ET.Element]) -> list[Poll]:
    # Only the poll the classifier reads (the last suggested-player-count
    # one) must have complete rows.
    selected = None
    for index, elem in enumerate(elems):
        if elem.get("name") == SUGGESTED_PLAYERS_POLL:
            selected = index
    return [_parse_poll(elem, strict=index == selected) for index, elem in enumerate(elems)]


def parse_game_metadata(raw: bytes) -> GameMetadata:
    """Parse a thing feed into GameMetadata.

    Only the first ``<item>`` is read; a feed without one decodes to an
    empty record, the same as a thing with no names, counts or polls.

    Raises:
        DecodeError: If the XML is malformed or a numeric attribute is not.
    """
    root = _fromstring(raw, "game")
    item = root.find("item")
    if item is None:
        return GameMetadata(names=[], min_players=0, max_players=0, polls=[])

    names = [
        GameName(value=n.get("value", ""), type=n.get("type", ""))
        for n in item.findall("name")
    ]

    return GameMetadata(
        names=names,
        min_players=_int_attr(item.find("minplayers"), "value", "minplayers"),
        max_players=_int_attr(item.find("maxplayers"), "value", "maxplayers"),
        polls=_parse_polls(item.findall("poll")),
    )
