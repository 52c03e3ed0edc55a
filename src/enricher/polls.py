"""Player-count classification from BGG's suggested_numplayers poll.

Each poll row carries three vote tallies for one player count: Best,
Recommended and Not Recommended. A row counts only when
``best + recommended > not_recommended``; it is then "best" if Best
strictly outvotes Recommended, otherwise "recommended".

Labels ending in "+" ("6+") are BGG's open-ended bucket above the box
maximum. ``classify`` treats such a row as covering any target up to
twice its count; ``tally`` records it as one more than its count.

Rows are scanned in feed order, which BGG lists ascending by player count.
"""

import re
from dataclasses import dataclass, field

from enricher.exceptions import ParseError
from enricher.feeds import SUGGESTED_PLAYERS_POLL, Poll, PollResult

OPEN_RANGE_MARKER = "+"

# Optional sign, ASCII digits only: no whitespace, underscores or other scripts.
_INTEGER_LABEL = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class Classification:
    """Outcome for one target player count."""

    best: bool = False
    recommended: bool = False

    @property
    def label(self) -> str:
        if self.best:
            return "best"
        if self.recommended:
            return "recommended"
        return "unsuitable"


NEITHER = Classification()


@dataclass
class PlayerCountSummary:
    """Every player count that passes the vote floor, split by verdict."""

    best: list[int] = field(default_factory=list)
    recommended: list[int] = field(default_factory=list)


def parse_player_count(label: str) -> tuple[int, bool]:
    """Parse a poll label into ``(count, open_ended)``.

    Raises:
        ParseError: If the label minus a trailing "+" is not an integer.
    """
    open_ended = label.endswith(OPEN_RANGE_MARKER)
    digits = label[: -len(OPEN_RANGE_MARKER)] if open_ended else label
    if not _INTEGER_LABEL.fullmatch(digits):
        raise ParseError(f"Failed to convert player count {label!r} to int")
    return int(digits), open_ended


def find_player_poll(polls: list[Poll]) -> Poll | None:
    """Return the suggested-player-count poll (last one wins), or None."""
    found = None
    for poll in polls:
        if poll.name == SUGGESTED_PLAYERS_POLL:
            found = poll
    return found


def _passes_vote_floor(row: PollResult) -> bool:
    return row.best + row.recommended > row.not_recommended


def classify(polls: list[Poll], target_players: int) -> Classification:
    """Classify ``target_players`` as best, recommended or neither.

    The first row (in feed order) that passes the vote floor and matches
    the target decides the outcome. An open-ended ``k+`` row matches any
    target ``t`` with ``k * 2 >= t``; other rows match only ``k == t``.

    Returns:
        Classification with exactly one flag set on a match, or
        ``NEITHER`` when the poll is missing or nothing matches.

    Raises:
        ParseError: If any row label scanned before a match is not numeric.
    """
    poll = find_player_poll(polls)
    if poll is None:
        return NEITHER

    for row in poll.results:
        count, open_ended = parse_player_count(row.num_players)
        if not _passes_vote_floor(row):
            continue
        is_best = row.best > row.recommended
        if open_ended and count * 2 >= target_players:
            return Classification(best=is_best, recommended=not is_best)
        if count == target_players:
            return Classification(best=is_best, recommended=not is_best)

    return NEITHER


def tally(polls: list[Poll]) -> PlayerCountSummary:
    """Split every qualifying player count into best and recommended lists.

    Raises:
        ParseError: If any row label is not numeric.
    """
    summary = PlayerCountSummary()
    poll = find_player_poll(polls)
    if poll is None:
        return summary

    for row in poll.results:
        count, open_ended = parse_player_count(row.num_players)
        if open_ended:
            count += 1
        if not _passes_vote_floor(row):
            continue
        if row.best > row.recommended:
            summary.best.append(count)
        else:
            summary.recommended.append(count)
    return summary
