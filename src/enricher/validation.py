"""Caller-side validation of enrichment queries.

The pipeline assumes an owner name of 4-20 characters and a target
player count of 1-100; these helpers enforce that before a run starts.
"""

import logging

from enricher.config import EnricherConfig
from enricher.exceptions import InvalidQuery

logger = logging.getLogger(__name__)


def validate_owner_name(owner_name: str, config: EnricherConfig | None = None) -> str:
    """Return the stripped owner name, or raise InvalidQuery if out of bounds."""
    if config is None:
        config = EnricherConfig()
    name = owner_name.strip()
    if not config.min_owner_length <= len(name) <= config.max_owner_length:
        raise InvalidQuery(
            f"bad bgg name {owner_name!r}, please provide a name between "
            f"{config.min_owner_length}-{config.max_owner_length} characters"
        )
    return name


def validate_player_count(value: int | str, config: EnricherConfig | None = None) -> int:
    """Return the player count as an int, or raise InvalidQuery."""
    if config is None:
        config = EnricherConfig()
    try:
        count = int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidQuery(
            f"bad num players {value!r}, please provide a number"
        ) from exc
    if not config.min_target_players <= count <= config.max_target_players:
        raise InvalidQuery(
            f"bad num players {count}, please provide a number between "
            f"{config.min_target_players} and {config.max_target_players}"
        )
    return count


def validate_query(
    owner_name: str, num_players: int | str, config: EnricherConfig | None = None,
) -> tuple[str, int]:
    """Validate both inputs of a collection run."""
    query = (
        validate_owner_name(owner_name, config),
        validate_player_count(num_players, config),
    )
    logger.debug("Validated query: owner=%s players=%d", *query)
    return query
