"""Per-game enrichment: thing feed + poll classification + page statistics.

``GameEnricher.enrich`` runs the stages for one game id strictly in
sequence and lets the first failure propagate; a partially built record
is never returned.
"""

import logging
from urllib.parse import quote

from enricher.config import EnricherConfig
from enricher.exceptions import BadStatus
from enricher.feeds import parse_game_metadata
from enricher.http_client import FetchResponse, RateLimitedFetcher
from enricher.models import GameRecord
from enricher.polls import classify, tally
from enricher.stats_extractor import extract_stats

logger = logging.getLogger(__name__)

THING_PATH = "/xmlapi2/thing"
GAME_PAGE_TEMPLATE = "/boardgame/{game_id}"


def require_ok(response: FetchResponse, what: str) -> bytes:
    """Body of a 200 response; anything else raises BadStatus."""
    if response.status_code != 200:
        raise BadStatus(
            f"Bad status code fetching {what}: {response.status_code}",
            url=response.url,
            status_code=response.status_code,
        )
    return response.body


class GameEnricher:
    """Build a GameRecord for one game id.

    Stages: thing feed fetch -> decode -> primary name -> poll
    classification for the target count -> game page fetch -> stats
    extraction -> record assembly.
    """

    def __init__(self, fetcher: RateLimitedFetcher, config: EnricherConfig | None = None):
        if config is None:
            config = EnricherConfig()
        self._fetcher = fetcher
        self._config = config

    def thing_url(self) -> str:
        return self._config.base_url + THING_PATH

    def game_page_url(self, game_id: str) -> str:
        return self._config.base_url + GAME_PAGE_TEMPLATE.format(
            game_id=quote(str(game_id), safe="")
        )

    async def enrich(self, game_id: str, target_players: int) -> GameRecord:
        """Fetch, parse and merge everything known about ``game_id``.

        Raises:
            EnricherError: Whatever the failing stage raised (TransportError,
                RateLimited, BadStatus, DecodeError, ParseError, NotFoundError).
        """
        game_id = str(game_id)

        thing = await self._fetcher.fetch(self.thing_url(), params={"id": game_id})
        metadata = parse_game_metadata(require_ok(thing, "game xml"))

        name = metadata.primary_name
        if name is None:
            logger.debug("Game %s has no primary name", game_id)

        verdict = classify(metadata.polls, target_players)
        counts = tally(metadata.polls)

        page = await self._fetcher.fetch(self.game_page_url(game_id))
        stats = extract_stats(require_ok(page, "game page"))

        record = GameRecord(
            game_id=game_id,
            name=name,
            min_players=metadata.min_players,
            max_players=metadata.max_players,
            target_players=target_players,
            best=verdict.best,
            recommended=verdict.recommended,
            best_counts=tuple(counts.best),
            recommended_counts=tuple(counts.recommended),
            score=stats.score,
            weight=stats.weight,
            bayes_score=stats.bayes_score,
            ratings=stats.ratings,
        )
        logger.debug(
            "Enriched game %s (%s): %s at %d players",
            game_id, record.display_name, verdict.label, target_players,
        )
        return record
