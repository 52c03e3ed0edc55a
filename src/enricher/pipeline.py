"""Collection enrichment orchestration.

Provides ``CollectionEnrichmentPipeline``, which fetches a user's owned
collection and enriches every game in it concurrently, plus two building
blocks:

* **EnrichmentOutcome** -- tagged per-item result: the record on success,
  the exception on failure.  Tasks never raise; the orchestrator filters.
* **EnrichmentReport** -- per-item progress logging with timing and an
  end-of-run summary.

Fan-out is one asyncio task per game with no concurrency cap.  Outcomes
come back from ``asyncio.gather`` in input order, so successful records
keep the order of their ids and failed ones simply drop out.  The run as
a whole fails only when not a single game could be enriched.
"""

import asyncio
import logging
import time
from dataclasses import dataclass

from enricher.config import EnricherConfig
from enricher.enrichment import GameEnricher, require_ok
from enricher.exceptions import AggregateFailure
from enricher.feeds import parse_collection
from enricher.http_client import RateLimitedFetcher
from enricher.models import GameRecord

logger = logging.getLogger(__name__)

COLLECTION_PATH = "/xmlapi2/collection"


# ---------------------------------------------------------------------------
# Tagged outcomes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EnrichmentOutcome:
    """Result of enriching one game id."""

    game_id: str
    record: GameRecord | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.record is not None


# ---------------------------------------------------------------------------
# Progress tracking
# ---------------------------------------------------------------------------

class EnrichmentReport:
    """Track and log per-game progress with timing.

    Maintains running counts of enriched / failed games and provides both
    machine-readable (``summary()``) and human-readable
    (``format_summary()``) end-of-run reports.
    """

    def __init__(self, total: int = 0) -> None:
        self.total = total
        self.done: int = 0
        self.enriched: int = 0
        self.failed: int = 0
        self._start_time: float = time.monotonic()

    def log_game(self, outcome: EnrichmentOutcome, elapsed: float) -> None:
        """Log a single game outcome.

        Failures are logged at WARNING with the reason; successes at DEBUG.
        """
        self.done += 1
        if self.total > 0:
            progress = f"[{self.done}/{self.total}]"
        else:
            progress = f"[{self.done}]"

        if outcome.ok:
            self.enriched += 1
            logger.debug(
                "%s game %s ok (%.1fs)", progress, outcome.game_id, elapsed,
            )
        else:
            self.failed += 1
            logger.warning(
                "%s unable to fetch game %s info (%.1fs): %s",
                progress, outcome.game_id, elapsed, outcome.error,
            )

    def summary(self) -> dict:
        """Return a machine-readable summary dict.

        Keys: ``total``, ``enriched``, ``failed``, ``wall_time``.
        """
        return {
            "total": self.total,
            "enriched": self.enriched,
            "failed": self.failed,
            "wall_time": time.monotonic() - self._start_time,
        }

    def format_summary(self) -> str:
        """Return a human-readable multiline summary string."""
        wall = time.monotonic() - self._start_time
        minutes, seconds = divmod(wall, 60)
        lines = [
            "--- Enrichment Summary ---",
            f"  Games     : {self.total}",
            f"  Enriched  : {self.enriched}",
            f"  Failed    : {self.failed}",
            f"  Wall time : {int(minutes)}m {seconds:.1f}s",
        ]
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

class CollectionEnrichmentPipeline:
    """Enrich a whole collection concurrently, tolerating per-game failures.

    Usage:
        async with build_client(config) as client:
            fetcher = RateLimitedFetcher(client, config)
            pipeline = CollectionEnrichmentPipeline(fetcher, config)
            games = await pipeline.run("owner", 4)
    """

    def __init__(
        self,
        fetcher: RateLimitedFetcher,
        config: EnricherConfig | None = None,
        enricher: GameEnricher | None = None,
    ):
        if config is None:
            config = EnricherConfig()
        self._fetcher = fetcher
        self._config = config
        self._enricher = enricher or GameEnricher(fetcher, config)
        self.last_report: EnrichmentReport | None = None

    async def fetch_collection(self, owner_name: str) -> list[str]:
        """Return the ids of every non-expansion game ``owner_name`` owns.

        Raises:
            RateLimited, TransportError: From the fetcher.
            BadStatus: On a non-200 terminal status.
            InvalidOwner: If BGG rejects the username.
            DecodeError: If the feed is malformed.
        """
        response = await self._fetcher.fetch(
            self._config.base_url + COLLECTION_PATH,
            params={
                "username": owner_name,
                "excludesubtype": "boardgameexpansion",
                "own": "1",
            },
        )
        items = parse_collection(require_ok(response, "collection"))
        logger.info("Collection of %s lists %d games", owner_name, len(items))
        return [item.object_id for item in items]

    async def _enrich_one(
        self, game_id: str, target_players: int, report: EnrichmentReport,
    ) -> EnrichmentOutcome:
        start = time.monotonic()
        try:
            record = await self._enricher.enrich(game_id, target_players)
            outcome = EnrichmentOutcome(game_id=game_id, record=record)
        except Exception as exc:
            outcome = EnrichmentOutcome(game_id=game_id, error=exc)
        report.log_game(outcome, time.monotonic() - start)
        return outcome

    async def enrich_all(
        self, game_ids: list[str], target_players: int,
    ) -> list[GameRecord]:
        """Enrich every id concurrently and return the successes in input order.

        Raises:
            AggregateFailure: If no game was enriched (including an empty
                id list). ``errors`` maps each id to its exception.
        """
        ids = [str(g) for g in game_ids]
        report = EnrichmentReport(total=len(ids))
        self.last_report = report

        outcomes = await asyncio.gather(
            *[self._enrich_one(game_id, target_players, report) for game_id in ids]
        )
        logger.info("\n%s", report.format_summary())

        records = [o.record for o in outcomes if o.ok]
        if not records:
            raise AggregateFailure(
                f"no valid games found ({len(ids)} attempted)",
                errors={o.game_id: o.error for o in outcomes},
            )
        return records

    async def run(self, owner_name: str, target_players: int) -> list[GameRecord]:
        """Fetch ``owner_name``'s collection and enrich it for ``target_players``."""
        game_ids = await self.fetch_collection(owner_name)
        return await self.enrich_all(game_ids, target_players)
