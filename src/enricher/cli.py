"""CLI entry point for the collection enricher.

Provides ``main()`` as the sync entry point for the ``bgg-enricher``
console script, and ``async_main(args)`` which sets up logging, builds
the shared HTTP client, runs the pipeline, and prints the enriched
collection grouped by suitability for the requested player count.

Usage::

    bgg-enricher CPT_Lemons 4                  # games for 4 players
    bgg-enricher CPT_Lemons 2 --max-attempts 3 # give up on BGG sooner
    bgg-enricher CPT_Lemons 5 --verbose        # DEBUG on the console
"""

import argparse
import asyncio
import logging
import time

from enricher.config import EnricherConfig
from enricher.exceptions import EnricherError, InvalidQuery
from enricher.http_client import RateLimitedFetcher, build_client
from enricher.logging_config import setup_logging
from enricher.models import GameRecord
from enricher.pipeline import CollectionEnrichmentPipeline
from enricher.validation import validate_query

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the bgg-enricher CLI."""
    parser = argparse.ArgumentParser(
        prog="bgg-enricher",
        description="Rank a BoardGameGeek collection for a given player count",
    )
    parser.add_argument(
        "owner",
        help="BGG username whose owned collection is enriched (4-20 characters)",
    )
    parser.add_argument(
        "players",
        help="Target player count (1-100)",
    )
    parser.add_argument(
        "--data-dir",
        type=str,
        default="data",
        help="Data directory for logs (default: data)",
    )
    parser.add_argument(
        "--base-url",
        type=str,
        default=None,
        help="BGG base URL (default: https://boardgamegeek.com)",
    )
    parser.add_argument(
        "--max-attempts",
        type=int,
        default=None,
        help="Attempts per URL while BGG reports it is processing (default: 8)",
    )
    parser.add_argument(
        "--retry-delay",
        type=float,
        default=None,
        help="Initial backoff in seconds between processing retries (default: 10)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-request timeout in seconds (default: 30)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show DEBUG output on the console",
    )
    return parser


def build_config(args: argparse.Namespace) -> EnricherConfig:
    """Apply CLI overrides on top of the default config."""
    overrides: dict = {"data_dir": args.data_dir}
    if args.base_url is not None:
        overrides["base_url"] = args.base_url.rstrip("/")
    if args.max_attempts is not None:
        overrides["max_attempts"] = args.max_attempts
    if args.retry_delay is not None:
        overrides["retry_initial_delay"] = args.retry_delay
    if args.timeout is not None:
        overrides["request_timeout"] = args.timeout
    return EnricherConfig(**overrides)


def _format_game(game: GameRecord) -> str:
    return (
        f"  {game.display_name:<40} {game.min_players}-{game.max_players}p"
        f"  score {game.score:4.2f}  weight {game.weight:4.2f}"
        f"  ({game.ratings} ratings)"
    )


def format_games(games: list[GameRecord], owner: str, players: int) -> str:
    """Render the enriched collection grouped into best / recommended / other."""
    best = [g for g in games if g.best]
    rec = [g for g in games if g.recommended]
    other = [g for g in games if not (g.best or g.recommended)]

    lines = [f"{owner}'s collection for {players} players", ""]
    for title, group in (
        ("Best games", best),
        ("Rec games", rec),
        ("Other games", other),
    ):
        lines.append(f"{title} ({len(group)})")
        lines.extend(_format_game(g) for g in group)
        lines.append("")
    return "\n".join(lines).rstrip()


def _format_results(summary: dict, fetch_stats: dict, wall_time: float, log_file: str) -> str:
    """Format end-of-run results into a human-readable summary string."""
    lines = [
        "=" * 60,
        "Enrichment complete",
        "-" * 60,
        "Games:       {} enriched, {} failed".format(
            summary.get("enriched", 0),
            summary.get("failed", 0),
        ),
        "Requests:    {} sent, {} processing retries".format(
            fetch_stats.get("requests", 0),
            fetch_stats.get("processing", 0),
        ),
        "-" * 60,
        f"Wall time:   {wall_time:.0f}s",
        f"Log file:    {log_file}",
        "=" * 60,
    ]
    return "\n".join(lines)


async def async_main(args: argparse.Namespace) -> int:
    """Async entry point: set up components, run pipeline, print results.

    Returns:
        Process exit code (0 on success, 1 when the run failed).
    """
    config = build_config(args)
    owner, players = validate_query(args.owner, args.players, config)

    log_file = setup_logging(config, verbose=args.verbose)
    logger.info(
        "Starting bgg-enricher: owner=%s, players=%d, max_attempts=%d, log=%s",
        owner, players, config.max_attempts, log_file,
    )

    start_time = time.monotonic()
    exit_code = 0
    summary: dict = {}
    fetch_stats: dict = {}

    try:
        async with build_client(config) as client:
            fetcher = RateLimitedFetcher(client, config)
            pipeline = CollectionEnrichmentPipeline(fetcher, config)
            try:
                games = await pipeline.run(owner, players)
            except EnricherError as exc:
                logger.error("unable to get collection information: %s", exc)
                exit_code = 1
            else:
                print(format_games(games, owner, players))
            finally:
                if pipeline.last_report is not None:
                    summary = pipeline.last_report.summary()
                fetch_stats = fetcher.stats
    finally:
        wall_time = time.monotonic() - start_time
        logger.info("\n%s", _format_results(summary, fetch_stats, wall_time, str(log_file)))
        logging.shutdown()

    return exit_code


def main() -> None:
    """Sync entry point for the bgg-enricher console script."""
    parser = build_parser()
    args = parser.parse_args()
    try:
        exit_code = asyncio.run(async_main(args))
    except InvalidQuery as exc:
        parser.error(str(exc))
    except KeyboardInterrupt:
        exit_code = 130
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
