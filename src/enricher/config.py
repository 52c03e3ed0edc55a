"""Enricher configuration with sensible defaults for BoardGameGeek."""

from dataclasses import dataclass

BGG_BASE_URL = "https://boardgamegeek.com"


@dataclass
class EnricherConfig:
    """Configuration for the collection enricher.

    All timing values are in seconds.
    """

    # BoardGameGeek base URL (XML API and game pages share the host)
    base_url: str = BGG_BASE_URL

    # Status BGG answers with while it is still preparing a response
    processing_status: int = 202

    # Retry schedule for the processing status (tenacity).
    # BGG usually needs ~10s to build a large collection response.
    max_attempts: int = 8
    retry_initial_delay: float = 10.0
    retry_max_delay: float = 60.0
    retry_jitter: float = 2.0

    # httpx request timeout per attempt
    request_timeout: float = 30.0

    # Connection pool for the shared httpx.AsyncClient
    max_connections: int = 100
    max_keepalive_connections: int = 20

    user_agent: str = "bgg-enricher/0.1 (+https://boardgamegeek.com)"

    # Log output: {data_dir}/logs/{log_prefix}-{timestamp}.log
    data_dir: str = "data"
    log_prefix: str = "enrich"
    # Third-party loggers held at WARNING (httpx logs every request at INFO)
    quiet_loggers: tuple[str, ...] = ("httpx", "httpcore")

    # Caller-side bounds (checked by enricher.validation)
    min_target_players: int = 1
    max_target_players: int = 100
    min_owner_length: int = 4
    max_owner_length: int = 20
