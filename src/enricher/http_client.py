"""BGG HTTP access with retry on the "processing" status.

BoardGameGeek answers some XML API requests (collections in particular)
with HTTP 202 while it assembles the response in the background; the
client is expected to come back later for the same URL. ``RateLimitedFetcher``
hides that handshake: each 202 raises ``RateLimited`` internally and
tenacity retries with exponential backoff plus jitter until a terminal
status arrives or ``max_attempts`` is spent.

Transport failures are wrapped in ``TransportError`` and never retried.
Every other status (2xx, 4xx, 5xx) is handed back verbatim, the caller
decides what it means.

The ``httpx.AsyncClient`` is injected so one connection pool is shared by
every concurrent enrichment. ``build_client()`` creates one configured
from ``EnricherConfig``.
"""

import logging
from dataclasses import dataclass
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from enricher.config import EnricherConfig
from enricher.exceptions import RateLimited, TransportError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchResponse:
    """Terminal response for one fetched URL."""

    status_code: int
    body: bytes
    url: str


def build_client(config: EnricherConfig | None = None, **kwargs: Any) -> httpx.AsyncClient:
    """Create an ``httpx.AsyncClient`` with pooling, timeout and user agent.

    Extra keyword arguments are forwarded to ``httpx.AsyncClient`` (tests
    pass ``transport=httpx.MockTransport(...)``).
    """
    if config is None:
        config = EnricherConfig()
    return httpx.AsyncClient(
        headers={"User-Agent": config.user_agent},
        timeout=config.request_timeout,
        limits=httpx.Limits(
            max_connections=config.max_connections,
            max_keepalive_connections=config.max_keepalive_connections,
        ),
        follow_redirects=True,
        **kwargs,
    )


class RateLimitedFetcher:
    """Single-URL GET that waits out BGG's processing status.

    Usage:
        async with build_client(config) as client:
            fetcher = RateLimitedFetcher(client, config)
            response = await fetcher.fetch(url, params={"id": "13"})
    """

    def __init__(self, client: httpx.AsyncClient, config: EnricherConfig | None = None):
        if config is None:
            config = EnricherConfig()

        self._client = client
        self._config = config

        # Request counters
        self._request_count = 0
        self._response_count = 0
        self._processing_count = 0

    def _retrying(self) -> AsyncRetrying:
        """Build a fresh retry controller; one per fetch so concurrent calls never share state."""
        return AsyncRetrying(
            retry=retry_if_exception_type(RateLimited),
            wait=wait_exponential_jitter(
                initial=self._config.retry_initial_delay,
                max=self._config.retry_max_delay,
                jitter=self._config.retry_jitter,
            ),
            stop=stop_after_attempt(self._config.max_attempts),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

    async def _get_once(self, url: str, params: dict[str, str] | None) -> FetchResponse:
        """Issue one GET. Raises RateLimited on the processing status."""
        self._request_count += 1
        try:
            response = await self._client.get(url, params=params)
        except httpx.HTTPError as exc:
            raise TransportError(f"Failed to fetch {url}: {exc}", url=url) from exc

        if response.status_code == self._config.processing_status:
            self._processing_count += 1
            logger.info("BGG accepted request for %s, waiting for body", response.url)
            raise RateLimited(
                f"BGG still processing {response.url}",
                url=str(response.url),
                status_code=response.status_code,
            )

        self._response_count += 1
        logger.debug(
            "Fetched %s -> %d (%d bytes)",
            response.url, response.status_code, len(response.content),
        )
        return FetchResponse(
            status_code=response.status_code,
            body=response.content,
            url=str(response.url),
        )

    async def fetch(self, url: str, params: dict[str, str] | None = None) -> FetchResponse:
        """Fetch a URL, retrying while BGG reports it is still processing.

        Args:
            url: The full URL to fetch.
            params: Optional query parameters.

        Returns:
            The first non-processing response.

        Raises:
            RateLimited: If every attempt got the processing status.
            TransportError: On any network-level failure (not retried).
        """
        return await self._retrying()(self._get_once, url, params)

    @property
    def stats(self) -> dict:
        """Return current fetcher statistics."""
        return {
            "requests": self._request_count,
            "responses": self._response_count,
            "processing": self._processing_count,
        }
