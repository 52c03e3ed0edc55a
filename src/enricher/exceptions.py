"""Custom exception hierarchy for the collection enricher.

Exception tree:
    EnricherError
    +-- TransportError       (network/connection failure, never retried)
    +-- RateLimited          (BGG kept answering "processing" past max attempts)
    +-- FetchError           (non-retriable response problem)
    |   +-- BadStatus        (terminal non-200 status)
    |   +-- InvalidOwner     (collection feed returned an <errors> document)
    +-- DecodeError          (malformed XML feed or embedded stats JSON)
    +-- ParseError           (player-count label is not an integer)
    +-- NotFoundError        (marker or object start missing in a stats page)
    +-- AggregateFailure     (every item of a pipeline run failed)
    +-- InvalidQuery         (owner name / player count outside bounds)
"""

from typing import Optional


class EnricherError(Exception):
    """Base exception for all enricher errors."""

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class TransportError(EnricherError):
    """Connection, timeout or protocol failure talking to BGG.

    Not retried -- surfaced to the caller as-is.
    """

    pass


class RateLimited(EnricherError):
    """BGG answered with the processing status on every attempt.

    Raised internally on each processing response so tenacity can retry;
    only reaches callers once the retry budget is spent.
    """

    pass


class FetchError(EnricherError):
    """Non-retriable fetch error (unexpected status code, error document).

    Do NOT retry these -- the resource is genuinely unavailable or invalid.
    """

    pass


class BadStatus(FetchError):
    """A terminal non-200 status where a 200 was required."""

    pass


class InvalidOwner(FetchError):
    """BGG returned an <errors> document for the collection request.

    BGG answers unknown usernames with HTTP 200 and an error body, so this
    cannot be detected from the status code alone.
    """

    pass


class DecodeError(EnricherError):
    """Malformed XML feed or embedded statistics JSON."""

    pass


class ParseError(EnricherError):
    """A poll player-count label failed integer parsing."""

    pass


class NotFoundError(EnricherError):
    """Expected marker or object start is absent from a stats page."""

    pass


class AggregateFailure(EnricherError):
    """Every item in a pipeline run failed.

    ``errors`` maps each game id to the exception that sank it.
    """

    def __init__(self, message: str, *, errors: Optional[dict] = None):
        self.errors = dict(errors or {})
        super().__init__(message)


class InvalidQuery(EnricherError):
    """Caller input (owner name or player count) is outside accepted bounds."""

    pass
