"""Statistics extraction from a BGG game page.

BGG game pages embed their full item record as a JavaScript assignment::

    GEEK.geekitemPreload = {"item": {..., "stats": {"average": "7.5", ...}}, ...};

``extract_stats`` finds the marker, jumps to the first "{" after it and
decodes exactly one JSON value from there. ``json.JSONDecoder.raw_decode``
stops at the end of that value, so whatever script or markup follows it
is never looked at and no matching closing brace has to be located.
"""

import json
import logging

from pydantic import ValidationError

from enricher.exceptions import DecodeError, NotFoundError
from enricher.models import GameStats

logger = logging.getLogger(__name__)

PRELOAD_MARKER = b"GEEK.geekitemPreload"

_decoder = json.JSONDecoder()


def _locate_object(html: bytes) -> bytes:
    """Return the bytes from the first "{" after the preload marker onwards.

    Raises:
        NotFoundError: If the marker or the opening brace is missing.
    """
    start = html.find(PRELOAD_MARKER)
    if start < 0:
        raise NotFoundError(
            f"Couldn't find {PRELOAD_MARKER.decode()} in page ({len(html)} bytes)"
        )
    start += len(PRELOAD_MARKER)

    brace = html.find(b"{", start)
    if brace < 0:
        raise NotFoundError("Couldn't find the first brace in preloaded data")
    return html[brace:]


def extract_stats(html: bytes) -> GameStats:
    """Decode the ``item.stats`` record embedded in a game page.

    Args:
        html: Raw bytes of the game page.

    Returns:
        GameStats with numeric-string fields coerced to numbers. Fields
        absent from the page are zero.

    Raises:
        NotFoundError: If the marker or the object start is missing.
        DecodeError: If the embedded JSON is malformed, truncated or nested
            too deeply to decode, or a stats value is not numeric.
    """
    preload = _locate_object(html).decode("utf-8", errors="replace")

    try:
        data, end = _decoder.raw_decode(preload)
    except (json.JSONDecodeError, RecursionError) as exc:
        raise DecodeError(f"Failed to parse preloaded json: {exc}") from exc
    logger.debug("Decoded %d chars of preloaded json", end)

    item = data.get("item") if isinstance(data, dict) else None
    stats = item.get("stats") if isinstance(item, dict) else None
    if stats is None:
        stats = {}
    if not isinstance(stats, dict):
        raise DecodeError(f"item.stats is {type(stats).__name__}, expected object")

    try:
        return GameStats.model_validate(stats)
    except ValidationError as exc:
        raise DecodeError(f"Invalid stats values: {exc}") from exc
