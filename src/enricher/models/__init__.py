"""Pydantic v2 models for enriched collection records.

Re-exports all model classes for convenient import::

    from enricher.models import GameRecord, GameStats
"""

from .game import GameRecord
from .stats import GameStats

__all__ = [
    "GameRecord",
    "GameStats",
]
