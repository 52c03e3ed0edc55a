"""Pydantic v2 model for an enriched game record.

GameRecord is built once per successful enrichment and never mutated.
The ``best``/``recommended`` flags answer "is this game good for
``target_players``"; ``best_counts``/``recommended_counts`` carry the full
poll tally for every player count.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing_extensions import Self


class GameRecord(BaseModel):
    """Merged metadata, poll classification and statistics for one game."""

    model_config = ConfigDict(frozen=True)

    game_id: str = Field(min_length=1)
    name: str | None = None  # no primary name in the feed
    min_players: int = Field(default=0, ge=0)
    max_players: int = Field(default=0, ge=0)
    target_players: int = Field(ge=1)
    best: bool = False
    recommended: bool = False
    best_counts: tuple[int, ...] = ()
    recommended_counts: tuple[int, ...] = ()
    score: float = Field(default=0.0, ge=0)
    weight: float = Field(default=0.0, ge=0)
    bayes_score: float = Field(default=0.0, ge=0)
    ratings: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def check_exclusive_classification(self) -> Self:
        """A game is best or recommended for the target count, never both."""
        if self.best and self.recommended:
            raise ValueError(
                f"game {self.game_id} marked both best and recommended "
                f"for {self.target_players} players"
            )
        return self

    @property
    def display_name(self) -> str:
        return self.name or f"#{self.game_id}"
