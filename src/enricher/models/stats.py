"""Pydantic v2 model for the statistics embedded in a BGG game page.

The page ships every number as a string (``"average": "7.5"``); pydantic's
lax mode coerces them on validation. Keys missing from the page fall back
to zero.
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class GameStats(BaseModel):
    """Numeric statistics decoded from ``item.stats``."""

    model_config = ConfigDict(frozen=True)

    score: float = Field(
        default=0.0, ge=0, validation_alias=AliasChoices("average", "score")
    )
    weight: float = Field(
        default=0.0, ge=0, validation_alias=AliasChoices("avgweight", "weight")
    )
    bayes_score: float = Field(
        default=0.0, ge=0, validation_alias=AliasChoices("baverage", "bayes_score")
    )
    ratings: int = Field(
        default=0, ge=0, validation_alias=AliasChoices("usersrated", "ratings")
    )
