"""Unit tests for the Pydantic models.

Tests field constraints, string coercion, immutability and the
exclusive-classification validator.
"""

import pytest
from pydantic import ValidationError

from enricher.models import GameRecord, GameStats


@pytest.fixture
def valid_record() -> dict:
    return {
        "game_id": "13",
        "name": "Catan",
        "min_players": 3,
        "max_players": 4,
        "target_players": 3,
        "best": True,
        "recommended": False,
        "best_counts": (3,),
        "recommended_counts": (4,),
        "score": 7.1,
        "weight": 2.3,
        "bayes_score": 6.9,
        "ratings": 100000,
    }


class TestGameStats:
    """Tests for GameStats."""

    def test_coerces_wire_strings(self):
        stats = GameStats.model_validate(
            {"average": "7.5", "avgweight": "2.3", "baverage": "7.1", "usersrated": "1000"}
        )
        assert stats.score == 7.5
        assert stats.weight == 2.3
        assert stats.bayes_score == 7.1
        assert stats.ratings == 1000
        assert isinstance(stats.ratings, int)

    def test_defaults_to_zero(self):
        stats = GameStats.model_validate({})
        assert (stats.score, stats.weight, stats.bayes_score, stats.ratings) == (0.0, 0.0, 0.0, 0)

    def test_field_names_accepted(self):
        stats = GameStats(score=6.0, weight=1.5, bayes_score=5.5, ratings=3)
        assert stats.ratings == 3

    def test_rejects_non_numeric(self):
        with pytest.raises(ValidationError):
            GameStats.model_validate({"average": "n/a"})

    def test_rejects_negative(self):
        with pytest.raises(ValidationError):
            GameStats.model_validate({"usersrated": "-1"})


class TestGameRecord:
    """Tests for GameRecord."""

    def test_valid(self, valid_record):
        record = GameRecord.model_validate(valid_record)
        assert record.display_name == "Catan"
        assert record.best_counts == (3,)

    def test_both_flags_rejected(self, valid_record):
        valid_record["recommended"] = True
        with pytest.raises(ValidationError, match="both best and recommended"):
            GameRecord.model_validate(valid_record)

    def test_neither_flag_allowed(self, valid_record):
        valid_record["best"] = False
        record = GameRecord.model_validate(valid_record)
        assert not record.best and not record.recommended

    def test_frozen(self, valid_record):
        record = GameRecord.model_validate(valid_record)
        with pytest.raises(ValidationError):
            record.name = "Settlers"

    def test_target_players_must_be_positive(self, valid_record):
        valid_record["target_players"] = 0
        with pytest.raises(ValidationError):
            GameRecord.model_validate(valid_record)

    def test_empty_game_id_rejected(self, valid_record):
        valid_record["game_id"] = ""
        with pytest.raises(ValidationError):
            GameRecord.model_validate(valid_record)

    def test_display_name_falls_back_to_id(self, valid_record):
        valid_record["name"] = None
        assert GameRecord.model_validate(valid_record).display_name == "#13"
