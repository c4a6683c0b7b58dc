"""Unit tests for score range and score set validation."""
import pytest

from ocean_engine.schemas.traits import TraitScoreSet
from ocean_engine.services.validation import validate_score_range, validate_score_set


class TestScoreRange:

    @pytest.mark.parametrize("value", [0, 100, 50, 0.0, 99.9999])
    def test_accepts_inclusive_bounds(self, value):
        assert validate_score_range(value) is True

    @pytest.mark.parametrize("value", [-1, 101, -0.0001, 100.0001])
    def test_rejects_out_of_range(self, value):
        assert validate_score_range(value) is False

    @pytest.mark.parametrize("value", [None, "50", [50], {"score": 50}, True, False, float("nan")])
    def test_rejects_non_numeric(self, value):
        assert validate_score_range(value) is False


class TestScoreSet:

    def test_complete_mapping(self, balanced_scores):
        assert validate_score_set(balanced_scores) is True

    def test_trait_score_set(self, balanced_scores):
        assert validate_score_set(TraitScoreSet(**balanced_scores)) is True

    def test_missing_dimension(self, balanced_scores):
        del balanced_scores["agreeableness"]
        assert validate_score_set(balanced_scores) is False

    def test_one_dimension_out_of_range(self, balanced_scores):
        balanced_scores["openness"] = 150
        assert validate_score_set(balanced_scores) is False

    def test_raw_unnormalized_set_rejected(self):
        assert validate_score_set(TraitScoreSet(neuroticism=-2.0)) is False

    def test_not_a_mapping(self):
        assert validate_score_set([50, 50, 50, 50, 50]) is False
        assert validate_score_set(None) is False
