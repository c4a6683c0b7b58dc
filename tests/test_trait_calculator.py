"""Unit tests for TraitScoreCalculator — weighted sums, normalization, quality."""
import pytest
from pydantic import ValidationError

from ocean_engine.schemas.responses import ResponseScale
from ocean_engine.services.normalizer import normalize_responses
from ocean_engine.services.trait_calculator import (
    TraitScoreCalculator,
    calculate_trait_scores,
    score_responses,
)
from ocean_engine.taxonomy import DIMENSIONS


@pytest.fixture
def calculator():
    return TraitScoreCalculator()


class TestRawScores:
    """score[d] = Σ value × weight, not an average."""

    def test_worked_example(self, calculator, worked_example_items):
        scores = calculator.calculate(normalize_responses(worked_example_items))
        assert scores.openness == pytest.approx(3.2)
        assert scores.conscientiousness == pytest.approx(3.0)
        assert scores.extraversion == pytest.approx(0.8)
        assert scores.agreeableness == pytest.approx(3.0)
        assert scores.neuroticism == pytest.approx(-2.0)
        assert scores.normalized is False

    def test_sum_not_average(self, calculator, item_factory):
        items = normalize_responses([
            item_factory("a", 4, "openness"),
            item_factory("b", 4, "openness"),
        ])
        assert calculator.calculate(items).openness == pytest.approx(8.0)

    def test_item_contributes_to_every_mapped_dimension(self, calculator):
        items = normalize_responses([{
            "itemId": "x",
            "rawValue": 4,
            "dimensionMappings": [
                {"dimension": "openness", "weight": 0.5},
                {"dimension": "extraversion", "weight": 0.5},
            ],
        }])
        scores = calculator.calculate(items)
        assert scores.openness == pytest.approx(2.0)
        assert scores.extraversion == pytest.approx(2.0)

    def test_invalid_items_do_not_contribute(self, invalid_items, worked_example_items):
        scores = score_responses(invalid_items + worked_example_items)
        assert scores.openness == pytest.approx(3.2)


class TestEmptyInput:
    """All five dimensions are present even with nothing to score."""

    def test_no_items_yields_zero_scores(self, calculator):
        scores = calculator.calculate([])
        for dim in DIMENSIONS:
            assert getattr(scores, dim) == 0.0
        assert scores.completeness == 0.0
        assert scores.consistency is None
        assert scores.facets is None

    def test_all_invalid_yields_zero_completeness(self, invalid_items):
        scores = score_responses(invalid_items)
        assert scores.dimension_scores() == {dim: 0.0 for dim in DIMENSIONS}
        assert scores.completeness == 0.0

    def test_missing_dimension_reported_in_item_counts(self, calculator, item_factory):
        scores = calculator.calculate(normalize_responses([item_factory("a", 3, "openness")]))
        assert scores.item_counts["openness"] == 1
        assert scores.item_counts["neuroticism"] == 0
        assert scores.neuroticism == 0.0


class TestNormalization:
    """Min/max-sum rescaling to 0-100."""

    def test_worked_example_normalized(self, calculator, worked_example_items):
        scores = calculator.calculate(normalize_responses(worked_example_items), normalize=True)
        assert scores.openness == pytest.approx(75.0)
        assert scores.conscientiousness == pytest.approx(50.0)
        assert scores.extraversion == pytest.approx(0.0)
        assert scores.agreeableness == pytest.approx(50.0)
        # weight -1: bounds are [-5, -1], -2 sits three quarters up
        assert scores.neuroticism == pytest.approx(75.0)
        assert scores.normalized is True

    def test_extremes_map_to_bounds(self, calculator, item_factory):
        items = normalize_responses([
            item_factory("hi", 5, "openness"),
            item_factory("lo", 1, "conscientiousness"),
        ])
        scores = calculator.calculate(items, normalize=True)
        assert scores.openness == pytest.approx(100.0)
        assert scores.conscientiousness == pytest.approx(0.0)

    def test_dimension_without_items_normalizes_to_zero(self, calculator, item_factory):
        scores = calculator.calculate(
            normalize_responses([item_factory("a", 3, "openness")]), normalize=True
        )
        assert scores.extraversion == 0.0

    def test_seven_point_scale(self, item_factory):
        scale = ResponseScale(min_value=1, max_value=7)
        scores = score_responses([item_factory("a", 4, "openness")], normalize=True, scale=scale)
        assert scores.openness == pytest.approx(50.0)


class TestCompleteness:

    def test_counts_rejected_items(self, invalid_items, worked_example_items):
        scores = score_responses(invalid_items + worked_example_items)
        assert scores.completeness == pytest.approx(round(5 / 9, 4))

    def test_explicit_total(self, calculator, worked_example_items):
        scores = calculator.calculate(
            normalize_responses(worked_example_items), total_item_count=10
        )
        assert scores.completeness == pytest.approx(0.5)

    def test_all_valid_is_complete(self, calculator, worked_example_items):
        scores = calculator.calculate(normalize_responses(worked_example_items))
        assert scores.completeness == 1.0

    def test_total_below_valid_count_rejected(self, calculator, item_factory):
        items = normalize_responses([
            item_factory("a", 4, "openness"),
            item_factory("b", 2, "openness"),
        ])
        with pytest.raises(ValueError, match="total_item_count"):
            calculator.calculate(items, total_item_count=1)


class TestConsistency:
    """1 - mean within-dimension variance / max variance."""

    def test_identical_answers_fully_consistent(self, calculator, item_factory):
        items = normalize_responses([
            item_factory("a", 4, "openness"),
            item_factory("b", 4, "openness"),
        ])
        assert calculator.calculate(items).consistency == 1.0

    def test_opposite_answers_fully_inconsistent(self, calculator, item_factory):
        items = normalize_responses([
            item_factory("a", 1, "openness"),
            item_factory("b", 5, "openness"),
        ])
        assert calculator.calculate(items).consistency == 0.0

    def test_negative_weight_direction_corrected(self, calculator, item_factory):
        # Agreeing with a positively keyed item and disagreeing with a
        # negatively keyed one is a consistent pattern.
        items = normalize_responses([
            item_factory("a", 5, "neuroticism", 1.0),
            item_factory("b", 1, "neuroticism", -1.0),
        ])
        assert calculator.calculate(items).consistency == 1.0

    def test_weak_mappings_ignored(self, calculator, item_factory):
        items = normalize_responses([
            item_factory("a", 1, "openness", 0.2),
            item_factory("b", 5, "openness", 0.2),
        ])
        assert calculator.calculate(items).consistency is None

    def test_single_item_dimensions_do_not_qualify(self, calculator, worked_example_items):
        assert calculator.calculate(normalize_responses(worked_example_items)).consistency is None


class TestFacets:

    def test_facet_mean_and_count(self, calculator, item_factory):
        items = normalize_responses([
            item_factory("a", 4, "openness", facets=[("O5_Ideas", 1.0)]),
            item_factory("b", 2, "openness", facets=[("O5_Ideas", 1.0)]),
        ])
        facet = calculator.calculate(items).facets["O5_Ideas"]
        assert facet.score == pytest.approx(3.0)
        assert facet.response_count == 2
        assert facet.standard_deviation == pytest.approx(1.0)

    def test_facet_normalized(self, calculator, item_factory):
        items = normalize_responses([
            item_factory("a", 5, "openness", facets=[("O2_Aesthetics", 1.0)]),
            item_factory("b", 3, "openness", facets=[("O2_Aesthetics", 1.0)]),
        ])
        facet = calculator.calculate(items, normalize=True).facets["O2_Aesthetics"]
        assert facet.score == pytest.approx(75.0)


class TestDeterminism:

    def test_rescoring_is_identical(self, worked_example_items):
        normalized = normalize_responses(worked_example_items)
        first = calculate_trait_scores(normalized, normalize=True)
        second = calculate_trait_scores(normalized, normalize=True)
        assert first == second

    def test_order_independent(self, worked_example_items):
        forward = calculate_trait_scores(normalize_responses(worked_example_items))
        backward = calculate_trait_scores(normalize_responses(list(reversed(worked_example_items))))
        assert forward == backward

    def test_result_is_immutable(self, worked_example_items):
        scores = calculate_trait_scores(normalize_responses(worked_example_items))
        with pytest.raises(ValidationError):
            scores.openness = 1.0
