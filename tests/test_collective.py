"""Unit tests for CollectiveDynamicsAnalyzer — roll-up and executive fit."""
import pytest

from ocean_engine.errors import InsufficientDataError, ScoreValidationError
from ocean_engine.schemas.organization import IndividualFacetProfile
from ocean_engine.schemas.traits import TraitScoreSet
from ocean_engine.services.collective import (
    CollectiveDynamicsAnalyzer,
    CollectiveTraits,
    calculate_executive_org_fit,
)
from ocean_engine.services.organization_service import OrganizationalAnalysisService
from ocean_engine.taxonomy import DIMENSIONS, FACETS_BY_DIMENSION


@pytest.fixture
def analyzer():
    return CollectiveDynamicsAnalyzer()


def _uniform(value):
    return {dim: value for dim in DIMENSIONS}


class TestCollectiveTraits:

    def test_person_score_is_mean_of_observed_facets(self, analyzer):
        openness = FACETS_BY_DIMENSION["openness"]
        profile = IndividualFacetProfile(
            profile_id="p",
            facets={openness[0]: 40.0, openness[1]: 80.0, openness[2]: None},
        )
        traits = analyzer.collective_traits([profile])
        assert traits.means == {"openness": pytest.approx(60.0)}
        assert traits.diversity == {"openness": 0.0}
        assert not traits.complete

    def test_incomplete_traits_yield_no_dynamics(self, analyzer):
        traits = CollectiveTraits(means={"openness": 50.0}, diversity={"openness": 5.0})
        assert analyzer.team_dynamics(traits) == {}
        assert analyzer.optimal_additions(traits) == {}

    def test_inverted_scale_rejected(self):
        with pytest.raises(ValueError):
            CollectiveDynamicsAnalyzer(scale_min=100.0, scale_max=0.0)


class TestExecutiveFit:

    def test_identical_profiles_fully_aligned(self, analyzer):
        fit = analyzer.executive_fit(_uniform(50.0), _uniform(50.0))
        assert fit.trait_alignment == {dim: 1.0 for dim in DIMENSIONS}
        assert fit.leadership_gap_fill == 0.0
        assert fit.diversity_contribution == 0.0
        assert fit.balance_potential == 0.5
        # 0.6·1.0 + 0.4·(0 + 0 + 0.5)/3
        assert fit.overall_fit == pytest.approx(0.6667)
        assert fit.recommendations == []

    def test_executive_fills_capability_gaps(self, analyzer):
        executive = TraitScoreSet(
            openness=90, conscientiousness=90, extraversion=90, agreeableness=60, neuroticism=20,
            normalized=True,
        )
        organization = {
            "openness": 30.0,
            "conscientiousness": 40.0,
            "extraversion": 30.0,
            "agreeableness": 60.0,
            "neuroticism": 70.0,
        }
        fit = analyzer.executive_fit(executive, organization)
        assert fit.leadership_gap_fill == 1.0
        assert fit.diversity_contribution == pytest.approx(0.8)
        assert fit.trait_alignment["openness"] == pytest.approx(0.4)
        assert fit.trait_alignment["agreeableness"] == pytest.approx(1.0)
        assert fit.balance_potential == 0.5
        assert any(r.startswith("High openness may clash") for r in fit.recommendations)
        assert any(r.startswith("Lower neuroticism than organization norm") for r in fit.recommendations)
        assert any("capability gaps" in r for r in fit.recommendations)
        assert any("diversity of perspective" in r for r in fit.recommendations)

    def test_accepts_organizational_profile(self, org_profiles):
        profile = OrganizationalAnalysisService().analyze(org_profiles)
        fit = calculate_executive_org_fit(_uniform(50.0), profile)
        assert fit.trait_alignment == {dim: 1.0 for dim in DIMENSIONS}

    def test_incomplete_executive_rejected(self, analyzer):
        scores = _uniform(50.0)
        del scores["neuroticism"]
        with pytest.raises(ScoreValidationError):
            analyzer.executive_fit(scores, _uniform(50.0))

    def test_out_of_range_executive_rejected(self, analyzer):
        with pytest.raises(ScoreValidationError):
            analyzer.executive_fit({**_uniform(50.0), "openness": 140.0}, _uniform(50.0))

    def test_organization_missing_dimension(self, analyzer):
        organization = CollectiveTraits(means={"openness": 50.0}, diversity={"openness": 0.0})
        with pytest.raises(InsufficientDataError) as exc_info:
            analyzer.executive_fit(_uniform(50.0), organization)
        assert exc_info.value.required == 5
        assert exc_info.value.actual == 1
