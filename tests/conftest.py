"""Shared pytest fixtures for OCEAN engine tests."""
import pytest

from ocean_engine.schemas.organization import FacetStatistic
from ocean_engine.taxonomy import FACET_CODES


def make_item(item_id, raw_value, dimension, weight=1.0, reverse=False, facets=None):
    """Build a raw response item in the camelCase shape callers submit."""
    return {
        "itemId": item_id,
        "rawValue": raw_value,
        "dimensionMappings": [{"dimension": dimension, "weight": weight}],
        "facetMappings": [{"facet": f, "weight": w} for f, w in (facets or [])],
        "reverseScored": reverse,
    }


def make_facet_profile(profile_id, value=50.0, team_id=None, facets=None):
    """Individual facet profile with every facet at ``value`` unless
    ``facets`` is given explicitly."""
    if facets is None:
        facets = {code: value for code in FACET_CODES}
    return {"profile_id": profile_id, "facets": facets, "team_id": team_id}


def stat(facet_id, mean, diversity=0.5, sample_size=5):
    return FacetStatistic(
        facet_id=facet_id,
        mean=mean,
        median=mean,
        standard_deviation=10.0,
        diversity_index=diversity,
        sample_size=sample_size,
    )


@pytest.fixture
def worked_example_items():
    """Five items, one per dimension, on a 1-5 scale.

    openness        4 × 0.8            = 3.2
    conscientiousness 3 × 1.0          = 3.0
    extraversion    5 reversed → 1 × 0.8 = 0.8
    agreeableness   3 × 1.0            = 3.0
    neuroticism     2 × -1.0           = -2.0
    """
    return [
        make_item("q1", 4, "openness", 0.8, facets=[("O5_Ideas", 0.8)]),
        make_item("q2", 3, "conscientiousness", 1.0),
        make_item("q3", 5, "extraversion", 0.8, reverse=True),
        make_item("q4", 3, "agreeableness", 1.0),
        make_item("q5", 2, "neuroticism", -1.0),
    ]


@pytest.fixture
def invalid_items():
    """Items the normalizer must skip."""
    return [
        make_item("bad_text", "abc", "openness"),
        make_item("bad_none", None, "openness"),
        make_item("bad_high", 6, "openness"),
        make_item("bad_bool", True, "openness"),
    ]


@pytest.fixture
def volatile_items():
    """Raw answers that normalize to neuroticism 100 and agreeableness 0."""
    return [
        make_item("o", 3, "openness"),
        make_item("c", 3, "conscientiousness"),
        make_item("e", 3, "extraversion"),
        make_item("a", 1, "agreeableness"),
        make_item("n", 5, "neuroticism"),
    ]


@pytest.fixture
def balanced_scores():
    return {
        "openness": 65,
        "conscientiousness": 70,
        "extraversion": 60,
        "agreeableness": 68,
        "neuroticism": 45,
    }


@pytest.fixture
def three_sixty_raters():
    """Self 0.4, manager 0.3, two peers 0.15 each."""

    def scores(openness, others=50.0):
        return {
            "openness": openness,
            "conscientiousness": others,
            "extraversion": others,
            "agreeableness": others,
            "neuroticism": others,
        }

    return [
        {"rater_id": "self", "weight": 0.4, "scores": scores(80)},
        {"rater_id": "manager", "weight": 0.3, "scores": scores(75)},
        {"rater_id": "peer1", "weight": 0.15, "scores": scores(78)},
        {"rater_id": "peer2", "weight": 0.15, "scores": scores(82)},
    ]


@pytest.fixture
def org_profiles():
    """Five fully covered profiles; gamma has a single member."""
    return [
        make_facet_profile("p1", 20.0, team_id="alpha"),
        make_facet_profile("p2", 40.0, team_id="alpha"),
        make_facet_profile("p3", 60.0, team_id="beta"),
        make_facet_profile("p4", 80.0, team_id="beta"),
        make_facet_profile("p5", 50.0, team_id="gamma"),
    ]


@pytest.fixture
def item_factory():
    return make_item


@pytest.fixture
def facet_profile_factory():
    return make_facet_profile


@pytest.fixture
def stat_factory():
    return stat
