"""
OCEAN Engine — Trait and facet taxonomy

The five Big Five dimensions and the 30-facet NEO taxonomy (six facets per
dimension).  Facet codes are prefixed with their dimension letter and
ordinal, e.g. ``E2_Gregariousness``.
"""

from __future__ import annotations

DIMENSIONS: tuple[str, ...] = (
    "openness",
    "conscientiousness",
    "extraversion",
    "agreeableness",
    "neuroticism",
)

FACETS_BY_DIMENSION: dict[str, tuple[str, ...]] = {
    "openness": (
        "O1_Fantasy", "O2_Aesthetics", "O3_Feelings",
        "O4_Actions", "O5_Ideas", "O6_Values",
    ),
    "conscientiousness": (
        "C1_Competence", "C2_Order", "C3_Dutifulness",
        "C4_Achievement_Striving", "C5_Self_Discipline", "C6_Deliberation",
    ),
    "extraversion": (
        "E1_Warmth", "E2_Gregariousness", "E3_Assertiveness",
        "E4_Activity", "E5_Excitement_Seeking", "E6_Positive_Emotions",
    ),
    "agreeableness": (
        "A1_Trust", "A2_Straightforwardness", "A3_Altruism",
        "A4_Compliance", "A5_Modesty", "A6_Tender_Mindedness",
    ),
    "neuroticism": (
        "N1_Anxiety", "N2_Angry_Hostility", "N3_Depression",
        "N4_Self_Consciousness", "N5_Impulsiveness", "N6_Vulnerability",
    ),
}

FACET_CODES: tuple[str, ...] = tuple(
    facet for facets in FACETS_BY_DIMENSION.values() for facet in facets
)

# Facets historically under-covered by item banks; organizational analysis
# reports them separately and prefers their dedicated statistics.
FOCUS_FACETS: tuple[str, ...] = (
    "O2_Aesthetics",
    "O6_Values",
    "E2_Gregariousness",
    "E5_Excitement_Seeking",
    "A3_Altruism",
    "A4_Compliance",
    "A6_Tender_Mindedness",
    "N3_Depression",
)


def dimension_for_facet(facet_id: str) -> str:
    """Return the dimension a facet code belongs to."""
    for dimension, facets in FACETS_BY_DIMENSION.items():
        if facet_id in facets:
            return dimension
    raise KeyError(f"Unknown facet code: {facet_id}")
