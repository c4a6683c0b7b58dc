from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ocean_engine.taxonomy import DIMENSIONS, FACET_CODES


class FacetScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: float
    response_count: int
    standard_deviation: float


class TraitScoreSet(BaseModel):
    """Five OCEAN dimension scores plus optional facet and quality data.

    All five dimensions are always present; a dimension nobody answered for
    stays at 0.0 and shows up as a zero in ``item_counts``.
    """

    model_config = ConfigDict(frozen=True)

    openness: float = 0.0
    conscientiousness: float = 0.0
    extraversion: float = 0.0
    agreeableness: float = 0.0
    neuroticism: float = 0.0

    facets: Optional[dict[str, FacetScore]] = None
    consistency: Optional[float] = None
    completeness: Optional[float] = None
    item_counts: Optional[dict[str, int]] = None
    normalized: bool = False

    @field_validator("facets")
    @classmethod
    def _known_facets(cls, v: Optional[dict[str, FacetScore]]) -> Optional[dict[str, FacetScore]]:
        if v is not None:
            unknown = sorted(set(v) - set(FACET_CODES))
            if unknown:
                raise ValueError(f"Unknown facet codes: {unknown}")
        return v

    def dimension_scores(self) -> dict[str, float]:
        return {dim: getattr(self, dim) for dim in DIMENSIONS}


class RaterScoreSet(BaseModel):
    """One rater's contribution to a 360 assessment.  ``scores`` is None for
    a rater who was invited but never submitted."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    rater_id: str = Field(alias="raterId")
    weight: float = Field(gt=0.0, le=1.0)
    scores: Optional[TraitScoreSet] = None


class AggregatedProfile(TraitScoreSet):
    discrepancies: Optional[dict[str, float]] = None
    rater_count: int = 0
    total_weight: float = 0.0
    rater_ids: list[str] = Field(default_factory=list)
