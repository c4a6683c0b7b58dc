from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ocean_engine.taxonomy import FACET_CODES


class FacetStatistic(BaseModel):
    model_config = ConfigDict(frozen=True)

    facet_id: str
    mean: Optional[float] = None
    median: Optional[float] = None
    standard_deviation: Optional[float] = None
    diversity_index: Optional[float] = None
    sample_size: int = 0


class IndividualFacetProfile(BaseModel):
    """One person's facet scores as stored by the caller.  Facets the person
    was never measured on are None or simply absent."""

    model_config = ConfigDict(frozen=True)

    profile_id: str
    facets: dict[str, Optional[float]] = Field(default_factory=dict)
    coverage_percentage: Optional[float] = None
    team_id: Optional[str] = None

    @field_validator("facets")
    @classmethod
    def _known_facets(cls, v: dict[str, Optional[float]]) -> dict[str, Optional[float]]:
        unknown = sorted(set(v) - set(FACET_CODES))
        if unknown:
            raise ValueError(f"Unknown facet codes: {unknown}")
        return v

    @model_validator(mode="before")
    @classmethod
    def _derive_coverage(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("coverage_percentage") is None:
            facets = data.get("facets") or {}
            if isinstance(facets, Mapping):
                observed = sum(1 for value in facets.values() if value is not None)
                data = {**data, "coverage_percentage": observed / len(FACET_CODES) * 100.0}
        return data


class FacetAggregations(BaseModel):
    model_config = ConfigDict(frozen=True)

    means: dict[str, Optional[float]]
    medians: dict[str, Optional[float]]
    std_deviations: dict[str, Optional[float]]
    diversity_indices: dict[str, Optional[float]]
    statistics: dict[str, FacetStatistic]
    sample_size: int = 0


class FocusInsight(BaseModel):
    model_config = ConfigDict(frozen=True)

    facet_id: str
    mean: Optional[float] = None
    level: Optional[str] = None


class TeamProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    team_id: str
    sample_size: int
    facet_means: dict[str, Optional[float]]
    culture_types: dict[str, float]
    emergent_properties: dict[str, float]
    primary_culture: Optional[str] = None
    collective_traits: dict[str, float] = Field(default_factory=dict)
    dynamics: dict[str, float] = Field(default_factory=dict)
    optimal_additions: dict[str, float] = Field(default_factory=dict)


class OrganizationalProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    organization_id: Optional[str] = None
    facet_means: dict[str, Optional[float]]
    facet_medians: dict[str, Optional[float]]
    facet_std_deviations: dict[str, Optional[float]]
    facet_diversity_indices: dict[str, Optional[float]]
    focus_facets: dict[str, FacetStatistic]
    focus_insights: dict[str, FocusInsight]
    culture_types: dict[str, float]
    primary_culture: Optional[str] = None
    culture_diversity: float = 0.0
    emergent_properties: dict[str, float]
    collective_traits: dict[str, float] = Field(default_factory=dict)
    trait_diversity: dict[str, float] = Field(default_factory=dict)
    health_metrics: dict[str, float] = Field(default_factory=dict)
    sample_size: int
    coverage_percentage: float
    quality_metrics: dict[str, float | str]
    team_breakdown: Optional[list[TeamProfile]] = None
