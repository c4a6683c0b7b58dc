from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ocean_engine.config import get_settings
from ocean_engine.taxonomy import DIMENSIONS, FACET_CODES


class ResponseScale(BaseModel):
    """Closed interval of valid raw answers, e.g. 1-5 or 1-7 Likert."""

    model_config = ConfigDict(frozen=True)

    min_value: float = 1.0
    max_value: float = 5.0

    @model_validator(mode="after")
    def _bounds_ordered(self) -> "ResponseScale":
        if self.min_value >= self.max_value:
            raise ValueError(
                f"Scale minimum {self.min_value} must be below maximum {self.max_value}"
            )
        return self

    @classmethod
    def from_settings(cls) -> "ResponseScale":
        settings = get_settings()
        return cls(min_value=settings.SCALE_MIN, max_value=settings.SCALE_MAX)

    def contains(self, value: float) -> bool:
        return self.min_value <= value <= self.max_value

    def reverse(self, value: float) -> float:
        return (self.min_value + self.max_value) - value


class DimensionMapping(BaseModel):
    model_config = ConfigDict(frozen=True)

    dimension: str
    weight: float

    @field_validator("dimension")
    @classmethod
    def _known_dimension(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in DIMENSIONS:
            raise ValueError(f"Unknown dimension: {v!r}")
        return v


class FacetMapping(BaseModel):
    model_config = ConfigDict(frozen=True)

    facet: str
    weight: float

    @field_validator("facet")
    @classmethod
    def _known_facet(cls, v: str) -> str:
        if v not in FACET_CODES:
            raise ValueError(f"Unknown facet code: {v!r}")
        return v


class ResponseItem(BaseModel):
    """One raw answer as submitted.  ``raw_value`` is left untyped so the
    normalizer can reject bad values item by item instead of failing the
    whole batch at parse time."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    item_id: str = Field(alias="itemId")
    raw_value: Any = Field(default=None, alias="rawValue")
    dimension_mappings: list[DimensionMapping] = Field(
        alias="dimensionMappings", min_length=1
    )
    facet_mappings: list[FacetMapping] = Field(default_factory=list, alias="facetMappings")
    reverse_scored: bool = Field(default=False, alias="reverseScored")

    @field_validator("item_id", mode="before")
    @classmethod
    def _stringify_id(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class NormalizedItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    item_id: str
    value: float
    raw_value: float
    reverse_scored: bool = False
    dimension_mappings: list[DimensionMapping]
    facet_mappings: list[FacetMapping] = Field(default_factory=list)
    scale: Optional[ResponseScale] = None
