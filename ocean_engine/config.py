"""
OCEAN Engine — Configuration

Loads all tunable thresholds and scale bounds from environment variables (and
an optional .env file) using Pydantic Settings.  A cached ``get_settings()``
helper is provided so that every component receives the same validated
instance without re-parsing the environment on every call.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Dict

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration for the scoring engine."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------ #
    # Runtime environment
    # ------------------------------------------------------------------ #
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # ------------------------------------------------------------------ #
    # Response scale (raw item values)
    # ------------------------------------------------------------------ #
    SCALE_MIN: float = 1.0
    SCALE_MAX: float = 5.0

    # ------------------------------------------------------------------ #
    # Normalized trait score range
    # ------------------------------------------------------------------ #
    SCORE_MIN: float = 0.0
    SCORE_MAX: float = 100.0

    # ------------------------------------------------------------------ #
    # Item mapping weights
    # ------------------------------------------------------------------ #
    REQUIRE_NORMALIZED_MAPPING_WEIGHTS: bool = False
    MAPPING_WEIGHT_TOLERANCE: float = 0.01
    STRONG_MAPPING_WEIGHT: float = 0.5  # |w| at or above counts for consistency

    # ------------------------------------------------------------------ #
    # Multi-rater
    # ------------------------------------------------------------------ #
    DISCREPANCY_THRESHOLD: float = 30.0

    # ------------------------------------------------------------------ #
    # Dark-side rule thresholds (0-100 scale)
    # ------------------------------------------------------------------ #
    DARK_SIDE_THRESHOLDS: Dict[str, float] = {
        "volatility_neuroticism_min": 80.0,
        "volatility_agreeableness_max": 30.0,
        "narcissism_extraversion_min": 85.0,
        "narcissism_agreeableness_max": 30.0,
        "narcissism_neuroticism_max": 40.0,
        "perfectionism_conscientiousness_min": 90.0,
        "perfectionism_neuroticism_min": 70.0,
    }

    # ------------------------------------------------------------------ #
    # Organizational analysis
    # ------------------------------------------------------------------ #
    FACET_SCALE_MIN: float = 0.0
    FACET_SCALE_MAX: float = 100.0
    DIVERSITY_BINS: int = 5
    MIN_ORG_SAMPLE_SIZE: int = 3
    MIN_FACET_COVERAGE: float = 50.0   # per-profile coverage percentage
    MIN_TEAM_SAMPLE_SIZE: int = 2

    # ------------------------------------------------------------------ #
    # Batch execution
    # ------------------------------------------------------------------ #
    BATCH_CONCURRENCY: int = 8

    # ------------------------------------------------------------------ #
    # Derived helpers
    # ------------------------------------------------------------------ #
    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @field_validator(
        "DIVERSITY_BINS",
        "MIN_ORG_SAMPLE_SIZE",
        "MIN_TEAM_SAMPLE_SIZE",
        "BATCH_CONCURRENCY",
    )
    @classmethod
    def _must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Value must be at least 1, got {v}")
        return v

    @field_validator("MIN_FACET_COVERAGE")
    @classmethod
    def _coverage_is_percentage(cls, v: float) -> float:
        if not 0.0 <= v <= 100.0:
            raise ValueError(f"Coverage must be between 0 and 100, got {v}")
        return v

    @model_validator(mode="after")
    def _bounds_must_be_ordered(self) -> "Settings":
        for low, high in (
            ("SCALE_MIN", "SCALE_MAX"),
            ("SCORE_MIN", "SCORE_MAX"),
            ("FACET_SCALE_MIN", "FACET_SCALE_MAX"),
        ):
            if getattr(self, low) >= getattr(self, high):
                raise ValueError(f"{low} must be lower than {high}")
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached, validated ``Settings`` instance.

    Import this function anywhere you need access to configuration::

        from ocean_engine.config import get_settings
        settings = get_settings()
    """
    return Settings()
