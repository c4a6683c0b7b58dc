"""
OCEAN Engine — Facet Analyzer

Population statistics for one facet across many individual profiles:
mean, median, population standard deviation and a diversity index.

The diversity index is the normalized Shannon entropy of the values binned
into ``DIVERSITY_BINS`` equal-width bands over the facet scale:

  H = -Σ p_k ln p_k / ln K

0 means everyone falls in the same band; 1 means the population is spread
evenly across all bands.  Unlike the standard deviation it is insensitive to
where on the scale the bands sit, so a polarised organisation scores high
even when its mean looks unremarkable.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from numbers import Real
from typing import Any

import numpy as np
import structlog

from ocean_engine.config import get_settings
from ocean_engine.schemas.organization import (
    FacetAggregations,
    FacetStatistic,
    IndividualFacetProfile,
)
from ocean_engine.taxonomy import FACET_CODES

logger = structlog.get_logger("ocean_engine.facet_analyzer")


class FacetAnalyzer:
    """Computes per-facet distribution statistics with numpy."""

    def __init__(
        self,
        bins: int | None = None,
        scale_min: float | None = None,
        scale_max: float | None = None,
    ) -> None:
        settings = get_settings()
        self.bins = settings.DIVERSITY_BINS if bins is None else bins
        self.scale_min = settings.FACET_SCALE_MIN if scale_min is None else scale_min
        self.scale_max = settings.FACET_SCALE_MAX if scale_max is None else scale_max

    def analyze_facet_distribution(
        self,
        values: Iterable[Any],
        facet_id: str,
    ) -> FacetStatistic:
        """Distribution statistics for one facet.

        Parameters
        ----------
        values:
            Facet scores from individual profiles.  ``None`` and non-finite
            entries are dropped before any statistic is computed.
        facet_id:
            Facet code the values belong to; echoed back on the result.

        Returns
        -------
        FacetStatistic
            All statistics are ``None`` with ``sample_size == 0`` when no
            usable value remains.
        """
        clean = _finite_values(values)
        if not clean:
            return FacetStatistic(facet_id=facet_id, sample_size=0)

        arr = np.asarray(clean, dtype=float)
        return FacetStatistic(
            facet_id=facet_id,
            mean=round(float(np.mean(arr)), 4),
            median=round(float(np.median(arr)), 4),
            standard_deviation=round(float(np.std(arr)), 4),
            diversity_index=self._diversity_index(arr),
            sample_size=int(arr.size),
        )

    def calculate_organizational_aggregations(
        self,
        profiles: Sequence[IndividualFacetProfile],
        facet_ids: Sequence[str] = FACET_CODES,
    ) -> FacetAggregations:
        """Run ``analyze_facet_distribution`` over every facet in the taxonomy."""
        statistics: dict[str, FacetStatistic] = {}
        for facet_id in facet_ids:
            values = [p.facets.get(facet_id) for p in profiles]
            statistics[facet_id] = self.analyze_facet_distribution(values, facet_id)

        observed = sum(1 for s in statistics.values() if s.sample_size > 0)
        logger.info(
            "facet_aggregations_computed",
            profiles=len(profiles),
            facets_observed=observed,
        )
        return FacetAggregations(
            means={f: s.mean for f, s in statistics.items()},
            medians={f: s.median for f, s in statistics.items()},
            std_deviations={f: s.standard_deviation for f, s in statistics.items()},
            diversity_indices={f: s.diversity_index for f, s in statistics.items()},
            statistics=statistics,
            sample_size=len(profiles),
        )

    def _diversity_index(self, arr: np.ndarray) -> float:
        if self.bins < 2 or arr.size < 2:
            return 0.0
        clipped = np.clip(arr, self.scale_min, self.scale_max)
        counts, _ = np.histogram(clipped, bins=self.bins, range=(self.scale_min, self.scale_max))
        proportions = counts[counts > 0] / arr.size
        entropy = float(-np.sum(proportions * np.log(proportions)))
        return round(min(1.0, max(0.0, entropy / math.log(self.bins))), 4)


def _finite_values(values: Iterable[Any]) -> list[float]:
    clean: list[float] = []
    for value in values:
        if isinstance(value, bool) or not isinstance(value, Real):
            continue
        number = float(value)
        if math.isfinite(number):
            clean.append(number)
    return clean


def analyze_facet_distribution(values: Iterable[Any], facet_id: str) -> FacetStatistic:
    return FacetAnalyzer().analyze_facet_distribution(values, facet_id)


def calculate_organizational_aggregations(
    profiles: Sequence[IndividualFacetProfile],
) -> FacetAggregations:
    return FacetAnalyzer().calculate_organizational_aggregations(profiles)
