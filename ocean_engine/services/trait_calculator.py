"""
OCEAN Engine — Trait Score Calculator

Turns normalized response items into a five-dimension trait score set:

  score[d] = Σ value × weight   over every mapping of dimension d

This is a sum, not an average: an item contributes its full weighted value
to every dimension it maps to.  With ``normalize=True`` each dimension is
rescaled to 0-100 against the lowest and highest sums the same item set could
produce on the response scale.

Quality indicators:
  - completeness = valid items / submitted items
  - consistency  = 1 - mean within-dimension variance / maximum variance,
    computed over strongly-mapped items only
"""

from __future__ import annotations

import math
import statistics
from collections.abc import Iterable, Mapping
from typing import Any

import structlog

from ocean_engine.config import get_settings
from ocean_engine.schemas.responses import NormalizedItem, ResponseItem, ResponseScale
from ocean_engine.schemas.traits import FacetScore, TraitScoreSet
from ocean_engine.services.normalizer import ResponseNormalizer
from ocean_engine.taxonomy import DIMENSIONS

logger = structlog.get_logger("ocean_engine.trait_calculator")


class TraitScoreCalculator:
    """Stateless calculator; one instance may score any number of respondents."""

    def __init__(
        self,
        scale: ResponseScale | None = None,
        strong_mapping_weight: float | None = None,
    ) -> None:
        settings = get_settings()
        self.scale = scale
        self.strong_mapping_weight = (
            settings.STRONG_MAPPING_WEIGHT
            if strong_mapping_weight is None
            else strong_mapping_weight
        )

    # ══════════════════════════════════════════════════════════════════════
    # calculate — main entry point
    # ══════════════════════════════════════════════════════════════════════

    def calculate(
        self,
        items: Iterable[NormalizedItem],
        normalize: bool = False,
        total_item_count: int | None = None,
    ) -> TraitScoreSet:
        """Score normalized items for one respondent.

        Parameters
        ----------
        items:
            Output of the normalizer.  Order does not matter.
        normalize:
            Rescale each dimension to 0-100 (min/max-sum normalization).
        total_item_count:
            Number of items originally submitted, valid or not.  Defaults to
            the number of normalized items.

        Returns
        -------
        TraitScoreSet
            All five dimensions are always present; dimensions without
            contributing items score 0.

        Raises
        ------
        ValueError
            When ``total_item_count`` is smaller than the number of items.
        """
        items = list(items)
        scale = self._resolve_scale(items)
        total = len(items) if total_item_count is None else total_item_count
        if total < len(items):
            raise ValueError(
                f"total_item_count ({total}) is smaller than the {len(items)} valid items"
            )

        contributions: dict[str, list[float]] = {dim: [] for dim in DIMENSIONS}
        lower_bounds: dict[str, list[float]] = {dim: [] for dim in DIMENSIONS}
        upper_bounds: dict[str, list[float]] = {dim: [] for dim in DIMENSIONS}

        for item in items:
            for mapping in item.dimension_mappings:
                low, high = _contribution_bounds(mapping.weight, scale)
                contributions[mapping.dimension].append(item.value * mapping.weight)
                lower_bounds[mapping.dimension].append(low)
                upper_bounds[mapping.dimension].append(high)

        scores: dict[str, float] = {}
        for dim in DIMENSIONS:
            raw = math.fsum(contributions[dim])
            if normalize:
                scores[dim] = _rescale(
                    raw, math.fsum(lower_bounds[dim]), math.fsum(upper_bounds[dim])
                )
            else:
                scores[dim] = raw

        item_counts = {
            dim: sum(
                1 for item in items
                if any(m.dimension == dim for m in item.dimension_mappings)
            )
            for dim in DIMENSIONS
        }
        completeness = round(len(items) / total, 4) if total > 0 else 0.0
        consistency = self._consistency(items, scale)
        facets = self._facet_scores(items, scale, normalize)

        missing = [dim for dim, count in item_counts.items() if count == 0]
        if missing:
            logger.info("dimensions_without_items", dimensions=missing)

        return TraitScoreSet(
            **scores,
            facets=facets,
            consistency=consistency,
            completeness=completeness,
            item_counts=item_counts,
            normalized=normalize,
        )

    # ══════════════════════════════════════════════════════════════════════
    # Quality indicators
    # ══════════════════════════════════════════════════════════════════════

    def _consistency(self, items: list[NormalizedItem], scale: ResponseScale) -> float | None:
        """Low spread among items keyed strongly to the same dimension means a
        consistent respondent.  Values of negatively weighted items are
        reversed first so that agreeing answers line up."""
        per_dimension: dict[str, list[float]] = {dim: [] for dim in DIMENSIONS}
        for item in items:
            for mapping in item.dimension_mappings:
                if abs(mapping.weight) < self.strong_mapping_weight:
                    continue
                value = item.value if mapping.weight > 0 else scale.reverse(item.value)
                per_dimension[mapping.dimension].append(value)

        variances = [
            statistics.pvariance(values)
            for values in per_dimension.values()
            if len(values) >= 2
        ]
        if not variances:
            return None

        max_variance = ((scale.max_value - scale.min_value) / 2.0) ** 2
        consistency = 1.0 - statistics.fmean(variances) / max_variance
        return round(min(1.0, max(0.0, consistency)), 4)

    def _facet_scores(
        self,
        items: list[NormalizedItem],
        scale: ResponseScale,
        normalize: bool,
    ) -> dict[str, FacetScore] | None:
        per_facet: dict[str, list[float]] = {}
        for item in items:
            for mapping in item.facet_mappings:
                value = item.value * mapping.weight
                if normalize:
                    low, high = _contribution_bounds(mapping.weight, scale)
                    value = _rescale(value, low, high)
                per_facet.setdefault(mapping.facet, []).append(value)

        if not per_facet:
            return None

        return {
            facet: FacetScore(
                score=round(statistics.fmean(values), 4),
                response_count=len(values),
                standard_deviation=round(statistics.pstdev(values), 4),
            )
            for facet, values in sorted(per_facet.items())
        }

    def _resolve_scale(self, items: list[NormalizedItem]) -> ResponseScale:
        if self.scale is not None:
            return self.scale
        for item in items:
            if item.scale is not None:
                return item.scale
        return ResponseScale.from_settings()


# ──────────────────────────────────────────────────────────────────────────────
# Module helpers
# ──────────────────────────────────────────────────────────────────────────────


def _contribution_bounds(weight: float, scale: ResponseScale) -> tuple[float, float]:
    """Lowest and highest value × weight attainable on the scale."""
    a = weight * scale.min_value
    b = weight * scale.max_value
    return min(a, b), max(a, b)


def _rescale(value: float, low: float, high: float) -> float:
    if high <= low:
        return 0.0
    scaled = (value - low) / (high - low) * 100.0
    return round(min(100.0, max(0.0, scaled)), 4)


def calculate_trait_scores(
    items: Iterable[NormalizedItem],
    normalize: bool = False,
    total_item_count: int | None = None,
    scale: ResponseScale | None = None,
) -> TraitScoreSet:
    """Score normalized items (see ``TraitScoreCalculator.calculate``)."""
    return TraitScoreCalculator(scale=scale).calculate(
        items, normalize=normalize, total_item_count=total_item_count
    )


def score_responses(
    items: Iterable[ResponseItem | Mapping[str, Any]],
    normalize: bool = False,
    scale: ResponseScale | None = None,
) -> TraitScoreSet:
    """Normalize raw items and score them, counting rejected items against
    completeness."""
    items = list(items)
    normalized = ResponseNormalizer(scale=scale).normalize(items)
    return TraitScoreCalculator(scale=scale).calculate(
        normalized, normalize=normalize, total_item_count=len(items)
    )
