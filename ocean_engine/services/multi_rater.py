"""
OCEAN Engine — Multi-Rater (360) Aggregation

Combines self, manager and peer trait score sets into one profile:

  aggregated[d] = Σ(weight_i × score_i[d]) / Σ(weight_i)

Raters who never submitted (``scores is None``) are excluded rather than
zero-filled.  Dividing by the total weight keeps the result a proper weighted
mean when the caller's weights do not sum to 1.

Optional discrepancy detection reports, per dimension, the largest pairwise
gap between contributing raters (max - min).  What counts as significant is
the caller's call; ``significant_discrepancies`` applies the configured
default.
"""

from __future__ import annotations

import math
import statistics
from collections.abc import Iterable, Mapping
from typing import Any

import structlog

from ocean_engine.config import get_settings
from ocean_engine.errors import InsufficientRatersError, ScoreValidationError
from ocean_engine.schemas.traits import AggregatedProfile, RaterScoreSet, TraitScoreSet
from ocean_engine.taxonomy import DIMENSIONS

logger = structlog.get_logger("ocean_engine.multi_rater")


class MultiRaterAggregator:
    """Weighted aggregation of several raters' trait score sets."""

    def aggregate(
        self,
        rater_score_sets: Iterable[RaterScoreSet | Mapping[str, Any]],
        detect_discrepancies: bool = False,
    ) -> AggregatedProfile:
        """Aggregate raters into one profile.

        Raises
        ------
        InsufficientRatersError
            When no rater has submitted scores.
        ScoreValidationError
            When contributing raters mix raw and normalized score sets.
        """
        raters = [
            r if isinstance(r, RaterScoreSet) else RaterScoreSet.model_validate(r)
            for r in rater_score_sets
        ]
        contributing = [r for r in raters if r.scores is not None]

        log = logger.bind(invited=len(raters), contributing=len(contributing))

        if not contributing:
            log.warning("aggregation_without_raters")
            raise InsufficientRatersError(actual=0)

        scales = {r.scores.normalized for r in contributing}
        if len(scales) > 1:
            log.warning("aggregation_mixed_scales")
            raise ScoreValidationError(
                "Cannot aggregate raw and normalized score sets together: "
                + ", ".join(f"{r.rater_id}(normalized={r.scores.normalized})" for r in contributing)
            )

        total_weight = math.fsum(r.weight for r in contributing)
        rater_ids = [r.rater_id for r in contributing]

        if len(contributing) == 1:
            only = contributing[0]
            log.info("single_rater_aggregation", rater_id=only.rater_id)
            return AggregatedProfile(
                **{name: getattr(only.scores, name) for name in TraitScoreSet.model_fields},
                discrepancies={} if detect_discrepancies else None,
                rater_count=1,
                total_weight=total_weight,
                rater_ids=rater_ids,
            )

        aggregated = {
            dim: round(
                math.fsum(r.weight * getattr(r.scores, dim) for r in contributing) / total_weight,
                4,
            )
            for dim in DIMENSIONS
        }

        discrepancies = None
        if detect_discrepancies:
            discrepancies = self._discrepancies(contributing)

        log.info(
            "raters_aggregated",
            total_weight=round(total_weight, 4),
            max_spread=max(discrepancies.values()) if discrepancies else None,
        )
        return AggregatedProfile(
            **aggregated,
            normalized=contributing[0].scores.normalized,
            discrepancies=discrepancies,
            rater_count=len(contributing),
            total_weight=total_weight,
            rater_ids=rater_ids,
        )

    def _discrepancies(self, raters: list[RaterScoreSet]) -> dict[str, float]:
        """Maximum pairwise absolute difference per dimension."""
        spreads: dict[str, float] = {}
        for dim in DIMENSIONS:
            values = [getattr(r.scores, dim) for r in raters]
            spreads[dim] = round(max(values) - min(values), 4)
        return spreads


def significant_discrepancies(
    profile: AggregatedProfile,
    threshold: float | None = None,
) -> dict[str, float]:
    """Dimensions whose rater spread is at least ``threshold``
    (default ``DISCREPANCY_THRESHOLD``)."""
    if threshold is None:
        threshold = get_settings().DISCREPANCY_THRESHOLD
    if not profile.discrepancies:
        return {}
    return {
        dim: spread
        for dim, spread in profile.discrepancies.items()
        if spread >= threshold
    }


def awareness_gap(self_scores: TraitScoreSet, observer_scores: TraitScoreSet) -> float:
    """Mean absolute difference between self-ratings and observer ratings.

    A large gap suggests limited self-awareness, which amplifies dark-side
    risk in practice.
    """
    gaps = [
        abs(getattr(self_scores, dim) - getattr(observer_scores, dim))
        for dim in DIMENSIONS
    ]
    return round(statistics.fmean(gaps), 4)


def aggregate_rater_scores(
    rater_score_sets: Iterable[RaterScoreSet | Mapping[str, Any]],
    detect_discrepancies: bool = False,
) -> AggregatedProfile:
    """Aggregate raters (see ``MultiRaterAggregator.aggregate``)."""
    return MultiRaterAggregator().aggregate(
        rater_score_sets, detect_discrepancies=detect_discrepancies
    )
