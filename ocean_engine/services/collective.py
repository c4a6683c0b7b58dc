"""
OCEAN Engine — Collective trait dynamics

Rolls individual facet profiles up to the five dimensions and derives
organization- and team-level readings from the result:

  * health metrics: psychological safety, innovation climate, resilience
    and performance culture
  * team dynamics: collaboration potential, innovation capacity, execution
    reliability and conflict risk
  * the trait profile of an optimal next team member
  * executive-organization fit (trait alignment plus complementary fit)

A person's dimension score is the mean of their observed facets in that
dimension.  The collective trait is the mean of those scores, and the trait
diversity is their population standard deviation, both on the facet scale.

The formulas work on unit values: ``u = (x - scale_min) / (scale_max -
scale_min)``.  A spread is expressed as ``d = 2·sd / range``, which reaches 1
for a population split evenly between the two scale ends.  Blends are
weighted sums of unit values, reported on 0-100.
"""

from __future__ import annotations

import math
import statistics
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Union

import numpy as np
import structlog

from ocean_engine.config import get_settings
from ocean_engine.errors import InsufficientDataError, ScoreValidationError
from ocean_engine.schemas.organization import IndividualFacetProfile, OrganizationalProfile
from ocean_engine.schemas.traits import TraitScoreSet
from ocean_engine.services.validation import validate_score_set
from ocean_engine.taxonomy import DIMENSIONS, FACETS_BY_DIMENSION

logger = structlog.get_logger("ocean_engine.collective")

# (dimension, weight, inverse)
_Blend = tuple[tuple[str, float, bool], ...]

HEALTH_METRICS: dict[str, _Blend] = {
    "psychological_safety": (
        ("agreeableness", 0.40, False),
        ("neuroticism", 0.35, True),
        ("openness", 0.25, False),
    ),
    "innovation_climate": (
        ("openness", 0.50, False),
        ("extraversion", 0.30, False),
        ("agreeableness", 0.20, False),
    ),
    "resilience": (
        ("neuroticism", 0.45, True),
        ("openness", 0.30, False),
        ("conscientiousness", 0.25, False),
    ),
    "performance_culture": (
        ("conscientiousness", 0.45, False),
        ("extraversion", 0.30, False),
        ("neuroticism", 0.25, True),
    ),
}


@dataclass(frozen=True)
class CollectiveTraits:
    """Dimension-level roll-up on the facet scale.  Dimensions nobody was
    measured on are absent from both dicts."""

    means: dict[str, float]
    diversity: dict[str, float]
    sample_size: int = 0

    @property
    def complete(self) -> bool:
        return all(dim in self.means for dim in DIMENSIONS)


@dataclass(frozen=True)
class ExecutiveFit:
    trait_alignment: dict[str, float]
    leadership_gap_fill: float
    diversity_contribution: float
    balance_potential: float
    overall_fit: float
    recommendations: list[str] = field(default_factory=list)


OrgTraits = Union[OrganizationalProfile, CollectiveTraits, Mapping[str, float]]


class CollectiveDynamicsAnalyzer:
    """Dimension-level health, team dynamics and executive fit."""

    # Optimal-addition targets (unit scale)
    BASELINE_TARGET: float = 0.625
    BASELINE_NEUROTICISM_TARGET: float = 0.375

    # Executive fit
    GAP_FILL_STEP: float = 0.25
    DIVERSITY_STEP: float = 0.2
    MODERATE_DIFFERENCE: tuple[float, float] = (0.25, 0.625)
    BALANCE_SD_CEILING: float = 0.625
    ALIGNMENT_WEIGHT: float = 0.6
    COMPLEMENTARY_WEIGHT: float = 0.4
    LOW_ALIGNMENT: float = 0.6

    def __init__(
        self,
        scale_min: float | None = None,
        scale_max: float | None = None,
    ) -> None:
        settings = get_settings()
        self.scale_min = settings.FACET_SCALE_MIN if scale_min is None else scale_min
        self.scale_max = settings.FACET_SCALE_MAX if scale_max is None else scale_max
        if self.scale_max <= self.scale_min:
            raise ValueError(
                f"Facet scale is inverted: min={self.scale_min}, max={self.scale_max}"
            )
        self.score_min = settings.SCORE_MIN
        self.score_max = settings.SCORE_MAX

    # ══════════════════════════════════════════════════════════════════════
    # Roll-up
    # ══════════════════════════════════════════════════════════════════════

    def collective_traits(
        self,
        profiles: Iterable[IndividualFacetProfile],
    ) -> CollectiveTraits:
        profiles = list(profiles)
        per_dimension: dict[str, list[float]] = {dim: [] for dim in DIMENSIONS}
        for profile in profiles:
            for dim in DIMENSIONS:
                observed = [
                    profile.facets[f]
                    for f in FACETS_BY_DIMENSION[dim]
                    if profile.facets.get(f) is not None
                ]
                if observed:
                    per_dimension[dim].append(math.fsum(observed) / len(observed))

        means: dict[str, float] = {}
        diversity: dict[str, float] = {}
        for dim, values in per_dimension.items():
            if not values:
                continue
            arr = np.asarray(values, dtype=float)
            means[dim] = round(float(np.mean(arr)), 4)
            diversity[dim] = round(float(np.std(arr)), 4)

        return CollectiveTraits(means=means, diversity=diversity, sample_size=len(profiles))

    # ══════════════════════════════════════════════════════════════════════
    # Organization health
    # ══════════════════════════════════════════════════════════════════════

    def health_metrics(self, traits: CollectiveTraits) -> dict[str, float]:
        """Health metrics on 0-100; empty when any dimension is unobserved."""
        if not traits.complete:
            logger.info("health_metrics_skipped", missing=self._missing(traits))
            return {}
        unit = self._unit_means(traits)
        return {
            name: round(
                math.fsum(w * ((1.0 - unit[d]) if inv else unit[d]) for d, w, inv in blend) * 100.0,
                4,
            )
            for name, blend in HEALTH_METRICS.items()
        }

    # ══════════════════════════════════════════════════════════════════════
    # Team composition
    # ══════════════════════════════════════════════════════════════════════

    def team_dynamics(self, traits: CollectiveTraits) -> dict[str, float]:
        """Predicted team dynamics on 0-100; empty when incomplete."""
        if not traits.complete:
            logger.info("team_dynamics_skipped", missing=self._missing(traits))
            return {}
        u = self._unit_means(traits)
        d = self._unit_spreads(traits)
        predictions = {
            "collaboration_potential": (
                0.4 * u["agreeableness"] + 0.3 * u["extraversion"] + 0.3 * (1.0 - d["agreeableness"])
            ),
            "innovation_capacity": (
                0.5 * u["openness"] + 0.3 * d["openness"] + 0.2 * u["extraversion"]
            ),
            "execution_reliability": (
                0.5 * u["conscientiousness"]
                + 0.3 * (1.0 - d["conscientiousness"])
                + 0.2 * (1.0 - u["neuroticism"])
            ),
            "conflict_risk": (
                0.4 * d["agreeableness"] + 0.3 * u["neuroticism"] + 0.3 * (1.0 - u["agreeableness"])
            ),
        }
        return {name: round(value * 100.0, 4) for name, value in predictions.items()}

    def optimal_additions(self, traits: CollectiveTraits) -> dict[str, float]:
        """Trait profile (facet scale) of the member who would best round out
        the team; empty when incomplete."""
        if not traits.complete:
            return {}
        u = self._unit_means(traits)
        d = self._unit_spreads(traits)

        target = {dim: self.BASELINE_TARGET for dim in DIMENSIONS}
        target["neuroticism"] = self.BASELINE_NEUROTICISM_TARGET

        if u["openness"] < 0.5:
            target["openness"] = 0.875
        if u["conscientiousness"] < 0.625:
            target["conscientiousness"] = 0.875
        if u["extraversion"] < 0.5:
            target["extraversion"] = 0.75
        if u["agreeableness"] < 0.625:
            target["agreeableness"] = 0.75
        if u["neuroticism"] > 0.625:
            target["neuroticism"] = 0.25

        # A homogeneous team gains most from someone at the far end.
        if d["openness"] < 0.4:
            target["openness"] = 1.0
        if d["extraversion"] < 0.5:
            target["extraversion"] = 0.0

        span = self.scale_max - self.scale_min
        return {dim: round(self.scale_min + value * span, 4) for dim, value in target.items()}

    # ══════════════════════════════════════════════════════════════════════
    # Executive fit
    # ══════════════════════════════════════════════════════════════════════

    def executive_fit(
        self,
        executive: TraitScoreSet | Mapping[str, Any],
        organization: OrgTraits,
    ) -> ExecutiveFit:
        """Fit between one executive's trait scores and the organization.

        Parameters
        ----------
        executive:
            Normalized (0-100) trait scores for the executive.
        organization:
            An ``OrganizationalProfile``, a ``CollectiveTraits`` roll-up or a
            plain mapping of dimension to collective mean on the facet scale.

        Raises
        ------
        ScoreValidationError
            When the executive's score set is incomplete or out of range.
        InsufficientDataError
            When the organization's collective traits miss a dimension.
        """
        if not validate_score_set(executive):
            raise ScoreValidationError(
                "Executive scores must include all five dimensions within the score range"
            )
        exec_scores = (
            executive.dimension_scores() if isinstance(executive, TraitScoreSet) else executive
        )
        score_span = self.score_max - self.score_min
        e = {dim: (float(exec_scores[dim]) - self.score_min) / score_span for dim in DIMENSIONS}

        org_means = self._org_means(organization)
        missing = [dim for dim in DIMENSIONS if org_means.get(dim) is None]
        if missing:
            raise InsufficientDataError(
                f"Organization has no collective score for: {missing}",
                required=len(DIMENSIONS),
                actual=len(DIMENSIONS) - len(missing),
            )
        o = {dim: self._unit(org_means[dim]) for dim in DIMENSIONS}

        alignment = {dim: round(1.0 - abs(e[dim] - o[dim]), 4) for dim in DIMENSIONS}

        gap_fill = 0.0
        if o["openness"] < 0.5 and e["openness"] > 0.75:
            gap_fill += self.GAP_FILL_STEP
        if o["conscientiousness"] < 0.625 and e["conscientiousness"] > 0.75:
            gap_fill += self.GAP_FILL_STEP
        if o["extraversion"] < 0.5 and e["extraversion"] > 0.75:
            gap_fill += self.GAP_FILL_STEP
        if o["neuroticism"] > 0.625 and e["neuroticism"] < 0.375:
            gap_fill += self.GAP_FILL_STEP
        gap_fill = min(gap_fill, 1.0)

        low, high = self.MODERATE_DIFFERENCE
        diversity = min(
            sum(self.DIVERSITY_STEP for dim in DIMENSIONS if low < abs(e[dim] - o[dim]) < high),
            1.0,
        )

        balance = 0.8 if self._balance(e) > self._balance(o) else 0.5

        alignment_score = statistics.fmean(alignment.values())
        complementary_score = (gap_fill + diversity + balance) / 3.0
        overall = (
            self.ALIGNMENT_WEIGHT * alignment_score
            + self.COMPLEMENTARY_WEIGHT * complementary_score
        )

        fit = ExecutiveFit(
            trait_alignment=alignment,
            leadership_gap_fill=round(gap_fill, 4),
            diversity_contribution=round(diversity, 4),
            balance_potential=balance,
            overall_fit=round(overall, 4),
            recommendations=self._recommendations(e, o, alignment, gap_fill, diversity, balance),
        )
        logger.info("executive_fit_computed", overall_fit=fit.overall_fit)
        return fit

    # ══════════════════════════════════════════════════════════════════════
    # Helpers
    # ══════════════════════════════════════════════════════════════════════

    def _unit(self, value: float) -> float:
        return (value - self.scale_min) / (self.scale_max - self.scale_min)

    def _unit_means(self, traits: CollectiveTraits) -> dict[str, float]:
        return {dim: self._unit(traits.means[dim]) for dim in DIMENSIONS}

    def _unit_spreads(self, traits: CollectiveTraits) -> dict[str, float]:
        span = self.scale_max - self.scale_min
        return {dim: min(1.0, 2.0 * traits.diversity[dim] / span) for dim in DIMENSIONS}

    def _balance(self, unit_scores: Mapping[str, float]) -> float:
        return 1.0 - statistics.pstdev(unit_scores.values()) / self.BALANCE_SD_CEILING

    @staticmethod
    def _missing(traits: CollectiveTraits) -> list[str]:
        return [dim for dim in DIMENSIONS if dim not in traits.means]

    @staticmethod
    def _org_means(organization: OrgTraits) -> Mapping[str, Any]:
        if isinstance(organization, OrganizationalProfile):
            return organization.collective_traits
        if isinstance(organization, CollectiveTraits):
            return organization.means
        return organization

    def _recommendations(
        self,
        executive: Mapping[str, float],
        organization: Mapping[str, float],
        alignment: Mapping[str, float],
        gap_fill: float,
        diversity: float,
        balance: float,
    ) -> list[str]:
        recommendations: list[str] = []
        for dim, fit in alignment.items():
            if fit >= self.LOW_ALIGNMENT:
                continue
            if executive[dim] > organization[dim]:
                recommendations.append(
                    f"High {dim} may clash with organizational culture. "
                    "Focus on gradual culture shift or adjust leadership style."
                )
            else:
                recommendations.append(
                    f"Lower {dim} than organization norm. "
                    f"Develop {dim}-related competencies or leverage team strengths."
                )
        if gap_fill > 0.6:
            recommendations.append(
                "Strong potential to fill organizational capability gaps. "
                "Leverage unique strengths to drive positive change."
            )
        if diversity > 0.7:
            recommendations.append(
                "Valuable diversity of perspective. "
                "Use different viewpoint to challenge groupthink and drive innovation."
            )
        if balance > 0.7:
            recommendations.append(
                "Well-balanced profile can stabilize organizational extremes. "
                "Act as a moderating influence in decision-making."
            )
        return recommendations


def calculate_executive_org_fit(
    executive: TraitScoreSet | Mapping[str, Any],
    organization: OrgTraits,
) -> ExecutiveFit:
    return CollectiveDynamicsAnalyzer().executive_fit(executive, organization)
