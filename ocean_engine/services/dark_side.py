"""
OCEAN Engine — Dark-Side Pattern Detection

Two views of behavioural risk on a 0-100 trait score set:

1. **Pattern detection**: a declarative table of rules, each a conjunction
   of ``(dimension, comparator, threshold)`` conditions that attaches one or
   more labels when satisfied.  Rules are evaluated independently; the
   result is deduplicated and ordered by the label catalogue.

2. **Trait-extreme risk assessment**: each dimension is checked for
   overuse (high extreme) or underuse (low extreme); extremeness scaled by
   current stress gives a per-trait risk level and an overall level.

Default thresholds for the rule table come from ``DARK_SIDE_THRESHOLDS``.
"""

from __future__ import annotations

import operator
import statistics
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import structlog

from ocean_engine.config import get_settings
from ocean_engine.errors import ConfigurationError, ScoreValidationError
from ocean_engine.schemas.traits import TraitScoreSet
from ocean_engine.services.validation import validate_score_set
from ocean_engine.taxonomy import DIMENSIONS

logger = structlog.get_logger("ocean_engine.dark_side")

# ──────────────────────────────────────────────────────────────────────────────
# Catalogue
# ──────────────────────────────────────────────────────────────────────────────

PATTERN_CATALOGUE: tuple[str, ...] = (
    "volatility_risk",
    "interpersonal_difficulties",
    "narcissistic_tendencies",
    "perfectionism_risk",
    "burnout_risk",
)

_COMPARATORS: dict[str, Callable[[float, float], bool]] = {
    ">": operator.gt,
    ">=": operator.ge,
    "<": operator.lt,
    "<=": operator.le,
}


@dataclass(frozen=True)
class Condition:
    dimension: str
    comparator: str
    threshold: float

    def holds(self, scores: Mapping[str, float]) -> bool:
        return _COMPARATORS[self.comparator](scores[self.dimension], self.threshold)


@dataclass(frozen=True)
class DarkSideRule:
    name: str
    conditions: tuple[Condition, ...]
    labels: tuple[str, ...]

    def matches(self, scores: Mapping[str, float]) -> bool:
        return all(condition.holds(scores) for condition in self.conditions)


def default_rules(thresholds: Mapping[str, float] | None = None) -> list[DarkSideRule]:
    """Build the standard rule table from threshold configuration."""
    t = dict(get_settings().DARK_SIDE_THRESHOLDS)
    if thresholds:
        t.update(thresholds)
    try:
        return [
            DarkSideRule(
                name="volatility",
                conditions=(
                    Condition("neuroticism", ">", t["volatility_neuroticism_min"]),
                    Condition("agreeableness", "<", t["volatility_agreeableness_max"]),
                ),
                labels=("volatility_risk", "interpersonal_difficulties"),
            ),
            DarkSideRule(
                name="narcissism",
                conditions=(
                    Condition("extraversion", ">", t["narcissism_extraversion_min"]),
                    Condition("agreeableness", "<", t["narcissism_agreeableness_max"]),
                    Condition("neuroticism", "<", t["narcissism_neuroticism_max"]),
                ),
                labels=("narcissistic_tendencies",),
            ),
            DarkSideRule(
                name="perfectionism",
                conditions=(
                    Condition("conscientiousness", ">", t["perfectionism_conscientiousness_min"]),
                    Condition("neuroticism", ">", t["perfectionism_neuroticism_min"]),
                ),
                labels=("perfectionism_risk", "burnout_risk"),
            ),
        ]
    except KeyError as exc:
        raise ConfigurationError(f"Missing dark-side threshold: {exc.args[0]}") from exc


# ──────────────────────────────────────────────────────────────────────────────
# Trait-extreme manifestations
# ──────────────────────────────────────────────────────────────────────────────

_MANIFESTATIONS: dict[str, dict[str, dict[str, str]]] = {
    "openness": {
        "high": {"name": "Chaotic Visionary", "description": "Unrealistic, impractical, scattered thinking"},
        "low": {"name": "Rigid Traditionalist", "description": "Inflexible, closed-minded, change-resistant"},
    },
    "conscientiousness": {
        "high": {"name": "Perfectionist Controller", "description": "Rigid, perfectionist, workaholic micromanager"},
        "low": {"name": "Chaotic Underperformer", "description": "Disorganized, unreliable, lacks follow-through"},
    },
    "extraversion": {
        "high": {"name": "Attention-Seeking Dominator", "description": "Attention-seeking, poor listening, impulsively dominant"},
        "low": {"name": "Invisible Leader", "description": "Withdrawn, inaccessible, under-communicating"},
    },
    "agreeableness": {
        "high": {"name": "Conflict-Avoidant Pleaser", "description": "Avoids hard decisions, over-accommodating"},
        "low": {"name": "Abrasive Competitor", "description": "Combative, distrustful, dismissive of others"},
    },
    "neuroticism": {
        "high": {"name": "Emotional Volatile", "description": "Reactive, anxious, mood-driven under pressure"},
        "low": {"name": "Detached Optimist", "description": "Underestimates risk, misses warning signs"},
    },
}

_RISK_WEIGHTS: dict[str, int] = {"low": 1, "moderate": 2, "high": 3, "critical": 4}


@dataclass(frozen=True)
class TraitRisk:
    dimension: str
    score: float
    risk_level: str
    manifestation_type: str
    manifestation: str | None = None
    description: str | None = None
    concerns: tuple[str, ...] = ()


@dataclass(frozen=True)
class DarkSideRiskProfile:
    overall_risk: str
    trait_risks: dict[str, TraitRisk]
    stress_amplification: float
    patterns: list[str] = field(default_factory=list)


class DarkSideDetector:
    """Stateless rule evaluator.  The rule table is validated once, at
    construction, and never mutated afterwards."""

    HIGH_EXTREME: float = 87.5   # 4.5 on a 1-5 item scale
    LOW_EXTREME: float = 12.5    # 1.5 on a 1-5 item scale
    WARNING_THRESHOLD: float = 70.0
    MIDPOINT: float = 50.0
    EXTREMENESS_UNIT: float = 25.0  # one raw scale point

    def __init__(
        self,
        rules: Sequence[DarkSideRule] | None = None,
        catalogue: Sequence[str] = PATTERN_CATALOGUE,
    ) -> None:
        self.catalogue = tuple(catalogue)
        self.rules = tuple(default_rules() if rules is None else rules)
        self._validate_rules()

    def _validate_rules(self) -> None:
        if not self.rules:
            raise ConfigurationError("Dark-side rule table is empty")
        seen: set[str] = set()
        for rule in self.rules:
            if rule.name in seen:
                raise ConfigurationError(f"Duplicate dark-side rule: {rule.name}")
            seen.add(rule.name)
            if not rule.conditions:
                raise ConfigurationError(f"Rule {rule.name!r} has no conditions")
            if not rule.labels:
                raise ConfigurationError(f"Rule {rule.name!r} attaches no labels")
            for condition in rule.conditions:
                if condition.dimension not in DIMENSIONS:
                    raise ConfigurationError(
                        f"Rule {rule.name!r} references unknown dimension {condition.dimension!r}"
                    )
                if condition.comparator not in _COMPARATORS:
                    raise ConfigurationError(
                        f"Rule {rule.name!r} uses unsupported comparator {condition.comparator!r}"
                    )
            unknown = [label for label in rule.labels if label not in self.catalogue]
            if unknown:
                raise ConfigurationError(f"Rule {rule.name!r} uses labels outside the catalogue: {unknown}")

    # ── Pattern detection ─────────────────────────────────────────────────

    def detect(self, scores: TraitScoreSet | Mapping[str, Any]) -> list[str]:
        """Return every pattern label triggered by ``scores``.

        Raises
        ------
        ScoreValidationError
            If a dimension is missing or outside 0-100.
        """
        values = self._dimension_values(scores)
        triggered: set[str] = set()
        for rule in self.rules:
            if rule.matches(values):
                triggered.update(rule.labels)
        patterns = [label for label in self.catalogue if label in triggered]
        if patterns:
            logger.info("dark_side_patterns_detected", patterns=patterns)
        return patterns

    # ── Trait-extreme risk ────────────────────────────────────────────────

    def assess_risk(
        self,
        scores: TraitScoreSet | Mapping[str, Any],
        stress_level: float = 5.0,
    ) -> DarkSideRiskProfile:
        """Per-trait overuse/underuse risk under a 0-10 stress level."""
        if not 0.0 <= stress_level <= 10.0:
            raise ScoreValidationError(f"Stress level must be within 0-10, got {stress_level}")
        values = self._dimension_values(scores)

        trait_risks = {
            dim: self._trait_risk(dim, values[dim], stress_level) for dim in DIMENSIONS
        }
        avg_risk = statistics.fmean(_RISK_WEIGHTS[r.risk_level] for r in trait_risks.values())
        if avg_risk >= 3.5:
            overall = "critical"
        elif avg_risk >= 2.5:
            overall = "high"
        elif avg_risk >= 1.5:
            overall = "moderate"
        else:
            overall = "low"

        return DarkSideRiskProfile(
            overall_risk=overall,
            trait_risks=trait_risks,
            stress_amplification=round(1.0 + (stress_level / 10.0) * 2.0, 4),
            patterns=self.detect(values),
        )

    def _trait_risk(self, dimension: str, score: float, stress_level: float) -> TraitRisk:
        if score >= self.HIGH_EXTREME:
            manifestation_type = "high_extreme"
            manifestation = _MANIFESTATIONS[dimension]["high"]
        elif score <= self.LOW_EXTREME:
            manifestation_type = "low_extreme"
            manifestation = _MANIFESTATIONS[dimension]["low"]
        else:
            concerns: tuple[str, ...] = ()
            if score >= self.WARNING_THRESHOLD:
                concerns = (f"Watch for overuse of {dimension} strengths",)
            return TraitRisk(
                dimension=dimension,
                score=score,
                risk_level="low",
                manifestation_type="none",
                concerns=concerns,
            )

        extremeness = abs(score - self.MIDPOINT) / self.EXTREMENESS_UNIT
        risk_score = extremeness * (stress_level / 5.0)
        if risk_score >= 2.0:
            level = "critical"
        elif risk_score >= 1.5:
            level = "high"
        elif risk_score >= 1.0:
            level = "moderate"
        else:
            level = "low"

        return TraitRisk(
            dimension=dimension,
            score=score,
            risk_level=level,
            manifestation_type=manifestation_type,
            manifestation=manifestation["name"],
            description=manifestation["description"],
        )

    # ── Helpers ───────────────────────────────────────────────────────────

    @staticmethod
    def _dimension_values(scores: TraitScoreSet | Mapping[str, Any]) -> dict[str, float]:
        if not validate_score_set(scores):
            raise ScoreValidationError(
                "Dark-side detection requires all five dimensions on the 0-100 scale"
            )
        if isinstance(scores, TraitScoreSet):
            return scores.dimension_scores()
        return {dim: float(scores[dim]) for dim in DIMENSIONS}


def detect_dark_side_patterns(scores: TraitScoreSet | Mapping[str, Any]) -> list[str]:
    """Evaluate the default rule table (see ``DarkSideDetector.detect``)."""
    return DarkSideDetector().detect(scores)


def assess_dark_side_risk(
    scores: TraitScoreSet | Mapping[str, Any],
    stress_level: float = 5.0,
) -> DarkSideRiskProfile:
    return DarkSideDetector().assess_risk(scores, stress_level=stress_level)
