"""
OCEAN Engine — Profile Interpretation

Normative conversion of 0-100 trait scores to percentiles and stanines, and
a short strengths / challenges / recommendations reading of the result.

Norms are expressed on the 1-5 item-mean scale, so a 0-100 score is mapped
back with ``1 + score / 25`` before the z-score is taken.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from statistics import NormalDist
from typing import Any

import structlog

from ocean_engine.errors import ScoreValidationError
from ocean_engine.schemas.traits import TraitScoreSet
from ocean_engine.services.validation import validate_score_set
from ocean_engine.taxonomy import DIMENSIONS

logger = structlog.get_logger("ocean_engine.interpretation")

# (mean, sd) on the 1-5 item-mean scale
NORMS: dict[str, tuple[float, float]] = {
    "openness": (3.92, 0.66),
    "conscientiousness": (3.81, 0.69),
    "extraversion": (3.39, 0.86),
    "agreeableness": (3.94, 0.63),
    "neuroticism": (2.96, 0.87),
}

STANINE_CUTS: tuple[int, ...] = (4, 11, 23, 40, 60, 77, 89, 96)

_READINGS: dict[str, dict[str, dict[str, str]]] = {
    "openness": {
        "high": {
            "strength": "Highly creative and innovative with strong intellectual curiosity",
            "recommendation": "Leverage creativity in strategic roles and innovation projects",
        },
        "low": {
            "challenge": "May resist change and new approaches",
            "recommendation": "Develop comfort with ambiguity through structured experimentation",
        },
    },
    "conscientiousness": {
        "high": {
            "strength": "Exceptional reliability and attention to detail",
            "recommendation": "Take on leadership roles requiring systematic execution",
        },
        "low": {
            "challenge": "May struggle with organization and follow-through",
            "recommendation": "Implement structured planning tools and accountability systems",
        },
    },
    "extraversion": {
        "high": {
            "strength": "Natural leader with strong communication and networking abilities",
            "recommendation": "Excel in roles requiring public presence and team motivation",
        },
        "low": {
            "challenge": "May avoid necessary networking and visibility",
            "recommendation": "Practice structured networking and prepare for social interactions",
        },
    },
    "agreeableness": {
        "high": {
            "strength": "Excellent team player with strong collaborative skills",
            "recommendation": "Serve as mediator and team harmony builder",
        },
        "low": {
            "challenge": "May come across as overly critical or competitive",
            "recommendation": "Develop empathy and diplomatic communication skills",
        },
    },
    # High neuroticism is the liability, low the asset.
    "neuroticism": {
        "high": {
            "challenge": "May experience stress and emotional volatility",
            "recommendation": "Develop stress management and emotional regulation techniques",
        },
        "low": {
            "strength": "Exceptional emotional stability and resilience",
            "recommendation": "Take on high-pressure roles requiring calm under stress",
        },
    },
}


@dataclass(frozen=True)
class ProfileInterpretation:
    percentiles: dict[str, int]
    stanines: dict[str, int]
    strengths: list[str] = field(default_factory=list)
    challenges: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)


class ProfileInterpreter:
    HIGH_STANINE = 7
    LOW_STANINE = 3

    def __init__(self, norms: Mapping[str, tuple[float, float]] | None = None) -> None:
        self.norms = dict(NORMS if norms is None else norms)

    def percentiles(self, scores: TraitScoreSet | Mapping[str, Any]) -> dict[str, int]:
        """Population percentile (1-99) per dimension."""
        values = _dimension_values(scores)
        result: dict[str, int] = {}
        for dim in DIMENSIONS:
            mean, sd = self.norms[dim]
            item_mean = 1.0 + values[dim] / 25.0
            pct = NormalDist(mean, sd).cdf(item_mean) * 100.0
            result[dim] = int(round(max(1.0, min(99.0, pct))))
        return result

    @staticmethod
    def stanines(percentiles: Mapping[str, float]) -> dict[str, int]:
        result: dict[str, int] = {}
        for dim, pct in percentiles.items():
            stanine = 1
            for cut in STANINE_CUTS:
                if pct >= cut:
                    stanine += 1
            result[dim] = stanine
        return result

    def interpret(self, scores: TraitScoreSet | Mapping[str, Any]) -> ProfileInterpretation:
        percentiles = self.percentiles(scores)
        stanines = self.stanines(percentiles)

        strengths: list[str] = []
        challenges: list[str] = []
        recommendations: list[str] = []
        for dim in DIMENSIONS:
            stanine = stanines[dim]
            if stanine >= self.HIGH_STANINE:
                reading = _READINGS[dim]["high"]
            elif stanine <= self.LOW_STANINE:
                reading = _READINGS[dim]["low"]
            else:
                continue
            if "strength" in reading:
                strengths.append(reading["strength"])
            if "challenge" in reading:
                challenges.append(reading["challenge"])
            recommendations.append(reading["recommendation"])

        logger.debug("profile_interpreted", stanines=stanines)
        return ProfileInterpretation(
            percentiles=percentiles,
            stanines=stanines,
            strengths=strengths,
            challenges=challenges,
            recommendations=recommendations,
        )


def _dimension_values(scores: TraitScoreSet | Mapping[str, Any]) -> dict[str, float]:
    if not validate_score_set(scores):
        raise ScoreValidationError("Interpretation requires all five dimensions on the 0-100 scale")
    if isinstance(scores, TraitScoreSet):
        return scores.dimension_scores()
    return {dim: float(scores[dim]) for dim in DIMENSIONS}


def interpret_profile(scores: TraitScoreSet | Mapping[str, Any]) -> ProfileInterpretation:
    return ProfileInterpreter().interpret(scores)
