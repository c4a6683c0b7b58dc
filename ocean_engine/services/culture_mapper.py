"""
OCEAN Engine — Organizational Culture Mapper

Maps aggregated facet statistics onto a 12-type culture taxonomy and derives
higher-order "emergent" organizational properties.

Culture types
-------------
Each type is a ``CultureTypeRule``: a list of ``FacetSignal`` entries.  A
signal reads the organization's mean on one facet, rescales it to [0, 1]
against the facet scale (inverted for signals that count against the type)
and the type's strength is the weighted mean of its observed signals:

  strength = Σ w_i · x_i / Σ w_i        (signals with no data are skipped)

Emergent properties
-------------------
Swappable strategy objects evaluated over ``Term`` inputs.  ``LinearBlend``
is a weighted arithmetic mean, ``GeometricBlend`` a weighted geometric mean
(any near-zero input pulls the whole property down).  The default table is
a starting point for product review, not a validated instrument.

Both tables are plain data and are checked once when the mapper is built.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Optional, Protocol, Union

import structlog

from ocean_engine.config import get_settings
from ocean_engine.errors import ConfigurationError
from ocean_engine.schemas.organization import FacetAggregations, FacetStatistic, FocusInsight
from ocean_engine.taxonomy import FACET_CODES

logger = structlog.get_logger("ocean_engine.culture_mapper")

FacetStats = Union[FacetAggregations, Mapping[str, FacetStatistic]]


# ══════════════════════════════════════════════════════════════════════════════
# Culture-type taxonomy
# ══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class FacetSignal:
    facet_id: str
    weight: float = 1.0
    inverse: bool = False


@dataclass(frozen=True)
class CultureTypeRule:
    culture_type: str
    signals: tuple[FacetSignal, ...]


DEFAULT_CULTURE_TYPES: tuple[CultureTypeRule, ...] = (
    CultureTypeRule("innovation", (
        FacetSignal("O5_Ideas", 1.5),
        FacetSignal("O4_Actions"),
        FacetSignal("E5_Excitement_Seeking"),
    )),
    CultureTypeRule("performance", (
        FacetSignal("C4_Achievement_Striving", 1.5),
        FacetSignal("C1_Competence"),
        FacetSignal("E3_Assertiveness"),
    )),
    CultureTypeRule("collaborative", (
        FacetSignal("A4_Compliance", 1.5),
        FacetSignal("A1_Trust"),
        FacetSignal("E1_Warmth"),
    )),
    CultureTypeRule("adaptive", (
        FacetSignal("O6_Values", 1.5),
        FacetSignal("O4_Actions"),
        FacetSignal("N6_Vulnerability", inverse=True),
    )),
    CultureTypeRule("creative", (
        FacetSignal("O2_Aesthetics", 1.5),
        FacetSignal("O1_Fantasy"),
        FacetSignal("O5_Ideas"),
    )),
    CultureTypeRule("progressive", (
        FacetSignal("O6_Values", 1.5),
        FacetSignal("O5_Ideas"),
        FacetSignal("C6_Deliberation", 0.5, inverse=True),
    )),
    CultureTypeRule("social", (
        FacetSignal("E2_Gregariousness", 1.5),
        FacetSignal("E1_Warmth"),
        FacetSignal("E6_Positive_Emotions"),
    )),
    CultureTypeRule("entrepreneurial", (
        FacetSignal("E5_Excitement_Seeking", 1.5),
        FacetSignal("E3_Assertiveness"),
        FacetSignal("C4_Achievement_Striving"),
        FacetSignal("N1_Anxiety", 0.5, inverse=True),
    )),
    CultureTypeRule("service", (
        FacetSignal("A3_Altruism", 1.5),
        FacetSignal("C3_Dutifulness"),
        FacetSignal("A6_Tender_Mindedness"),
    )),
    CultureTypeRule("empathetic", (
        FacetSignal("A6_Tender_Mindedness", 1.5),
        FacetSignal("O3_Feelings"),
        FacetSignal("A3_Altruism"),
    )),
    CultureTypeRule("structured", (
        FacetSignal("C2_Order", 1.5),
        FacetSignal("C5_Self_Discipline"),
        FacetSignal("C6_Deliberation"),
        FacetSignal("C3_Dutifulness"),
    )),
    CultureTypeRule("resilient", (
        FacetSignal("N3_Depression", 1.5, inverse=True),
        FacetSignal("N6_Vulnerability", inverse=True),
        FacetSignal("N1_Anxiety", inverse=True),
        FacetSignal("E6_Positive_Emotions"),
    )),
)


# ══════════════════════════════════════════════════════════════════════════════
# Emergent-property strategies
# ══════════════════════════════════════════════════════════════════════════════

STATISTICS = ("mean", "diversity")


@dataclass(frozen=True)
class Term:
    facet_id: str
    weight: float = 1.0
    statistic: str = "mean"
    inverse: bool = False


class EmergentProperty(Protocol):
    name: str
    terms: tuple[Term, ...]

    def combine(self, values: Sequence[float], weights: Sequence[float]) -> float: ...


@dataclass(frozen=True)
class LinearBlend:
    name: str
    terms: tuple[Term, ...]

    def combine(self, values: Sequence[float], weights: Sequence[float]) -> float:
        return math.fsum(v * w for v, w in zip(values, weights)) / math.fsum(weights)


@dataclass(frozen=True)
class GeometricBlend:
    name: str
    terms: tuple[Term, ...]

    def combine(self, values: Sequence[float], weights: Sequence[float]) -> float:
        total = math.fsum(weights)
        if any(v <= 0.0 for v in values):
            return 0.0
        return math.exp(math.fsum(w * math.log(v) for v, w in zip(values, weights)) / total)


DEFAULT_EMERGENT_PROPERTIES: tuple[EmergentProperty, ...] = (
    GeometricBlend("innovation_climate", (
        Term("O2_Aesthetics"),
        Term("E2_Gregariousness"),
    )),
    LinearBlend("collective_intelligence", (
        Term("O5_Ideas"),
        Term("A4_Compliance"),
        Term("O6_Values", 0.5, statistic="diversity"),
    )),
    GeometricBlend("team_cohesion", (
        Term("E2_Gregariousness"),
        Term("A3_Altruism"),
        Term("A4_Compliance"),
    )),
    LinearBlend("adaptive_capacity", (
        Term("O6_Values"),
        Term("E5_Excitement_Seeking"),
        Term("N6_Vulnerability", inverse=True),
    )),
    LinearBlend("execution_capability", (
        Term("C4_Achievement_Striving"),
        Term("C5_Self_Discipline"),
        Term("N5_Impulsiveness", 0.5, inverse=True),
    )),
    GeometricBlend("psychological_safety", (
        Term("A6_Tender_Mindedness"),
        Term("A1_Trust"),
        Term("N2_Angry_Hostility", inverse=True),
    )),
    LinearBlend("organizational_mood", (
        Term("N3_Depression", 1.5, inverse=True),
        Term("E6_Positive_Emotions"),
    )),
)


# ══════════════════════════════════════════════════════════════════════════════
# Focus-facet insights
# ══════════════════════════════════════════════════════════════════════════════

FOCUS_INSIGHTS: dict[str, str] = {
    "aesthetic_culture": "O2_Aesthetics",
    "value_flexibility": "O6_Values",
    "social_energy": "E2_Gregariousness",
    "risk_appetite": "E5_Excitement_Seeking",
    "service_orientation": "A3_Altruism",
    "collaboration_style": "A4_Compliance",
    "empathy_culture": "A6_Tender_Mindedness",
    "organizational_mood": "N3_Depression",
}


class CultureMapper:
    """Evaluates the culture-type and emergent-property tables."""

    LOW_BAND: float = 1.0 / 3.0
    HIGH_BAND: float = 2.0 / 3.0

    def __init__(
        self,
        culture_types: Sequence[CultureTypeRule] | None = None,
        emergent_properties: Sequence[EmergentProperty] | None = None,
        scale_min: float | None = None,
        scale_max: float | None = None,
    ) -> None:
        settings = get_settings()
        self.culture_types = tuple(DEFAULT_CULTURE_TYPES if culture_types is None else culture_types)
        self.emergent_properties = tuple(
            DEFAULT_EMERGENT_PROPERTIES if emergent_properties is None else emergent_properties
        )
        self.scale_min = settings.FACET_SCALE_MIN if scale_min is None else scale_min
        self.scale_max = settings.FACET_SCALE_MAX if scale_max is None else scale_max
        if self.scale_max <= self.scale_min:
            raise ConfigurationError("Facet scale maximum must exceed its minimum")
        self._validate_culture_types()
        self._validate_emergent_properties()

    # ── Table validation ──────────────────────────────────────────────────

    def _validate_culture_types(self) -> None:
        if not self.culture_types:
            raise ConfigurationError("Culture-type table is empty")
        seen: set[str] = set()
        for rule in self.culture_types:
            if rule.culture_type in seen:
                raise ConfigurationError(f"Duplicate culture type: {rule.culture_type}")
            seen.add(rule.culture_type)
            if not rule.signals:
                raise ConfigurationError(f"Culture type {rule.culture_type!r} has no signals")
            for signal in rule.signals:
                self._check_facet(signal.facet_id, rule.culture_type)
                if signal.weight <= 0:
                    raise ConfigurationError(
                        f"Culture type {rule.culture_type!r} has non-positive weight for {signal.facet_id}"
                    )

    def _validate_emergent_properties(self) -> None:
        seen: set[str] = set()
        for prop in self.emergent_properties:
            if prop.name in seen:
                raise ConfigurationError(f"Duplicate emergent property: {prop.name}")
            seen.add(prop.name)
            if not prop.terms:
                raise ConfigurationError(f"Emergent property {prop.name!r} has no terms")
            for term in prop.terms:
                self._check_facet(term.facet_id, prop.name)
                if term.weight <= 0:
                    raise ConfigurationError(
                        f"Emergent property {prop.name!r} has non-positive weight for {term.facet_id}"
                    )
                if term.statistic not in STATISTICS:
                    raise ConfigurationError(
                        f"Emergent property {prop.name!r} uses unknown statistic {term.statistic!r}"
                    )

    @staticmethod
    def _check_facet(facet_id: str, owner: str) -> None:
        if facet_id not in FACET_CODES:
            raise ConfigurationError(f"{owner!r} references unknown facet {facet_id!r}")

    # ── Culture types ─────────────────────────────────────────────────────

    def map_facets_to_culture_types(self, aggregations: FacetStats) -> dict[str, float]:
        """Strength in [0, 1] for every culture type in the taxonomy."""
        stats = _statistics(aggregations)
        strengths: dict[str, float] = {}
        for rule in self.culture_types:
            values: list[float] = []
            weights: list[float] = []
            for signal in rule.signals:
                x = self._normalized_mean(stats.get(signal.facet_id))
                if x is None:
                    continue
                values.append(1.0 - x if signal.inverse else x)
                weights.append(signal.weight)
            if not weights:
                strengths[rule.culture_type] = 0.0
                continue
            strength = math.fsum(v * w for v, w in zip(values, weights)) / math.fsum(weights)
            strengths[rule.culture_type] = round(min(1.0, max(0.0, strength)), 4)

        logger.debug("culture_types_mapped", primary=primary_culture(strengths))
        return strengths

    # ── Emergent properties ───────────────────────────────────────────────

    def calculate_emergent_properties(
        self,
        aggregations: FacetStats,
        focus_stats: Mapping[str, FacetStatistic] | None = None,
    ) -> dict[str, float]:
        """Evaluate every emergent property on a 0-100 scale.

        Focus-facet statistics, when given, override the org-wide statistic
        for the same facet.  A property is omitted when any of its inputs has
        no data.
        """
        stats = dict(_statistics(aggregations))
        for facet_id, stat in (focus_stats or {}).items():
            if stat is not None and stat.sample_size > 0:
                stats[facet_id] = stat

        properties: dict[str, float] = {}
        skipped: list[str] = []
        for prop in self.emergent_properties:
            values: list[float] = []
            for term in prop.terms:
                x = self._term_value(term, stats.get(term.facet_id))
                if x is None:
                    break
                values.append(x)
            else:
                raw = prop.combine(values, [t.weight for t in prop.terms])
                properties[prop.name] = round(min(100.0, max(0.0, raw * 100.0)), 4)
                continue
            skipped.append(prop.name)

        if skipped:
            logger.info("emergent_properties_skipped", properties=skipped)
        return properties

    # ── Focus facets ──────────────────────────────────────────────────────

    def interpret_focus_facets(
        self,
        focus_stats: Mapping[str, FacetStatistic],
    ) -> dict[str, FocusInsight]:
        """Low / moderate / high band for each focus-facet insight."""
        insights: dict[str, FocusInsight] = {}
        for insight, facet_id in FOCUS_INSIGHTS.items():
            stat = focus_stats.get(facet_id)
            x = self._normalized_mean(stat)
            if x is None:
                insights[insight] = FocusInsight(facet_id=facet_id)
                continue
            if x < self.LOW_BAND:
                level = "low"
            elif x >= self.HIGH_BAND:
                level = "high"
            else:
                level = "moderate"
            insights[insight] = FocusInsight(facet_id=facet_id, mean=stat.mean, level=level)
        return insights

    # ── Helpers ───────────────────────────────────────────────────────────

    def _normalized_mean(self, stat: Optional[FacetStatistic]) -> Optional[float]:
        if stat is None or stat.mean is None:
            return None
        x = (stat.mean - self.scale_min) / (self.scale_max - self.scale_min)
        return min(1.0, max(0.0, x))

    def _term_value(self, term: Term, stat: Optional[FacetStatistic]) -> Optional[float]:
        if term.statistic == "diversity":
            if stat is None or stat.diversity_index is None:
                return None
            x = stat.diversity_index
        else:
            x = self._normalized_mean(stat)
            if x is None:
                return None
        return 1.0 - x if term.inverse else x


def _statistics(aggregations: FacetStats) -> Mapping[str, FacetStatistic]:
    if isinstance(aggregations, FacetAggregations):
        return aggregations.statistics
    return aggregations


def primary_culture(culture_types: Mapping[str, float]) -> str | None:
    """Strongest culture type; first in taxonomy order on ties, None when all
    strengths are zero."""
    if not culture_types:
        return None
    best = max(culture_types, key=culture_types.__getitem__)
    return best if culture_types[best] > 0 else None


def culture_diversity(culture_types: Mapping[str, float]) -> float:
    """Σ strength², a concentration measure over the culture profile."""
    return round(math.fsum(s * s for s in culture_types.values()), 4)


def map_facets_to_culture_types(aggregations: FacetStats) -> dict[str, float]:
    return CultureMapper().map_facets_to_culture_types(aggregations)


def calculate_emergent_properties(
    aggregations: FacetStats,
    focus_stats: Mapping[str, FacetStatistic] | None = None,
) -> dict[str, float]:
    return CultureMapper().calculate_emergent_properties(aggregations, focus_stats)


def interpret_focus_facets(focus_stats: Mapping[str, FacetStatistic]) -> dict[str, FocusInsight]:
    return CultureMapper().interpret_focus_facets(focus_stats)
