"""
OCEAN Engine — Organizational Analysis

Implements the organization-level pipeline over individual facet profiles:
  1. Keep profiles with adequate per-profile facet coverage
  2. Enforce the minimum sample size
  3. Aggregate every facet (Facet Analyzer)
  4. Focus-facet statistics and insights
  5. Culture types and emergent properties (Culture Mapper)
  6. Collective traits and organizational health
  7. Quality metrics and optional team breakdown (with team dynamics)

The profile is always recomputed from the full population; nothing here
updates a previous result incrementally.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import structlog

from ocean_engine.config import get_settings
from ocean_engine.errors import InsufficientDataError
from ocean_engine.schemas.organization import (
    FacetAggregations,
    FacetStatistic,
    IndividualFacetProfile,
    OrganizationalProfile,
    TeamProfile,
)
from ocean_engine.services.collective import CollectiveDynamicsAnalyzer
from ocean_engine.services.culture_mapper import (
    CultureMapper,
    culture_diversity,
    primary_culture,
)
from ocean_engine.services.facet_analyzer import FacetAnalyzer
from ocean_engine.taxonomy import FACET_CODES, FOCUS_FACETS

logger = structlog.get_logger("ocean_engine.organization_service")


class OrganizationalAnalysisService:
    """Orchestrates facet aggregation and culture mapping for one organization."""

    ADEQUATE_SAMPLE_SIZE: int = 10
    FULL_CONFIDENCE_SAMPLE_SIZE: int = 20

    def __init__(
        self,
        analyzer: FacetAnalyzer | None = None,
        mapper: CultureMapper | None = None,
        dynamics: CollectiveDynamicsAnalyzer | None = None,
    ) -> None:
        self.settings = get_settings()
        self.analyzer = analyzer or FacetAnalyzer()
        self.mapper = mapper or CultureMapper()
        self.dynamics = dynamics or CollectiveDynamicsAnalyzer()

    # ══════════════════════════════════════════════════════════════════════
    # analyze — full pipeline entry point
    # ══════════════════════════════════════════════════════════════════════

    def analyze(
        self,
        profiles: Iterable[IndividualFacetProfile | Mapping[str, Any]],
        organization_id: str | None = None,
        min_sample_size: int | None = None,
        include_team_breakdown: bool = False,
    ) -> OrganizationalProfile:
        """Build the organizational profile.

        Parameters
        ----------
        profiles:
            Individual facet profiles of the organization's members.
        organization_id:
            Echoed on the result and bound to log events.
        min_sample_size:
            Minimum number of eligible profiles; defaults to
            ``MIN_ORG_SAMPLE_SIZE``.
        include_team_breakdown:
            Also analyze each team with enough members.

        Raises
        ------
        InsufficientDataError
            When fewer eligible profiles than ``min_sample_size`` remain.
        """
        required = self.settings.MIN_ORG_SAMPLE_SIZE if min_sample_size is None else min_sample_size
        log = logger.bind(organization_id=organization_id)

        parsed = [
            p if isinstance(p, IndividualFacetProfile) else IndividualFacetProfile.model_validate(p)
            for p in profiles
        ]
        eligible = [
            p for p in parsed
            if (p.coverage_percentage or 0.0) >= self.settings.MIN_FACET_COVERAGE
        ]
        log.info("org_profiles_filtered", submitted=len(parsed), eligible=len(eligible))

        if len(eligible) < required:
            log.warning("org_sample_insufficient", required=required, actual=len(eligible))
            raise InsufficientDataError(
                f"Insufficient data for analysis: {required} profiles required, "
                f"{len(eligible)} eligible",
                required=required,
                actual=len(eligible),
            )

        aggregations = self.analyzer.calculate_organizational_aggregations(eligible)
        focus_stats = {f: aggregations.statistics[f] for f in FOCUS_FACETS}
        culture_types = self.mapper.map_facets_to_culture_types(aggregations)
        emergent = self.mapper.calculate_emergent_properties(aggregations, focus_stats)
        collective = self.dynamics.collective_traits(eligible)

        observed = sum(1 for v in aggregations.means.values() if v is not None)
        team_breakdown = self._team_breakdown(eligible) if include_team_breakdown else None

        profile = OrganizationalProfile(
            organization_id=organization_id,
            facet_means=aggregations.means,
            facet_medians=aggregations.medians,
            facet_std_deviations=aggregations.std_deviations,
            facet_diversity_indices=aggregations.diversity_indices,
            focus_facets=focus_stats,
            focus_insights=self.mapper.interpret_focus_facets(focus_stats),
            culture_types=culture_types,
            primary_culture=primary_culture(culture_types),
            culture_diversity=culture_diversity(culture_types),
            emergent_properties=emergent,
            collective_traits=collective.means,
            trait_diversity=collective.diversity,
            health_metrics=self.dynamics.health_metrics(collective),
            sample_size=len(eligible),
            coverage_percentage=round(observed / len(FACET_CODES) * 100.0, 4),
            quality_metrics=self._quality_metrics(len(eligible), observed, focus_stats),
            team_breakdown=team_breakdown,
        )

        log.info(
            "org_profile_built",
            sample_size=profile.sample_size,
            coverage=profile.coverage_percentage,
            primary_culture=profile.primary_culture,
        )
        return profile

    # ══════════════════════════════════════════════════════════════════════
    # Helpers
    # ══════════════════════════════════════════════════════════════════════

    def _quality_metrics(
        self,
        sample_size: int,
        observed_facets: int,
        focus_stats: Mapping[str, FacetStatistic],
    ) -> dict[str, float | str]:
        focus_covered = sum(1 for s in focus_stats.values() if s.sample_size > 0)
        return {
            "sample_adequacy": "adequate" if sample_size >= self.ADEQUATE_SAMPLE_SIZE else "limited",
            "coverage_completeness": round(observed_facets / len(FACET_CODES), 4),
            "focus_facet_coverage": round(focus_covered / len(FOCUS_FACETS), 4),
            "confidence_level": round(min(1.0, sample_size / self.FULL_CONFIDENCE_SAMPLE_SIZE), 4),
        }

    def _team_breakdown(self, profiles: list[IndividualFacetProfile]) -> list[TeamProfile]:
        teams: dict[str, list[IndividualFacetProfile]] = {}
        for p in profiles:
            if p.team_id is not None:
                teams.setdefault(p.team_id, []).append(p)

        breakdown: list[TeamProfile] = []
        for team_id in sorted(teams):
            members = teams[team_id]
            if len(members) < self.settings.MIN_TEAM_SAMPLE_SIZE:
                logger.debug("team_skipped", team_id=team_id, members=len(members))
                continue
            aggregations: FacetAggregations = self.analyzer.calculate_organizational_aggregations(members)
            focus_stats = {f: aggregations.statistics[f] for f in FOCUS_FACETS}
            culture_types = self.mapper.map_facets_to_culture_types(aggregations)
            collective = self.dynamics.collective_traits(members)
            breakdown.append(
                TeamProfile(
                    team_id=team_id,
                    sample_size=len(members),
                    facet_means=aggregations.means,
                    culture_types=culture_types,
                    emergent_properties=self.mapper.calculate_emergent_properties(
                        aggregations, focus_stats
                    ),
                    primary_culture=primary_culture(culture_types),
                    collective_traits=collective.means,
                    dynamics=self.dynamics.team_dynamics(collective),
                    optimal_additions=self.dynamics.optimal_additions(collective),
                )
            )
        return breakdown


def analyze_organization(
    profiles: Iterable[IndividualFacetProfile | Mapping[str, Any]],
    organization_id: str | None = None,
    include_team_breakdown: bool = False,
) -> OrganizationalProfile:
    return OrganizationalAnalysisService().analyze(
        profiles,
        organization_id=organization_id,
        include_team_breakdown=include_team_breakdown,
    )
