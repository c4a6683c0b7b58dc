"""
OCEAN Engine — Assessment pipeline and batch runner

``AssessmentPipeline`` wires the synchronous components together for one
subject:

  raw items ──► Normalizer ──► Trait Calculator ──► (per rater)
                 rater profiles ──► Multi-Rater Aggregator ──► Dark-Side Detector

``BatchScoringService`` fans the pipeline out over many subjects (or many
organizations) with bounded concurrency.  Each member runs its whole pipeline
in a worker thread; a failure is captured on that member's result and never
cancels its siblings.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Optional, Union

import structlog

from ocean_engine.config import get_settings
from ocean_engine.schemas.organization import IndividualFacetProfile, OrganizationalProfile
from ocean_engine.schemas.responses import ResponseItem
from ocean_engine.schemas.traits import AggregatedProfile, RaterScoreSet, TraitScoreSet
from ocean_engine.services.dark_side import DarkSideDetector
from ocean_engine.services.multi_rater import MultiRaterAggregator
from ocean_engine.services.normalizer import ResponseNormalizer
from ocean_engine.services.organization_service import OrganizationalAnalysisService
from ocean_engine.services.trait_calculator import TraitScoreCalculator

logger = structlog.get_logger("ocean_engine.pipeline")

RawItem = Union[ResponseItem, Mapping[str, Any]]


@dataclass(frozen=True)
class RaterResponses:
    """Raw answers from one rater about one subject.  ``items`` is None for
    a rater who was invited but never responded."""

    rater_id: str
    weight: float
    items: Optional[Sequence[RawItem]] = None


@dataclass(frozen=True)
class SubjectResult:
    subject_id: str
    profile: Optional[AggregatedProfile] = None
    patterns: list[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class OrganizationResult:
    organization_id: str
    profile: Optional[OrganizationalProfile] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class AssessmentPipeline:
    """Runs normalize → score → aggregate → detect for a single subject."""

    def __init__(
        self,
        normalizer: ResponseNormalizer | None = None,
        calculator: TraitScoreCalculator | None = None,
        aggregator: MultiRaterAggregator | None = None,
        detector: DarkSideDetector | None = None,
    ) -> None:
        self.normalizer = normalizer or ResponseNormalizer()
        self.calculator = calculator or TraitScoreCalculator(scale=self.normalizer.scale)
        self.aggregator = aggregator or MultiRaterAggregator()
        self.detector = detector or DarkSideDetector()

    def score_respondent(self, items: Sequence[RawItem]) -> TraitScoreSet:
        """Normalized (0-100) trait scores for one respondent's answers."""
        items = list(items)
        normalized = self.normalizer.normalize(items)
        return self.calculator.calculate(
            normalized, normalize=True, total_item_count=len(items)
        )

    def evaluate_subject(
        self,
        subject_id: str,
        raters: Sequence[RaterResponses],
        detect_discrepancies: bool = True,
    ) -> SubjectResult:
        """Full 360 evaluation of one subject.

        Raises
        ------
        InsufficientRatersError
            When none of the raters responded.
        """
        log = logger.bind(subject_id=subject_id)
        rater_sets = [
            RaterScoreSet(
                rater_id=r.rater_id,
                weight=r.weight,
                scores=None if r.items is None else self.score_respondent(r.items),
            )
            for r in raters
        ]
        profile = self.aggregator.aggregate(rater_sets, detect_discrepancies=detect_discrepancies)
        patterns = self.detector.detect(profile)
        log.info("subject_evaluated", raters=profile.rater_count, patterns=patterns)
        return SubjectResult(subject_id=subject_id, profile=profile, patterns=patterns)

    def evaluate_respondent(self, subject_id: str, items: Sequence[RawItem]) -> SubjectResult:
        """Self-report only: one rater with full weight."""
        return self.evaluate_subject(
            subject_id,
            [RaterResponses(rater_id=subject_id, weight=1.0, items=items)],
            detect_discrepancies=False,
        )


class BatchScoringService:
    """Bounded-concurrency fan-out of the pipeline across subjects."""

    def __init__(
        self,
        pipeline: AssessmentPipeline | None = None,
        organization_service: OrganizationalAnalysisService | None = None,
        concurrency: int | None = None,
    ) -> None:
        self.pipeline = pipeline or AssessmentPipeline()
        self.organization_service = organization_service or OrganizationalAnalysisService()
        self.concurrency = get_settings().BATCH_CONCURRENCY if concurrency is None else concurrency
        if self.concurrency < 1:
            raise ValueError(f"Concurrency must be at least 1, got {self.concurrency}")

    async def score_batch(
        self,
        subjects: Mapping[str, Sequence[RaterResponses]],
    ) -> list[SubjectResult]:
        """Evaluate every subject; results come back in input order."""
        semaphore = asyncio.Semaphore(self.concurrency)
        subject_ids = list(subjects)
        start = time.perf_counter()

        async def _run(subject_id: str) -> SubjectResult:
            async with semaphore:
                return await asyncio.to_thread(
                    self.pipeline.evaluate_subject, subject_id, subjects[subject_id]
                )

        raw_results = await asyncio.gather(
            *(_run(sid) for sid in subject_ids), return_exceptions=True
        )

        results: list[SubjectResult] = []
        for subject_id, result in zip(subject_ids, raw_results):
            if isinstance(result, Exception):
                logger.error(
                    "subject_scoring_failed",
                    subject_id=subject_id,
                    error_type=type(result).__name__,
                    error=str(result),
                )
                results.append(SubjectResult(subject_id=subject_id, error=str(result)))
            elif isinstance(result, BaseException):
                raise result
            else:
                results.append(result)

        logger.info(
            "batch_scored",
            subjects=len(results),
            failed=sum(1 for r in results if not r.ok),
            elapsed_ms=round((time.perf_counter() - start) * 1000, 1),
        )
        return results

    async def analyze_organizations(
        self,
        organizations: Mapping[str, Sequence[IndividualFacetProfile | Mapping[str, Any]]],
        include_team_breakdown: bool = False,
    ) -> list[OrganizationResult]:
        """Build one organizational profile per organization, in input order."""
        semaphore = asyncio.Semaphore(self.concurrency)
        org_ids = list(organizations)

        async def _run(org_id: str) -> OrganizationalProfile:
            async with semaphore:
                return await asyncio.to_thread(
                    self.organization_service.analyze,
                    organizations[org_id],
                    organization_id=org_id,
                    include_team_breakdown=include_team_breakdown,
                )

        raw_results = await asyncio.gather(
            *(_run(oid) for oid in org_ids), return_exceptions=True
        )

        results: list[OrganizationResult] = []
        for org_id, result in zip(org_ids, raw_results):
            if isinstance(result, Exception):
                logger.error(
                    "organization_analysis_failed",
                    organization_id=org_id,
                    error_type=type(result).__name__,
                    error=str(result),
                )
                results.append(OrganizationResult(organization_id=org_id, error=str(result)))
            elif isinstance(result, BaseException):
                raise result
            else:
                results.append(OrganizationResult(organization_id=org_id, profile=result))

        logger.info(
            "organizations_analyzed",
            organizations=len(results),
            failed=sum(1 for r in results if not r.ok),
        )
        return results
