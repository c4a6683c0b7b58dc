"""
OCEAN Engine — service registry.
"""

from ocean_engine.services.collective import CollectiveDynamicsAnalyzer
from ocean_engine.services.culture_mapper import CultureMapper
from ocean_engine.services.dark_side import DarkSideDetector
from ocean_engine.services.facet_analyzer import FacetAnalyzer
from ocean_engine.services.interpretation import ProfileInterpreter
from ocean_engine.services.multi_rater import MultiRaterAggregator
from ocean_engine.services.normalizer import ResponseNormalizer
from ocean_engine.services.organization_service import OrganizationalAnalysisService
from ocean_engine.services.pipeline import AssessmentPipeline, BatchScoringService
from ocean_engine.services.trait_calculator import TraitScoreCalculator

__all__ = [
    "AssessmentPipeline",
    "BatchScoringService",
    "CollectiveDynamicsAnalyzer",
    "CultureMapper",
    "DarkSideDetector",
    "FacetAnalyzer",
    "MultiRaterAggregator",
    "OrganizationalAnalysisService",
    "ProfileInterpreter",
    "ResponseNormalizer",
    "TraitScoreCalculator",
]
