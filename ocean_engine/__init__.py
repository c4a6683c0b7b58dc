"""
OCEAN Engine — personality scoring and aggregation.

The package-level functions below are the supported entry points; the
service classes behind them live in ``ocean_engine.services``.
"""

from ocean_engine.errors import (
    ConfigurationError,
    EngineError,
    InsufficientDataError,
    InsufficientRatersError,
    ScoreValidationError,
)
from ocean_engine.services.collective import calculate_executive_org_fit
from ocean_engine.services.culture_mapper import (
    calculate_emergent_properties,
    map_facets_to_culture_types,
)
from ocean_engine.services.dark_side import detect_dark_side_patterns
from ocean_engine.services.facet_analyzer import analyze_facet_distribution
from ocean_engine.services.multi_rater import aggregate_rater_scores
from ocean_engine.services.normalizer import normalize_responses
from ocean_engine.services.trait_calculator import calculate_trait_scores, score_responses
from ocean_engine.services.validation import validate_score_range, validate_score_set

__version__ = "1.0.0"

__all__ = [
    "ConfigurationError",
    "EngineError",
    "InsufficientDataError",
    "InsufficientRatersError",
    "ScoreValidationError",
    "aggregate_rater_scores",
    "analyze_facet_distribution",
    "calculate_emergent_properties",
    "calculate_executive_org_fit",
    "calculate_trait_scores",
    "detect_dark_side_patterns",
    "map_facets_to_culture_types",
    "normalize_responses",
    "score_responses",
    "validate_score_range",
    "validate_score_set",
]
