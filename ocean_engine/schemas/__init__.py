from ocean_engine.schemas.organization import (
    FacetAggregations,
    FacetStatistic,
    FocusInsight,
    IndividualFacetProfile,
    OrganizationalProfile,
    TeamProfile,
)
from ocean_engine.schemas.responses import (
    DimensionMapping,
    FacetMapping,
    NormalizedItem,
    ResponseItem,
    ResponseScale,
)
from ocean_engine.schemas.traits import (
    AggregatedProfile,
    FacetScore,
    RaterScoreSet,
    TraitScoreSet,
)

__all__ = [
    "AggregatedProfile",
    "DimensionMapping",
    "FacetAggregations",
    "FacetMapping",
    "FacetScore",
    "FacetStatistic",
    "FocusInsight",
    "IndividualFacetProfile",
    "NormalizedItem",
    "OrganizationalProfile",
    "RaterScoreSet",
    "ResponseItem",
    "ResponseScale",
    "TeamProfile",
    "TraitScoreSet",
]
