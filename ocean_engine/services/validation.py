"""
OCEAN Engine — Score validation

Boundary checks for normalized (0-100) trait scores.  Both functions are
predicates: they never raise, callers decide what an invalid set means.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from numbers import Real
from typing import Any

from ocean_engine.config import get_settings
from ocean_engine.schemas.traits import TraitScoreSet
from ocean_engine.taxonomy import DIMENSIONS


def validate_score_range(value: Any) -> bool:
    """True if ``value`` is a real number within ``[SCORE_MIN, SCORE_MAX]``.

    ``None``, booleans, strings (even numeric ones) and NaN are rejected.
    """
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    value = float(value)
    if math.isnan(value):
        return False
    settings = get_settings()
    return settings.SCORE_MIN <= value <= settings.SCORE_MAX


def validate_score_set(score_set: Any) -> bool:
    """True if all five dimensions are present and each is in range."""
    if isinstance(score_set, TraitScoreSet):
        values = score_set.dimension_scores()
    elif isinstance(score_set, Mapping):
        values = score_set
    else:
        return False
    return all(
        dimension in values and validate_score_range(values[dimension])
        for dimension in DIMENSIONS
    )
