"""
OCEAN Engine — Response Normalizer

First stage of the scoring pipeline:
  1. Validate each raw item against the item schema
  2. Reject missing / non-numeric / out-of-scale values
  3. Apply reverse scoring: (min + max) - raw
  4. Optionally enforce that mapping weights sum to 1

Invalid items are skipped and logged, never raised; the caller sees them as
a completeness shortfall in the trait scores.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from numbers import Real
from typing import Any

import structlog
from pydantic import ValidationError

from ocean_engine.config import get_settings
from ocean_engine.schemas.responses import NormalizedItem, ResponseItem, ResponseScale

logger = structlog.get_logger("ocean_engine.normalizer")


class ResponseNormalizer:
    """Validates and value-corrects raw response items for one respondent."""

    def __init__(
        self,
        scale: ResponseScale | None = None,
        require_normalized_weights: bool | None = None,
        weight_tolerance: float | None = None,
    ) -> None:
        settings = get_settings()
        self.scale = scale or ResponseScale.from_settings()
        self.require_normalized_weights = (
            settings.REQUIRE_NORMALIZED_MAPPING_WEIGHTS
            if require_normalized_weights is None
            else require_normalized_weights
        )
        self.weight_tolerance = (
            settings.MAPPING_WEIGHT_TOLERANCE if weight_tolerance is None else weight_tolerance
        )

    # ── Public API ────────────────────────────────────────────────────────

    def normalize(self, items: Iterable[ResponseItem | Mapping[str, Any]]) -> list[NormalizedItem]:
        """Return the valid items with reverse scoring applied, in input order."""
        items = list(items)
        normalized: list[NormalizedItem] = []
        rejected: dict[str, int] = {}

        for position, raw_item in enumerate(items):
            item = self._parse_item(raw_item, position)
            if item is None:
                rejected["schema"] = rejected.get("schema", 0) + 1
                continue

            value, reason = self._coerce_value(item.raw_value)
            if reason is not None:
                logger.debug("item_rejected", item_id=item.item_id, reason=reason)
                rejected[reason] = rejected.get(reason, 0) + 1
                continue

            if self.require_normalized_weights and not self._weights_normalized(item):
                logger.debug("item_rejected", item_id=item.item_id, reason="weights_not_normalized")
                rejected["weights_not_normalized"] = rejected.get("weights_not_normalized", 0) + 1
                continue

            corrected = self.scale.reverse(value) if item.reverse_scored else value
            normalized.append(
                NormalizedItem(
                    item_id=item.item_id,
                    value=corrected,
                    raw_value=value,
                    reverse_scored=item.reverse_scored,
                    dimension_mappings=item.dimension_mappings,
                    facet_mappings=item.facet_mappings,
                    scale=self.scale,
                )
            )

        logger.info(
            "responses_normalized",
            total=len(items),
            valid=len(normalized),
            rejected=rejected,
        )
        return normalized

    # ── Helpers ───────────────────────────────────────────────────────────

    def _parse_item(self, raw_item: ResponseItem | Mapping[str, Any], position: int) -> ResponseItem | None:
        if isinstance(raw_item, ResponseItem):
            return raw_item
        try:
            return ResponseItem.model_validate(raw_item)
        except ValidationError as exc:
            item_id = raw_item.get("item_id", raw_item.get("itemId")) if isinstance(raw_item, Mapping) else None
            logger.debug(
                "item_rejected",
                item_id=item_id,
                position=position,
                reason="schema",
                errors=exc.error_count(),
            )
            return None

    def _coerce_value(self, raw_value: Any) -> tuple[float, str | None]:
        """Return ``(value, None)`` or ``(nan, reason)`` for a rejected value."""
        if raw_value is None:
            return math.nan, "missing_value"
        if isinstance(raw_value, bool) or not isinstance(raw_value, Real):
            return math.nan, "non_numeric"
        value = float(raw_value)
        if not math.isfinite(value):
            return math.nan, "non_numeric"
        if not self.scale.contains(value):
            return math.nan, "out_of_scale"
        return value, None

    def _weights_normalized(self, item: ResponseItem) -> bool:
        total = math.fsum(abs(m.weight) for m in item.dimension_mappings)
        return abs(total - 1.0) <= self.weight_tolerance


def normalize_responses(
    items: Iterable[ResponseItem | Mapping[str, Any]],
    scale: ResponseScale | None = None,
) -> list[NormalizedItem]:
    """Validate raw items and apply reverse scoring."""
    return ResponseNormalizer(scale=scale).normalize(items)
