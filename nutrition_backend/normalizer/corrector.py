# -*- coding: utf-8 -*-
"""Normalizer — calorie correction and total aggregation.

Operates on already-validated field maps only, so it never fails.
Calories are recomputed with the Atwater factors; a declared value is
replaced only when it is off by more than the tolerance. When a result has
an ingredient list its top-level totals are always rebuilt from the items.
"""

from __future__ import annotations

import copy
import logging
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, Dict, Iterable, List

from ..config import settings
from .constants import (
    CALORIE_TOLERANCE_KCAL,
    CALORIES_DECIMALS,
    CARBS_KCAL_PER_G,
    FAT_KCAL_PER_G,
    MACRO_DECIMALS,
    MACRO_FIELDS,
    PROTEIN_KCAL_PER_G,
)
from .registry import ResultKindSpec

logger = logging.getLogger(__name__)


def round_half_away(value: float, decimals: int = 0) -> float | int:
    """Round half away from zero (the builtin `round` rounds half to even).

    Returns an int when `decimals` is 0.
    """
    exact = Decimal(str(value))
    with localcontext() as ctx:
        # quantize needs every integer digit plus `decimals` within precision.
        ctx.prec = max(ctx.prec, exact.adjusted() + decimals + 2)
        rounded = exact.quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP)
    if decimals == 0:
        return int(rounded)
    return float(rounded)


def expected_calories(item: Dict[str, Any]) -> float:
    return (
        item.get("protein", 0) * PROTEIN_KCAL_PER_G
        + item.get("carbs", 0) * CARBS_KCAL_PER_G
        + item.get("fat", 0) * FAT_KCAL_PER_G
    )


def _item_label(item: Dict[str, Any]) -> str:
    name = item.get("name")
    if isinstance(name, dict):
        name = name.get("zh_TW") or name.get("en")
    return str(name) if name else "?"


def correct_item(item: Dict[str, Any]) -> Dict[str, Any]:
    """Replace `calories` in place when it deviates from the macro formula beyond tolerance."""
    declared = item.get("calories", 0)
    expected = expected_calories(item)
    if abs(declared - expected) > CALORIE_TOLERANCE_KCAL:
        corrected = round_half_away(expected, CALORIES_DECIMALS)
        if settings.log_corrections:
            logger.warning(
                "calories corrected for %s: declared=%s computed=%s",
                _item_label(item),
                declared,
                corrected,
            )
        item["calories"] = corrected
    return item


def aggregate_totals(items: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    """Sum item nutrition: calories to an int, macros to one decimal."""
    items = list(items)
    totals: Dict[str, Any] = {
        "calories": round_half_away(sum(i.get("calories", 0) for i in items), CALORIES_DECIMALS),
    }
    for name in MACRO_FIELDS:
        totals[name] = round_half_away(sum(i.get(name, 0) for i in items), MACRO_DECIMALS)
    return totals


def _keep_if_equal(declared: Any, computed: Any) -> Any:
    # Keep the declared value (and its int/float type) when it already matches.
    if isinstance(declared, (int, float)) and not isinstance(declared, bool) and declared == computed:
        return declared
    return computed


def correct(fields: Dict[str, Any], spec: ResultKindSpec) -> Dict[str, Any]:
    """Return a corrected copy of `fields`; the input map is left untouched."""
    out = copy.deepcopy(fields)

    if spec.correct_top_level:
        correct_item(out)
        return out

    if not spec.ingredients_field:
        return out

    items: List[Dict[str, Any]] = out.get(spec.ingredients_field) or []
    for item in items:
        correct_item(item)

    totals = aggregate_totals(items)
    for name, value in totals.items():
        out[name] = _keep_if_equal(out.get(name), value)

    logger.debug("%s totals recomputed from %d items: %s", spec.kind.value, len(items), totals)
    return out
