# -*- coding: utf-8 -*-
"""Normalizer — fixed domain constants."""

from __future__ import annotations

from typing import Tuple

# Atwater factors (kcal per gram).
PROTEIN_KCAL_PER_G = 4
CARBS_KCAL_PER_G = 4
FAT_KCAL_PER_G = 9

# Max absolute gap between declared and computed calories before correction.
CALORIE_TOLERANCE_KCAL = 5

CALORIES_DECIMALS = 0
MACRO_DECIMALS = 1

MACRO_FIELDS: Tuple[str, ...] = ("protein", "carbs", "fat")
ITEM_NUMERIC_FIELDS: Tuple[str, ...] = ("calories", "protein", "carbs", "fat", "amountValue")

REQUIRED_LANGUAGES: Tuple[str, ...] = (
    "zh_TW",
    "zh_CN",
    "en",
    "ja",
    "ko",
    "vi",
    "th",
    "ms",
    "id",
    "fr",
    "de",
    "es",
    "pt_BR",
)

HEALTH_SCORE_RANGE: Tuple[int, int] = (1, 10)

# Largest absolute value accepted for a nutrition number; keeps sums finite.
MAX_NUMERIC_MAGNITUDE = 1e12

NO_RESULT_MESSAGE = "no valid result produced"
FORMAT_INVALID_MESSAGE = "API response format invalid"
