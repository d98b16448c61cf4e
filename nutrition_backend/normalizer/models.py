# -*- coding: utf-8 -*-
"""Normalizer — Pydantic models for the replay endpoint."""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from .registry import ResultKind


class NutritionTotals(BaseModel):
    calories: float = 0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0


class NormalizeRequest(BaseModel):
    response: Any = Field(..., description="Raw model response: functionCalls/candidates JSON or plain text")


class NormalizeResponse(BaseModel):
    success: bool = True
    kind: ResultKind
    result: Dict[str, Any] = Field(default_factory=dict)
    totals: Optional[NutritionTotals] = Field(None, description="Verified totals, when the kind carries nutrition")
