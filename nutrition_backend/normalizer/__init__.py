# -*- coding: utf-8 -*-
"""Nutrition response normalizer.

Turns a raw generative-model response into a validated, numerically
consistent result (or an error value) for one of the registered result kinds.
"""

from .assembler import FailureKind, NormalizedResult, assemble, normalize
from .corrector import aggregate_totals, correct, expected_calories
from .extractor import extract
from .registry import REGISTRY, ResultKind, ResultKindSpec, get_spec
from .validator import ValidationOutcome, validate

__all__ = [
    "FailureKind",
    "NormalizedResult",
    "REGISTRY",
    "ResultKind",
    "ResultKindSpec",
    "ValidationOutcome",
    "aggregate_totals",
    "assemble",
    "correct",
    "expected_calories",
    "extract",
    "get_spec",
    "normalize",
    "validate",
]
