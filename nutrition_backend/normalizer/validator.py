# -*- coding: utf-8 -*-
"""Normalizer — structural validation of an extracted field map."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Tuple

from .constants import (
    HEALTH_SCORE_RANGE,
    ITEM_NUMERIC_FIELDS,
    MAX_NUMERIC_MAGNITUDE,
    NO_RESULT_MESSAGE,
    REQUIRED_LANGUAGES,
)
from .registry import ResultKindSpec

_MISSING = object()


@dataclass(frozen=True)
class ValidationOutcome:
    ok: bool
    fields: Optional[Dict[str, Any]] = None
    reason: Optional[str] = None
    # Set when the model reported its own error; `reason` then holds that value.
    model_error: bool = False

    @classmethod
    def success(cls, fields: Dict[str, Any]) -> "ValidationOutcome":
        return cls(ok=True, fields=fields)

    @classmethod
    def failure(cls, reason: str, *, model_error: bool = False) -> "ValidationOutcome":
        return cls(ok=False, reason=reason, model_error=model_error)


def is_number(value: Any) -> bool:
    """Finite int/float; bools and numeric strings do not count."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    # ints are always finite; math.isfinite overflows on very large ones.
    return isinstance(value, int) or math.isfinite(value)


def in_range(value: Any) -> bool:
    return abs(value) <= MAX_NUMERIC_MAGNITUDE


def is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def lookup(fields: Dict[str, Any], path: str) -> Any:
    """Resolve a dotted path; returns `_MISSING` when any segment is absent."""
    node: Any = fields
    for segment in path.split("."):
        if not isinstance(node, dict) or segment not in node:
            return _MISSING
        node = node[segment]
    return node


def _non_object_parent(fields: Dict[str, Any], path: str) -> Optional[str]:
    """Return the first present ancestor of `path` that is not an object."""
    segments = path.split(".")
    node: Any = fields
    for depth, segment in enumerate(segments[:-1]):
        if segment not in node:
            return None
        node = node[segment]
        if not isinstance(node, dict):
            return ".".join(segments[: depth + 1])
    return None


def _check_multi_lang_text(value: Any, label: str) -> Optional[str]:
    if not isinstance(value, dict):
        return f"{label} must be a multi-language object"
    for lang in REQUIRED_LANGUAGES:
        if lang not in value:
            return f"{label} missing language: {lang}"
        if not is_non_empty_string(value[lang]):
            return f"{label} empty text for language: {lang}"
    return None


def _check_multi_lang_list(value: Any, label: str) -> Optional[str]:
    if not isinstance(value, dict):
        return f"{label} must be a multi-language object"
    for lang in REQUIRED_LANGUAGES:
        if lang not in value:
            return f"{label} missing language: {lang}"
        if not isinstance(value[lang], list):
            return f"{label} must be a list for language: {lang}"
    return None


def _typed_values(fields: Dict[str, Any], names: Iterable[str], optional: Tuple[str, ...]):
    """Yield (name, value) for each typed field, skipping absent optional ones."""
    for name in names:
        value = lookup(fields, name)
        if value is _MISSING and name in optional:
            continue
        yield name, value


def _check_item(item: Any, index: int, spec: ResultKindSpec) -> Optional[str]:
    label = f"{spec.ingredients_field}[{index}]"
    if not isinstance(item, dict):
        return f"{label} must be an object"
    for name in spec.item_required_fields:
        if name not in item:
            return f"{label} missing field: {name}"
    for name in ITEM_NUMERIC_FIELDS:
        if name in item and not is_number(item[name]):
            return f"{label} field must be a number: {name}"
        if name in item and not in_range(item[name]):
            return f"{label} field out of range: {name}"
    for name in spec.item_non_empty_strings:
        if not is_non_empty_string(item.get(name)):
            return f"{label} field must be a non-empty string: {name}"
    return None


def _check_assessment(value: Any, field: str) -> Optional[str]:
    if not isinstance(value, dict):
        return f"{field} must be an object"
    score = value.get("score")
    low, high = HEALTH_SCORE_RANGE
    if not is_number(score) or score < low or score > high:
        return f"{field}.score must be a number between {low} and {high}"
    return None


def _check_steps(value: Any, spec: ResultKindSpec) -> Optional[str]:
    field = spec.steps_field
    if not isinstance(value, list):
        return f"{field} must be a list"
    if len(value) < spec.steps_min_length:
        return f"{field} must contain at least {spec.steps_min_length} step(s)"
    # Step contents are only checked for kinds that declare step text fields.
    if not spec.step_multi_lang_text_fields:
        return None
    for index, step in enumerate(value):
        label = f"{field}[{index}]"
        if not isinstance(step, dict):
            return f"{label} must be an object"
        order = step.get("order")
        if not is_number(order) or order < 1:
            return f"{label}.order must be a positive number"
        for name in spec.step_multi_lang_text_fields:
            problem = _check_multi_lang_text(step.get(name), f"{label}.{name}")
            if problem:
                return problem
    return None


def validate(fields: Dict[str, Any], spec: ResultKindSpec) -> ValidationOutcome:
    """Check `fields` against `spec`, short-circuiting on the first failing rule."""
    if not fields:
        return ValidationOutcome.failure(NO_RESULT_MESSAGE)

    # Falsy values (None, "") are not treated as a declared error.
    declared_error = fields.get("error")
    if declared_error:
        if not isinstance(declared_error, str):
            declared_error = json.dumps(declared_error, ensure_ascii=False)
        return ValidationOutcome.failure(declared_error, model_error=True)

    for name in spec.required_fields:
        if lookup(fields, name) is _MISSING:
            return ValidationOutcome.failure(f"missing field: {name}")

    optional = spec.optional_fields

    for name in optional:
        parent = _non_object_parent(fields, name)
        if parent:
            return ValidationOutcome.failure(f"{parent} must be an object")

    for name, value in _typed_values(fields, spec.numeric_fields, optional):
        if not is_number(value):
            return ValidationOutcome.failure(f"field must be a number: {name}")
        if not in_range(value):
            return ValidationOutcome.failure(f"field out of range: {name}")

    for name, value in _typed_values(fields, spec.required_non_empty_strings, optional):
        if not is_non_empty_string(value):
            return ValidationOutcome.failure(f"field must be a non-empty string: {name}")

    for name, value in _typed_values(fields, spec.multi_lang_text_fields, optional):
        problem = _check_multi_lang_text(value, name)
        if problem:
            return ValidationOutcome.failure(problem)

    for name, value in _typed_values(fields, spec.multi_lang_list_fields, optional):
        problem = _check_multi_lang_list(value, name)
        if problem:
            return ValidationOutcome.failure(problem)

    if spec.ingredients_field:
        items = lookup(fields, spec.ingredients_field)
        if not isinstance(items, list):
            return ValidationOutcome.failure(f"field must be a list: {spec.ingredients_field}")
        for index, item in enumerate(items):
            problem = _check_item(item, index, spec)
            if problem:
                return ValidationOutcome.failure(problem)

    if spec.assessment_field:
        problem = _check_assessment(lookup(fields, spec.assessment_field), spec.assessment_field)
        if problem:
            return ValidationOutcome.failure(problem)

    if spec.steps_field:
        problem = _check_steps(lookup(fields, spec.steps_field), spec)
        if problem:
            return ValidationOutcome.failure(problem)

    return ValidationOutcome.success(fields)
