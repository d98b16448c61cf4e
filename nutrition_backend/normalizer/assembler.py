# -*- coding: utf-8 -*-
"""Normalizer — extract → validate → correct, returned as a value."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .constants import FORMAT_INVALID_MESSAGE, NO_RESULT_MESSAGE
from .corrector import correct
from .extractor import extract
from .registry import ResultKind, ResultKindSpec, get_spec
from .validator import validate

logger = logging.getLogger(__name__)


class FailureKind(str, Enum):
    extraction = "extraction"
    model_error = "model_error"
    schema = "schema"


@dataclass(frozen=True)
class NormalizedResult:
    kind: ResultKind
    result: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    failure: Optional[FailureKind] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        """Success → the corrected field map; failure → `{"error": message}`."""
        if self.ok:
            return dict(self.result or {})
        return {"error": self.error}


def assemble(raw: Any, spec: ResultKindSpec) -> NormalizedResult:
    fields = extract(raw, spec.function_name)
    if not fields:
        logger.info("%s: no result extracted from model response", spec.kind.value)
        return NormalizedResult(kind=spec.kind, error=NO_RESULT_MESSAGE, failure=FailureKind.extraction)

    outcome = validate(fields, spec)
    if not outcome.ok:
        if outcome.model_error:
            logger.info("%s: model declared error: %s", spec.kind.value, outcome.reason)
            return NormalizedResult(kind=spec.kind, error=outcome.reason, failure=FailureKind.model_error)
        logger.warning("%s: schema violation: %s", spec.kind.value, outcome.reason)
        return NormalizedResult(
            kind=spec.kind,
            error=f"{FORMAT_INVALID_MESSAGE}: {outcome.reason}",
            failure=FailureKind.schema,
        )

    return NormalizedResult(kind=spec.kind, result=correct(outcome.fields or {}, spec))


def normalize(raw: Any, kind: ResultKind | str) -> NormalizedResult:
    """Normalize a raw model response for the given result kind."""
    return assemble(raw, get_spec(kind))
