# -*- coding: utf-8 -*-
"""Normalizer — replay endpoint for recorded model responses."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from ..config import settings
from .assembler import FailureKind, assemble
from .models import NormalizeRequest, NormalizeResponse, NutritionTotals
from .registry import get_spec

router = APIRouter(prefix="/api/normalize", tags=["Normalizer"])

_FAILURE_STATUS = {
    FailureKind.extraction: 502,
    FailureKind.model_error: 422,
    FailureKind.schema: 502,
}


def _too_large(max_bytes: int) -> HTTPException:
    return HTTPException(status_code=413, detail=f"Response too large: limit is {max_bytes} bytes")


async def read_normalize_request(request: Request) -> NormalizeRequest:
    """Read the body under the size limit, then parse it.

    The declared Content-Length is rejected up front; chunked bodies are
    counted while streaming so the limit holds without that header.
    """
    max_bytes = settings.max_raw_response_bytes
    raw_length = request.headers.get("content-length")
    if raw_length and raw_length.isdigit() and int(raw_length) > max_bytes:
        raise _too_large(max_bytes)

    chunks: list[bytes] = []
    size = 0
    async for chunk in request.stream():
        size += len(chunk)
        if size > max_bytes:
            raise _too_large(max_bytes)
        chunks.append(chunk)

    try:
        return NormalizeRequest.model_validate_json(b"".join(chunks))
    except ValidationError as exc:
        raise RequestValidationError(exc.errors(include_url=False)) from exc


@router.post(
    "/{kind}",
    response_model=NormalizeResponse,
    summary="Normalize a recorded model response",
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": NormalizeRequest.model_json_schema()}},
        }
    },
)
def normalize_response(kind: str, body: NormalizeRequest = Depends(read_normalize_request)):
    try:
        spec = get_spec(kind)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"Unknown result kind: {kind}") from exc

    normalized = assemble(body.response, spec)
    if not normalized.ok:
        status = _FAILURE_STATUS.get(normalized.failure, 502)
        raise HTTPException(status_code=status, detail=normalized.error)

    result = normalized.result or {}
    totals = None
    if spec.ingredients_field or spec.correct_top_level:
        totals = NutritionTotals(
            calories=result["calories"],
            protein=result["protein"],
            carbs=result["carbs"],
            fat=result["fat"],
        )
    return NormalizeResponse(kind=spec.kind, result=result, totals=totals)
