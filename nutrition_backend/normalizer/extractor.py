# -*- coding: utf-8 -*-
"""Normalizer — raw model response to field map.

Raw responses arrive in one of several shapes:

- preferred: ``{"functionCalls": [{"name": ..., "args": {...}}]}``
- legacy: ``{"candidates": [{"content": {"parts": [{"functionCall": ...}, {"text": ...}]}}]}``
- plain text (a ``str``) embedding JSON, possibly fenced in a markdown code block.

Both JSON dicts (camelCase keys) and SDK response objects (snake_case
attributes) are accepted. Strategies are tried in order; the first one that
yields a non-empty map wins.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)

FieldMap = Dict[str, Any]
Strategy = Callable[[Any, str], Optional[FieldMap]]

_FENCE_OPEN_RE = re.compile(r"^```(?:json)?\s*", flags=re.IGNORECASE)
_FENCE_CLOSE_RE = re.compile(r"\s*```$")


def _get(obj: Any, *names: str) -> Any:
    """Read the first present key/attribute among `names` (dicts and SDK objects alike)."""
    if obj is None:
        return None
    for name in names:
        if isinstance(obj, Mapping):
            if name in obj:
                return obj[name]
        elif hasattr(obj, name):
            return getattr(obj, name)
    return None


def _to_plain(value: Any) -> Any:
    """Deep-copy mappings/sequences into plain dicts/lists."""
    if isinstance(value, Mapping):
        return {str(k): _to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_plain(v) for v in value]
    return value


def _as_list(value: Any) -> List[Any]:
    if value is None or isinstance(value, (str, bytes, Mapping)):
        return []
    try:
        return list(value)
    except TypeError:
        return []


def _args_to_map(args: Any) -> FieldMap:
    if isinstance(args, Mapping):
        return _to_plain(args)
    return {}


def _first_candidate_parts(raw: Any) -> List[Any]:
    candidates = _as_list(_get(raw, "candidates"))
    if not candidates:
        return []
    content = _get(candidates[0], "content")
    return _as_list(_get(content, "parts"))


def _iter_text_blocks(raw: Any) -> Iterator[str]:
    if isinstance(raw, str):
        if raw.strip():
            yield raw
        return
    for part in _first_candidate_parts(raw):
        text = _get(part, "text")
        if isinstance(text, str) and text.strip():
            yield text


def strip_code_fence(text: str) -> str:
    cleaned = text.strip()
    cleaned = _FENCE_OPEN_RE.sub("", cleaned)
    cleaned = _FENCE_CLOSE_RE.sub("", cleaned)
    return cleaned


# A JSON string literal; an unterminated one runs to the end of the text.
_STRING_LITERAL_RE = re.compile(r'"(?:\\.|[^"\\])*"?', flags=re.DOTALL)
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")
_NON_FINITE_RE = re.compile(r"-?\bInfinity\b|\bNaN\b")


def _split_string_literals(text: str) -> Iterator[Tuple[int, str, bool]]:
    """Yield ``(offset, chunk, is_string)`` so callers can leave string contents alone."""
    pos = 0
    for match in _STRING_LITERAL_RE.finditer(text):
        if match.start() > pos:
            yield pos, text[pos : match.start()], False
        yield match.start(), match.group(), True
        pos = match.end()
    if pos < len(text):
        yield pos, text[pos:], False


def _sanitize_json_like(text: str) -> str:
    """Drop trailing commas and turn NaN/Infinity into null, outside string literals."""
    out: list[str] = []
    for _, chunk, is_string in _split_string_literals(text):
        if not is_string:
            chunk = _TRAILING_COMMA_RE.sub(r"\1", chunk)
            chunk = _NON_FINITE_RE.sub("null", chunk)
        out.append(chunk)
    return "".join(out)


def parse_json_object(text: str) -> Optional[FieldMap]:
    """Parse `text` as a JSON object, retrying once on a sanitized copy."""
    for attempt in (text, _sanitize_json_like(text)):
        try:
            parsed = json.loads(attempt)
        except ValueError:
            continue
        if isinstance(parsed, dict):
            return parsed
    return None


def iter_json_object_candidates(text: str) -> list[str]:
    """Return the top-level balanced ``{...}`` spans of `text`, ignoring braces inside strings."""
    candidates: list[str] = []
    depth = 0
    start: int | None = None
    for offset, chunk, is_string in _split_string_literals(text):
        if is_string:
            continue
        for i, ch in enumerate(chunk, offset):
            if ch == "{":
                if depth == 0:
                    start = i
                depth += 1
            elif ch == "}" and depth > 0:
                depth -= 1
                if depth == 0 and start is not None:
                    candidates.append(text[start : i + 1])
                    start = None
    return candidates


# ---------- Strategies ----------


def from_function_calls(raw: Any, function_name: str) -> Optional[FieldMap]:
    calls = _as_list(_get(raw, "functionCalls", "function_calls"))
    if not calls:
        return None
    call = calls[0]
    if _get(call, "name") != function_name:
        return None
    return _args_to_map(_get(call, "args"))


def from_candidate_parts(raw: Any, function_name: str) -> Optional[FieldMap]:
    for part in _first_candidate_parts(raw):
        call = _get(part, "functionCall", "function_call")
        if call is not None and _get(call, "name") == function_name:
            return _args_to_map(_get(call, "args"))
    return None


def from_text(raw: Any, function_name: str) -> Optional[FieldMap]:  # noqa: ARG001
    for text in _iter_text_blocks(raw):
        parsed = parse_json_object(strip_code_fence(text))
        if parsed is not None:
            return _to_plain(parsed)
        logger.debug("text part is not a JSON object (%d chars)", len(text))
    return None


def from_prose(raw: Any, function_name: str) -> Optional[FieldMap]:  # noqa: ARG001
    for text in _iter_text_blocks(raw):
        for candidate in iter_json_object_candidates(text):
            parsed = parse_json_object(candidate)
            if parsed:
                return _to_plain(parsed)
    return None


STRATEGIES: Tuple[Tuple[str, Strategy], ...] = (
    ("function_calls", from_function_calls),
    ("candidate_parts", from_candidate_parts),
    ("text", from_text),
    ("prose", from_prose),
)


def extract(raw: Any, function_name: str) -> FieldMap:
    """Return the first non-empty field map produced by the strategies, else `{}`."""
    for name, strategy in STRATEGIES:
        fields = strategy(raw, function_name)
        if fields:
            logger.debug("extracted %d fields via %s", len(fields), name)
            return fields
    return {}
