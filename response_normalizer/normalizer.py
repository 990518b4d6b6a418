"""Cleanup and decoding helpers for raw AI completion text."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Type, TypeVar

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

# Checked in order when a list item comes back as an object instead of a string.
STRING_FIELD_PRIORITY = (
    "name",
    "value",
    "company",
    "role",
    "position",
    "skill",
    "achievement",
    "weakness",
    "recommendation",
    "keyword",
    "description",
)


class MalformedResponseError(ValueError):
    """AI reply could not be parsed into the expected shape."""


def strip_code_fences(content: str | None) -> str:
    """Remove leading ```json / ``` and trailing ``` markers."""

    if content is None:
        return ""
    text = content.strip()
    if text.startswith("```json"):
        text = text[len("```json"):]
    elif text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def _json_span(text: str) -> str | None:
    starts = [pos for pos in (text.find("{"), text.find("[")) if pos != -1]
    if not starts:
        return None
    start = min(starts)
    closer = "}" if text[start] == "{" else "]"
    end = text.rfind(closer)
    if end <= start:
        return None
    return text[start : end + 1]


def load_json(content: str | None) -> Any:
    """Parse AI text as JSON, tolerating fences and surrounding prose."""

    cleaned = strip_code_fences(content)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as exc:
        span = _json_span(cleaned)
        if span is not None and span != cleaned:
            try:
                return json.loads(span)
            except json.JSONDecodeError:
                pass
        raise MalformedResponseError(f"AI reply was not valid JSON: {exc.msg}") from exc


def parse_object(content: str | None) -> Dict[str, Any]:
    data = load_json(content)
    if not isinstance(data, dict):
        raise MalformedResponseError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def _primitive_text(value: Any) -> str | None:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    return None


def _item_text(item: Any) -> str | None:
    text = _primitive_text(item)
    if text is not None:
        return text
    if isinstance(item, dict):
        for key in STRING_FIELD_PRIORITY:
            if key in item:
                text = _primitive_text(item[key])
                if text is not None:
                    return text
        for value in item.values():
            text = _primitive_text(value)
            if text is not None:
                return text
    return None


def coerce_string_list(value: Any) -> List[str]:
    """Decode a list of strings or single-field objects; anything else yields []."""

    if not isinstance(value, list):
        if value is not None:
            logger.warning("Expected list from AI reply, got %s; using empty list", type(value).__name__)
        return []
    result: List[str] = []
    for item in value:
        text = _item_text(item)
        if text is not None:
            result.append(text)
    return result


def parse_string_list(content: str | None) -> List[str]:
    """Parse a bare JSON array reply into strings; failures yield an empty list."""

    try:
        data = load_json(content)
    except MalformedResponseError as exc:
        logger.error("Failed to parse AI response as string list: %s", exc)
        return []
    return coerce_string_list(data)


def clean_text(content: str | None) -> str:
    """Normalize a free-text reply such as a single interview question."""

    text = strip_code_fences(content)
    if len(text) >= 2 and text[0] == text[-1] == '"':
        text = text[1:-1].strip()
    return text


def decode(content: str | None, schema: Type[T]) -> T:
    """Decode an AI JSON object reply into ``schema``."""

    data = parse_object(content)
    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        raise MalformedResponseError(f"AI reply did not match {schema.__name__}: {exc.error_count()} error(s)") from exc


__all__ = [
    "MalformedResponseError",
    "STRING_FIELD_PRIORITY",
    "clean_text",
    "coerce_string_list",
    "decode",
    "load_json",
    "parse_object",
    "parse_string_list",
    "strip_code_fences",
]
