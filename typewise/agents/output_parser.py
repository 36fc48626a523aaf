"""Shared JSON output handling for the LLM agents."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_FENCED_JSON = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL)


class GenerationError(Exception):
    """Raised when the provider call fails or its output does not match the schema."""


def parse_json_output(content: str) -> dict[str, Any]:
    """Parse LLM JSON output, tolerating a fenced ```json block."""
    try:
        data = json.loads(content)
    except json.JSONDecodeError:
        match = _FENCED_JSON.search(content)
        if not match:
            logger.error("LLM output is not JSON: %s", content[:200])
            raise GenerationError("Model output is not valid JSON")
        try:
            data = json.loads(match.group(1))
        except json.JSONDecodeError as exc:
            raise GenerationError("Model output is not valid JSON") from exc

    if not isinstance(data, dict):
        raise GenerationError("Model output is not a JSON object")
    return data


def validate_output(content: str, schema: type[ModelT]) -> ModelT:
    """Parse and validate LLM output against ``schema`` or raise GenerationError."""
    data = parse_json_output(content)
    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        logger.error("LLM output failed %s validation: %s", schema.__name__, exc)
        raise GenerationError(f"Model output does not match {schema.__name__}") from exc
