"""Normalize tool schemas for a target model family.

Tools that cannot be made valid for the family are reported through
``on_failure`` and left out of the result; normalization never raises for a
single bad tool.
"""
from __future__ import annotations

import re
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from pydantic import BaseModel, Field, ValidationError, field_validator

from .spec import ToolSpec

FailureCallback = Callable[[str, str], None]

_NAME_RE = re.compile(r"^[a-zA-Z0-9_-]{1,64}$")
_GPT_DESCRIPTION_LIMIT = 1024
_COMPOSITE_KEYS = ("oneOf", "anyOf", "allOf")


class FunctionDefinition(BaseModel):
    model_config = {
        "extra": "forbid",
    }

    name: str
    description: str = ""
    parameters: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        if not _NAME_RE.match(value):
            raise ValueError("name must be 1-64 characters of letters, digits, '_' or '-'")
        return value

    @field_validator("parameters", mode="before")
    @classmethod
    def default_parameters(cls, value: Any) -> Any:
        if value is None:
            return {}
        return value

    @field_validator("parameters")
    @classmethod
    def normalize_parameters(cls, value: Dict[str, Any]) -> Dict[str, Any]:
        schema = dict(value)
        schema_type = schema.setdefault("type", "object")
        if schema_type != "object":
            raise ValueError(f"top-level schema must be of type object (got {schema_type!r})")
        properties = schema.setdefault("properties", {})
        if not isinstance(properties, dict):
            raise ValueError("properties must be an object")
        required = schema.get("required")
        if required is not None:
            schema["required"] = [name for name in required if name in properties]
        return schema

    def to_anthropic_definition(self) -> Dict[str, Any]:
        """Return a dict compatible with Anthropic tool definitions."""
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.parameters,
        }


def normalize_tool_schema(
    family: str,
    tools: Optional[Iterable[ToolSpec]],
    on_failure: FailureCallback,
) -> List[FunctionDefinition]:
    if not tools:
        return []
    normalized: List[FunctionDefinition] = []
    for tool in tools:
        try:
            definition = FunctionDefinition(
                name=tool.name,
                description=tool.description or "",
                parameters=tool.input_schema or None,
            )
        except ValidationError as exc:
            on_failure(tool.name, _format_errors(exc))
            continue
        problem = _family_problem(family, definition)
        if problem is not None:
            on_failure(tool.name, problem)
            continue
        normalized.append(definition)
    return normalized


def _family_problem(family: str, definition: FunctionDefinition) -> Optional[str]:
    family = family.lower()
    if family.startswith("gpt"):
        if len(definition.description) > _GPT_DESCRIPTION_LIMIT:
            return f"description longer than {_GPT_DESCRIPTION_LIMIT} characters"
        missing = _arrays_without_items(definition.parameters, path="parameters")
        if missing:
            return f"array schema without items at {missing[0]}"
    if family.startswith("claude"):
        for key in _COMPOSITE_KEYS:
            if key in definition.parameters:
                return f"top-level {key} is not supported"
    return None


def _arrays_without_items(schema: Any, *, path: str) -> Sequence[str]:
    if not isinstance(schema, dict):
        return []
    found: List[str] = []
    if schema.get("type") == "array" and "items" not in schema:
        found.append(path)
    for key, child in (schema.get("properties") or {}).items():
        found.extend(_arrays_without_items(child, path=f"{path}.{key}"))
    if isinstance(schema.get("items"), dict):
        found.extend(_arrays_without_items(schema["items"], path=f"{path}[]"))
    return found


def _format_errors(exc: ValidationError) -> str:
    messages = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ())) or "tool"
        messages.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return "; ".join(messages)


__all__ = ["FunctionDefinition", "normalize_tool_schema"]
