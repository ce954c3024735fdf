"""Pydantic schemas for tool arguments read back from history."""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Type

from pydantic import BaseModel, Field, ValidationError

from .spec import ToolName


class ToolSchema(BaseModel):
    """Base class for tool argument schemas."""

    model_config = {
        "extra": "ignore",
        "populate_by_name": True,
    }

    def dump(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True, by_alias=True)


class RunNotebookCellInput(ToolSchema):
    file_path: str = Field(..., min_length=1, alias="filePath")
    cell_id: Optional[str] = Field(None, alias="cellId")
    continue_on_error: bool = Field(False, alias="continueOnError")
    reason: Optional[str] = None


_TOOL_SCHEMAS: Dict[str, Type[ToolSchema]] = {
    ToolName.RUN_NOTEBOOK_CELL.value: RunNotebookCellInput,
}


def parse_tool_input(tool_name: str, raw_input: Mapping[str, Any]) -> ToolSchema:
    """Validate *raw_input* against the schema registered for *tool_name*."""

    schema = _TOOL_SCHEMAS.get(tool_name)
    if schema is None:
        raise KeyError(f"no schema registered for tool '{tool_name}'")
    try:
        return schema.model_validate(dict(raw_input))
    except ValidationError as exc:
        messages = []
        for err in exc.errors():
            loc = ".".join(str(part) for part in err.get("loc", ())) or "input"
            messages.append(f"{loc}: {err.get('msg', 'invalid value')}")
        raise ValueError("; ".join(messages)) from exc


__all__ = ["RunNotebookCellInput", "ToolSchema", "parse_tool_input"]
