"""Tool specification models."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict


class ToolName(str, Enum):
    """Tool names the compaction engine inspects in history."""

    RUN_NOTEBOOK_CELL = "run_notebook_cell"


@dataclass(slots=True)
class ToolSpec:
    """Describes a tool available to the conversation."""

    name: str
    description: str
    input_schema: Dict[str, Any] = field(default_factory=dict)


__all__ = ["ToolName", "ToolSpec"]
