"""Tool definitions as seen by the summarization request."""

from .schema_normalizer import FunctionDefinition, normalize_tool_schema
from .schemas import RunNotebookCellInput, ToolSchema, parse_tool_input
from .spec import ToolName, ToolSpec

__all__ = [
    "FunctionDefinition",
    "RunNotebookCellInput",
    "ToolName",
    "ToolSchema",
    "ToolSpec",
    "normalize_tool_schema",
    "parse_tool_input",
]
