"""Locate the notebook the agent was working on, for the summarization prompt.

The lookup is best-effort. Each way it can come up empty is reported as a
``SkipReason`` instead of an exception so callers can simply omit the
attachment.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional, Protocol, Sequence

from conversation import Round, ToolCall
from tools import ToolName, parse_tool_input

logger = logging.getLogger(__name__)


@dataclass
class NotebookCell:
    kind: str
    source: str
    language: str = "python"
    outputs: List[str] = field(default_factory=list)


@dataclass
class NotebookDocument:
    uri: str
    cells: List[NotebookCell] = field(default_factory=list)


class PathResolver(Protocol):
    def resolve_file_path(self, file_path: str) -> Optional[str]: ...


class NotebookWorkspace(Protocol):
    @property
    def notebook_documents(self) -> Sequence[NotebookDocument]: ...


class WorkspacePathResolver:
    """Resolve model-supplied paths to ``file://`` URIs inside a workspace root."""

    def __init__(self, root: Path) -> None:
        self.root = root.expanduser().resolve()

    def resolve_file_path(self, file_path: str) -> Optional[str]:
        if not file_path.strip():
            return None
        candidate = Path(file_path).expanduser()
        if not candidate.is_absolute():
            candidate = self.root / candidate
        candidate = candidate.resolve()
        if not candidate.is_relative_to(self.root):
            return None
        return candidate.as_uri()


class OpenNotebooks:
    """In-memory registry of notebooks currently open in the workspace."""

    def __init__(self, documents: Iterable[NotebookDocument] = ()) -> None:
        self._documents: List[NotebookDocument] = list(documents)

    @property
    def notebook_documents(self) -> Sequence[NotebookDocument]:
        return tuple(self._documents)

    def open(self, document: NotebookDocument) -> None:
        self.close(document.uri)
        self._documents.append(document)

    def close(self, uri: str) -> None:
        self._documents = [doc for doc in self._documents if doc.uri != uri]


class SkipReason(Enum):
    NO_NOTEBOOK_CALL = "no_notebook_call"
    MALFORMED_ARGUMENTS = "malformed_arguments"
    UNRESOLVABLE_PATH = "unresolvable_path"
    NOT_OPEN = "not_open"


@dataclass(frozen=True)
class NotebookLookup:
    notebook: Optional[NotebookDocument] = None
    skipped: Optional[SkipReason] = None

    @classmethod
    def skip(cls, reason: SkipReason) -> "NotebookLookup":
        logger.debug("Working notebook omitted: %s", reason.value)
        return cls(skipped=reason)


def find_working_notebook(
    rounds: Sequence[Round],
    resolver: Optional[PathResolver],
    workspace: Optional[NotebookWorkspace],
) -> NotebookLookup:
    call = _latest_notebook_call(rounds)
    if call is None or resolver is None or workspace is None:
        return NotebookLookup.skip(SkipReason.NO_NOTEBOOK_CALL)

    try:
        raw = json.loads(call.arguments or "{}")
        if not isinstance(raw, dict):
            raise ValueError("arguments must be a JSON object")
        arguments = parse_tool_input(call.name, raw)
    except ValueError:
        return NotebookLookup.skip(SkipReason.MALFORMED_ARGUMENTS)

    try:
        uri = resolver.resolve_file_path(arguments.file_path)
    except (ValueError, OSError) as exc:
        logger.debug("Could not resolve notebook path %r: %s", arguments.file_path, exc)
        return NotebookLookup.skip(SkipReason.UNRESOLVABLE_PATH)
    if not uri:
        return NotebookLookup.skip(SkipReason.UNRESOLVABLE_PATH)

    for document in workspace.notebook_documents:
        if document.uri == uri:
            return NotebookLookup(notebook=document)
    return NotebookLookup.skip(SkipReason.NOT_OPEN)


def _latest_notebook_call(rounds: Sequence[Round]) -> Optional[ToolCall]:
    for round_ in reversed(rounds):
        for call in round_.tool_calls:
            if call.name == ToolName.RUN_NOTEBOOK_CELL.value:
                return call
    return None


__all__ = [
    "NotebookCell",
    "NotebookDocument",
    "NotebookLookup",
    "NotebookWorkspace",
    "OpenNotebooks",
    "PathResolver",
    "SkipReason",
    "WorkspacePathResolver",
    "find_working_notebook",
]
