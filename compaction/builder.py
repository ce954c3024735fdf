"""Assemble the input for a summarization request."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from conversation import PromptContext

from .notebook import NotebookDocument, NotebookWorkspace, PathResolver, find_working_notebook
from .selector import select_rounds


@dataclass(frozen=True)
class SummarizationRequest:
    context: PromptContext
    round_id: str
    max_tool_result_length: int
    notebook: Optional[NotebookDocument] = None
    enable_cache_breakpoints: bool = False


class SummarizationRequestBuilder:
    def __init__(
        self,
        *,
        max_tool_result_length: int,
        path_resolver: Optional[PathResolver] = None,
        workspace: Optional[NotebookWorkspace] = None,
    ) -> None:
        self.max_tool_result_length = max_tool_result_length
        self.path_resolver = path_resolver
        self.workspace = workspace

    def build(self, context: PromptContext, *, enable_cache_breakpoints: bool = False) -> SummarizationRequest:
        selection = select_rounds(context)
        lookup = find_working_notebook(
            selection.context.tool_call_rounds,
            self.path_resolver,
            self.workspace,
        )
        return SummarizationRequest(
            context=selection.context,
            round_id=selection.round_id,
            max_tool_result_length=self.max_tool_result_length,
            notebook=lookup.notebook,
            enable_cache_breakpoints=enable_cache_breakpoints,
        )


__all__ = ["SummarizationRequest", "SummarizationRequestBuilder"]
