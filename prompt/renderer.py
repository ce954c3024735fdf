"""Render a summarization request into model-ready messages."""
from __future__ import annotations

from typing import TYPE_CHECKING, List

from .history import build_history_segments
from .packer import Message, PackedPrompt, PromptPacker
from .renderers import render_notebook
from .summarization import NOTEBOOK_PREAMBLE, SUMMARY_INSTRUCTIONS, SUMMARY_REQUEST

if TYPE_CHECKING:  # pragma: no cover
    from compaction.builder import SummarizationRequest
    from compaction.token_meter import TokenMeter


class SummarizationPromptRenderer:
    def __init__(self, meter: TokenMeter) -> None:
        self.meter = meter
        self.packer = PromptPacker(meter)

    def render(self, request: SummarizationRequest, *, budget: int) -> PackedPrompt:
        segments = build_history_segments(
            request.context,
            max_tool_result_length=request.max_tool_result_length,
            enable_cache_breakpoints=request.enable_cache_breakpoints,
        )
        optional: List[Message] = []
        if request.notebook is not None:
            text = f"{NOTEBOOK_PREAMBLE}\n{render_notebook(request.notebook)}"
            optional.append({"role": "user", "content": [{"type": "text", "text": text}]})
        return self.packer.pack(
            head=[{"role": "system", "content": [{"type": "text", "text": SUMMARY_INSTRUCTIONS}]}],
            segments=segments,
            optional=optional,
            tail=[{"role": "user", "content": [{"type": "text", "text": SUMMARY_REQUEST}]}],
            budget=budget,
        )


__all__ = ["SummarizationPromptRenderer"]
