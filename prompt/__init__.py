"""Prompt assembly for conversation summarization."""
from .history import HistorySegment, build_history_segments, collect_until_summary, history_messages
from .packer import PackedPrompt, PromptPacker
from .renderer import SummarizationPromptRenderer

__all__ = [
    "HistorySegment",
    "PackedPrompt",
    "PromptPacker",
    "SummarizationPromptRenderer",
    "build_history_segments",
    "collect_until_summary",
    "history_messages",
]
