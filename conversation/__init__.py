"""Conversation history records consumed by the compaction engine."""
from .model import (
    Conversation,
    PromptContext,
    Round,
    SummaryMetadata,
    ToolCall,
    ToolCallResult,
    Turn,
    TurnResultMetadata,
    new_round_id,
)
from .restore import record_summary, restore_summaries
from .transcript import dump_transcript, load_transcript

__all__ = [
    "Conversation",
    "PromptContext",
    "Round",
    "SummaryMetadata",
    "ToolCall",
    "ToolCallResult",
    "Turn",
    "TurnResultMetadata",
    "dump_transcript",
    "load_transcript",
    "new_round_id",
    "record_summary",
    "restore_summaries",
]
