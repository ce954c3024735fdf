"""Test doubles shared across the compaction suite."""
from .client import MockAnthropic, MockAnthropicMessages
from .endpoint import FakeChatEndpoint, RecordedCall
from .history import call, make_context, make_round, make_turn, message_texts
from .responses import MockAnthropicResponse, text_block, tool_use_block

__all__ = [
    "FakeChatEndpoint",
    "MockAnthropic",
    "MockAnthropicMessages",
    "MockAnthropicResponse",
    "RecordedCall",
    "call",
    "make_context",
    "make_round",
    "make_turn",
    "message_texts",
    "text_block",
    "tool_use_block",
]
