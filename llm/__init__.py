"""Model endpoint adapters for summarization requests."""
from .anthropic_endpoint import AnthropicChatEndpoint, split_system_messages
from .endpoint import ChatEndpoint, ChatOptions, ChatResponse, ChatResponseType, Message
from .tool_calls import INTERNAL_ID_SEPARATOR, strip_internal_tool_call_ids

__all__ = [
    "AnthropicChatEndpoint",
    "ChatEndpoint",
    "ChatOptions",
    "ChatResponse",
    "ChatResponseType",
    "INTERNAL_ID_SEPARATOR",
    "Message",
    "split_system_messages",
    "strip_internal_tool_call_ids",
]
