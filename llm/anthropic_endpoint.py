"""Anthropic Messages API implementation of ``ChatEndpoint``."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

import anthropic
from anthropic import AsyncAnthropic

from .endpoint import ChatOptions, ChatResponse, ChatResponseType, Message

logger = logging.getLogger(__name__)

_TOOL_CHOICE = {
    "auto": {"type": "auto"},
    "none": {"type": "none"},
    "required": {"type": "any"},
}


class AnthropicChatEndpoint:
    """Send summarization requests through ``AsyncAnthropic.messages.create``."""

    def __init__(
        self,
        model: str,
        *,
        max_tokens: int,
        client: Optional[AsyncAnthropic] = None,
        family: str = "claude",
    ) -> None:
        self._model = model
        self._family = family
        self.max_tokens = max_tokens
        self.client = client or AsyncAnthropic()

    @property
    def model(self) -> str:
        return self._model

    @property
    def family(self) -> str:
        return self._family

    def build_request(self, messages: Sequence[Message], options: ChatOptions) -> Dict[str, Any]:
        if options.stream:
            raise ValueError("streaming requests are not supported by this endpoint")
        system, chat_messages = split_system_messages(messages)
        request: Dict[str, Any] = {
            "model": self._model,
            "max_tokens": self.max_tokens,
            "messages": chat_messages,
            "temperature": options.temperature,
        }
        if system:
            request["system"] = system
        if options.tools:
            request["tools"] = [tool.to_anthropic_definition() for tool in options.tools]
            request["tool_choice"] = dict(_TOOL_CHOICE[options.tool_choice])
        return request

    async def complete(
        self,
        request_kind: str,
        messages: Sequence[Message],
        options: ChatOptions,
    ) -> ChatResponse:
        request = self.build_request(messages, options)
        logger.debug("Sending %s request to %s (%d messages)", request_kind, self._model, len(request["messages"]))
        try:
            message = await self.client.messages.create(**request)
        except anthropic.RateLimitError as exc:
            return ChatResponse.failure(
                ChatResponseType.RATE_LIMITED,
                exc.message,
                request_id=exc.request_id or "",
            )
        except anthropic.APIStatusError as exc:
            return ChatResponse.failure(
                ChatResponseType.FAILED,
                f"{exc.status_code}: {exc.message}",
                request_id=exc.request_id or "",
            )

        request_id = getattr(message, "id", "") or ""
        text = "".join(
            getattr(block, "text", "") for block in message.content if getattr(block, "type", None) == "text"
        )
        stop_reason = getattr(message, "stop_reason", None)
        if stop_reason == "max_tokens":
            return ChatResponse.failure(ChatResponseType.LENGTH, "max_tokens reached", request_id=request_id)
        if stop_reason == "refusal":
            return ChatResponse.failure(ChatResponseType.FILTERED, "model refused", request_id=request_id)
        if not text.strip():
            return ChatResponse.failure(ChatResponseType.UNKNOWN, "empty response", request_id=request_id)
        return ChatResponse.success(text, request_id=request_id)


def split_system_messages(
    messages: Sequence[Message],
) -> Tuple[List[Dict[str, Any]], List[Message]]:
    system_blocks: List[Dict[str, Any]] = []
    chat_messages: List[Message] = []

    for message in messages:
        role = message.get("role")
        content = message.get("content", [])
        if role == "system":
            if isinstance(content, list):
                for block in content:
                    if isinstance(block, dict):
                        system_blocks.append(block)
                    else:
                        system_blocks.append({"type": "text", "text": str(block)})
            else:
                system_blocks.append({"type": "text", "text": str(content)})
        else:
            chat_messages.append(message)

    return system_blocks, chat_messages


__all__ = ["AnthropicChatEndpoint", "split_system_messages"]
