"""Chat completion endpoint contract used by the summarizer."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Protocol, Sequence

from tools import FunctionDefinition

Message = Dict[str, Any]


class ChatResponseType(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"
    CANCELLED = "cancelled"
    RATE_LIMITED = "rateLimited"
    LENGTH = "length"
    FILTERED = "filtered"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ChatResponse:
    type: ChatResponseType
    value: str = ""
    request_id: str = ""
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.type is ChatResponseType.SUCCESS

    @classmethod
    def success(cls, value: str, *, request_id: str = "") -> "ChatResponse":
        return cls(ChatResponseType.SUCCESS, value=value, request_id=request_id)

    @classmethod
    def failure(
        cls,
        response_type: ChatResponseType,
        reason: Optional[str] = None,
        *,
        request_id: str = "",
    ) -> "ChatResponse":
        return cls(response_type, request_id=request_id, reason=reason)


@dataclass(frozen=True)
class ChatOptions:
    temperature: float = 0.0
    stream: bool = False
    tool_choice: Literal["auto", "none", "required"] = "auto"
    tools: List[FunctionDefinition] = field(default_factory=list)


class ChatEndpoint(Protocol):
    """A model endpoint able to answer a single non-streaming request."""

    @property
    def model(self) -> str: ...

    @property
    def family(self) -> str: ...

    async def complete(
        self,
        request_kind: str,
        messages: Sequence[Message],
        options: ChatOptions,
    ) -> ChatResponse: ...


__all__ = [
    "ChatEndpoint",
    "ChatOptions",
    "ChatResponse",
    "ChatResponseType",
    "Message",
]
