"""Turn and round records shared across renders of one conversation."""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from typing import Dict, Iterator, List, Optional


def new_round_id() -> str:
    return f"round-{uuid.uuid4()}"


@dataclass
class ToolCall:
    id: str
    name: str
    arguments: str = "{}"


@dataclass
class ToolCallResult:
    content: str
    is_error: bool = False


@dataclass
class Round:
    """One model generation step: assistant text plus any tool calls it issued."""

    id: str = field(default_factory=new_round_id)
    response: str = ""
    tool_calls: List[ToolCall] = field(default_factory=list)
    tool_results: Dict[str, ToolCallResult] = field(default_factory=dict)
    summary: Optional[str] = None

    @property
    def last_tool_name(self) -> Optional[str]:
        if not self.tool_calls:
            return None
        return self.tool_calls[-1].name


@dataclass
class SummaryMetadata:
    round_id: str
    text: str


@dataclass
class TurnResultMetadata:
    tool_call_results: Dict[str, ToolCallResult] = field(default_factory=dict)
    summary: Optional[SummaryMetadata] = None
    max_tool_calls_exceeded: bool = False


@dataclass
class Turn:
    request: str
    rounds: List[Round] = field(default_factory=list)
    result_metadata: Optional[TurnResultMetadata] = None
    id: str = field(default_factory=lambda: f"turn-{uuid.uuid4()}")

    @property
    def tool_call_results(self) -> Dict[str, ToolCallResult]:
        if self.result_metadata is None:
            return {}
        return self.result_metadata.tool_call_results


@dataclass(frozen=True)
class Conversation:
    session_id: str


@dataclass
class PromptContext:
    """Per-render view of a conversation.

    ``history`` holds finished turns; ``tool_call_rounds`` are the rounds of the
    turn still in progress. Turn and round objects are shared with the owning
    conversation, the context itself is discarded after the render.
    """

    query: str
    history: List[Turn] = field(default_factory=list)
    tool_call_rounds: List[Round] = field(default_factory=list)
    tool_call_results: Dict[str, ToolCallResult] = field(default_factory=dict)
    is_continuation: bool = False
    conversation: Optional[Conversation] = None

    @property
    def session_id(self) -> Optional[str]:
        return self.conversation.session_id if self.conversation else None

    def derive(self, **changes) -> "PromptContext":
        """Shallow copy sharing turns and rounds, with its own round list."""

        changes.setdefault("tool_call_rounds", list(self.tool_call_rounds))
        return replace(self, **changes)

    def iter_rounds_newest_first(self) -> Iterator[Round]:
        yield from reversed(self.tool_call_rounds)
        for turn in reversed(self.history):
            yield from reversed(turn.rounds)


__all__ = [
    "Conversation",
    "PromptContext",
    "Round",
    "SummaryMetadata",
    "ToolCall",
    "ToolCallResult",
    "Turn",
    "TurnResultMetadata",
    "new_round_id",
]
