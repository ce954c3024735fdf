"""Shared helpers for constructing mock Anthropic message responses."""
from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import Any, Dict, List, Mapping, Optional, Sequence


def text_block(text: str) -> Dict[str, Any]:
    """Convenience helper that returns a complete text content block."""
    return {"type": "text", "text": text}


def tool_use_block(
    name: str,
    input_payload: Mapping[str, Any],
    *,
    tool_use_id: str,
) -> Dict[str, Any]:
    """Return a tool-use content block matching Anthropic's schema."""
    return {
        "type": "tool_use",
        "id": tool_use_id,
        "name": name,
        "input": {str(k): v for k, v in input_payload.items()},
    }


@dataclass
class MockAnthropicResponse:
    """Minimal response object returned by :class:`MockAnthropic`.

    The real SDK returns ``anthropic.types.Message`` whose content blocks are
    objects, so blocks are exposed through attribute access.
    """

    blocks: List[Dict[str, Any]] = field(default_factory=list)
    id: str = field(default_factory=lambda: _next_response_id("msg"))
    model: str = "claude-mock"
    role: str = "assistant"
    stop_reason: str = "end_turn"
    stop_sequence: Optional[str] = None

    @property
    def content(self) -> List[SimpleNamespace]:
        return [SimpleNamespace(**block) for block in self.blocks]

    @classmethod
    def from_blocks(cls, blocks: Sequence[Mapping[str, Any]], **kwargs: Any) -> "MockAnthropicResponse":
        """Create a response directly from already-normalized blocks."""
        normalized = [{str(k): v for k, v in block.items()} for block in blocks]
        return cls(blocks=normalized, **kwargs)

    @classmethod
    def from_text(cls, text: str, **kwargs: Any) -> "MockAnthropicResponse":
        return cls.from_blocks([text_block(text)], **kwargs)

    def clone(self) -> "MockAnthropicResponse":
        return MockAnthropicResponse(
            blocks=[dict(block) for block in self.blocks],
            id=self.id,
            model=self.model,
            role=self.role,
            stop_reason=self.stop_reason,
            stop_sequence=self.stop_sequence,
        )


_counter = itertools.count()


def _next_response_id(prefix: str) -> str:
    return f"{prefix}_{next(_counter)}"


__all__ = [
    "MockAnthropicResponse",
    "text_block",
    "tool_use_block",
]
