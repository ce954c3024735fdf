"""Helpers for tool-call blocks inside rendered messages."""
from __future__ import annotations

import copy
from typing import List, Sequence

from .endpoint import Message

# Tool call ids may carry a local-only suffix after this marker.
INTERNAL_ID_SEPARATOR = "__internal-"


def strip_internal_tool_call_id(call_id: str) -> str:
    head, sep, _ = call_id.partition(INTERNAL_ID_SEPARATOR)
    return head if sep else call_id


def strip_internal_tool_call_ids(messages: Sequence[Message]) -> List[Message]:
    """Return a copy of *messages* with internal id suffixes removed."""

    stripped: List[Message] = []
    for message in messages:
        message = copy.deepcopy(message)
        content = message.get("content")
        if isinstance(content, list):
            for block in content:
                if not isinstance(block, dict):
                    continue
                if block.get("type") == "tool_use" and "id" in block:
                    block["id"] = strip_internal_tool_call_id(str(block["id"]))
                elif block.get("type") == "tool_result" and "tool_use_id" in block:
                    block["tool_use_id"] = strip_internal_tool_call_id(str(block["tool_use_id"]))
        stripped.append(message)
    return stripped


__all__ = [
    "INTERNAL_ID_SEPARATOR",
    "strip_internal_tool_call_id",
    "strip_internal_tool_call_ids",
]
