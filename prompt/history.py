"""Linearize conversation history into message segments.

History is walked newest to oldest so the walk can stop at the most recent
summarized round; each collected run of rounds is then reversed so messages
come out in chronological order.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from conversation import PromptContext, Round, ToolCallResult

from .renderers import render_tag, truncate_text

Message = Dict[str, Any]

MISSING_RESULT_TEXT = "Tool result unavailable."
SUMMARY_TAG = "conversation-summary"


@dataclass
class HistorySegment:
    """Messages that must be kept or dropped together."""

    kind: str
    messages: List[Message]


def collect_until_summary(rounds: Sequence[Round]) -> Tuple[List[Round], Optional[str]]:
    """Return rounds after the newest summarized one, plus that summary.

    Rounds come back in chronological order; the summarized round itself is
    not included because its summary stands in for it.
    """

    collected: List[Round] = []
    summary: Optional[str] = None
    for round_ in reversed(rounds):
        if round_.summary:
            summary = round_.summary
            break
        collected.append(round_)
    collected.reverse()
    return collected, summary


def build_history_segments(
    context: PromptContext,
    *,
    max_tool_result_length: int,
    enable_cache_breakpoints: bool = False,
) -> List[HistorySegment]:
    blocks: List[List[HistorySegment]] = []

    current_rounds, current_summary = collect_until_summary(context.tool_call_rounds)
    current_block: List[HistorySegment] = []
    if current_summary:
        current_block.append(_summary_segment(current_summary))
    round_segments = _round_segments(
        current_rounds,
        lambda call_id: context.tool_call_results.get(call_id),
        max_tool_result_length=max_tool_result_length,
    )
    if enable_cache_breakpoints:
        _mark_cache_breakpoint(round_segments)
    current_block.extend(round_segments)

    if current_summary:
        return current_block

    if not context.is_continuation and context.query:
        current_block.insert(0, _user_segment(context.query))
    blocks.append(current_block)

    for index in reversed(range(len(context.history))):
        turn = context.history[index]
        results = _turn_results(context, index)
        rounds, summary = collect_until_summary(turn.rounds)
        block = [_summary_segment(summary) if summary else _user_segment(turn.request)]
        block.extend(
            _round_segments(rounds, results.get, max_tool_result_length=max_tool_result_length)
        )
        blocks.append(block)
        if summary:
            # Everything older is covered by the summary.
            break

    return [segment for block in reversed(blocks) for segment in block]


def history_messages(
    context: PromptContext,
    *,
    max_tool_result_length: int,
    enable_cache_breakpoints: bool = False,
) -> List[Message]:
    segments = build_history_segments(
        context,
        max_tool_result_length=max_tool_result_length,
        enable_cache_breakpoints=enable_cache_breakpoints,
    )
    return coalesce_messages(message for segment in segments for message in segment.messages)


def coalesce_messages(messages) -> List[Message]:
    """Merge adjacent messages that share a role."""

    merged: List[Message] = []
    for message in messages:
        content = list(message.get("content", []))
        if merged and merged[-1]["role"] == message["role"]:
            merged[-1]["content"].extend(content)
        else:
            merged.append({"role": message["role"], "content": content})
    return merged


def _turn_results(context: PromptContext, index: int) -> Dict[str, ToolCallResult]:
    turn = context.history[index]
    results: Dict[str, ToolCallResult] = dict(turn.tool_call_results)
    metadata = turn.result_metadata
    if metadata is not None and metadata.max_tool_calls_exceeded:
        # The aborted call's result lands in the following turn.
        if index == len(context.history) - 1:
            results.update(context.tool_call_results)
        else:
            results.update(context.history[index + 1].tool_call_results)
    return results


def _round_segments(rounds: Sequence[Round], lookup, *, max_tool_result_length: int) -> List[HistorySegment]:
    segments: List[HistorySegment] = []
    for round_ in rounds:
        assistant_blocks: List[Dict[str, Any]] = []
        if round_.response:
            assistant_blocks.append({"type": "text", "text": round_.response})
        result_blocks: List[Dict[str, Any]] = []
        for call in round_.tool_calls:
            assistant_blocks.append(
                {"type": "tool_use", "id": call.id, "name": call.name, "input": _parse_arguments(call.arguments)}
            )
            result = round_.tool_results.get(call.id) or lookup(call.id)
            if result is None:
                result = ToolCallResult(content=MISSING_RESULT_TEXT, is_error=True)
            result_blocks.append(
                {
                    "type": "tool_result",
                    "tool_use_id": call.id,
                    "content": truncate_text(result.content, max_tool_result_length),
                    "is_error": result.is_error,
                }
            )
        if not assistant_blocks:
            continue
        messages: List[Message] = [{"role": "assistant", "content": assistant_blocks}]
        if result_blocks:
            messages.append({"role": "user", "content": result_blocks})
        segments.append(HistorySegment(kind="round", messages=messages))
    return segments


def _mark_cache_breakpoint(segments: List[HistorySegment]) -> None:
    for segment in reversed(segments):
        for message in reversed(segment.messages):
            for block in reversed(message["content"]):
                if block.get("type") == "tool_result":
                    block["cache_control"] = {"type": "ephemeral"}
                    return


def _parse_arguments(arguments: str) -> Dict[str, Any]:
    try:
        parsed = json.loads(arguments or "{}")
    except ValueError:
        return {}
    return parsed if isinstance(parsed, dict) else {}


def _user_segment(text: str) -> HistorySegment:
    return HistorySegment(kind="user", messages=[{"role": "user", "content": [{"type": "text", "text": text}]}])


def _summary_segment(summary: str) -> HistorySegment:
    return HistorySegment(
        kind="summary",
        messages=[{"role": "user", "content": [{"type": "text", "text": render_tag(SUMMARY_TAG, summary)}]}],
    )


__all__ = [
    "HistorySegment",
    "MISSING_RESULT_TEXT",
    "SUMMARY_TAG",
    "build_history_segments",
    "coalesce_messages",
    "collect_until_summary",
    "history_messages",
]
