"""Pydantic schemas for loading and saving conversation transcripts as JSON."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from .model import (
    Conversation,
    PromptContext,
    Round,
    SummaryMetadata,
    ToolCall,
    ToolCallResult,
    Turn,
    TurnResultMetadata,
)


class TranscriptSchema(BaseModel):
    model_config = {
        "extra": "forbid",
    }


class ToolCallRecord(TranscriptSchema):
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    arguments: str = "{}"

    @field_validator("arguments", mode="before")
    @classmethod
    def encode_arguments(cls, value: Any) -> Any:
        if isinstance(value, (dict, list)):
            return json.dumps(value, ensure_ascii=False)
        return value


class ToolResultRecord(TranscriptSchema):
    content: str = ""
    is_error: bool = False


class RoundRecord(TranscriptSchema):
    id: str = Field(..., min_length=1)
    response: str = ""
    tool_calls: List[ToolCallRecord] = Field(default_factory=list)
    tool_results: Dict[str, ToolResultRecord] = Field(default_factory=dict)
    summary: Optional[str] = None


class SummaryRecord(TranscriptSchema):
    round_id: str = Field(..., min_length=1)
    text: str


class ResultMetadataRecord(TranscriptSchema):
    tool_call_results: Dict[str, ToolResultRecord] = Field(default_factory=dict)
    summary: Optional[SummaryRecord] = None
    max_tool_calls_exceeded: bool = False


class TurnRecord(TranscriptSchema):
    id: Optional[str] = None
    request: str
    rounds: List[RoundRecord] = Field(default_factory=list)
    result_metadata: Optional[ResultMetadataRecord] = None


class TranscriptRecord(TranscriptSchema):
    session_id: Optional[str] = None
    query: str = ""
    is_continuation: bool = False
    history: List[TurnRecord] = Field(default_factory=list)
    tool_call_rounds: List[RoundRecord] = Field(default_factory=list)
    tool_call_results: Dict[str, ToolResultRecord] = Field(default_factory=dict)

    @field_validator("tool_call_rounds")
    @classmethod
    def unique_round_ids(cls, rounds: List[RoundRecord], info) -> List[RoundRecord]:
        seen = {round_.id for turn in info.data.get("history", []) for round_ in turn.rounds}
        for round_ in rounds:
            if round_.id in seen:
                raise ValueError(f"duplicate round id {round_.id!r}")
            seen.add(round_.id)
        return rounds


def context_from_record(record: TranscriptRecord) -> PromptContext:
    history = [_turn_from_record(turn) for turn in record.history]
    return PromptContext(
        query=record.query,
        history=history,
        tool_call_rounds=[_round_from_record(item) for item in record.tool_call_rounds],
        tool_call_results=_results_from_records(record.tool_call_results),
        is_continuation=record.is_continuation,
        conversation=Conversation(record.session_id) if record.session_id else None,
    )


def context_to_record(context: PromptContext) -> TranscriptRecord:
    return TranscriptRecord(
        session_id=context.session_id,
        query=context.query,
        is_continuation=context.is_continuation,
        history=[_turn_to_record(turn) for turn in context.history],
        tool_call_rounds=[_round_to_record(round_) for round_ in context.tool_call_rounds],
        tool_call_results=_results_to_records(context.tool_call_results),
    )


def load_transcript(path: Path) -> PromptContext:
    raw = path.read_text(encoding="utf-8")
    return context_from_record(TranscriptRecord.model_validate_json(raw))


def dump_transcript(context: PromptContext, path: Path) -> None:
    payload = context_to_record(context).model_dump(exclude_none=True)
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")


def _turn_from_record(record: TurnRecord) -> Turn:
    metadata: Optional[TurnResultMetadata] = None
    if record.result_metadata is not None:
        summary = record.result_metadata.summary
        metadata = TurnResultMetadata(
            tool_call_results=_results_from_records(record.result_metadata.tool_call_results),
            summary=SummaryMetadata(summary.round_id, summary.text) if summary else None,
            max_tool_calls_exceeded=record.result_metadata.max_tool_calls_exceeded,
        )
    turn = Turn(
        request=record.request,
        rounds=[_round_from_record(item) for item in record.rounds],
        result_metadata=metadata,
    )
    if record.id:
        turn.id = record.id
    return turn


def _turn_to_record(turn: Turn) -> TurnRecord:
    metadata = None
    if turn.result_metadata is not None:
        summary = turn.result_metadata.summary
        metadata = ResultMetadataRecord(
            tool_call_results=_results_to_records(turn.result_metadata.tool_call_results),
            summary=SummaryRecord(round_id=summary.round_id, text=summary.text) if summary else None,
            max_tool_calls_exceeded=turn.result_metadata.max_tool_calls_exceeded,
        )
    return TurnRecord(
        id=turn.id,
        request=turn.request,
        rounds=[_round_to_record(round_) for round_ in turn.rounds],
        result_metadata=metadata,
    )


def _round_from_record(record: RoundRecord) -> Round:
    return Round(
        id=record.id,
        response=record.response,
        tool_calls=[ToolCall(id=call.id, name=call.name, arguments=call.arguments) for call in record.tool_calls],
        tool_results=_results_from_records(record.tool_results),
        summary=record.summary,
    )


def _round_to_record(round_: Round) -> RoundRecord:
    return RoundRecord(
        id=round_.id,
        response=round_.response,
        tool_calls=[
            ToolCallRecord(id=call.id, name=call.name, arguments=call.arguments)
            for call in round_.tool_calls
        ],
        tool_results=_results_to_records(round_.tool_results),
        summary=round_.summary,
    )


def _results_from_records(records: Dict[str, ToolResultRecord]) -> Dict[str, ToolCallResult]:
    return {
        call_id: ToolCallResult(content=item.content, is_error=item.is_error)
        for call_id, item in records.items()
    }


def _results_to_records(results: Dict[str, ToolCallResult]) -> Dict[str, ToolResultRecord]:
    return {
        call_id: ToolResultRecord(content=item.content, is_error=item.is_error)
        for call_id, item in results.items()
    }


__all__ = [
    "TranscriptRecord",
    "context_from_record",
    "context_to_record",
    "dump_transcript",
    "load_transcript",
]
