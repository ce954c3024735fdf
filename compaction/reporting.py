"""Outcome telemetry for compaction attempts."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from conversation import PromptContext

from .outcome import CompactionOutcome, outcome_detail, outcome_request_id
from .telemetry import TelemetrySink

logger = logging.getLogger(__name__)

EVENT_NAME = "summarizedConversationHistory"


@dataclass(frozen=True)
class SummarizationStats:
    num_rounds: int
    num_rounds_since_last_summarization: int
    last_used_tool: str
    is_during_tool_calling: int
    conversation_id: str


def compute_stats(context: PromptContext) -> SummarizationStats:
    pending = context.tool_call_rounds
    num_rounds = len(pending) + sum(len(turn.rounds) for turn in context.history)

    since_last = -1
    for skipped, round_ in enumerate(context.iter_rounds_newest_first()):
        if round_.summary:
            since_last = skipped
            break

    last_tool: Optional[str] = None
    if pending:
        last_tool = pending[-1].last_tool_name
    elif context.history and context.history[-1].rounds:
        last_tool = context.history[-1].rounds[-1].last_tool_name

    return SummarizationStats(
        num_rounds=num_rounds,
        num_rounds_since_last_summarization=since_last,
        last_used_tool=last_tool or "none",
        is_during_tool_calling=1 if pending else 0,
        conversation_id=context.session_id or "",
    )


class TelemetryReporter:
    """Emit one event per terminal outcome; never raises."""

    def __init__(self, sink: TelemetrySink, *, model: str) -> None:
        self.sink = sink
        self.model = model

    def report(self, context: PromptContext, outcome: CompactionOutcome) -> None:
        try:
            stats = compute_stats(context)
            properties: Dict[str, str] = {
                "outcome": outcome.tag,
                "requestId": outcome_request_id(outcome),
                "model": self.model,
                "lastUsedTool": stats.last_used_tool,
                "conversationId": stats.conversation_id,
            }
            detail = outcome_detail(outcome)
            if detail:
                properties["detailedOutcome"] = detail
            measurements = {
                "numRounds": float(stats.num_rounds),
                "numRoundsSinceLastSummarization": float(stats.num_rounds_since_last_summarization),
                "isDuringToolCalling": float(stats.is_during_tool_calling),
            }
            self.sink.send_event(EVENT_NAME, properties, measurements)
        except Exception as exc:
            logger.debug("Compaction telemetry failed: %s", exc)

    def recorder(self, context: PromptContext) -> "OutcomeRecorder":
        return OutcomeRecorder(self, context)


class OutcomeRecorder:
    """Single-use holder that reports an outcome as it is recorded."""

    def __init__(self, reporter: TelemetryReporter, context: PromptContext) -> None:
        self._reporter = reporter
        self._context = context
        self._outcome: Optional[CompactionOutcome] = None

    @property
    def outcome(self) -> CompactionOutcome:
        if self._outcome is None:
            raise RuntimeError("no outcome recorded")
        return self._outcome

    @property
    def recorded(self) -> bool:
        return self._outcome is not None

    def record(self, outcome: CompactionOutcome) -> CompactionOutcome:
        if self._outcome is not None:
            raise RuntimeError(f"outcome already recorded as {self._outcome.tag}")
        self._outcome = outcome
        self._reporter.report(self._context, outcome)
        return outcome


__all__ = [
    "EVENT_NAME",
    "OutcomeRecorder",
    "SummarizationStats",
    "TelemetryReporter",
    "compute_stats",
]
