"""Re-apply persisted summaries onto rounds when a conversation is reloaded."""
from __future__ import annotations

from typing import List, Optional, Sequence

from .model import Round, SummaryMetadata, Turn, TurnResultMetadata


def restore_summaries(history: Sequence[Turn]) -> int:
    """Copy each turn's persisted summary back onto its round.

    A summary recorded while a turn was in progress points at one of that
    turn's rounds, or at a round of an earlier turn when the compaction fell
    back to turn granularity. Returns the number of rounds updated.
    """

    restored = 0
    for index, turn in enumerate(history):
        metadata = turn.result_metadata
        if metadata is None or metadata.summary is None:
            continue
        target = _find_round(history[: index + 1], metadata.summary.round_id)
        if target is None:
            continue
        target.summary = metadata.summary.text
        restored += 1
    return restored


def record_summary(turn: Turn, round_id: str, text: str) -> SummaryMetadata:
    """Persist a summary on *turn* so it can be restored on the next request."""

    if turn.result_metadata is None:
        turn.result_metadata = TurnResultMetadata()
    summary = SummaryMetadata(round_id=round_id, text=text)
    turn.result_metadata.summary = summary
    return summary


def _find_round(turns: Sequence[Turn], round_id: str) -> Optional[Round]:
    candidates: List[Turn] = list(turns)
    for turn in reversed(candidates):
        for round_ in turn.rounds:
            if round_.id == round_id:
                return round_
    return None


__all__ = ["record_summary", "restore_summaries"]
