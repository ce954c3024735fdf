"""Choose which rounds a summary covers and where it is attached."""
from __future__ import annotations

from dataclasses import dataclass

from conversation import PromptContext
from errors import NothingToSummarizeError


@dataclass(frozen=True)
class RoundSelection:
    context: PromptContext
    round_id: str


def select_rounds(context: PromptContext) -> RoundSelection:
    """Return the context to summarize and the id of the covered round.

    With several pending rounds the newest one is assumed to be what pushed the
    prompt over budget, so it is left out and the summary attaches to the round
    before it. Otherwise the summary covers everything up to the last round of
    the previous turn and the newest user message is excluded.
    """

    pending = context.tool_call_rounds
    if len(pending) > 1:
        kept = list(pending[:-1])
        return RoundSelection(
            context=context.derive(tool_call_rounds=kept),
            round_id=kept[-1].id,
        )

    if context.history:
        last_turn = context.history[-1]
        if not last_turn.rounds:
            raise NothingToSummarizeError("Last turn has no rounds to attach a summary to")
        return RoundSelection(
            context=context.derive(tool_call_rounds=[], is_continuation=True),
            round_id=last_turn.rounds[-1].id,
        )

    raise NothingToSummarizeError()


__all__ = ["RoundSelection", "select_rounds"]
