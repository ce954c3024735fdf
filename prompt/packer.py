"""Pack prompt parts into a message list that fits an input token budget."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Sequence

from errors import BudgetExceededError

from .history import HistorySegment, coalesce_messages

if TYPE_CHECKING:  # pragma: no cover
    from compaction.token_meter import TokenMeter

Message = Dict[str, Any]

OMITTED_HISTORY_TEXT = "[Earlier conversation omitted to fit the context budget.]"


@dataclass
class PackedPrompt:
    messages: List[Message]
    token_total: int
    budget_tokens: int
    dropped_segments: int = 0
    dropped_optional: int = 0

    @property
    def usage_pct(self) -> float:
        if not self.budget_tokens:
            return 0.0
        return round(self.token_total / self.budget_tokens * 100, 2)


class PromptPacker:
    """Fit required, history and optional parts into a budget.

    ``head`` and ``tail`` are always included. History segments are kept
    newest first until the budget runs out; optional parts only use what the
    history leaves over.
    """

    def __init__(self, meter: TokenMeter) -> None:
        self.meter = meter

    def pack(
        self,
        *,
        head: Sequence[Message],
        segments: Sequence[HistorySegment],
        tail: Sequence[Message],
        optional: Sequence[Message] = (),
        budget: int,
    ) -> PackedPrompt:
        required_tokens = self.meter.estimate_messages(list(head) + list(tail))
        if required_tokens > budget:
            raise BudgetExceededError(
                f"Prompt instructions need {required_tokens} tokens, budget is {budget}",
                budget=budget,
                required=required_tokens,
            )

        remaining = budget - required_tokens
        segment_costs = [self.meter.estimate_messages(segment.messages) for segment in segments]
        kept: List[HistorySegment] = list(segments)
        history_messages: List[Message] = [m for segment in segments for m in segment.messages]
        if sum(segment_costs) > remaining:
            note = {"role": "user", "content": [{"type": "text", "text": OMITTED_HISTORY_TEXT}]}
            remaining -= self.meter.estimate_messages([note])
            kept = []
            for segment, cost in zip(reversed(segments), reversed(segment_costs)):
                if cost > remaining:
                    break
                kept.append(segment)
                remaining -= cost
            kept.reverse()
            if not kept:
                newest = segment_costs[-1] if segment_costs else 0
                raise BudgetExceededError(
                    f"Newest history segment needs {newest} tokens, {max(remaining, 0)} available",
                    budget=budget,
                    required=required_tokens + newest,
                )
            history_messages = [note] + [m for segment in kept for m in segment.messages]
        else:
            remaining -= sum(segment_costs)

        included_optional: List[Message] = []
        for message in optional:
            cost = self.meter.estimate_messages([message])
            if cost > remaining:
                continue
            included_optional.append(message)
            remaining -= cost

        messages = coalesce_messages([*head, *history_messages, *included_optional, *tail])
        return PackedPrompt(
            messages=messages,
            token_total=self.meter.estimate_messages(messages),
            budget_tokens=budget,
            dropped_segments=len(segments) - len(kept),
            dropped_optional=len(optional) - len(included_optional),
        )


__all__ = ["OMITTED_HISTORY_TEXT", "PackedPrompt", "PromptPacker"]
