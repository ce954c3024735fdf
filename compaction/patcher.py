"""Install a validated summary onto its covered round."""
from __future__ import annotations

import logging
from typing import Optional

from conversation import PromptContext, Round

logger = logging.getLogger(__name__)


class HistoryPatcher:
    """Patch rounds of one conversation by id.

    Rounds in ``context.history`` belong to persisted turns; a summary written
    there lasts for the current render only and is restored from turn metadata
    on the next request.
    """

    def __init__(self, context: PromptContext) -> None:
        self.context = context

    def find(self, round_id: str) -> Optional[Round]:
        for round_ in self.context.tool_call_rounds:
            if round_.id == round_id:
                return round_
        for turn in reversed(self.context.history):
            for round_ in turn.rounds:
                if round_.id == round_id:
                    return round_
        return None

    def install(self, summary: str, round_id: str) -> bool:
        round_ = self.find(round_id)
        if round_ is None:
            logger.debug("No round %s to attach summary to", round_id)
            return False
        round_.summary = summary
        return True


__all__ = ["HistoryPatcher"]
