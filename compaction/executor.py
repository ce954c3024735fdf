"""Issue the summarization request and classify what comes back."""
from __future__ import annotations

import asyncio
import logging
from typing import Optional, Sequence

from errors import (
    BudgetExceededError,
    CompactionCancelledError,
    SummaryRenderError,
    SummaryRequestError,
    SummaryTooLargeError,
    SummaryUpstreamError,
)
from llm import ChatEndpoint, ChatOptions, ChatResponse, ChatResponseType, strip_internal_tool_call_ids
from prompt import SummarizationPromptRenderer
from tools import ToolSpec, normalize_tool_schema

from .builder import SummarizationRequest
from .outcome import (
    BudgetExceeded,
    RenderFailed,
    RequestFailed,
    Success,
    TooLarge,
    UpstreamFailure,
)
from .patcher import HistoryPatcher
from .progress import SUMMARIZED_MESSAGE, SUMMARIZING_MESSAGE, NullProgress, ProgressReporter
from .reporting import OutcomeRecorder
from .token_meter import PromptSizing

logger = logging.getLogger(__name__)

REQUEST_KIND = "summarizeConversationHistory"


class SummarizationExecutor:
    """Run one summarization attempt.

    Every exit path records exactly one outcome on the recorder before it
    returns or raises. The patcher only runs after the summary passed the
    output budget check.
    """

    def __init__(
        self,
        renderer: SummarizationPromptRenderer,
        endpoint: ChatEndpoint,
        *,
        input_budget: int,
        progress: Optional[ProgressReporter] = None,
    ) -> None:
        self.renderer = renderer
        self.endpoint = endpoint
        self.input_budget = input_budget
        self.progress = progress or NullProgress()

    async def run(
        self,
        request: SummarizationRequest,
        recorder: OutcomeRecorder,
        patcher: HistoryPatcher,
        *,
        tools: Sequence[ToolSpec],
        sizing: PromptSizing,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Success:
        try:
            prompt = self.renderer.render(request, budget=self.input_budget)
        except BudgetExceededError as exc:
            exc.outcome = recorder.record(BudgetExceeded(detail=exc.message))
            raise
        except Exception as exc:
            outcome = recorder.record(RenderFailed(detail=f"{type(exc).__name__}: {exc}"))
            raise SummaryRenderError(f"Failed to render summarization prompt: {exc}", outcome=outcome) from exc

        if prompt.dropped_segments or prompt.dropped_optional:
            logger.info(
                "Summarization prompt trimmed: %d history segments and %d attachments dropped (%.1f%% of budget)",
                prompt.dropped_segments,
                prompt.dropped_optional,
                prompt.usage_pct,
            )

        messages = strip_internal_tool_call_ids(prompt.messages)
        options = ChatOptions(
            temperature=0.0,
            stream=False,
            tool_choice="none",
            tools=normalize_tool_schema(self.endpoint.family, tools, _log_dropped_tool),
        )

        try:
            response = await self._complete(messages, options, cancel_event)
        except asyncio.CancelledError as exc:
            recorder.record(RequestFailed(cause=exc))
            raise
        except CompactionCancelledError as exc:
            exc.outcome = recorder.record(RequestFailed(cause=exc))
            raise
        except Exception as exc:
            outcome = recorder.record(RequestFailed(cause=exc))
            raise SummaryRequestError(f"Summarization request failed: {exc}", outcome=outcome) from exc

        if not response.ok:
            kind = "failed" if response.type is ChatResponseType.FAILED else response.type.value
            outcome = recorder.record(
                UpstreamFailure(kind=kind, reason=response.reason, request_id=response.request_id)
            )
            logger.info("Summarization returned %s: %s", kind, response.reason)
            raise SummaryUpstreamError(
                f"Summarization response was {kind}: {response.reason or 'no reason given'}",
                kind=kind,
                reason=response.reason,
                outcome=outcome,
            )

        summary = response.value
        tokens = sizing.count_tokens(summary)
        if tokens > sizing.token_budget:
            outcome = recorder.record(
                TooLarge(request_id=response.request_id, tokens=tokens, budget=sizing.token_budget)
            )
            logger.info("Summary of %d tokens exceeds budget of %d", tokens, sizing.token_budget)
            raise SummaryTooLargeError(
                f"Summary needs {tokens} tokens, budget is {sizing.token_budget}",
                tokens=tokens,
                budget=sizing.token_budget,
                outcome=outcome,
            )

        success = recorder.record(Success(summary=summary, round_id=request.round_id, request_id=response.request_id))
        patcher.install(summary, request.round_id)
        logger.info("Summarized conversation history onto round %s (%d tokens)", request.round_id, tokens)
        return success

    async def _complete(
        self,
        messages: list,
        options: ChatOptions,
        cancel_event: Optional[asyncio.Event],
    ) -> ChatResponse:
        pending = asyncio.ensure_future(self.endpoint.complete(REQUEST_KIND, messages, options))
        try:
            self.progress.report(SUMMARIZING_MESSAGE, pending, SUMMARIZED_MESSAGE)
        except Exception as exc:
            logger.debug("Progress reporter failed: %s", exc)

        if cancel_event is None:
            try:
                return await pending
            except asyncio.CancelledError:
                pending.cancel()
                raise

        waiter = asyncio.ensure_future(cancel_event.wait())
        try:
            await asyncio.wait({pending, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            pending.cancel()
            raise
        finally:
            waiter.cancel()
        if pending.done():
            return pending.result()
        pending.cancel()
        raise CompactionCancelledError()


def _log_dropped_tool(name: str, problem: str) -> None:
    logger.warning("Dropping tool %s from summarization request: %s", name, problem)


__all__ = ["REQUEST_KIND", "SummarizationExecutor"]
