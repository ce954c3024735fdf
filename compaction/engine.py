"""Entry point for compacting a conversation's history."""
from __future__ import annotations

import asyncio
import logging
import weakref
from dataclasses import dataclass
from typing import List, Optional, Sequence

from conversation import PromptContext, SummaryMetadata, Turn, record_summary
from llm import ChatEndpoint, Message
from prompt import SummarizationPromptRenderer, history_messages
from tools import ToolSpec

from .builder import SummarizationRequestBuilder
from .executor import SummarizationExecutor
from .notebook import NotebookWorkspace, PathResolver
from .outcome import Success
from .patcher import HistoryPatcher
from .progress import ProgressReporter
from .reporting import TelemetryReporter
from .settings import SessionSettings
from .telemetry import SessionTelemetry, TelemetrySink
from .token_meter import PromptSizing, TokenMeter

logger = logging.getLogger(__name__)


@dataclass
class CompactionResult:
    metadata: SummaryMetadata
    context: PromptContext
    outcome: Success


@dataclass
class SummarizedHistory:
    messages: List[Message]
    metadata: Optional[SummaryMetadata] = None


class ConversationCompactor:
    """Compact conversation history by summarizing it onto one round.

    Attempts for the same conversation are serialized; attempts for different
    conversations may run concurrently.
    """

    def __init__(
        self,
        settings: Optional[SessionSettings] = None,
        *,
        meter: Optional[TokenMeter] = None,
        telemetry: Optional[TelemetrySink] = None,
        path_resolver: Optional[PathResolver] = None,
        workspace: Optional[NotebookWorkspace] = None,
    ) -> None:
        self.settings = settings or SessionSettings()
        self.meter = meter or TokenMeter(self.settings.model.name)
        self.telemetry: TelemetrySink = telemetry if telemetry is not None else SessionTelemetry()
        self.builder = SummarizationRequestBuilder(
            max_tool_result_length=self.settings.compaction.max_tool_result_length,
            path_resolver=path_resolver,
            workspace=workspace,
        )
        self.renderer = SummarizationPromptRenderer(self.meter)
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()

    def lock_for(self, context: PromptContext) -> asyncio.Lock:
        """Return the lock serializing attempts for *context*'s conversation.

        Locks live only while an attempt holds or awaits them. Contexts without
        a conversation id get a fresh, unshared lock.
        """

        if not context.session_id:
            return asyncio.Lock()
        lock = self._locks.get(context.session_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[context.session_id] = lock
        return lock

    def default_sizing(self) -> PromptSizing:
        return self.meter.sizing(self.settings.compaction.summary_budget_tokens)

    def should_compact(self, context: PromptContext) -> bool:
        if not self.settings.compaction.auto:
            return False
        if not context.history and len(context.tool_call_rounds) < 2:
            return False
        tokens = self.meter.estimate_messages(self._history_messages(context, enable_cache_breakpoints=False))
        return tokens > self.settings.input_budget_tokens

    async def compact(
        self,
        context: PromptContext,
        endpoint: ChatEndpoint,
        tools: Sequence[ToolSpec] = (),
        *,
        sizing: Optional[PromptSizing] = None,
        enable_cache_breakpoints: Optional[bool] = None,
        progress: Optional[ProgressReporter] = None,
        cancel_event: Optional[asyncio.Event] = None,
        record_into: Optional[Turn] = None,
    ) -> CompactionResult:
        """Summarize *context* and install the summary on the covered round.

        Raises ``NothingToSummarizeError`` before any request when there is no
        round to attach a summary to. Every other failure is reported to the
        telemetry sink and raised as a ``CompactionError``.
        """

        if enable_cache_breakpoints is None:
            enable_cache_breakpoints = self.settings.compaction.enable_cache_breakpoints
        async with self.lock_for(context):
            request = self.builder.build(context, enable_cache_breakpoints=enable_cache_breakpoints)
            recorder = TelemetryReporter(self.telemetry, model=endpoint.model).recorder(context)
            executor = SummarizationExecutor(
                self.renderer,
                endpoint,
                input_budget=self.settings.input_budget_tokens,
                progress=progress,
            )
            success = await executor.run(
                request,
                recorder,
                HistoryPatcher(context),
                tools=tools,
                sizing=sizing or self.default_sizing(),
                cancel_event=cancel_event,
            )

        if record_into is not None:
            metadata = record_summary(record_into, success.round_id, success.summary)
        else:
            metadata = SummaryMetadata(round_id=success.round_id, text=success.summary)
        return CompactionResult(metadata=metadata, context=context, outcome=success)

    async def render_history(
        self,
        context: PromptContext,
        endpoint: Optional[ChatEndpoint] = None,
        tools: Sequence[ToolSpec] = (),
        *,
        trigger_summarize: Optional[bool] = None,
        enable_cache_breakpoints: Optional[bool] = None,
        **compact_options,
    ) -> SummarizedHistory:
        """Render history messages, compacting first when asked or when over budget."""

        if enable_cache_breakpoints is None:
            enable_cache_breakpoints = self.settings.compaction.enable_cache_breakpoints
        if trigger_summarize is None:
            trigger_summarize = endpoint is not None and self.should_compact(context)

        metadata: Optional[SummaryMetadata] = None
        if trigger_summarize:
            if endpoint is None:
                raise ValueError("An endpoint is required to summarize history")
            result = await self.compact(
                context,
                endpoint,
                tools,
                enable_cache_breakpoints=enable_cache_breakpoints,
                **compact_options,
            )
            metadata = result.metadata

        messages = self._history_messages(context, enable_cache_breakpoints=enable_cache_breakpoints)
        return SummarizedHistory(messages=messages, metadata=metadata)

    def _history_messages(self, context: PromptContext, *, enable_cache_breakpoints: bool) -> List[Message]:
        return history_messages(
            context,
            max_tool_result_length=self.settings.compaction.max_tool_result_length,
            enable_cache_breakpoints=enable_cache_breakpoints,
        )


__all__ = ["CompactionResult", "ConversationCompactor", "SummarizedHistory"]
