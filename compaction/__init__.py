"""Conversation history compaction."""
from .builder import SummarizationRequest, SummarizationRequestBuilder
from .engine import CompactionResult, ConversationCompactor, SummarizedHistory
from .executor import REQUEST_KIND, SummarizationExecutor
from .notebook import (
    NotebookCell,
    NotebookDocument,
    NotebookLookup,
    OpenNotebooks,
    SkipReason,
    WorkspacePathResolver,
    find_working_notebook,
)
from .otel import OtelExporter
from .outcome import (
    BudgetExceeded,
    CompactionOutcome,
    RenderFailed,
    RequestFailed,
    Success,
    TooLarge,
    UpstreamFailure,
)
from .patcher import HistoryPatcher
from .progress import ConsoleProgress, NullProgress, ProgressReporter
from .reporting import EVENT_NAME, OutcomeRecorder, TelemetryReporter, compute_stats
from .selector import RoundSelection, select_rounds
from .settings import SessionSettings, load_session_settings
from .telemetry import SessionTelemetry, TelemetryEvent, TelemetrySink
from .token_meter import PromptSizing, TokenMeter

__all__ = [
    "BudgetExceeded",
    "CompactionOutcome",
    "CompactionResult",
    "ConsoleProgress",
    "ConversationCompactor",
    "EVENT_NAME",
    "HistoryPatcher",
    "NotebookCell",
    "NotebookDocument",
    "NotebookLookup",
    "NullProgress",
    "OpenNotebooks",
    "OtelExporter",
    "OutcomeRecorder",
    "ProgressReporter",
    "PromptSizing",
    "REQUEST_KIND",
    "RenderFailed",
    "RequestFailed",
    "RoundSelection",
    "SessionSettings",
    "SessionTelemetry",
    "SkipReason",
    "Success",
    "SummarizationExecutor",
    "SummarizationRequest",
    "SummarizationRequestBuilder",
    "SummarizedHistory",
    "TelemetryEvent",
    "TelemetryReporter",
    "TelemetrySink",
    "TokenMeter",
    "TooLarge",
    "UpstreamFailure",
    "WorkspacePathResolver",
    "compute_stats",
    "find_working_notebook",
    "load_session_settings",
    "select_rounds",
]
