"""Structured compaction error types."""
from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:  # pragma: no cover
    from compaction.outcome import CompactionOutcome


class ErrorType(Enum):
    """Classification of compaction errors."""

    FATAL = "fatal"
    RECOVERABLE = "recoverable"


class CompactionError(Exception):
    """Base class for failed compaction attempts.

    ``outcome`` is the telemetry outcome recorded for the attempt, or ``None``
    for failures raised before an attempt starts.
    """

    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.RECOVERABLE,
        *,
        outcome: Optional["CompactionOutcome"] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.outcome = outcome

    def __str__(self) -> str:  # pragma: no cover - convenience
        return self.message


class NothingToSummarizeError(CompactionError):
    """Raised when the history has no round a summary could be attached to."""

    def __init__(self, message: str = "Nothing to summarize") -> None:
        super().__init__(message, ErrorType.FATAL)


class BudgetExceededError(CompactionError):
    """The summarization prompt cannot fit the input token budget."""

    def __init__(
        self,
        message: str,
        *,
        budget: int = 0,
        required: int = 0,
        outcome: Optional["CompactionOutcome"] = None,
    ) -> None:
        super().__init__(message, outcome=outcome)
        self.budget = budget
        self.required = required


class SummaryRenderError(CompactionError):
    """Rendering the summarization prompt failed for a reason other than budget."""


class SummaryRequestError(CompactionError):
    """The summarization request raised before producing a response."""


class CompactionCancelledError(SummaryRequestError):
    """The summarization request was cancelled through its cancellation signal."""

    def __init__(self, message: str = "Summarization cancelled") -> None:
        super().__init__(message)


class SummaryUpstreamError(CompactionError):
    """The endpoint answered with a non-success response."""

    def __init__(
        self,
        message: str,
        *,
        kind: str,
        reason: Optional[str] = None,
        outcome: Optional["CompactionOutcome"] = None,
    ) -> None:
        super().__init__(message, outcome=outcome)
        self.kind = kind
        self.reason = reason


class SummaryTooLargeError(CompactionError):
    """The returned summary does not fit the output token budget."""

    def __init__(
        self,
        message: str,
        *,
        tokens: int,
        budget: int,
        outcome: Optional["CompactionOutcome"] = None,
    ) -> None:
        super().__init__(message, outcome=outcome)
        self.tokens = tokens
        self.budget = budget


__all__ = [
    "BudgetExceededError",
    "CompactionCancelledError",
    "CompactionError",
    "ErrorType",
    "NothingToSummarizeError",
    "SummaryRenderError",
    "SummaryRequestError",
    "SummaryTooLargeError",
    "SummaryUpstreamError",
]
