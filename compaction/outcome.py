"""Terminal outcomes of a compaction attempt."""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional, Union


@dataclass(frozen=True)
class Success:
    tag: ClassVar[str] = "success"

    summary: str
    round_id: str
    request_id: str = ""


@dataclass(frozen=True)
class BudgetExceeded:
    tag: ClassVar[str] = "budget_exceeded"

    detail: Optional[str] = None


@dataclass(frozen=True)
class RenderFailed:
    tag: ClassVar[str] = "renderError"

    detail: Optional[str] = None


@dataclass(frozen=True)
class RequestFailed:
    tag: ClassVar[str] = "requestThrow"

    cause: Optional[BaseException] = None

    @property
    def detail(self) -> Optional[str]:
        if self.cause is None:
            return None
        return f"{type(self.cause).__name__}: {self.cause}"


@dataclass(frozen=True)
class TooLarge:
    tag: ClassVar[str] = "too_large"

    request_id: str = ""
    tokens: int = 0
    budget: int = 0


@dataclass(frozen=True)
class UpstreamFailure:
    kind: str
    reason: Optional[str] = None
    request_id: str = ""

    @property
    def tag(self) -> str:
        return self.kind


CompactionOutcome = Union[Success, BudgetExceeded, RenderFailed, RequestFailed, TooLarge, UpstreamFailure]


def outcome_request_id(outcome: CompactionOutcome) -> str:
    return getattr(outcome, "request_id", "") or ""


def outcome_detail(outcome: CompactionOutcome) -> Optional[str]:
    if isinstance(outcome, UpstreamFailure):
        return outcome.reason
    return getattr(outcome, "detail", None)


__all__ = [
    "BudgetExceeded",
    "CompactionOutcome",
    "RenderFailed",
    "RequestFailed",
    "Success",
    "TooLarge",
    "UpstreamFailure",
    "outcome_detail",
    "outcome_request_id",
]
