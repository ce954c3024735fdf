"""Shared pytest fixtures for the compaction test suite."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

import pytest

import compaction.token_meter as token_meter_module
from compaction import ConversationCompactor, PromptSizing, SessionSettings, SessionTelemetry, TokenMeter
from compaction.settings import CompactionSettings, ModelSettings
from tests.mocking import FakeChatEndpoint, MockAnthropic


@dataclass
class AnthropicMockHandle:
    """Helper that patches modules to return a shared ``MockAnthropic`` instance."""

    client: MockAnthropic
    monkeypatch: Any

    def patch(self, *targets: str) -> MockAnthropic:
        """Patch dotted attribute paths (e.g. ``"llm.anthropic_endpoint.AsyncAnthropic"``)."""
        if not targets:
            targets = ("llm.anthropic_endpoint.AsyncAnthropic",)
        for target in targets:
            self.monkeypatch.setattr(target, lambda *args, client=self.client, **kwargs: client)
        return self.client


@pytest.fixture
def anthropic_mock(monkeypatch) -> AnthropicMockHandle:
    """Provide a ``MockAnthropic`` instance with convenient patching helpers."""
    client = MockAnthropic()
    return AnthropicMockHandle(client=client, monkeypatch=monkeypatch)


@pytest.fixture
def meter(monkeypatch) -> TokenMeter:
    """Token meter using the character heuristic so counts are deterministic offline."""
    monkeypatch.setattr(token_meter_module, "_load_encoder", lambda model: None)
    return TokenMeter("claude-test")


@pytest.fixture
def fixed_sizing() -> Callable[..., PromptSizing]:
    """Build a sizing whose counter reports the same value for any text."""

    def factory(tokens: int, *, budget: int = 100) -> PromptSizing:
        return PromptSizing(token_budget=budget, count_tokens=lambda text: tokens)

    return factory


@pytest.fixture
def settings() -> SessionSettings:
    return SessionSettings(
        model=ModelSettings(name="claude-test", context_tokens=50_000, guardrail_tokens=0),
        compaction=CompactionSettings(max_tool_result_length=500, summary_budget_tokens=1_000),
    )


@pytest.fixture
def telemetry() -> SessionTelemetry:
    return SessionTelemetry()


@pytest.fixture
def endpoint() -> FakeChatEndpoint:
    return FakeChatEndpoint()


@pytest.fixture
def compactor(settings, meter, telemetry) -> ConversationCompactor:
    return ConversationCompactor(settings, meter=meter, telemetry=telemetry)
