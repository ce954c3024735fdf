"""Anthropic client settings for summarization requests."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_MODEL = "claude-sonnet-4-5"
DEFAULT_MAX_TOKENS = 8192


@dataclass(frozen=True)
class AnthropicConfig:
    """Models and output caps used when calling Anthropic.

    ``model`` is the conversation model. Summaries go to ``summary_model``,
    capped at ``summary_max_tokens`` output tokens when set and at
    ``max_tokens`` otherwise.
    """

    model: str
    max_tokens: int
    summary_model: str
    summary_max_tokens: Optional[int] = None

    def summary_request(self, model: Optional[str] = None) -> tuple[str, int]:
        """Return the (model, max_tokens) pair for a summarization call."""

        return model or self.summary_model, self.summary_max_tokens or self.max_tokens


def _env_text(name: str) -> Optional[str]:
    value = (os.getenv(name) or "").strip()
    return value or None


def _env_positive_int(name: str) -> Optional[int]:
    raw = _env_text(name)
    if raw is None:
        return None
    try:
        value = int(raw)
    except ValueError:
        return None
    return value if value > 0 else None


def load_anthropic_config() -> AnthropicConfig:
    """Read ``ANTHROPIC_*`` variables, ignoring blank or invalid values.

    ``ANTHROPIC_SUMMARY_MODEL`` falls back to ``ANTHROPIC_MODEL`` and
    ``ANTHROPIC_SUMMARY_MAX_TOKENS`` to ``ANTHROPIC_MAX_TOKENS``.
    """

    model = _env_text("ANTHROPIC_MODEL") or DEFAULT_MODEL
    return AnthropicConfig(
        model=model,
        max_tokens=_env_positive_int("ANTHROPIC_MAX_TOKENS") or DEFAULT_MAX_TOKENS,
        summary_model=_env_text("ANTHROPIC_SUMMARY_MODEL") or model,
        summary_max_tokens=_env_positive_int("ANTHROPIC_SUMMARY_MAX_TOKENS"),
    )


__all__ = ["AnthropicConfig", "DEFAULT_MODEL", "DEFAULT_MAX_TOKENS", "load_anthropic_config"]
