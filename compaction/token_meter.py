"""Token estimation utilities with best-effort model mapping."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional

import tiktoken

_ENCODER_ALIASES = {
    "gpt-4.1": "gpt-4o-mini",
    "gpt-4.1-mini": "gpt-4o-mini",
    "gpt-4o": "gpt-4o-mini",
}

TokenCounter = Callable[[str], int]


@dataclass
class TokenMeasurement:
    label: str
    tokens: int


@dataclass(frozen=True)
class PromptSizing:
    """Output budget for a summary plus the counter used to check it."""

    token_budget: int
    count_tokens: TokenCounter


class TokenMeter:
    """Estimate token consumption for messages and summaries."""

    def __init__(self, model: str, *, fallback_chars_per_token: int = 4) -> None:
        self.model = model
        self._encoder = _load_encoder(model)
        self._fallback_ratio = max(fallback_chars_per_token, 1)
        self.measurements: List[TokenMeasurement] = []

    def count_tokens(self, text: str) -> int:
        return self._encode_length(text)

    def sizing(self, token_budget: int) -> PromptSizing:
        return PromptSizing(token_budget=token_budget, count_tokens=self.count_tokens)

    def estimate_text(self, text: str, *, label: Optional[str] = None) -> int:
        tokens = self._encode_length(text)
        if label:
            self.measurements.append(TokenMeasurement(label=label, tokens=tokens))
        return tokens

    def estimate_messages(self, messages: Iterable[dict[str, Any]], *, label: Optional[str] = None) -> int:
        total = 0
        for message in messages:
            total += self._estimate_message(message)
        if label:
            self.measurements.append(TokenMeasurement(label=label, tokens=total))
        return total

    def reset_measurements(self) -> None:
        self.measurements.clear()

    def _estimate_message(self, message: dict[str, Any]) -> int:
        role = message.get("role", "")
        total = 4  # role + separators
        content = message.get("content", [])
        if isinstance(content, str):
            content = [{"type": "text", "text": content}]
        for block in content:
            btype = block.get("type")
            if btype == "text":
                total += self._encode_length(block.get("text", ""))
            elif btype == "tool_use":
                total += self._encode_length(str(block.get("input", {})))
                total += self._encode_length(block.get("name", ""))
                total += 6  # id overhead
            elif btype == "tool_result":
                total += self._encode_length(_result_text(block.get("content", "")))
                total += 6
            else:
                total += 3
        total += len(role)
        return total

    def _encode_length(self, text: str) -> int:
        if not text:
            return 0
        if self._encoder is None:
            return max(1, math.ceil(len(text) / self._fallback_ratio))
        return len(self._encoder.encode(text, disallowed_special=()))


def _result_text(content: Any) -> str:
    if isinstance(content, list):
        return "\n".join(str(block.get("text", "")) for block in content if isinstance(block, dict))
    return str(content)


def _load_encoder(model: str):
    target = _ENCODER_ALIASES.get(model, model)
    try:
        return tiktoken.encoding_for_model(target)
    except KeyError:
        pass
    except OSError:  # encoding files unavailable offline
        return None
    try:
        return tiktoken.get_encoding("cl100k_base")
    except (KeyError, OSError, ValueError):
        return None


__all__ = ["PromptSizing", "TokenCounter", "TokenMeasurement", "TokenMeter"]
