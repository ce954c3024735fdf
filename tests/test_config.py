import pytest

from config import DEFAULT_MAX_TOKENS, DEFAULT_MODEL, load_anthropic_config


def test_load_config_uses_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ANTHROPIC_MODEL", raising=False)
    monkeypatch.delenv("ANTHROPIC_MAX_TOKENS", raising=False)
    monkeypatch.delenv("ANTHROPIC_SUMMARY_MODEL", raising=False)
    monkeypatch.delenv("ANTHROPIC_SUMMARY_MAX_TOKENS", raising=False)

    cfg = load_anthropic_config()

    assert cfg.model == DEFAULT_MODEL
    assert cfg.max_tokens == DEFAULT_MAX_TOKENS
    assert cfg.summary_model == DEFAULT_MODEL
    assert cfg.summary_request() == (DEFAULT_MODEL, DEFAULT_MAX_TOKENS)


def test_load_config_honours_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ANTHROPIC_MODEL", "claude-test")
    monkeypatch.setenv("ANTHROPIC_MAX_TOKENS", "2048")
    monkeypatch.setenv("ANTHROPIC_SUMMARY_MODEL", "claude-summary")

    cfg = load_anthropic_config()

    assert cfg.model == "claude-test"
    assert cfg.max_tokens == 2048
    assert cfg.summary_model == "claude-summary"


def test_summary_model_follows_model(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ANTHROPIC_MODEL", "claude-test")
    monkeypatch.setenv("ANTHROPIC_SUMMARY_MODEL", "  ")

    assert load_anthropic_config().summary_model == "claude-test"


def test_load_config_invalid_tokens_falls_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ANTHROPIC_MODEL", " ")
    monkeypatch.setenv("ANTHROPIC_MAX_TOKENS", "not-an-int")

    cfg = load_anthropic_config()

    assert cfg.model == DEFAULT_MODEL
    assert cfg.max_tokens == DEFAULT_MAX_TOKENS


def test_load_config_rejects_non_positive_tokens(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ANTHROPIC_MAX_TOKENS", "0")

    assert load_anthropic_config().max_tokens == DEFAULT_MAX_TOKENS


def test_summary_max_tokens_caps_summary_requests(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ANTHROPIC_MODEL", "claude-test")
    monkeypatch.setenv("ANTHROPIC_MAX_TOKENS", "4096")
    monkeypatch.setenv("ANTHROPIC_SUMMARY_MAX_TOKENS", "1024")
    monkeypatch.delenv("ANTHROPIC_SUMMARY_MODEL", raising=False)

    cfg = load_anthropic_config()

    assert cfg.summary_request() == ("claude-test", 1024)
    assert cfg.summary_request("claude-other") == ("claude-other", 1024)


def test_invalid_summary_max_tokens_falls_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ANTHROPIC_MAX_TOKENS", "4096")
    monkeypatch.setenv("ANTHROPIC_SUMMARY_MAX_TOKENS", "-5")

    cfg = load_anthropic_config()

    assert cfg.summary_max_tokens is None
    assert cfg.summary_request()[1] == 4096
