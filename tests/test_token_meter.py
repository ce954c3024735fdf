from compaction import TokenMeter


def test_heuristic_counts_characters(meter):
    assert meter.count_tokens("") == 0
    assert meter.count_tokens("abcd") == 1
    assert meter.count_tokens("abcde") == 2


def test_sizing_uses_meter_counter(meter):
    sizing = meter.sizing(50)

    assert sizing.token_budget == 50
    assert sizing.count_tokens("x" * 40) == 10


def test_estimate_messages_covers_tool_blocks(meter):
    messages = [
        {"role": "user", "content": "plain string"},
        {
            "role": "assistant",
            "content": [
                {"type": "text", "text": "calling"},
                {"type": "tool_use", "id": "c1", "name": "grep", "input": {"pattern": "x"}},
            ],
        },
        {"role": "user", "content": [{"type": "tool_result", "tool_use_id": "c1", "content": "match"}]},
    ]

    total = meter.estimate_messages(messages, label="history")

    assert total > sum(meter.count_tokens(t) for t in ("plain string", "calling", "match"))
    assert meter.measurements[-1].label == "history"
    assert meter.measurements[-1].tokens == total


def test_reset_measurements(meter):
    meter.estimate_text("hello", label="greeting")
    meter.reset_measurements()

    assert meter.measurements == []


def test_unknown_model_falls_back_to_an_encoder_or_heuristic(monkeypatch):
    import compaction.token_meter as module

    calls = []

    def fake_encoding_for_model(name):
        calls.append(name)
        raise KeyError(name)

    def fake_get_encoding(name):
        raise OSError("offline")

    monkeypatch.setattr(module.tiktoken, "encoding_for_model", fake_encoding_for_model)
    monkeypatch.setattr(module.tiktoken, "get_encoding", fake_get_encoding)

    meter = TokenMeter("gpt-4.1")

    assert calls == ["gpt-4o-mini"]
    assert meter.count_tokens("abcdefgh") == 2
