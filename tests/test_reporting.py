import pytest

from compaction import (
    EVENT_NAME,
    BudgetExceeded,
    RequestFailed,
    Success,
    TelemetryReporter,
    UpstreamFailure,
    compute_stats,
)
from tests.mocking import call, make_context, make_round, make_turn


class _BrokenSink:
    def send_event(self, name, properties, measurements):
        raise RuntimeError("sink offline")


def test_stats_count_rounds_and_last_tool():
    context = make_context(
        history=[
            make_turn("a", make_round("r1"), make_round("r2", call("c1", "grep"))),
            make_turn("b", make_round("r3")),
        ],
        pending=[make_round("p1", call("c2", "read_file"), call("c3", "edit_file"))],
    )

    stats = compute_stats(context)

    assert stats.num_rounds == 4
    assert stats.last_used_tool == "edit_file"
    assert stats.is_during_tool_calling == 1
    assert stats.conversation_id == "conv-1"
    assert stats.num_rounds_since_last_summarization == -1


def test_rounds_since_last_summary_stops_at_first_summary():
    context = make_context(
        history=[
            make_turn("a", make_round("r1", summary="older"), make_round("r2")),
            make_turn("b", make_round("r3", summary="newer"), make_round("r4"), make_round("r5")),
        ],
        pending=[make_round("p1")],
    )

    assert compute_stats(context).num_rounds_since_last_summarization == 3


def test_last_tool_falls_back_to_latest_turn():
    context = make_context(history=[make_turn("a", make_round("r1", call("c1", "grep")))])

    stats = compute_stats(context)

    assert stats.last_used_tool == "grep"
    assert stats.is_during_tool_calling == 0


def test_last_tool_none_when_no_tools():
    context = make_context(history=[make_turn("a", make_round("r1"))], session_id=None)

    stats = compute_stats(context)

    assert stats.last_used_tool == "none"
    assert stats.conversation_id == ""


def test_report_emits_one_event(telemetry):
    context = make_context(history=[make_turn("a", make_round("r1"))])
    reporter = TelemetryReporter(telemetry, model="claude-test")

    reporter.report(context, Success(summary="S", round_id="r1", request_id="req-1"))

    (event,) = telemetry.events_named(EVENT_NAME)
    assert event.properties == {
        "outcome": "success",
        "requestId": "req-1",
        "model": "claude-test",
        "lastUsedTool": "none",
        "conversationId": "conv-1",
    }
    assert event.measurements == {
        "numRounds": 1.0,
        "numRoundsSinceLastSummarization": -1.0,
        "isDuringToolCalling": 0.0,
    }


def test_failure_detail_is_reported(telemetry):
    context = make_context(history=[make_turn("a", make_round("r1"))])
    reporter = TelemetryReporter(telemetry, model="m")

    reporter.report(context, RequestFailed(cause=TimeoutError("slow")))
    reporter.report(context, UpstreamFailure(kind="rateLimited", reason="429"))
    reporter.report(context, BudgetExceeded())

    details = [event.properties.get("detailedOutcome") for event in telemetry.events]
    assert details == ["TimeoutError: slow", "429", None]
    assert telemetry.snapshot()["compaction_failures"] == 3


def test_sink_errors_are_swallowed(caplog):
    context = make_context(history=[make_turn("a", make_round("r1"))])
    reporter = TelemetryReporter(_BrokenSink(), model="m")

    with caplog.at_level("DEBUG", logger="compaction.reporting"):
        reporter.report(context, BudgetExceeded())

    assert "sink offline" in caplog.text


def test_recorder_accepts_exactly_one_outcome(telemetry):
    context = make_context(history=[make_turn("a", make_round("r1"))])
    recorder = TelemetryReporter(telemetry, model="m").recorder(context)

    assert recorder.recorded is False
    with pytest.raises(RuntimeError):
        recorder.outcome

    first = recorder.record(BudgetExceeded(detail="too big"))

    assert recorder.outcome is first
    with pytest.raises(RuntimeError):
        recorder.record(Success(summary="S", round_id="r1"))
    assert len(telemetry.events) == 1
