import json

from compaction import EVENT_NAME, SessionTelemetry, TelemetryEvent


def test_session_telemetry_records_events():
    telemetry = SessionTelemetry()
    telemetry.send_event(EVENT_NAME, {"outcome": "success", "requestId": "req-1"}, {"numRounds": 2})

    event = telemetry.last_event()
    assert isinstance(event, TelemetryEvent)
    assert event.properties["requestId"] == "req-1"
    assert event.measurements == {"numRounds": 2.0}
    assert telemetry.snapshot() == {"compact_events": 1, "summarizer_calls": 1, "compaction_failures": 0}
    otel = json.loads(telemetry.export_otel())
    assert otel["events"][0]["name"] == EVENT_NAME
    assert otel["events"][0]["attributes"]["compaction.requestId"] == "req-1"


def test_session_telemetry_tracks_failures():
    telemetry = SessionTelemetry()
    telemetry.send_event(EVENT_NAME, {"outcome": "too_large"}, {})
    telemetry.send_event("other", {"outcome": "requestThrow"}, {})

    assert telemetry.snapshot()["compaction_failures"] == 2
    assert telemetry.snapshot()["compact_events"] == 0
    assert [e.name for e in telemetry.events_named(EVENT_NAME)] == [EVENT_NAME]
    assert telemetry.events[0].to_dict()["properties"] == {"outcome": "too_large"}


def test_counters_can_be_adjusted():
    telemetry = SessionTelemetry()
    telemetry.incr("compact_events", 2)
    telemetry.set("summarizer_calls", 7)

    assert telemetry.snapshot()["compact_events"] == 2
    assert telemetry.snapshot()["summarizer_calls"] == 7
    assert telemetry.last_event() is None
