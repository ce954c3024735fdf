import json

import pytest
from pydantic import ValidationError

from conversation import dump_transcript, load_transcript
from conversation.transcript import TranscriptRecord, context_from_record, context_to_record
from tests.mocking import call, make_context, make_round, make_turn


def _payload():
    return {
        "session_id": "conv-7",
        "query": "keep going",
        "history": [
            {
                "request": "look around",
                "rounds": [
                    {
                        "id": "r1",
                        "response": "listing",
                        "tool_calls": [{"id": "c1", "name": "list_dir", "arguments": {"path": "."}}],
                        "tool_results": {"c1": {"content": "a.py"}},
                    }
                ],
                "result_metadata": {"summary": {"round_id": "r1", "text": "S0"}},
            }
        ],
        "tool_call_rounds": [{"id": "p1"}],
        "tool_call_results": {"c9": {"content": "late", "is_error": True}},
    }


def test_load_transcript(tmp_path):
    path = tmp_path / "t.json"
    path.write_text(json.dumps(_payload()), encoding="utf-8")

    context = load_transcript(path)

    assert context.session_id == "conv-7"
    assert context.query == "keep going"
    round_ = context.history[0].rounds[0]
    assert json.loads(round_.tool_calls[0].arguments) == {"path": "."}
    assert round_.tool_results["c1"].content == "a.py"
    assert context.history[0].result_metadata.summary.text == "S0"
    assert context.tool_call_rounds[0].id == "p1"
    assert context.tool_call_results["c9"].is_error is True


def test_dump_and_reload_preserves_summaries(tmp_path):
    turn = make_turn("first", make_round("r1", call("c1"), results={"c1": "ok"}, summary="S1"))
    context = make_context("q", history=[turn], pending=[make_round("p1")])
    path = tmp_path / "out.json"

    dump_transcript(context, path)
    reloaded = load_transcript(path)

    assert reloaded.history[0].rounds[0].summary == "S1"
    assert reloaded.history[0].id == turn.id
    assert context_to_record(reloaded) == context_to_record(context)


def test_duplicate_round_ids_are_rejected():
    payload = _payload()
    payload["tool_call_rounds"] = [{"id": "r1"}]

    with pytest.raises(ValidationError):
        TranscriptRecord.model_validate(payload)


def test_unknown_fields_are_rejected():
    payload = _payload()
    payload["extra"] = True

    with pytest.raises(ValidationError):
        TranscriptRecord.model_validate(payload)


def test_context_without_session():
    context = context_from_record(TranscriptRecord(query="hi"))

    assert context.conversation is None
    assert context.session_id is None
