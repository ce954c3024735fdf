import logging

from compaction import HistoryPatcher
from tests.mocking import make_context, make_round, make_turn


def test_installs_on_pending_round_first():
    shared_id = "dup"
    historical = make_round(shared_id)
    pending = make_round(shared_id)
    context = make_context(history=[make_turn("t", historical)], pending=[pending])

    assert HistoryPatcher(context).install("S", shared_id) is True

    assert pending.summary == "S"
    assert historical.summary is None


def test_searches_turns_newest_first():
    older = make_round("r")
    newer = make_round("r")
    context = make_context(history=[make_turn("a", older), make_turn("b", newer)])

    HistoryPatcher(context).install("S", "r")

    assert newer.summary == "S"
    assert older.summary is None


def test_missing_round_is_a_logged_no_op(caplog):
    round_ = make_round("r1")
    context = make_context(history=[make_turn("a", round_)])

    with caplog.at_level(logging.DEBUG, logger="compaction.patcher"):
        installed = HistoryPatcher(context).install("S", "nope")

    assert installed is False
    assert round_.summary is None
    assert "nope" in caplog.text


def test_installing_twice_is_idempotent():
    rounds = [make_round("r1"), make_round("r2"), make_round("r3")]
    turn = make_turn("a", *rounds)
    context = make_context(history=[turn])
    patcher = HistoryPatcher(context)

    patcher.install("same", "r2")
    patcher.install("same", "r2")

    assert [r.id for r in turn.rounds] == ["r1", "r2", "r3"]
    assert [r.summary for r in turn.rounds] == [None, "same", None]


def test_reinstall_overwrites():
    round_ = make_round("r1", summary="old")
    context = make_context(pending=[round_])

    HistoryPatcher(context).install("new", "r1")

    assert round_.summary == "new"


def test_find_returns_shared_round_object():
    round_ = make_round("r1")
    context = make_context(history=[make_turn("a", round_)])

    assert HistoryPatcher(context).find("r1") is round_
    assert HistoryPatcher(context).find("r2") is None
