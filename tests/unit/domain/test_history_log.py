"""Unit tests for the history log (append, pop, persisted codec)."""

from __future__ import annotations

import json
from datetime import time, timedelta

import pytest
from structlog.testing import capture_logs

from task_engine.domain.errors import EmptyHistoryError, InvalidHistoryEntryError
from task_engine.domain.models.history_entry import PostponeEntry, SnoozeEntry
from task_engine.domain.services import history_log
from task_engine.infrastructure.stubs.error_reporter_stub import ErrorReporterStub


@pytest.fixture
def postpone_entry(now) -> PostponeEntry:
    return PostponeEntry(
        from_date=now,
        from_time=time(8, 0),
        to_date=now + timedelta(days=2),
        reason="Waiting on parts",
        postponed_at=now,
        penalty_applied=-5,
    )


@pytest.fixture
def snooze_entry(now) -> SnoozeEntry:
    return SnoozeEntry(at=now, minutes=15, until=now + timedelta(minutes=15), source="popup")


class TestAppend:
    """Appends are non-destructive and validated."""

    def test_append_postpone_returns_new_tuple(self, postpone_entry) -> None:
        original: tuple[PostponeEntry, ...] = ()

        updated = history_log.append_postpone(original, postpone_entry)

        assert updated == (postpone_entry,)
        assert original == ()

    def test_append_postpone_rejects_positive_penalty(self, now) -> None:
        entry = PostponeEntry(now, now, "x", now, penalty_applied=3)

        with pytest.raises(InvalidHistoryEntryError):
            history_log.append_postpone((), entry)

    @pytest.mark.parametrize("minutes", [0, -10])
    def test_append_snooze_rejects_non_positive_minutes(self, now, minutes) -> None:
        entry = SnoozeEntry(at=now, minutes=minutes, until=now, source="popup")

        with pytest.raises(InvalidHistoryEntryError):
            history_log.append_snooze((), entry)

    def test_pop_last(self, postpone_entry, now) -> None:
        second = PostponeEntry(now, now, "again", now, penalty_applied=-2)

        last, remaining = history_log.pop_last((postpone_entry, second))

        assert last == second
        assert remaining == (postpone_entry,)

    def test_pop_last_empty_raises(self) -> None:
        with pytest.raises(EmptyHistoryError):
            history_log.pop_last(())


class TestEncode:
    """Persisted form of the histories."""

    def test_empty_history_encodes_to_none(self) -> None:
        assert history_log.encode_postpone_history(()) is None
        assert history_log.encode_snooze_history(()) is None

    def test_postpone_record_keys(self, postpone_entry) -> None:
        records = json.loads(history_log.encode_postpone_history((postpone_entry,)))

        assert set(records[0]) == {
            "from",
            "fromTime",
            "to",
            "reason",
            "postponedAt",
            "penaltyApplied",
        }
        assert records[0]["fromTime"] == "08:00"
        assert records[0]["penaltyApplied"] == -5

    def test_decode_restores_entries(self, postpone_entry, snooze_entry) -> None:
        raw_postpone = history_log.encode_postpone_history((postpone_entry,))
        raw_snooze = history_log.encode_snooze_history((snooze_entry,))

        assert history_log.decode_postpone_history(raw_postpone) == (postpone_entry,)
        assert history_log.decode_snooze_history(raw_snooze) == (snooze_entry,)


class TestDecodeDegradation:
    """Malformed persisted history degrades to empty and is reported."""

    def test_none_and_empty_decode_to_empty(self) -> None:
        assert history_log.decode_postpone_history(None) == ()
        assert history_log.decode_snooze_history("") == ()

    def test_legacy_entry_without_penalty_uses_default(self) -> None:
        raw = json.dumps(
            [
                {
                    "from": "2026-03-01T00:00:00+00:00",
                    "to": "2026-03-02T00:00:00+00:00",
                    "reason": "old app",
                    "postponedAt": "2026-03-01T10:00:00+00:00",
                }
            ]
        )

        (entry,) = history_log.decode_postpone_history(raw)

        assert entry.penalty_applied == -5
        assert entry.from_time is None

    @pytest.mark.parametrize(
        "raw",
        [
            "not json",
            '{"from": "2026-03-01"}',
            '[{"reason": "missing dates"}]',
            '[{"from": "2026-03-01", "to": "2026-03-02", "postponedAt": "2026-03-01", '
            '"penaltyApplied": 5}]',
            "[1]",
            "[null]",
            '["x"]',
            "[[]]",
        ],
    )
    def test_malformed_postpone_history(self, raw) -> None:
        reporter = ErrorReporterStub()

        with capture_logs() as logs:
            result = history_log.decode_postpone_history(reporter=reporter, raw=raw, task_id="t-1")

        assert result == ()
        assert len(reporter.reports) == 1
        assert reporter.reports[0].context["task_id"] == "t-1"
        assert any(
            log["event"] == "history_decode_failed" and log["log_level"] == "warning"
            for log in logs
        )

    def test_malformed_snooze_history_without_reporter(self) -> None:
        assert history_log.decode_snooze_history('[{"at": "soon"}]') == ()
