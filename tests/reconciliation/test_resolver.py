from __future__ import annotations

from datetime import date, time

from src.ojt_attendance.ojt_attendance.core.enums import DurationSource, ReviewStatus, Slot
from src.ojt_attendance.ojt_attendance.punches.model import WindowSnapshot
from src.ojt_attendance.ojt_attendance.reconciliation.pairing import Session
from src.ojt_attendance.ojt_attendance.reconciliation.resolver import DurationResolver, measure_for_ledger
from src.ojt_attendance.ojt_attendance.reconciliation.windows import OfficialWindow

from tests.fakes import TZ, at, make_punch

DAY = date(2025, 3, 10)
MORNING = OfficialWindow(start=at(DAY, 9), end=at(DAY, 12))


def _session(in_status=ReviewStatus.PENDING, out_status=ReviewStatus.PENDING, **out_extra):
    return Session(
        slot=Slot.AM,
        in_event=make_punch(1, "in", at(DAY, 8, 35), status=in_status),
        out_event=make_punch(2, "out", at(DAY, 12, 15), status=out_status, **out_extra),
    )


def test_pending_session_counts_as_tracked_only():
    result = DurationResolver(tz=TZ).resolve(_session(), MORNING)

    assert result.tracked_minutes == 180
    assert result.validated_minutes == 0
    assert result.source is DurationSource.LIVE


def test_fully_approved_session_counts_as_validated():
    result = DurationResolver(tz=TZ).resolve(_session(ReviewStatus.APPROVED, ReviewStatus.APPROVED), MORNING)
    assert result.validated_minutes == 180


def test_half_approved_session_is_not_validated():
    result = DurationResolver(tz=TZ).resolve(_session(ReviewStatus.APPROVED, ReviewStatus.PENDING), MORNING)
    assert (result.tracked_minutes, result.validated_minutes) == (180, 0)


def test_rejected_side_zeroes_everything():
    result = DurationResolver(tz=TZ).resolve(_session(ReviewStatus.APPROVED, ReviewStatus.REJECTED), MORNING)

    assert (result.tracked_minutes, result.validated_minutes) == (0, 0)
    assert result.source is DurationSource.REJECTED


def test_ledger_value_wins_over_any_window():
    session = _session(ReviewStatus.APPROVED, ReviewStatus.APPROVED, validated_minutes=150)
    wider = OfficialWindow(start=at(DAY, 7), end=at(DAY, 13))

    result = DurationResolver(tz=TZ).resolve(session, wider)

    assert result.validated_minutes == 150
    assert result.source is DurationSource.LEDGER


def test_snapshot_wins_over_live_window():
    session = _session(window_snapshot=WindowSnapshot(start=time(10, 0), end=time(12, 0)))
    result = DurationResolver(tz=TZ).resolve(session, MORNING)

    assert result.tracked_minutes == 120
    assert result.source is DurationSource.SNAPSHOT


def test_unconfigured_window_falls_back_to_raw_elapsed_for_tracked_only():
    session = _session(ReviewStatus.APPROVED, ReviewStatus.APPROVED)
    result = DurationResolver(tz=TZ).resolve(session, None)

    assert result.tracked_minutes == 220
    assert result.validated_minutes == 0
    assert result.source is DurationSource.RAW_FALLBACK


def test_raw_fallback_can_be_switched_off():
    result = DurationResolver(tz=TZ, raw_fallback_for_tracked=False).resolve(_session(), None)
    assert result.tracked_minutes == 0


def test_disabled_window_is_zero_not_raw():
    disabled = OfficialWindow(start=at(DAY, 12), end=at(DAY, 12))
    result = DurationResolver(tz=TZ).resolve(_session(), disabled)

    assert result.tracked_minutes == 0
    assert result.source is DurationSource.LIVE


def test_incomplete_session_counts_nothing():
    session = Session(slot=Slot.AM, in_event=make_punch(1, "in", at(DAY, 8)))
    result = DurationResolver(tz=TZ).resolve(session, MORNING)

    assert result.source is DurationSource.INCOMPLETE
    assert result.tracked_minutes == 0


def test_ledger_measure_ignores_an_existing_ledger_value():
    session = _session(validated_minutes=5)
    assert measure_for_ledger(session, MORNING, tz=TZ) == 180


def test_ledger_measure_without_window_is_zero():
    assert measure_for_ledger(_session(), None, tz=TZ) == 0
