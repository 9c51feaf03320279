from __future__ import annotations

from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from src.ojt_attendance.ojt_attendance.reconciliation.overlap import clamped_overlap, overlap_minutes

from tests.fakes import at

DAY = date(2025, 3, 10)


@pytest.mark.parametrize(
    "punch_in, punch_out, official, expected_hours",
    [
        ((8, 35), (12, 15), ((9, 0), (12, 0)), 3.00),
        ((12, 45), (17, 30), ((13, 0), (17, 0)), 4.00),
        ((7, 0), (8, 0), ((9, 0), (12, 0)), 0.00),
        ((13, 0), (14, 0), ((9, 0), (12, 0)), 0.00),
        ((8, 30), (9, 30), ((9, 0), (12, 0)), 0.50),
        ((11, 30), (12, 30), ((9, 0), (12, 0)), 0.50),
    ],
)
def test_overlap_scenarios_in_hours(punch_in, punch_out, official, expected_hours):
    minutes = overlap_minutes(
        at(DAY, *punch_in),
        at(DAY, *punch_out),
        at(DAY, *official[0]),
        at(DAY, *official[1]),
    )
    assert round(minutes / 60, 2) == expected_hours


def test_seconds_are_floored_on_each_bound_before_comparing():
    # 04:13:59-04:15:01 counts as 04:13-04:15, not the ~1 minute elapsed
    minutes = overlap_minutes(at(DAY, 4, 13, 59), at(DAY, 4, 15, 1), at(DAY, 4, 0), at(DAY, 5, 0))
    assert minutes == 2


def test_degenerate_official_interval_is_zero():
    assert overlap_minutes(at(DAY, 8), at(DAY, 17), at(DAY, 12), at(DAY, 12)) == 0
    assert overlap_minutes(at(DAY, 8), at(DAY, 17), at(DAY, 13), at(DAY, 12)) == 0


def test_official_bounds_with_seconds_are_floored_too():
    assert overlap_minutes(at(DAY, 8), at(DAY, 12), at(DAY, 9, 0, 59), at(DAY, 11, 59, 59)) == 179


def test_reversed_punch_interval_is_zero():
    assert clamped_overlap(at(DAY, 12), at(DAY, 9), at(DAY, 8), at(DAY, 17)) == timedelta(0)


def test_overlap_across_a_dst_change_counts_real_elapsed_time():
    # 2025-03-09 02:00 New York clocks jump to 03:00: 01:00-04:00 local is two hours
    ny = ZoneInfo("America/New_York")
    spring = date(2025, 3, 9)

    def local(hour):
        return datetime(spring.year, spring.month, spring.day, hour, tzinfo=ny)

    assert overlap_minutes(local(1), local(4), local(0), local(5)) == 120
    assert overlap_minutes(local(0), local(5), local(1), local(4)) == 120


def test_overlap_is_bounded_by_both_intervals():
    samples = [
        ((8, 0), (12, 0), (9, 0), (10, 0)),
        ((9, 15), (9, 45), (9, 0), (12, 0)),
        ((10, 0), (16, 0), (8, 0), (12, 0)),
        ((6, 0), (7, 0), (8, 0), (12, 0)),
    ]
    for s_in, s_out, o_in, o_out in samples:
        minutes = overlap_minutes(at(DAY, *s_in), at(DAY, *s_out), at(DAY, *o_in), at(DAY, *o_out))
        punch_len = (at(DAY, *s_out) - at(DAY, *s_in)) // timedelta(minutes=1)
        official_len = (at(DAY, *o_out) - at(DAY, *o_in)) // timedelta(minutes=1)
        assert 0 <= minutes <= min(punch_len, official_len)


def test_changing_only_seconds_never_changes_overlap():
    base = overlap_minutes(at(DAY, 8, 35), at(DAY, 12, 15), at(DAY, 9, 0), at(DAY, 12, 0))
    for seconds in (1, 30, 59):
        assert overlap_minutes(
            at(DAY, 8, 35, seconds),
            at(DAY, 12, 15, seconds),
            at(DAY, 9, 0, seconds),
            at(DAY, 12, 0, seconds),
        ) == base


def test_widening_the_official_window_never_decreases_overlap():
    punch = (at(DAY, 8, 35), at(DAY, 12, 15))
    previous = 0
    for widen in range(0, 120, 15):
        start = at(DAY, 9, 0) - timedelta(minutes=widen)
        end = at(DAY, 12, 0) + timedelta(minutes=widen)
        minutes = overlap_minutes(*punch, start, end)
        assert minutes >= previous
        previous = minutes
