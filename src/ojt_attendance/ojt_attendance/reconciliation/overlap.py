from __future__ import annotations

from datetime import datetime, timedelta

from ..common.datetime_utils import to_utc, truncate_to_minute, whole_minutes

ZERO = timedelta(0)


def clamped_overlap(
    subject_in: datetime,
    subject_out: datetime,
    official_in: datetime,
    official_out: datetime,
) -> timedelta:
    """How much of [subject_in, subject_out) falls inside [official_in, official_out).

    Every bound is floored to its minute before comparing, so seconds on a
    punch never add or remove time: 04:13:59-04:15:01 counts as 04:13-04:15.
    Bounds are then compared as UTC instants, so a DST change inside the
    interval is measured in real elapsed time.
    A degenerate official interval yields zero.
    """
    s_in = to_utc(truncate_to_minute(subject_in))
    s_out = to_utc(truncate_to_minute(subject_out))
    o_in = to_utc(truncate_to_minute(official_in))
    o_out = to_utc(truncate_to_minute(official_out))

    if o_in >= o_out:
        return ZERO

    start = max(s_in, o_in)
    end = min(s_out, o_out)
    if start >= end:
        return ZERO
    return end - start


def overlap_minutes(
    subject_in: datetime,
    subject_out: datetime,
    official_in: datetime,
    official_out: datetime,
) -> int:
    return whole_minutes(clamped_overlap(subject_in, subject_out, official_in, official_out))
