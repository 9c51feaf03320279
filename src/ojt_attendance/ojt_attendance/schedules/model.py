from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional

from ..common.datetime_utils import format_iso_date, format_time_of_day


@dataclass(frozen=True)
class TimeWindow:
    """Official wall-clock window. A window whose start is not before its end is disabled."""

    start: time
    end: time

    @property
    def is_enabled(self) -> bool:
        return self.start < self.end

    def to_dict(self) -> dict:
        return {"start": format_time_of_day(self.start), "end": format_time_of_day(self.end)}


def _window_dict(window: Optional[TimeWindow]) -> Optional[dict]:
    return window.to_dict() if window else None


@dataclass(frozen=True)
class ShiftSchedule:
    """Schedule for one scope: the global default (subject_id None) or one subject.

    The overtime window is kept for display only; overtime is unlocked per
    date by an overtime grant.
    """

    subject_id: Optional[int] = None
    morning: Optional[TimeWindow] = None
    afternoon: Optional[TimeWindow] = None
    overtime: Optional[TimeWindow] = None

    def to_dict(self) -> dict:
        return {
            "subject_id": self.subject_id,
            "morning": _window_dict(self.morning),
            "afternoon": _window_dict(self.afternoon),
            "overtime": _window_dict(self.overtime),
        }


@dataclass(frozen=True)
class DateOverride:
    """Morning/afternoon windows replacing the schedule on one date."""

    work_date: date
    subject_id: Optional[int] = None
    morning: Optional[TimeWindow] = None
    afternoon: Optional[TimeWindow] = None

    def to_dict(self) -> dict:
        return {
            "subject_id": self.subject_id,
            "date": format_iso_date(self.work_date),
            "morning": _window_dict(self.morning),
            "afternoon": _window_dict(self.afternoon),
        }
