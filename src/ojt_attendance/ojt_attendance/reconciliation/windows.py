from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from typing import Iterable, Optional

from ..common.datetime_utils import at_time
from ..core.enums import Slot
from ..overtime.model import OvertimeGrant
from ..punches.model import WindowSnapshot
from ..schedules.model import DateOverride, ShiftSchedule, TimeWindow


@dataclass(frozen=True)
class OfficialWindow:
    """An official window anchored to real instants."""

    start: datetime
    end: datetime

    @property
    def is_enabled(self) -> bool:
        return self.start < self.end

    def admits(self, moment: datetime, *, grace: timedelta) -> bool:
        """True when ``moment`` lies in [start - grace, end]."""
        return self.start - grace <= moment <= self.end

    def snapshot(self) -> WindowSnapshot:
        return WindowSnapshot(start=self.start.time(), end=self.end.time())


@dataclass(frozen=True)
class DayWindows:
    """Resolved windows of one subject on one date.

    None means nothing is configured for the slot; a window whose start is
    not before its end means the slot is disabled for the date.
    """

    work_date: date
    morning: Optional[OfficialWindow] = None
    afternoon: Optional[OfficialWindow] = None
    overtime: Optional[OfficialWindow] = None

    def for_slot(self, slot: Slot) -> Optional[OfficialWindow]:
        if slot is Slot.AM:
            return self.morning
        if slot is Slot.PM:
            return self.afternoon
        if slot is Slot.OT:
            return self.overtime
        raise ValueError(f"Unknown slot: {slot!r}")


def _anchor(window: Optional[TimeWindow], work_date: date, tz: tzinfo) -> Optional[OfficialWindow]:
    if window is None:
        return None
    return OfficialWindow(start=at_time(work_date, window.start, tz), end=at_time(work_date, window.end, tz))


def _first_present(*candidates: Optional[TimeWindow]) -> Optional[TimeWindow]:
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None


def build_day_windows(
    *,
    work_date: date,
    tz: tzinfo,
    default: Optional[ShiftSchedule],
    subject_schedule: Optional[ShiftSchedule] = None,
    overrides: Iterable[DateOverride] = (),
    grant: Optional[OvertimeGrant] = None,
) -> DayWindows:
    """Resolve the morning, afternoon and overtime windows for one date.

    Morning and afternoon: subject override > global override > subject
    schedule > default, window by window. A present but degenerate window
    disables the slot instead of falling through. Overtime exists only when
    a grant exists for this exact date; configured overtime times are never
    used.
    """
    subject_override = None
    global_override = None
    for override in overrides:
        if override.work_date != work_date:
            continue
        if override.subject_id is None:
            global_override = override
        else:
            subject_override = override

    def pick(attr: str) -> Optional[TimeWindow]:
        return _first_present(
            getattr(subject_override, attr, None),
            getattr(global_override, attr, None),
            getattr(subject_schedule, attr, None),
            getattr(default, attr, None),
        )

    overtime = None
    if grant is not None and grant.work_date == work_date and grant.start < grant.end:
        overtime = OfficialWindow(start=grant.start.astimezone(tz), end=grant.end.astimezone(tz))

    return DayWindows(
        work_date=work_date,
        morning=_anchor(pick("morning"), work_date, tz),
        afternoon=_anchor(pick("afternoon"), work_date, tz),
        overtime=overtime,
    )


def window_from_snapshot(snapshot: WindowSnapshot, anchor_date: date, tz: tzinfo) -> OfficialWindow:
    """Rebuild a captured window on ``anchor_date``; an end before the start rolls to the next day."""
    start = at_time(anchor_date, snapshot.start, tz)
    end = at_time(anchor_date, snapshot.end, tz)
    if end < start:
        end = at_time(anchor_date + timedelta(days=1), snapshot.end, tz)
    return OfficialWindow(start=start, end=end)
