from __future__ import annotations

from datetime import tzinfo
from typing import Optional

from ..common.datetime_utils import truncate_to_minute
from ..core.enums import SessionFlag
from .pairing import Session
from .windows import DayWindows, OfficialWindow, window_from_snapshot


def effective_window(session: Session, live_window: Optional[OfficialWindow], tz: tzinfo) -> Optional[OfficialWindow]:
    """The window a session is judged against: its captured snapshot if any, else the live one."""
    out_event = session.out_event
    if out_event is not None and out_event.window_snapshot is not None and session.in_event is not None:
        anchor = session.in_event.occurred_at.astimezone(tz).date()
        return window_from_snapshot(out_event.window_snapshot, anchor, tz)
    return live_window


def is_late(session: Session, live_window: Optional[OfficialWindow], tz: tzinfo) -> bool:
    """Advisory: the "in" minute is strictly after the window's opening minute."""
    if session.in_event is None:
        return False
    window = effective_window(session, live_window, tz)
    if window is None or not window.is_enabled:
        return False
    return truncate_to_minute(session.in_event.occurred_at) > truncate_to_minute(window.start)


def bridges_lunch(session: Session, windows: DayWindows) -> bool:
    """A single session running from the morning window into the afternoon one."""
    morning, afternoon = windows.morning, windows.afternoon
    if not session.is_complete or morning is None or afternoon is None:
        return False
    if not (morning.is_enabled and afternoon.is_enabled):
        return False
    start = session.in_event.occurred_at
    end = session.out_event.occurred_at
    overlaps_morning = start < morning.end and end > morning.start
    overlaps_afternoon = start < afternoon.end and end > afternoon.start
    return overlaps_morning and overlaps_afternoon


def session_flags(session: Session, windows: DayWindows, tz: tzinfo) -> tuple[SessionFlag, ...]:
    flags: list[SessionFlag] = []
    if is_late(session, windows.for_slot(session.slot), tz):
        flags.append(SessionFlag.LATE)
    if bridges_lunch(session, windows):
        flags.append(SessionFlag.MISSED_LUNCH_PUNCH)
    return tuple(flags)
