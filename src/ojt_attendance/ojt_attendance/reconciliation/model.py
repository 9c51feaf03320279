from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..common.datetime_utils import format_iso_date, format_minutes, to_epoch_ms
from ..core.enums import DurationSource, SessionFlag, Slot
from ..punches.model import PunchEvent
from .windows import OfficialWindow


def _hours(minutes: int) -> float:
    return round(minutes / 60, 2)


@dataclass(frozen=True)
class SessionSummary:
    slot: Slot
    in_event: Optional[PunchEvent]
    out_event: Optional[PunchEvent]
    window: Optional[OfficialWindow]
    tracked_minutes: int
    validated_minutes: int
    source: DurationSource
    flags: tuple[SessionFlag, ...] = ()

    @property
    def is_late(self) -> bool:
        return SessionFlag.LATE in self.flags

    def to_dict(self) -> dict:
        return {
            "slot": self.slot.value,
            "in": self.in_event.to_dict() if self.in_event else None,
            "out": self.out_event.to_dict() if self.out_event else None,
            "window": (
                {"start": to_epoch_ms(self.window.start), "end": to_epoch_ms(self.window.end)}
                if self.window
                else None
            ),
            "tracked_minutes": self.tracked_minutes,
            "validated_minutes": self.validated_minutes,
            "source": self.source.value,
            "flags": [f.value for f in self.flags],
        }


@dataclass(frozen=True)
class DaySummary:
    """Per subject per date totals, recomputed on every request."""

    subject_id: int
    work_date: date
    sessions: tuple[SessionSummary, ...]
    unassigned: tuple[PunchEvent, ...] = ()

    @property
    def tracked_minutes(self) -> int:
        return sum(s.tracked_minutes for s in self.sessions)

    @property
    def validated_minutes(self) -> int:
        return sum(s.validated_minutes for s in self.sessions)

    @property
    def late_slots(self) -> tuple[Slot, ...]:
        return tuple(s.slot for s in self.sessions if s.is_late)

    def session(self, slot: Slot) -> SessionSummary:
        for s in self.sessions:
            if s.slot is slot:
                return s
        raise KeyError(slot)

    def to_dict(self) -> dict:
        return {
            "subject_id": self.subject_id,
            "date": format_iso_date(self.work_date),
            "tracked_minutes": self.tracked_minutes,
            "validated_minutes": self.validated_minutes,
            "tracked_hours": _hours(self.tracked_minutes),
            "validated_hours": _hours(self.validated_minutes),
            "tracked_display": format_minutes(self.tracked_minutes),
            "validated_display": format_minutes(self.validated_minutes),
            "late_slots": [s.value for s in self.late_slots],
            "sessions": [s.to_dict() for s in self.sessions],
            "unassigned": [e.to_dict() for e in self.unassigned],
        }


@dataclass(frozen=True)
class SubjectRangeSummary:
    subject_id: int
    start: date
    end: date
    days: tuple[DaySummary, ...]

    @property
    def tracked_minutes(self) -> int:
        return sum(d.tracked_minutes for d in self.days)

    @property
    def validated_minutes(self) -> int:
        return sum(d.validated_minutes for d in self.days)

    def to_dict(self) -> dict:
        return {
            "subject_id": self.subject_id,
            "start": format_iso_date(self.start),
            "end": format_iso_date(self.end),
            "tracked_minutes": self.tracked_minutes,
            "validated_minutes": self.validated_minutes,
            "tracked_hours": _hours(self.tracked_minutes),
            "validated_hours": _hours(self.validated_minutes),
            "days": [d.to_dict() for d in self.days],
        }
