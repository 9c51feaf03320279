from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import DateOverride, ShiftSchedule


class ScheduleRepository(Protocol):
    def get_default(self) -> Optional[ShiftSchedule]:
        raise NotImplementedError

    def get_for_subject(self, subject_id: int) -> Optional[ShiftSchedule]:
        raise NotImplementedError

    def list_for_subjects(self, subject_ids: Sequence[int]) -> Sequence[ShiftSchedule]:
        raise NotImplementedError

    def save(self, schedule: ShiftSchedule) -> None:
        """Create or replace the schedule of ``schedule.subject_id`` (None = default)."""

        raise NotImplementedError

    def list_overrides(self, *, subject_ids: Sequence[int], start: date, end: date) -> Sequence[DateOverride]:
        """Overrides in [start, end] scoped globally or to one of the subjects."""

        raise NotImplementedError

    def replace_override(self, override: DateOverride) -> None:
        """Drop any override for the same scope and date, then store this one."""

        raise NotImplementedError

    def delete_override(self, *, subject_id: Optional[int], work_date: date) -> bool:
        raise NotImplementedError
