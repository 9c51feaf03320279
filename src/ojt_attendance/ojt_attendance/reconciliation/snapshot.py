from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, tzinfo
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from ..overtime.model import OvertimeGrant
from ..punches.model import PunchEvent
from ..schedules.model import DateOverride, ShiftSchedule
from .windows import DayWindows, build_day_windows


@dataclass(frozen=True)
class ReconciliationSnapshot:
    """Everything one reconciliation pass reads, fetched once up front.

    Built per call and discarded afterwards; nothing here is shared between
    calls, and worker threads only read it.
    """

    tz: tzinfo
    today: date
    start: date
    end: date
    default_schedule: Optional[ShiftSchedule] = None
    subject_schedules: Mapping[int, ShiftSchedule] = field(default_factory=dict)
    overrides: Mapping[date, tuple[DateOverride, ...]] = field(default_factory=dict)
    grants: Mapping[tuple[int, date], OvertimeGrant] = field(default_factory=dict)
    punches: Mapping[tuple[int, date], tuple[PunchEvent, ...]] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        *,
        tz: tzinfo,
        today: date,
        start: date,
        end: date,
        default_schedule: Optional[ShiftSchedule] = None,
        subject_schedules: Iterable[ShiftSchedule] = (),
        overrides: Iterable[DateOverride] = (),
        grants: Iterable[OvertimeGrant] = (),
        punches: Iterable[PunchEvent] = (),
    ) -> "ReconciliationSnapshot":
        overrides_by_date: dict[date, list[DateOverride]] = {}
        for o in overrides:
            overrides_by_date.setdefault(o.work_date, []).append(o)

        punches_by_day: dict[tuple[int, date], list[PunchEvent]] = {}
        for p in punches:
            day = p.occurred_at.astimezone(tz).date()
            punches_by_day.setdefault((p.subject_id, day), []).append(p)

        return cls(
            tz=tz,
            today=today,
            start=start,
            end=end,
            default_schedule=default_schedule,
            subject_schedules=MappingProxyType(
                {s.subject_id: s for s in subject_schedules if s.subject_id is not None}
            ),
            overrides=MappingProxyType({d: tuple(v) for d, v in overrides_by_date.items()}),
            grants=MappingProxyType({(g.subject_id, g.work_date): g for g in grants}),
            punches=MappingProxyType({k: tuple(v) for k, v in punches_by_day.items()}),
        )

    def punches_on(self, subject_id: int, work_date: date) -> tuple[PunchEvent, ...]:
        return self.punches.get((subject_id, work_date), ())

    def windows_for(self, subject_id: int, work_date: date) -> DayWindows:
        overrides = [
            o for o in self.overrides.get(work_date, ()) if o.subject_id is None or o.subject_id == subject_id
        ]
        return build_day_windows(
            work_date=work_date,
            tz=self.tz,
            default=self.default_schedule,
            subject_schedule=self.subject_schedules.get(subject_id),
            overrides=overrides,
            grant=self.grants.get((subject_id, work_date)),
        )
