from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from ..core.constants import SLOT_GRACE_BEFORE_MINUTES, VIRTUAL_OUT_MIN_MINUTES
from ..core.enums import PunchKind, ReviewStatus, Slot
from ..punches.model import EventRef, PunchEvent, VirtualRef
from .windows import DayWindows, OfficialWindow

SLOT_ORDER = (Slot.AM, Slot.PM, Slot.OT)


@dataclass(frozen=True)
class Session:
    """One slot of a subject's day: an "in" punch and the "out" that closes it."""

    slot: Slot
    in_event: Optional[PunchEvent] = None
    out_event: Optional[PunchEvent] = None

    @property
    def is_complete(self) -> bool:
        return self.in_event is not None and self.out_event is not None

    def holds(self, ref: EventRef) -> bool:
        return any(e is not None and e.ref == ref for e in (self.in_event, self.out_event))


@dataclass(frozen=True)
class DayPairing:
    subject_id: int
    work_date: date
    sessions: tuple[Session, ...]
    unassigned: tuple[PunchEvent, ...] = ()

    def session(self, slot: Slot) -> Session:
        for s in self.sessions:
            if s.slot is slot:
                return s
        return Session(slot=slot)

    def session_of(self, ref: EventRef) -> Optional[Session]:
        for s in self.sessions:
            if s.holds(ref):
                return s
        return None


def _sort_key(event: PunchEvent):
    return event.occurred_at, event.event_id or 0


def virtual_out(
    *,
    subject_id: int,
    work_date: date,
    slot: Slot,
    in_event: PunchEvent,
    window: Optional[OfficialWindow],
    before: Optional[datetime] = None,
) -> PunchEvent:
    """Close-out for a past session that was never punched out.

    It sits at the slot's window end, but never earlier than one minute
    after the "in" punch. When ``before`` (the next session's "in") is
    given, it is pulled back to a minute before that punch so that, once
    stored, it still closes this session.
    """
    step = timedelta(minutes=VIRTUAL_OUT_MIN_MINUTES)
    earliest = in_event.occurred_at + step
    closes_at = max(window.end, earliest) if window is not None and window.is_enabled else earliest
    if before is not None and closes_at >= before:
        closes_at = max(before - step, earliest)
    return PunchEvent(
        ref=VirtualRef(subject_id=subject_id, work_date=work_date, slot=slot),
        subject_id=subject_id,
        kind=PunchKind.OUT,
        occurred_at=closes_at,
        status=ReviewStatus.PENDING,
        is_synthetic=True,
    )


def pair_day(
    *,
    subject_id: int,
    work_date: date,
    punches: Iterable[PunchEvent],
    windows: DayWindows,
    is_past: bool,
    grace: timedelta = timedelta(minutes=SLOT_GRACE_BEFORE_MINUTES),
) -> DayPairing:
    """Assign one day's punches to the AM, PM and OT slots and pair them.

    1. "in" punches, oldest first, take the first free slot whose window
       (opened ``grace`` early, end inclusive) contains them.
    2. Leftover "in" punches take the first slot still without one.
    3. Each slot's "in" is closed by the latest unused "out" before the
       next slot's "in" (chronologically).
    4. On past dates an unclosed slot gets a virtual close-out, placed
       before the next slot's "in".
    """
    ordered = sorted(punches, key=_sort_key)
    ins = [e for e in ordered if e.kind is PunchKind.IN]
    outs = [e for e in ordered if e.kind is PunchKind.OUT]

    slot_in: dict[Slot, PunchEvent] = {}
    leftovers: list[PunchEvent] = []
    for event in ins:
        for slot in SLOT_ORDER:
            window = windows.for_slot(slot)
            if slot in slot_in or window is None or not window.is_enabled:
                continue
            if window.admits(event.occurred_at, grace=grace):
                slot_in[slot] = event
                break
        else:
            leftovers.append(event)

    unassigned: list[PunchEvent] = []
    for event in leftovers:
        free = next((slot for slot in SLOT_ORDER if slot not in slot_in), None)
        if free is None:
            unassigned.append(event)
        else:
            slot_in[free] = event

    filled = sorted(slot_in.items(), key=lambda item: (_sort_key(item[1]), SLOT_ORDER.index(item[0])))
    used: set[int] = set()
    slot_out: dict[Slot, PunchEvent] = {}
    for position, (slot, in_event) in enumerate(filled):
        upper = filled[position + 1][1].occurred_at if position + 1 < len(filled) else None
        candidates = [
            i
            for i, out in enumerate(outs)
            if i not in used
            and out.occurred_at > in_event.occurred_at
            and (upper is None or out.occurred_at < upper)
        ]
        if candidates:
            chosen = max(candidates, key=lambda i: _sort_key(outs[i]))
            used.add(chosen)
            slot_out[slot] = outs[chosen]
        elif is_past:
            slot_out[slot] = virtual_out(
                subject_id=subject_id,
                work_date=work_date,
                slot=slot,
                in_event=in_event,
                window=windows.for_slot(slot),
                before=upper,
            )

    unassigned.extend(out for i, out in enumerate(outs) if i not in used)
    unassigned.sort(key=_sort_key)

    sessions = tuple(Session(slot=slot, in_event=slot_in.get(slot), out_event=slot_out.get(slot)) for slot in SLOT_ORDER)
    return DayPairing(subject_id=subject_id, work_date=work_date, sessions=sessions, unassigned=tuple(unassigned))
