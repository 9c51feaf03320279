from __future__ import annotations

from datetime import date

from ..common.datetime_utils import iter_dates
from .flags import effective_window, session_flags
from .model import DaySummary, SessionSummary
from .pairing import DayPairing, pair_day
from .resolver import DurationResolver
from .snapshot import ReconciliationSnapshot
from .windows import DayWindows


def pair_for(snapshot: ReconciliationSnapshot, subject_id: int, work_date: date) -> tuple[DayPairing, DayWindows]:
    windows = snapshot.windows_for(subject_id, work_date)
    pairing = pair_day(
        subject_id=subject_id,
        work_date=work_date,
        punches=snapshot.punches_on(subject_id, work_date),
        windows=windows,
        is_past=work_date < snapshot.today,
    )
    return pairing, windows


def summarize_day(
    snapshot: ReconciliationSnapshot,
    subject_id: int,
    work_date: date,
    resolver: DurationResolver,
) -> DaySummary:
    pairing, windows = pair_for(snapshot, subject_id, work_date)

    sessions = []
    for session in pairing.sessions:
        live = windows.for_slot(session.slot)
        result = resolver.resolve(session, live)
        sessions.append(
            SessionSummary(
                slot=session.slot,
                in_event=session.in_event,
                out_event=session.out_event,
                window=effective_window(session, live, snapshot.tz),
                tracked_minutes=result.tracked_minutes,
                validated_minutes=result.validated_minutes,
                source=result.source,
                flags=session_flags(session, windows, snapshot.tz),
            )
        )

    return DaySummary(
        subject_id=subject_id,
        work_date=work_date,
        sessions=tuple(sessions),
        unassigned=pairing.unassigned,
    )


def summarize_subject(
    snapshot: ReconciliationSnapshot,
    subject_id: int,
    resolver: DurationResolver,
) -> list[DaySummary]:
    return [summarize_day(snapshot, subject_id, d, resolver) for d in iter_dates(snapshot.start, snapshot.end)]
