from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from typing import Optional, Sequence

from ..common.datetime_utils import elapsed, whole_minutes
from ..core.enums import DurationSource, ReviewStatus
from ..punches.model import PunchEvent
from .factory import DurationStrategyFactory
from .pairing import Session
from .strategies.base import DurationContext, DurationStrategy
from .windows import OfficialWindow


@dataclass(frozen=True)
class SessionResult:
    tracked_minutes: int
    validated_minutes: int
    source: DurationSource


def _is_excluded(status: ReviewStatus) -> bool:
    if status is ReviewStatus.REJECTED:
        return True
    if status is ReviewStatus.APPROVED or status is ReviewStatus.PENDING:
        return False
    raise ValueError(f"Unhandled review status: {status!r}")


def _is_approved(status: ReviewStatus) -> bool:
    if status is ReviewStatus.APPROVED:
        return True
    if status is ReviewStatus.PENDING or status is ReviewStatus.REJECTED:
        return False
    raise ValueError(f"Unhandled review status: {status!r}")


def both_approved(in_event: PunchEvent, out_event: PunchEvent) -> bool:
    return _is_approved(in_event.status) and _is_approved(out_event.status)


class DurationResolver:
    """Turns a paired session into tracked and validated minutes.

    Tracked counts every session that is not rejected; validated only counts
    sessions whose two punches are both approved. When no strategy can
    measure a session (no ledger, no snapshot, no configured window) the
    tracked figure falls back to the raw elapsed time so an unconfigured
    schedule does not show a misleading zero; validated stays zero.
    """

    def __init__(
        self,
        *,
        tz: tzinfo,
        strategies: Optional[Sequence[DurationStrategy]] = None,
        raw_fallback_for_tracked: bool = True,
    ):
        self._tz = tz
        self._strategies = tuple(strategies) if strategies is not None else DurationStrategyFactory().for_reporting()
        self._raw_fallback = bool(raw_fallback_for_tracked)

    def resolve(self, session: Session, live_window: Optional[OfficialWindow]) -> SessionResult:
        if not session.is_complete:
            return SessionResult(0, 0, DurationSource.INCOMPLETE)

        in_event, out_event = session.in_event, session.out_event
        if _is_excluded(in_event.status) or _is_excluded(out_event.status):
            return SessionResult(0, 0, DurationSource.REJECTED)

        approved = both_approved(in_event, out_event)
        ctx = DurationContext(in_event=in_event, out_event=out_event, live_window=live_window, tz=self._tz)
        for strategy in self._strategies:
            minutes = strategy.minutes(ctx)
            if minutes is not None:
                return SessionResult(minutes, minutes if approved else 0, strategy.source)

        raw = 0
        if self._raw_fallback:
            raw = max(whole_minutes(elapsed(in_event.occurred_at, out_event.occurred_at)), 0)
        return SessionResult(raw, 0, DurationSource.RAW_FALLBACK)


def measure_for_ledger(session: Session, live_window: Optional[OfficialWindow], *, tz: tzinfo) -> int:
    """Minutes to freeze on approval: snapshot first, then the live window, else zero."""
    ctx = DurationContext(in_event=session.in_event, out_event=session.out_event, live_window=live_window, tz=tz)
    for strategy in DurationStrategyFactory().for_freezing():
        minutes = strategy.minutes(ctx)
        if minutes is not None:
            return minutes
    return 0
