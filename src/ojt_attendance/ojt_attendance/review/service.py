from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.locks import KeyedLocks
from ..core.constants import DEFAULT_REVIEW_WORKERS
from ..core.enums import ChangeTopic, PunchKind, ReviewDecision, ReviewStatus
from ..core.exceptions import DomainError, NotFoundError, TransitionError, ValidationError
from ..notifications.channel import ChangeChannel, ChangeNotice
from ..punches.model import EventRef, PersistedRef, PunchEvent, VirtualRef
from ..punches.repository import PunchRepository
from ..reconciliation.pairing import DayPairing, pair_day
from ..reconciliation.resolver import both_approved, measure_for_ledger
from ..reconciliation.service import ReconciliationService
from ..reconciliation.windows import DayWindows
from .model import ReviewOutcome

logger = logging.getLogger(__name__)


class ReviewService:
    """Pending -> Approved / Rejected transitions of punches.

    Work on one subject-day is serialised, and storage writes are
    conditional on the punch still being Pending, so concurrent or repeated
    requests for the same punch record a single transition. Approving the
    second half of a session freezes its validated minutes and official
    window onto the out punch (the ledger).
    """

    def __init__(
        self,
        punches: PunchRepository,
        reconciliation: ReconciliationService,
        *,
        workers: int = DEFAULT_REVIEW_WORKERS,
        changes: Optional[ChangeChannel] = None,
        locks: Optional[KeyedLocks] = None,
    ):
        self._punches = punches
        self._reconciliation = reconciliation
        self._workers = max(1, int(workers))
        self._changes = changes
        self._locks = locks or KeyedLocks()

    # -------- public API --------

    def apply_review(
        self,
        refs: Sequence[EventRef],
        decision: ReviewDecision,
        reviewer_id: Optional[str],
        *,
        now: Optional[datetime] = None,
    ) -> list[ReviewOutcome]:
        """Apply one decision to many punches, reporting success or failure per id."""
        reviewer_id = self._check_reviewer(decision, reviewer_id)
        now = now or now_local(self._reconciliation.tz)

        unique: list[EventRef] = []
        for ref in refs:
            if ref not in unique:
                unique.append(ref)
        if not unique:
            return []

        if len(unique) == 1:
            return [self._apply_safely(unique[0], decision, reviewer_id, now)]

        workers = min(self._workers, len(unique))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="review") as pool:
            return list(pool.map(lambda ref: self._apply_safely(ref, decision, reviewer_id, now), unique))

    def approve(self, ref: EventRef, reviewer_id: str, *, now: Optional[datetime] = None) -> ReviewOutcome:
        reviewer_id = self._check_reviewer(ReviewDecision.APPROVE, reviewer_id)
        return self._apply_one(ref, ReviewDecision.APPROVE, reviewer_id, now or now_local(self._reconciliation.tz))

    def reject(self, ref: EventRef, reviewer_id: Optional[str] = None, *, now: Optional[datetime] = None) -> ReviewOutcome:
        reviewer_id = self._check_reviewer(ReviewDecision.REJECT, reviewer_id)
        return self._apply_one(ref, ReviewDecision.REJECT, reviewer_id, now or now_local(self._reconciliation.tz))

    # -------- internals --------

    @staticmethod
    def _check_reviewer(decision: ReviewDecision, reviewer_id: Optional[str]) -> Optional[str]:
        reviewer_id = (reviewer_id or "").strip() or None
        if decision is ReviewDecision.APPROVE and not reviewer_id:
            raise ValidationError("Reviewer is required to approve")
        return reviewer_id

    def _apply_safely(
        self,
        ref: EventRef,
        decision: ReviewDecision,
        reviewer_id: Optional[str],
        now: datetime,
    ) -> ReviewOutcome:
        try:
            return self._apply_one(ref, decision, reviewer_id, now)
        except DomainError as e:
            logger.warning("Review %s of %s failed: %s", decision.value, ref.token(), e)
            return ReviewOutcome(ref=ref, ok=False, error=str(e))
        except Exception:
            logger.exception("Review %s of %s failed unexpectedly", decision.value, ref.token())
            return ReviewOutcome(ref=ref, ok=False, error="Unexpected error")

    def _locate(self, ref: EventRef) -> tuple[int, date]:
        if isinstance(ref, VirtualRef):
            return ref.subject_id, ref.work_date
        event = self._punches.get_by_id(ref.event_id)
        if event is None:
            raise NotFoundError(f"Punch {ref.event_id} does not exist")
        return event.subject_id, event.occurred_at.astimezone(self._reconciliation.tz).date()

    def _materialize(self, ref: VirtualRef, pairing: DayPairing, windows: DayWindows) -> tuple[int, bool]:
        """Store a virtual close-out so it can be reviewed. Returns (event_id, created).

        The close-out is stored only if, as a real punch, it would still close
        the same session.
        """
        session = pairing.session(ref.slot)
        out_event = session.out_event
        if session.in_event is None or out_event is None:
            raise NotFoundError(f"Close-out {ref.token()} no longer applies")
        if not out_event.is_virtual:
            # Already stored by an earlier request, or a real punch now closes the session.
            return out_event.event_id, False

        stored = [e for s in pairing.sessions for e in (s.in_event, s.out_event) if e is not None and not e.is_virtual]
        candidate = replace(out_event, ref=PersistedRef(0))
        trial = pair_day(
            subject_id=ref.subject_id,
            work_date=ref.work_date,
            punches=[*stored, *pairing.unassigned, candidate],
            windows=windows,
            is_past=True,
        )
        closing = trial.session(ref.slot).out_event
        if closing is None or closing.ref != candidate.ref:
            raise TransitionError(f"Close-out {ref.token()} would not close its session once stored")

        event_id = self._punches.create(
            subject_id=ref.subject_id,
            kind=PunchKind.OUT,
            occurred_at=out_event.occurred_at,
            evidence_ref=None,
            is_synthetic=True,
        )
        logger.info("Materialized close-out %s as punch %s at %s", ref.token(), event_id, out_event.occurred_at)
        return event_id, True

    def _apply_one(
        self,
        ref: EventRef,
        decision: ReviewDecision,
        reviewer_id: Optional[str],
        now: datetime,
    ) -> ReviewOutcome:
        subject_id, work_date = self._locate(ref)
        today = now.astimezone(self._reconciliation.tz).date()

        with self._locks.hold((subject_id, work_date)):
            materialized = False
            if isinstance(ref, VirtualRef):
                pairing, windows = self._reconciliation.pair_day(subject_id, work_date, today=today)
                event_id, materialized = self._materialize(ref, pairing, windows)
                if materialized:
                    repaired, _ = self._reconciliation.pair_day(subject_id, work_date, today=today)
                    closing = repaired.session(ref.slot).out_event
                    if closing is None or closing.event_id != event_id:
                        raise TransitionError(f"Close-out {ref.token()} does not close its session once stored")
            else:
                event_id = ref.event_id

            event = self._punches.get_by_id(event_id)
            if event is None:
                raise NotFoundError(f"Punch {event_id} does not exist")

            target = decision.target_status
            changed = False
            if event.status is ReviewStatus.PENDING:
                changed = self._punches.record_review(
                    event_id=event_id,
                    status=target,
                    reviewer_id=reviewer_id,
                    reviewed_at=now,
                )
                if not changed:
                    event = self._punches.get_by_id(event_id) or event

            if not changed:
                if event.status is target:
                    logger.debug("Punch %s already %s; nothing to do", event_id, target.value)
                    return ReviewOutcome(
                        ref=ref,
                        ok=True,
                        event_id=event_id,
                        status=target,
                        materialized=materialized,
                    )
                raise TransitionError(f"Punch {event_id} is already {event.status.value}")

            logger.info("Punch %s %s by %s", event_id, target.value, reviewer_id or "-")
            frozen = None
            if target is ReviewStatus.APPROVED:
                pairing, windows = self._reconciliation.pair_day(subject_id, work_date, today=today)
                frozen = self._write_ledger(PersistedRef(event_id), pairing, windows)

        if self._changes:
            self._changes.publish(ChangeNotice(topic=ChangeTopic.REVIEW, subject_id=subject_id, work_date=work_date))

        return ReviewOutcome(
            ref=ref,
            ok=True,
            event_id=event_id,
            status=target,
            changed=True,
            materialized=materialized,
            frozen_minutes=frozen,
        )

    def _write_ledger(self, ref: PersistedRef, pairing: DayPairing, windows: DayWindows) -> Optional[int]:
        """Capture the official window and, once both punches are approved, freeze the minutes."""
        session = pairing.session_of(ref)
        if session is None or not session.is_complete:
            return None

        out_event: PunchEvent = session.out_event
        if out_event.is_virtual:
            return None

        live = windows.for_slot(session.slot)
        if out_event.window_snapshot is None and live is not None and live.is_enabled:
            snapshot = live.snapshot()
            if self._punches.capture_window_snapshot(event_id=out_event.event_id, snapshot=snapshot):
                out_event = replace(out_event, window_snapshot=snapshot)
                session = replace(session, out_event=out_event)

        if out_event.validated_minutes is not None or not both_approved(session.in_event, out_event):
            return None

        minutes = measure_for_ledger(session, live, tz=self._reconciliation.tz)
        if not self._punches.freeze_validated_minutes(event_id=out_event.event_id, minutes=minutes):
            return None
        logger.info(
            "Froze %d validated minute(s) for subject %s %s %s on punch %s",
            minutes,
            pairing.subject_id,
            pairing.work_date,
            session.slot.value,
            out_event.event_id,
        )
        return minutes
