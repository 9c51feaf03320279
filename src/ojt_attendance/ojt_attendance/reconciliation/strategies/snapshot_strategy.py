from __future__ import annotations

from typing import Optional

from ...core.enums import DurationSource
from ..overlap import overlap_minutes
from ..windows import window_from_snapshot
from .base import DurationContext, DurationStrategy


class SnapshotStrategy(DurationStrategy):
    """Overlap with the official window captured on the out punch."""

    source = DurationSource.SNAPSHOT

    def minutes(self, ctx: DurationContext) -> Optional[int]:
        snapshot = ctx.out_event.window_snapshot
        if snapshot is None:
            return None
        window = window_from_snapshot(snapshot, ctx.in_event.occurred_at.astimezone(ctx.tz).date(), ctx.tz)
        return overlap_minutes(ctx.in_event.occurred_at, ctx.out_event.occurred_at, window.start, window.end)
