from __future__ import annotations

from typing import Optional

from ...core.enums import DurationSource
from ..overlap import overlap_minutes
from .base import DurationContext, DurationStrategy


class LiveWindowStrategy(DurationStrategy):
    """Overlap with the resolved window; nothing to say when no window is configured.

    A disabled window still answers, with zero.
    """

    source = DurationSource.LIVE

    def minutes(self, ctx: DurationContext) -> Optional[int]:
        window = ctx.live_window
        if window is None:
            return None
        return overlap_minutes(ctx.in_event.occurred_at, ctx.out_event.occurred_at, window.start, window.end)
