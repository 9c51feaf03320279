from __future__ import annotations

from typing import Optional

from ...core.enums import DurationSource
from .base import DurationContext, DurationStrategy


class LedgerStrategy(DurationStrategy):
    """Duration frozen on the out punch at approval. Later schedule edits never reach it."""

    source = DurationSource.LEDGER

    def minutes(self, ctx: DurationContext) -> Optional[int]:
        return ctx.out_event.validated_minutes
