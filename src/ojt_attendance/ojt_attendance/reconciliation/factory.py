from __future__ import annotations

from dataclasses import dataclass

from .strategies.base import DurationStrategy
from .strategies.ledger_strategy import LedgerStrategy
from .strategies.live_window_strategy import LiveWindowStrategy
from .strategies.snapshot_strategy import SnapshotStrategy


@dataclass
class DurationStrategyFactory:
    """Factory Pattern: the ordered strategy chain used to measure sessions."""

    def for_reporting(self) -> tuple[DurationStrategy, ...]:
        return LedgerStrategy(), SnapshotStrategy(), LiveWindowStrategy()

    def for_freezing(self) -> tuple[DurationStrategy, ...]:
        """Chain used when writing the ledger, which must not read itself."""
        return SnapshotStrategy(), LiveWindowStrategy()
