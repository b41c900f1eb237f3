# src/trcalc/shared/clock.py
"""
Clock Utilities - Epoch Timestamps and Entry Identifiers

Timestamps throughout the calculator are epoch milliseconds (matching the
persisted rate and history records). History entry ids come from a
nanosecond clock, bumped when two ids would collide.

Files that USE this module:
- trcalc.application.rate_cache (now_ms for fetch timestamps and staleness)
- trcalc.application.conversion_engine (now_ms, IdGenerator for history entries)
- trcalc.application.settings_service (IdGenerator for multiplier preset ids)
"""
from __future__ import annotations

import time
from typing import Callable, Optional

Clock = Callable[[], int]


def now_ms() -> int:
    """Current wall-clock time as epoch milliseconds."""
    return time.time_ns() // 1_000_000


class IdGenerator:
    """Produces strictly increasing string ids from a high-resolution clock."""

    def __init__(self, source: Optional[Callable[[], int]] = None):
        self._source = source or time.time_ns
        self._last = 0

    def __call__(self) -> str:
        value = self._source()
        if value <= self._last:
            value = self._last + 1
        self._last = value
        return str(value)
