# src/trcalc/application/rate_cache.py
"""
Rate Cache - Time-Boxed Exchange Rate Snapshot

This module owns the currency → units-per-USD table and its fetch timestamp.
The snapshot is loaded from the store (or built from the fallback table), then
only ever replaced as a whole by successful refreshes.

Refreshes are not serialized: when two overlap, whichever completes last
overwrites the snapshot, even if it was issued first. Rate freshness does not
affect the structure of a conversion, so last-write-wins is accepted.

Files that USE this module:
- trcalc.application.conversion_engine (get_rate on every conversion)
- trcalc.adapters.console.handlers (refresh command, rate info line)
- trcalc.app (composition root, start() at boot)

Files that this module USES:
- trcalc.adapters.persistence.schemas (load_rates, save_rates)
- trcalc.adapters.providers.base (RateProvider)
- trcalc.adapters.formatting.formatter (format_last_updated)
"""
from __future__ import annotations

import asyncio
import logging
from typing import Dict, Optional

from trcalc.adapters.formatting.formatter import format_last_updated
from trcalc.adapters.persistence.file_store import FileStore
from trcalc.adapters.persistence.schemas import load_rates, save_rates
from trcalc.adapters.providers.base import RateProvider
from trcalc.domain.errors import StorageError
from trcalc.domain.models import CurrencyCode, RateSnapshot
from trcalc.shared.clock import Clock, now_ms
from trcalc.shared.observable import Observable

logger = logging.getLogger(__name__)

DEFAULT_TTL_MS = 60 * 60 * 1000  # 1 hour


class RateCache(Observable["RateCache"]):
    """Cached rate table with a staleness window and soft-failing refresh."""

    def __init__(
        self,
        provider: RateProvider,
        store: Optional[FileStore] = None,
        ttl_ms: int = DEFAULT_TTL_MS,
        clock: Clock = now_ms,
    ):
        """
        Initialize rate cache and load the persisted snapshot if available.

        Args:
            provider: Source of fresh rate tables
            store: Optional key-value store for the snapshot
            ttl_ms: Staleness window in milliseconds
            clock: Epoch-milliseconds clock
        """
        super().__init__()
        self._provider = provider
        self._store = store
        self._ttl_ms = ttl_ms
        self._clock = clock
        self._in_flight = 0
        self._started = False
        self.last_error: Optional[str] = None

        if store is not None:
            self._snapshot = load_rates(store)
        else:
            self._snapshot = RateSnapshot.fallback()
        logger.info("Rate snapshot loaded (timestamp=%s)", self._snapshot.timestamp or "never")

    @property
    def snapshot(self) -> RateSnapshot:
        return self._snapshot

    @property
    def rates(self) -> Dict[CurrencyCode, float]:
        return dict(self._snapshot.rates)

    @property
    def timestamp(self) -> int:
        return self._snapshot.timestamp

    @property
    def is_loading(self) -> bool:
        """True while at least one refresh is in flight."""
        return self._in_flight > 0

    @property
    def has_error(self) -> bool:
        return self.last_error is not None

    def get_rate(self, code: CurrencyCode) -> float:
        """
        Get units of a currency per 1 USD.

        Unknown codes get the identity rate so a lookup never fails.
        """
        return self._snapshot.rates.get(code, 1.0)

    def is_stale(self, now: Optional[int] = None) -> bool:
        """
        Check whether the snapshot is due for a refresh.

        Args:
            now: Epoch milliseconds (defaults to the cache clock)

        Returns:
            True if never fetched or at least one TTL old
        """
        if not self._snapshot.timestamp:
            return True
        if now is None:
            now = self._clock()
        return now - self._snapshot.timestamp >= self._ttl_ms

    async def refresh(self) -> bool:
        """
        Fetch a fresh table and replace the whole snapshot.

        The blocking provider call runs in a worker thread; the snapshot is
        replaced back on the event loop. On failure the snapshot is left
        untouched and last_error is set.

        Returns:
            True on success, False on failure
        """
        self._in_flight += 1
        self.last_error = None
        self._notify(self)
        try:
            rates = await asyncio.to_thread(self._provider.latest_rates)
            snapshot = RateSnapshot(rates=rates, timestamp=self._clock())
        except Exception as e:
            logger.warning("Rate refresh failed, keeping snapshot from %s: %s",
                           self._snapshot.timestamp or "never", e)
            self.last_error = str(e) or type(e).__name__
            return False
        else:
            self._snapshot = snapshot
            logger.info("Rate snapshot replaced (timestamp=%s)", snapshot.timestamp)
            self._persist()
            return True
        finally:
            self._in_flight -= 1
            self._notify(self)

    def start(self) -> Optional[asyncio.Task]:
        """
        Schedule the one automatic refresh allowed at process start.

        Must be called from a running event loop. Only the first call can
        schedule anything; there is no periodic polling.

        Returns:
            The refresh task if the snapshot was stale, None otherwise
        """
        if self._started:
            return None
        self._started = True
        if not self.is_stale():
            logger.info("Rate snapshot is fresh, no startup refresh needed")
            return None
        logger.info("Rate snapshot is stale, scheduling startup refresh")
        return asyncio.get_running_loop().create_task(self.refresh())

    def last_updated_label(self, now: Optional[int] = None) -> str:
        if now is None:
            now = self._clock()
        return format_last_updated(self._snapshot.timestamp, now)

    def _persist(self) -> None:
        if self._store is None:
            return
        try:
            save_rates(self._store, self._snapshot)
        except StorageError as e:
            # In-memory snapshot stays current even if the write fails
            logger.error("Failed to persist rate snapshot: %s", e)
