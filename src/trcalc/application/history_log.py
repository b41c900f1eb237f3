# src/trcalc/application/history_log.py
"""
History Log - Bounded Record of Completed Conversions

Most-recent-first list of HistoryEntry objects, capped at 50. Appending past
the cap silently evicts the oldest entries. Entries are never mutated; the
only removal is clear().

Files that USE this module:
- trcalc.application.conversion_engine (append on commit and snapshot)
- trcalc.adapters.console.handlers (history listing, clear-history)

Files that this module USES:
- trcalc.adapters.persistence.schemas (load_history, save_history)
- trcalc.domain.models (HistoryEntry)
"""
from __future__ import annotations

import logging
from typing import Iterator, List, Optional, Tuple

from trcalc.adapters.persistence.file_store import FileStore
from trcalc.adapters.persistence.schemas import load_history, save_history
from trcalc.domain.errors import StorageError
from trcalc.domain.models import HISTORY_LIMIT, HistoryEntry
from trcalc.shared.observable import Observable

logger = logging.getLogger(__name__)


class HistoryLog(Observable["HistoryLog"]):
    """Capacity-bounded, insertion-ordered conversion history."""

    def __init__(self, store: Optional[FileStore] = None, capacity: int = HISTORY_LIMIT):
        super().__init__()
        if capacity < 1:
            raise ValueError("History capacity must be at least 1")
        self._store = store
        self.capacity = capacity
        self._entries: List[HistoryEntry] = []
        if store is not None:
            self._entries = load_history(store)[:capacity]
            logger.info("Loaded %d history entries", len(self._entries))

    @property
    def entries(self) -> Tuple[HistoryEntry, ...]:
        return tuple(self._entries)

    @property
    def latest(self) -> Optional[HistoryEntry]:
        return self._entries[0] if self._entries else None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(tuple(self._entries))

    def append(self, entry: HistoryEntry) -> None:
        """
        Prepend an entry, dropping entries from the tail beyond capacity.

        Args:
            entry: Entry to record
        """
        self._entries.insert(0, entry)
        if len(self._entries) > self.capacity:
            del self._entries[self.capacity:]
        logger.debug("History entry %s recorded (%d/%d)", entry.id, len(self._entries), self.capacity)
        self._persist()
        self._notify(self)

    def clear(self) -> None:
        self._entries.clear()
        logger.info("History cleared")
        self._persist()
        self._notify(self)

    def _persist(self) -> None:
        if self._store is None:
            return
        try:
            save_history(self._store, self._entries)
        except StorageError as e:
            logger.error("Failed to persist history: %s", e)
