# src/trcalc/adapters/persistence/__init__.py
"""
Persistence Adapters - Data Storage

This package contains adapters for persisting data:
- File-based key-value storage (JSON)
- Versioned record schemas for settings, history and rates
"""

from trcalc.adapters.persistence.file_store import (
    HISTORY_KEY,
    RATES_KEY,
    SETTINGS_KEY,
    FileStore,
)
from trcalc.adapters.persistence.schemas import (
    load_history,
    load_rates,
    load_settings,
    save_history,
    save_rates,
    save_settings,
)

__all__ = [
    "FileStore",
    "HISTORY_KEY",
    "RATES_KEY",
    "SETTINGS_KEY",
    "load_history",
    "load_rates",
    "load_settings",
    "save_history",
    "save_rates",
    "save_settings",
]
