# src/trcalc/domain/__init__.py
"""
Domain Layer - Pure Business Objects

This package contains domain models and business rules.
No dependencies on infrastructure or external systems.
"""

from trcalc.domain.models import (
    FALLBACK_RATES,
    HISTORY_LIMIT,
    MAX_AMOUNT,
    ConversionView,
    CurrencyCode,
    HistoryEntry,
    Modifier,
    MultiplierPreset,
    RateSnapshot,
    Theme,
    UserSettings,
    round_half_up,
)
from trcalc.domain.errors import (
    DomainError,
    InvalidSettingError,
    RateFetchError,
    StorageError,
)

__all__ = [
    "FALLBACK_RATES",
    "HISTORY_LIMIT",
    "MAX_AMOUNT",
    "ConversionView",
    "CurrencyCode",
    "HistoryEntry",
    "Modifier",
    "MultiplierPreset",
    "RateSnapshot",
    "Theme",
    "UserSettings",
    "round_half_up",
    "DomainError",
    "InvalidSettingError",
    "RateFetchError",
    "StorageError",
]
