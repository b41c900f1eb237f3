# src/trcalc/application/__init__.py
"""
Application Layer - Use Cases and Services

This package contains the calculator core services. They reach storage and
rate sources only through the adapters they are handed.
"""

from trcalc.application.rates_service import ProviderChain, build_rate_provider
from trcalc.application.rate_cache import RateCache
from trcalc.application.history_log import HistoryLog
from trcalc.application.settings_service import SettingsService
from trcalc.application.conversion_engine import ConversionEngine
from trcalc.application.focus_reset import FocusResetCoordinator, FocusState
from trcalc.application.calculator import CalculatorSession, build_session

__all__ = [
    "ProviderChain",
    "build_rate_provider",
    "RateCache",
    "HistoryLog",
    "SettingsService",
    "ConversionEngine",
    "FocusResetCoordinator",
    "FocusState",
    "CalculatorSession",
    "build_session",
]
