# src/trcalc/application/calculator.py
"""
Calculator Session - Wiring of the Calculator Core

Bundles the settings service, rate cache, history log, conversion engine and
focus-reset coordinator that make up one calculator session, all sharing one
store and one clock.

Files that USE this module:
- trcalc.app (build_session in the composition root)
- trcalc.adapters.console.handlers (CalculatorSession)
- tests.* (build sessions over a temporary store)

Files that this module USES:
- trcalc.application.* (all core services)
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from trcalc.adapters.persistence.file_store import FileStore
from trcalc.adapters.providers.base import RateProvider
from trcalc.application.conversion_engine import ConversionEngine
from trcalc.application.focus_reset import FocusResetCoordinator
from trcalc.application.history_log import HistoryLog
from trcalc.application.rate_cache import DEFAULT_TTL_MS, RateCache
from trcalc.application.settings_service import SettingsService
from trcalc.domain.models import HISTORY_LIMIT
from trcalc.shared.clock import Clock, IdGenerator, now_ms


@dataclass
class CalculatorSession:
    settings: SettingsService
    rates: RateCache
    history: HistoryLog
    engine: ConversionEngine
    focus: FocusResetCoordinator


def build_session(
    provider: RateProvider,
    store: Optional[FileStore] = None,
    ttl_ms: int = DEFAULT_TTL_MS,
    history_limit: int = HISTORY_LIMIT,
    clock: Clock = now_ms,
) -> CalculatorSession:
    """
    Create a calculator session.

    Args:
        provider: Rate provider behind the cache
        store: Optional store shared by settings, history and rates
        ttl_ms: Rate staleness window
        history_limit: History capacity
        clock: Epoch-milliseconds clock

    Returns:
        CalculatorSession with every component wired
    """
    ids = IdGenerator()
    settings = SettingsService(store, id_factory=ids)
    rates = RateCache(provider, store=store, ttl_ms=ttl_ms, clock=clock)
    history = HistoryLog(store, capacity=history_limit)
    engine = ConversionEngine(rates, history, settings, clock=clock, id_factory=ids)
    focus = FocusResetCoordinator(engine, settings)
    return CalculatorSession(
        settings=settings,
        rates=rates,
        history=history,
        engine=engine,
        focus=focus,
    )
