# src/trcalc/adapters/providers/__init__.py
"""
Provider Adapters - External API Clients

This package contains adapters for exchange rate sources.
All providers implement the RateProvider interface.
"""

from trcalc.adapters.providers.base import RateProvider
from trcalc.adapters.providers.openexchangerates import OpenExchangeRatesProvider
from trcalc.adapters.providers.static import StaticRateProvider

__all__ = [
    "RateProvider",
    "OpenExchangeRatesProvider",
    "StaticRateProvider",
]
