# src/trcalc/adapters/providers/static.py
"""
Static Rate Provider - Built-in Fallback Table

Returns the fixed fallback table. Used when no app id is configured and as the
fallback link of the provider chain when the HTTP provider fails.

Files that USE this module:
- trcalc.application.rates_service (ProviderChain fallback)
- trcalc.adapters.providers.openexchangerates (no-app-id shortcut)
"""
from typing import Dict

from trcalc.adapters.providers.base import RateProvider
from trcalc.domain.models import FALLBACK_RATES, CurrencyCode


class StaticRateProvider(RateProvider):
    name = "static"

    def latest_rates(self) -> Dict[CurrencyCode, float]:
        return dict(FALLBACK_RATES)
