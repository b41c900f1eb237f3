# src/trcalc/adapters/providers/base.py
"""
Base Provider Interface for Exchange Rate Providers

This module defines the abstract base class for all exchange rate providers.
It establishes the contract that all provider implementations must follow.

Files that USE this module:
- trcalc.adapters.providers.openexchangerates (OpenExchangeRatesProvider implements RateProvider)
- trcalc.adapters.providers.static (StaticRateProvider implements RateProvider)
- trcalc.application.rates_service (ProviderChain composes RateProviders)

Files that this module USES:
- trcalc.domain.models (CurrencyCode)
"""
from abc import ABC, abstractmethod
from typing import Dict

from trcalc.domain.models import CurrencyCode


class RateProvider(ABC):
    name: str = "provider"

    @abstractmethod
    def latest_rates(self) -> Dict[CurrencyCode, float]:
        """
        Return units-per-USD for every supported currency.

        Raises:
            RateFetchError: If the table cannot be obtained
        """
        raise NotImplementedError
