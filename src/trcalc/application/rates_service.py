# src/trcalc/application/rates_service.py
"""
Rates Service - Provider Composition for Exchange Rate Tables

This module composes rate providers: the HTTP provider is tried first and the
static fallback table is substituted when it fails, so the rate cache always
receives a table with a fresh timestamp. With the fallback disabled the primary
provider's RateFetchError reaches the cache, which keeps its last snapshot.

Files that USE this module:
- trcalc.app (build_rate_provider for the composition root)
- tests.test_rates_service (unit tests)

Files that this module USES:
- trcalc.adapters.providers.* (OpenExchangeRatesProvider, StaticRateProvider, RateProvider)
- trcalc.config (settings for provider selection)
"""
from __future__ import annotations  # Enable postponed evaluation of annotations

import logging  # Standard library for logging messages
from typing import Dict, Optional  # Type hints for mappings and optional values

from trcalc.adapters.providers.base import RateProvider  # Provider interface
from trcalc.adapters.providers.openexchangerates import OpenExchangeRatesProvider  # HTTP provider
from trcalc.adapters.providers.static import StaticRateProvider  # Fallback table provider
from trcalc.domain.errors import RateFetchError  # Raised when every provider fails
from trcalc.domain.models import CurrencyCode  # Currency enumeration

log = logging.getLogger(__name__)


class ProviderChain(RateProvider):
    """
    Provider chain that tries the primary provider, then the fallback.
    Tracks which provider was actually used.
    """
    name = "chain"

    def __init__(self, primary: RateProvider, fallback: Optional[RateProvider] = None):
        """
        Initialize provider chain with primary and fallback providers.

        Args:
            primary: Primary provider to try first
            fallback: Provider used when the primary fails (None disables fallback)
        """
        self.primary = primary
        self.fallback = fallback
        self.last_used_provider: Optional[str] = None

    def latest_rates(self) -> Dict[CurrencyCode, float]:
        """
        Get a rate table, trying the primary provider first, then the fallback.

        Returns:
            Units-per-USD table

        Raises:
            RateFetchError: If the primary fails and there is no fallback,
                or both providers fail
        """
        try:
            rates = self.primary.latest_rates()
            self.last_used_provider = self.primary.name
            return rates
        except Exception as e:
            if self.fallback is None:
                log.warning("Primary provider (%s) failed and no fallback is configured: %s",
                            self.primary.name, e)
                if isinstance(e, RateFetchError):
                    raise
                raise RateFetchError(f"{self.primary.name} failed: {e}") from e

            log.warning("Primary provider (%s) failed, using fallback (%s): %s",
                        self.primary.name, self.fallback.name, e)
            try:
                rates = self.fallback.latest_rates()
                self.last_used_provider = self.fallback.name
                return rates
            except Exception as e2:
                log.error("Both providers failed. Primary: %s, Fallback: %s", e, e2)
                raise RateFetchError(f"All providers failed: primary={e}, fallback={e2}") from e2

    def get_last_provider(self) -> Optional[str]:
        """
        Get the name of the last provider that successfully provided data.

        Returns:
            Provider name or None if not yet called
        """
        return self.last_used_provider


def build_rate_provider(
    app_id: Optional[str] = None,
    fallback_enabled: Optional[bool] = None,
) -> ProviderChain:
    """
    Build the provider chain from settings.

    Args:
        app_id: Optional app id override
        fallback_enabled: Optional override of settings.rate_fallback_enabled

    Returns:
        ProviderChain with the HTTP provider as primary
    """
    from trcalc.config import settings

    if fallback_enabled is None:
        fallback_enabled = settings.rate_fallback_enabled
    primary = OpenExchangeRatesProvider(app_id=app_id)
    fallback = StaticRateProvider() if fallback_enabled else None
    return ProviderChain(primary=primary, fallback=fallback)
