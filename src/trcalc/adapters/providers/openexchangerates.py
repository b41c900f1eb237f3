# src/trcalc/adapters/providers/openexchangerates.py
"""
Open Exchange Rates Provider for USD-based Rate Tables

This module implements the openexchangerates.org `latest.json` client. It
returns units-per-USD for USD, EUR, GBP and TRY. Currencies missing from the
response (or reported as non-positive) take their fallback constant, and USD is
always forced to 1.

Without a configured app id the provider returns the static fallback table
instead of calling the network.

Files that USE this module:
- trcalc.application.rates_service (build_rate_provider wires it into a ProviderChain)
- tests.test_providers (unit tests)

Files that this module USES:
- trcalc.adapters.providers.base (RateProvider interface)
- trcalc.config (settings for API configuration)
- trcalc.domain (CurrencyCode, FALLBACK_RATES, RateFetchError)
"""
import logging
import math
from typing import Dict, Optional

import requests

from trcalc.adapters.providers.base import RateProvider
from trcalc.config import settings
from trcalc.domain.errors import RateFetchError
from trcalc.domain.models import FALLBACK_RATES, PIVOT_CURRENCY, CurrencyCode

log = logging.getLogger(__name__)


class OpenExchangeRatesProvider(RateProvider):
    name = "openexchangerates"

    def __init__(
        self,
        app_id: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        """
        Initialize Open Exchange Rates provider.

        Args:
            app_id: Optional app id (defaults to settings.open_exchange_rates_app_id)
            base_url: Optional custom API URL (defaults to settings.rates_url)
            timeout: Optional HTTP timeout in seconds (defaults to settings.http_timeout_seconds)
        """
        self.app_id = settings.open_exchange_rates_app_id if app_id is None else app_id
        self.url = base_url or settings.rates_url
        self.timeout = timeout or settings.http_timeout_seconds

    @property
    def symbols(self) -> str:
        return ",".join(c.value for c in CurrencyCode)

    def get_latest_raw(self) -> dict:
        """
        Fetch the raw `latest.json` payload.

        Returns:
            Decoded JSON object

        Raises:
            RateFetchError: On timeout, transport error, non-2xx status or invalid JSON
        """
        params = {"app_id": self.app_id, "symbols": self.symbols}
        try:
            log.info("Fetching fresh rate table from Open Exchange Rates")
            resp = requests.get(self.url, params=params, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except requests.exceptions.Timeout:
            log.warning("Open Exchange Rates timeout after %d seconds", self.timeout)
            raise RateFetchError(f"Open Exchange Rates timeout after {self.timeout}s")
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else "?"
            log.warning("Open Exchange Rates HTTP error %s", status)
            raise RateFetchError(f"Open Exchange Rates HTTP {status}") from e
        except requests.exceptions.RequestException as e:
            log.warning("Open Exchange Rates request failed (network/connection error): %s", e)
            raise RateFetchError(f"Open Exchange Rates request failed: {e}") from e
        except ValueError as e:
            log.error("Open Exchange Rates returned invalid JSON: %s", e)
            raise RateFetchError(f"Open Exchange Rates returned invalid JSON: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("rates"), dict):
            log.error("Open Exchange Rates unexpected response structure: %s", data)
            raise RateFetchError("Open Exchange Rates response missing 'rates' object")
        return data

    @staticmethod
    def _normalize(raw_rates: dict) -> Dict[CurrencyCode, float]:
        rates: Dict[CurrencyCode, float] = {}
        for code in CurrencyCode:
            try:
                value = float(raw_rates.get(code.value) or 0)
            except (TypeError, ValueError):
                value = 0.0
            if not math.isfinite(value) or value <= 0:
                log.warning("Rate for %s missing or invalid, using fallback %s",
                            code.value, FALLBACK_RATES[code])
                value = FALLBACK_RATES[code]
            rates[code] = value
        rates[PIVOT_CURRENCY] = 1.0
        return rates

    def latest_rates(self) -> Dict[CurrencyCode, float]:
        """
        Get the current units-per-USD table.

        Returns:
            Rate per currency with USD == 1

        Raises:
            RateFetchError: If the request fails or returns an unusable payload
        """
        if not self.app_id:
            log.info("No Open Exchange Rates app id configured, returning fallback rates")
            return dict(FALLBACK_RATES)

        data = self.get_latest_raw()
        rates = self._normalize(data["rates"])
        log.info("Open Exchange Rates updated: %s",
                 ", ".join(f"{c.value}={r}" for c, r in rates.items()))
        return rates
