# tests/test_rates_service.py
"""
Rates Service Tests - Unit Tests for Provider Composition

This module contains unit tests for the ProviderChain and the
build_rate_provider factory: primary-then-fallback behaviour, error wrapping
and tracking of the provider that actually answered.

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- trcalc.application.rates_service (ProviderChain, build_rate_provider)
- unittest.mock (Mock for provider mocking)
- pytest (testing framework)
"""
import pytest  # Testing framework for writing and running tests

from unittest.mock import Mock  # Mock objects for testing without real providers

from trcalc.adapters.providers.openexchangerates import OpenExchangeRatesProvider  # Expected primary type
from trcalc.adapters.providers.static import StaticRateProvider  # Expected fallback type
from trcalc.application.rates_service import ProviderChain, build_rate_provider  # Classes to test
from trcalc.domain.errors import RateFetchError  # Error raised by the chain
from trcalc.domain.models import CurrencyCode  # Rate table keys


def make_provider(name, rates=None, error=None):
    provider = Mock()
    provider.name = name
    if error is not None:
        provider.latest_rates.side_effect = error
    else:
        provider.latest_rates.return_value = rates or {CurrencyCode.TRY: 35.0}
    return provider


class TestProviderChain:
    def test_primary_success(self):
        primary = make_provider("primary", rates={CurrencyCode.TRY: 36.0})
        fallback = make_provider("fallback")
        chain = ProviderChain(primary, fallback)

        assert chain.latest_rates() == {CurrencyCode.TRY: 36.0}
        assert chain.get_last_provider() == "primary"
        fallback.latest_rates.assert_not_called()

    def test_fallback_on_primary_failure(self):
        primary = make_provider("primary", error=RateFetchError("down"))
        fallback = make_provider("fallback", rates={CurrencyCode.TRY: 34.5})
        chain = ProviderChain(primary, fallback)

        assert chain.latest_rates() == {CurrencyCode.TRY: 34.5}
        assert chain.get_last_provider() == "fallback"

    def test_no_fallback_reraises_fetch_error(self):
        error = RateFetchError("down")
        chain = ProviderChain(make_provider("primary", error=error))

        with pytest.raises(RateFetchError) as exc_info:
            chain.latest_rates()
        assert exc_info.value is error
        assert chain.get_last_provider() is None

    def test_no_fallback_wraps_other_errors(self):
        chain = ProviderChain(make_provider("primary", error=KeyError("rates")))

        with pytest.raises(RateFetchError, match="primary failed"):
            chain.latest_rates()

    def test_both_fail(self):
        chain = ProviderChain(
            make_provider("primary", error=RateFetchError("down")),
            make_provider("fallback", error=RuntimeError("also down")),
        )

        with pytest.raises(RateFetchError, match="All providers failed"):
            chain.latest_rates()


class TestBuildRateProvider:
    def test_with_fallback(self):
        chain = build_rate_provider(app_id="abcdef0123456789", fallback_enabled=True)
        assert isinstance(chain.primary, OpenExchangeRatesProvider)
        assert isinstance(chain.fallback, StaticRateProvider)
        assert chain.primary.app_id == "abcdef0123456789"

    def test_without_fallback(self):
        chain = build_rate_provider(app_id="abcdef0123456789", fallback_enabled=False)
        assert chain.fallback is None
