# tests/conftest.py
"""
Shared fixtures: a temporary file store, a controllable clock and a stub rate
provider, plus a fully wired calculator session built from them.
"""
import pytest

from trcalc.adapters.persistence.file_store import FileStore
from trcalc.adapters.providers.base import RateProvider
from trcalc.application.calculator import build_session
from trcalc.domain.errors import RateFetchError
from trcalc.domain.models import CurrencyCode

HOUR_MS = 60 * 60 * 1000
START_MS = 1_700_000_000_000


class FakeClock:
    def __init__(self, now: int = START_MS):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class StubProvider(RateProvider):
    name = "stub"

    def __init__(self, rates=None, error=None):
        self.rates = rates or {
            CurrencyCode.USD: 1.0,
            CurrencyCode.EUR: 0.9,
            CurrencyCode.GBP: 0.8,
            CurrencyCode.TRY: 34.5,
        }
        self.error = error
        self.calls = 0

    def latest_rates(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return dict(self.rates)


@pytest.fixture
def store(tmp_path):
    return FileStore(tmp_path / "data")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def provider():
    return StubProvider()


@pytest.fixture
def failing_provider():
    return StubProvider(error=RateFetchError("boom"))


@pytest.fixture
def session(store, provider, clock):
    return build_session(provider=provider, store=store, clock=clock)
