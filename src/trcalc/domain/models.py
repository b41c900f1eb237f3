# src/trcalc/domain/models.py
"""
Domain Models - Pure Business Objects

This module contains domain models representing core calculator concepts:
- Currencies and their display metadata
- Rate snapshots (units of currency per 1 USD)
- Modifiers and multiplier presets
- History entries
- User settings
- The conversion view handed to the presentation layer

Files that USE this module:
- trcalc.application.* (all services use domain models)
- trcalc.adapters.* (adapters create and use domain models)
- tests.* (tests use domain models for test data)

Files that this module USES:
- None (pure domain layer, no external dependencies)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

import math  # floor for round-half-up
from dataclasses import dataclass, field, replace  # Data classes and immutable updates
from enum import Enum  # Closed enumerations for currency and theme
from typing import Mapping, Optional, Tuple  # Type hints

MAX_AMOUNT = 999_999_999
HISTORY_LIMIT = 50


class CurrencyCode(str, Enum):
    """Supported currencies. USD is the pivot with implicit rate 1."""
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    TRY = "TRY"

    @property
    def display_name(self) -> str:
        return _CURRENCY_META[self][0]

    @property
    def symbol(self) -> str:
        return _CURRENCY_META[self][1]


_CURRENCY_META = {
    CurrencyCode.USD: ("US Dollar", "$"),
    CurrencyCode.EUR: ("Euro", "€"),
    CurrencyCode.GBP: ("British Pound", "£"),
    CurrencyCode.TRY: ("Turkish Lira", "₺"),
}

PIVOT_CURRENCY = CurrencyCode.USD

# Used when no snapshot has ever been fetched, and by the static provider
FALLBACK_RATES: Mapping[CurrencyCode, float] = {
    CurrencyCode.USD: 1.0,
    CurrencyCode.EUR: 0.92,
    CurrencyCode.GBP: 0.79,
    CurrencyCode.TRY: 34.5,
}


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


def round_half_up(value: float) -> int:
    """
    Round a non-negative value to the nearest integer, halves rounding up.

    Args:
        value: Non-negative float

    Returns:
        Rounded integer
    """
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class RateSnapshot:
    """
    Currency → units-per-USD table plus its fetch time.

    Attributes:
        rates: Rate per currency, always with rates[USD] == 1
        timestamp: Epoch milliseconds of the fetch, 0 meaning never fetched
    """
    rates: Mapping[CurrencyCode, float]
    timestamp: int = 0

    def __post_init__(self):
        rates = dict(self.rates)
        rates[PIVOT_CURRENCY] = 1.0
        object.__setattr__(self, "rates", rates)

    @classmethod
    def fallback(cls) -> RateSnapshot:
        """Snapshot built from the static fallback table, never fetched."""
        return cls(rates=dict(FALLBACK_RATES), timestamp=0)


@dataclass(frozen=True)
class Modifier:
    """
    Surcharge (percent > 0) or discount (percent <= 0) applied before conversion.

    Attributes:
        label: Short display label, e.g. '+KDV'
        percent: Signed whole percentage, e.g. 18 or -18
    """
    label: str
    percent: int

    def apply(self, amount: int) -> int:
        """
        Apply the modifier to an amount.

        A positive percent multiplies by (1 + p/100); a zero or negative
        percent divides by (1 + |p|/100), which removes a previously added
        surcharge of that size.
        """
        if self.percent > 0:
            return round_half_up(amount * (1 + self.percent / 100))
        return round_half_up(amount / (1 + abs(self.percent) / 100))


@dataclass(frozen=True)
class MultiplierPreset:
    """A user-configured modifier button stored in settings."""
    id: str
    label: str
    percent: int

    def to_modifier(self) -> Modifier:
        return Modifier(label=self.label, percent=self.percent)


@dataclass(frozen=True)
class HistoryEntry:
    """
    A completed conversion. Created once, never mutated.

    Attributes:
        id: Unique id (high-resolution timestamp string)
        input_amount: Amount entered (after modifier, if any)
        output_amount: Converted amount
        from_currency: Currency of input_amount
        to_currency: Currency of output_amount
        rate_used: Effective rate (to_currency per from_currency)
        modifier: Modifier applied at commit time, if any
        timestamp: Epoch milliseconds
    """
    id: str
    input_amount: int
    output_amount: int
    from_currency: CurrencyCode
    to_currency: CurrencyCode
    rate_used: float
    modifier: Optional[Modifier]
    timestamp: int


DEFAULT_MULTIPLIERS: Tuple[MultiplierPreset, ...] = (
    MultiplierPreset(id="1", label="+KDV", percent=18),
    MultiplierPreset(id="2", label="-KDV", percent=-18),
    MultiplierPreset(id="3", label="+OTV25", percent=25),
)

DEFAULT_QUICK_VALUES: Tuple[int, ...] = (50, 100, 500, 1000)


@dataclass(frozen=True)
class UserSettings:
    """
    Persisted user preferences.

    target_currency is never USD; the conversion is always between USD and
    the target, in the direction given by is_reversed.
    """
    target_currency: CurrencyCode = CurrencyCode.TRY
    auto_reset: bool = False
    first_visit: bool = True
    is_reversed: bool = False
    multipliers: Tuple[MultiplierPreset, ...] = field(default=DEFAULT_MULTIPLIERS)
    quick_values: Tuple[int, ...] = field(default=DEFAULT_QUICK_VALUES)
    theme: Theme = Theme.SYSTEM

    def evolve(self, **changes) -> UserSettings:
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)


@dataclass(frozen=True)
class ConversionView:
    """What the presentation layer shows for the in-progress amount."""
    displayed_amount: int
    converted_amount: int
    from_currency: CurrencyCode
    to_currency: CurrencyCode
    rate: float
