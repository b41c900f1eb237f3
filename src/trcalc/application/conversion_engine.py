# src/trcalc/application/conversion_engine.py
"""
Conversion Engine - Keypad Input Accumulation and Currency Conversion

This module owns the in-progress amount. Digits accumulate into a bounded
integer, modifiers scale it, and committing converts it at the current rate and
records a history entry.

The direction comes from the settings service: when is_reversed is false the
amount is USD and the output is the target currency; when true the amount is
in the target currency and the output is USD. Swapping the direction keeps the
amount's numeric value and only relabels it.

Files that USE this module:
- trcalc.application.focus_reset (FocusResetCoordinator drives and snapshots the engine)
- trcalc.adapters.console.handlers (keypad commands)
- trcalc.app (composition root)

Files that this module USES:
- trcalc.application.rate_cache (RateCache.get_rate)
- trcalc.application.history_log (HistoryLog.append)
- trcalc.application.settings_service (target currency and direction)
- trcalc.domain.models (HistoryEntry, Modifier, ConversionView)
"""
from __future__ import annotations

import logging
from typing import Callable, Optional

from trcalc.application.history_log import HistoryLog
from trcalc.application.rate_cache import RateCache
from trcalc.application.settings_service import SettingsService
from trcalc.domain.models import (
    MAX_AMOUNT,
    PIVOT_CURRENCY,
    ConversionView,
    CurrencyCode,
    HistoryEntry,
    Modifier,
    round_half_up,
)
from trcalc.shared.clock import Clock, IdGenerator, now_ms
from trcalc.shared.observable import Observable
from trcalc.shared.validators import validate_amount

logger = logging.getLogger(__name__)


class ConversionEngine(Observable[ConversionView]):
    """In-progress amount plus conversion against the cached rate table."""

    def __init__(
        self,
        rates: RateCache,
        history: HistoryLog,
        settings: SettingsService,
        clock: Clock = now_ms,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        """
        Initialize the engine with an amount of zero.

        Args:
            rates: Rate cache consulted on every conversion
            history: Log receiving committed conversions
            settings: Source of target currency and direction
            clock: Epoch-milliseconds clock for entry timestamps
            id_factory: Unique id source for history entries
        """
        super().__init__()
        self._rates = rates
        self._history = history
        self._settings = settings
        self._clock = clock
        self._new_id = id_factory or IdGenerator()
        self._amount = 0

    # --- Read-only views ---

    @property
    def amount(self) -> int:
        return self._amount

    @property
    def target_currency(self) -> CurrencyCode:
        return self._settings.settings.target_currency

    @property
    def is_reversed(self) -> bool:
        return self._settings.settings.is_reversed

    @property
    def from_currency(self) -> CurrencyCode:
        return self.target_currency if self.is_reversed else PIVOT_CURRENCY

    @property
    def to_currency(self) -> CurrencyCode:
        return PIVOT_CURRENCY if self.is_reversed else self.target_currency

    @property
    def effective_rate(self) -> float:
        """Units of to_currency per unit of from_currency, read live from the cache."""
        target_rate = self._rates.get_rate(self.target_currency)
        return 1 / target_rate if self.is_reversed else target_rate

    def current_conversion(self) -> ConversionView:
        """Pure read of what the display shows; never mutates or logs history."""
        rate = self.effective_rate
        return ConversionView(
            displayed_amount=self._amount,
            converted_amount=round_half_up(self._amount * rate),
            from_currency=self.from_currency,
            to_currency=self.to_currency,
            rate=rate,
        )

    # --- Input operations ---

    def _set_amount(self, value: int) -> None:
        self._amount = value
        self._notify(self.current_conversion())

    def append_digit(self, digit: int) -> None:
        """
        Shift a digit into the amount.

        A keystroke that would push the amount past MAX_AMOUNT is dropped.

        Raises:
            ValueError: If digit is not 0..9
        """
        if isinstance(digit, bool) or not isinstance(digit, int) or not 0 <= digit <= 9:
            raise ValueError(f"Not a keypad digit: {digit!r}")
        candidate = self._amount * 10 + digit
        if candidate > MAX_AMOUNT:
            logger.debug("Digit %d dropped, amount would exceed cap", digit)
            return
        self._set_amount(candidate)

    def backspace(self) -> None:
        self._set_amount(self._amount // 10)

    def clear(self) -> None:
        self._set_amount(0)

    def apply_multiplier(self, modifier: Modifier) -> None:
        """
        Scale the in-progress amount by a modifier without recording history.

        The result is capped at MAX_AMOUNT. No-op on zero.
        """
        if self._amount == 0:
            return
        self._set_amount(min(modifier.apply(self._amount), MAX_AMOUNT))

    def select_quick_value(self, value: int) -> None:
        """Replace the amount with a preset; out-of-range values are ignored."""
        if not validate_amount(value):
            logger.warning("Ignoring out-of-range quick value %r", value)
            return
        self._set_amount(value)

    def swap_direction(self) -> None:
        """Flip from/to currencies; the amount keeps its numeric value."""
        self._settings.set_reversed(not self.is_reversed)
        logger.debug("Direction swapped: %s -> %s", self.from_currency.value, self.to_currency.value)
        self._notify(self.current_conversion())

    # --- History ---

    def _build_entry(self, modifier: Optional[Modifier]) -> HistoryEntry:
        final_input = self._amount if modifier is None else modifier.apply(self._amount)
        rate = self.effective_rate
        return HistoryEntry(
            id=self._new_id(),
            input_amount=final_input,
            output_amount=round_half_up(final_input * rate),
            from_currency=self.from_currency,
            to_currency=self.to_currency,
            rate_used=rate,
            modifier=modifier,
            timestamp=self._clock(),
        )

    def commit_equals(self, modifier: Optional[Modifier] = None) -> Optional[HistoryEntry]:
        """
        Record the current conversion and reset the amount.

        Args:
            modifier: Optional modifier applied to the amount before converting

        Returns:
            The recorded entry, or None when the amount is zero
        """
        if self._amount == 0:
            return None
        entry = self._build_entry(modifier)
        self._history.append(entry)
        logger.info("Committed %d %s -> %d %s",
                    entry.input_amount, entry.from_currency.value,
                    entry.output_amount, entry.to_currency.value)
        self._set_amount(0)
        return entry

    def snapshot_entry(self) -> Optional[HistoryEntry]:
        """
        Record the current conversion without a modifier and keep the amount.

        Returns:
            The recorded entry, or None when the amount is zero
        """
        if self._amount == 0:
            return None
        entry = self._build_entry(None)
        self._history.append(entry)
        return entry
