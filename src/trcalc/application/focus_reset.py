# src/trcalc/application/focus_reset.py
"""
Focus Reset Coordinator - Visibility-Driven Auto-Reset State Machine

When auto-reset is on and the user leaves the app with an amount on screen,
the conversion is recorded immediately (so nothing is lost) but the screen is
not cleared. The clear is deferred until the user starts typing again after
coming back, so a quick glance at another app does not wipe the display.

States:
    ACTIVE                      normal input
    BACKGROUNDED_PENDING_RESET  hidden after a snapshot was taken
    RESET_ARMED                 visible again; next digit/quick-value/clear starts fresh

Engine and settings are read when an event fires, never captured at
construction time.

Files that USE this module:
- trcalc.adapters.console.handlers (visibility commands and digit/quick-value/clear input)
- trcalc.app (composition root)

Files that this module USES:
- trcalc.application.conversion_engine (ConversionEngine)
- trcalc.application.settings_service (auto_reset flag)
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from trcalc.application.conversion_engine import ConversionEngine
from trcalc.application.settings_service import SettingsService
from trcalc.domain.models import HistoryEntry

logger = logging.getLogger(__name__)


class FocusState(str, Enum):
    ACTIVE = "active"
    BACKGROUNDED_PENDING_RESET = "backgrounded_pending_reset"
    RESET_ARMED = "reset_armed"


class FocusResetCoordinator:
    """Reacts to visibility transitions on top of the conversion engine."""

    def __init__(self, engine: ConversionEngine, settings: SettingsService):
        self._engine = engine
        self._settings = settings
        self._state = FocusState.ACTIVE

    @property
    def state(self) -> FocusState:
        return self._state

    @property
    def is_reset_pending(self) -> bool:
        """True once a background excursion has armed the deferred clear."""
        return self._state is FocusState.RESET_ARMED

    def _transition(self, new_state: FocusState) -> None:
        logger.debug("Focus state %s -> %s", self._state.value, new_state.value)
        self._state = new_state

    # --- Visibility events ---

    def on_visibility_change(self, visible: bool) -> Optional[HistoryEntry]:
        """
        Dispatch a visibility transition.

        Args:
            visible: New visibility of the application

        Returns:
            The snapshot entry if hiding recorded one, otherwise None
        """
        if visible:
            self.on_show()
            return None
        return self.on_hide()

    def on_hide(self) -> Optional[HistoryEntry]:
        """
        Handle the app going to the background.

        From ACTIVE with auto-reset on and a non-zero amount, records the
        current conversion (amount kept) and moves to BACKGROUNDED_PENDING_RESET.
        Every other case leaves the state unchanged.
        """
        if self._state is not FocusState.ACTIVE:
            return None
        if not self._settings.settings.auto_reset or self._engine.amount == 0:
            return None

        entry = self._engine.snapshot_entry()
        self._transition(FocusState.BACKGROUNDED_PENDING_RESET)
        logger.info("App hidden, snapshot %s recorded, reset deferred", entry.id if entry else None)
        return entry

    def on_show(self) -> None:
        """Arm the deferred reset when returning from a snapshotting excursion."""
        if self._state is FocusState.BACKGROUNDED_PENDING_RESET:
            self._transition(FocusState.RESET_ARMED)

    # --- Input events that honour an armed reset ---

    def _consume_armed_reset(self) -> bool:
        if self._state is not FocusState.RESET_ARMED:
            return False
        self._engine.clear()
        self._transition(FocusState.ACTIVE)
        logger.info("Armed reset consumed, starting a fresh amount")
        return True

    def press_digit(self, digit: int) -> None:
        """Type a digit, starting from zero if a reset is armed."""
        self._consume_armed_reset()
        self._engine.append_digit(digit)

    def select_quick_value(self, value: int) -> None:
        """Select a quick value, disarming any pending reset first."""
        self._consume_armed_reset()
        self._engine.select_quick_value(value)

    def clear(self) -> None:
        """Explicit clear: zero the amount and disarm any pending reset."""
        if not self._consume_armed_reset():
            self._engine.clear()
