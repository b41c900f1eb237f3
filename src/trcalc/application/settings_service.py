# src/trcalc/application/settings_service.py
"""
Settings Service - Persisted User Preferences

This module owns the UserSettings record: target currency, auto-reset,
conversion direction, multiplier and quick-value presets, theme and the
first-visit flag. Every change replaces the immutable record and persists it
as a whole.

Files that USE this module:
- trcalc.application.conversion_engine (reads target_currency, is_reversed; swaps direction)
- trcalc.application.focus_reset (reads auto_reset at event time)
- trcalc.adapters.console.handlers (settings commands)

Files that this module USES:
- trcalc.adapters.persistence.schemas (load_settings, save_settings)
- trcalc.shared.validators (preset validation)
"""
from __future__ import annotations

import logging
from typing import Optional, Union

from trcalc.adapters.persistence.file_store import FileStore
from trcalc.adapters.persistence.schemas import load_settings, save_settings
from trcalc.domain.errors import InvalidSettingError, StorageError
from trcalc.domain.models import CurrencyCode, MultiplierPreset, Theme, UserSettings
from trcalc.shared.clock import IdGenerator
from trcalc.shared.observable import Observable
from trcalc.shared.validators import validate_multiplier_label, validate_quick_value

logger = logging.getLogger(__name__)


class SettingsService(Observable[UserSettings]):
    """Manages the user's calculator settings with persistence."""

    def __init__(self, store: Optional[FileStore] = None,
                 id_factory: Optional[IdGenerator] = None):
        """
        Initialize settings service and load persisted settings if available.

        Args:
            store: Optional key-value store
            id_factory: Id source for new multiplier presets
        """
        super().__init__()
        self._store = store
        self._new_id = id_factory or IdGenerator()
        self._settings = load_settings(store) if store is not None else UserSettings()

    @property
    def settings(self) -> UserSettings:
        return self._settings

    def _update(self, **changes) -> UserSettings:
        self._settings = self._settings.evolve(**changes)
        if self._store is not None:
            try:
                save_settings(self._store, self._settings)
            except StorageError as e:
                # Still update in-memory settings even if persistence fails
                logger.error("Failed to persist settings: %s", e)
        self._notify(self._settings)
        return self._settings

    def set_target_currency(self, code: Union[CurrencyCode, str]) -> UserSettings:
        """
        Change the non-USD side of the conversion.

        Raises:
            InvalidSettingError: If the code is unknown or USD
        """
        try:
            code = CurrencyCode(code)
        except ValueError:
            raise InvalidSettingError(f"Unknown currency: {code}")
        if code is CurrencyCode.USD:
            raise InvalidSettingError("USD is the pivot currency and cannot be the target")
        logger.info("Target currency set to %s", code.value)
        return self._update(target_currency=code)

    def set_auto_reset(self, enabled: bool) -> UserSettings:
        logger.info("Auto-reset %s", "enabled" if enabled else "disabled")
        return self._update(auto_reset=bool(enabled))

    def toggle_auto_reset(self) -> UserSettings:
        return self.set_auto_reset(not self._settings.auto_reset)

    def set_reversed(self, reversed_: bool) -> UserSettings:
        return self._update(is_reversed=bool(reversed_))

    def set_theme(self, theme: Union[Theme, str]) -> UserSettings:
        try:
            theme = Theme(theme)
        except ValueError:
            raise InvalidSettingError(f"Unknown theme: {theme}")
        return self._update(theme=theme)

    def mark_visited(self) -> UserSettings:
        if not self._settings.first_visit:
            return self._settings
        return self._update(first_visit=False)

    # --- Quick values ---

    def add_quick_value(self, value: int) -> UserSettings:
        """
        Add a quick-value preset, keeping the list sorted ascending.

        Invalid or duplicate values are ignored.
        """
        if not validate_quick_value(value) or value in self._settings.quick_values:
            logger.debug("Ignoring quick value %r", value)
            return self._settings
        return self._update(quick_values=tuple(sorted(self._settings.quick_values + (value,))))

    def remove_quick_value(self, value: int) -> UserSettings:
        if value not in self._settings.quick_values:
            return self._settings
        return self._update(
            quick_values=tuple(v for v in self._settings.quick_values if v != value)
        )

    # --- Multipliers ---

    def add_multiplier(self, label: str, percent: int) -> Optional[MultiplierPreset]:
        """
        Add a multiplier preset.

        Args:
            label: Button label (blank labels are ignored)
            percent: Signed whole percentage

        Returns:
            The new preset, or None if the input was ignored
        """
        if not validate_multiplier_label(label):
            logger.debug("Ignoring multiplier with invalid label %r", label)
            return None
        preset = MultiplierPreset(id=self._new_id(), label=label.strip(), percent=int(percent))
        self._update(multipliers=self._settings.multipliers + (preset,))
        return preset

    def update_multiplier(self, preset_id: str, label: Optional[str] = None,
                          percent: Optional[int] = None) -> UserSettings:
        """Change the label and/or percent of an existing preset; unknown ids are ignored."""
        changed = False
        presets = []
        for preset in self._settings.multipliers:
            if preset.id == preset_id:
                new_label = label.strip() if label is not None and validate_multiplier_label(label) else preset.label
                new_percent = int(percent) if percent is not None else preset.percent
                preset = MultiplierPreset(id=preset.id, label=new_label, percent=new_percent)
                changed = True
            presets.append(preset)
        if not changed:
            return self._settings
        return self._update(multipliers=tuple(presets))

    def remove_multiplier(self, preset_id: str) -> UserSettings:
        presets = tuple(p for p in self._settings.multipliers if p.id != preset_id)
        if len(presets) == len(self._settings.multipliers):
            return self._settings
        return self._update(multipliers=presets)
