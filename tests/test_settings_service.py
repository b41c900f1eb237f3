# tests/test_settings_service.py
"""
Settings Service Tests - Preference Updates and Persistence

Files that this module USES:
- trcalc.application.settings_service (SettingsService)
- trcalc.domain.errors (InvalidSettingError)
- pytest (testing framework)
"""
import pytest

from trcalc.application.settings_service import SettingsService
from trcalc.domain.errors import InvalidSettingError
from trcalc.domain.models import (
    DEFAULT_MULTIPLIERS,
    DEFAULT_QUICK_VALUES,
    CurrencyCode,
    Theme,
)


class TestDefaults:
    def test_defaults_without_store(self):
        s = SettingsService().settings
        assert s.target_currency is CurrencyCode.TRY
        assert s.auto_reset is False
        assert s.first_visit is True
        assert s.is_reversed is False
        assert s.multipliers == DEFAULT_MULTIPLIERS
        assert s.quick_values == DEFAULT_QUICK_VALUES
        assert s.theme is Theme.SYSTEM

    def test_defaults_with_empty_store(self, store):
        assert SettingsService(store).settings.quick_values == DEFAULT_QUICK_VALUES


class TestTargetCurrency:
    def test_set_by_code_string(self):
        service = SettingsService()
        service.set_target_currency("GBP")
        assert service.settings.target_currency is CurrencyCode.GBP

    def test_usd_rejected(self):
        service = SettingsService()
        with pytest.raises(InvalidSettingError):
            service.set_target_currency(CurrencyCode.USD)
        assert service.settings.target_currency is CurrencyCode.TRY

    def test_unknown_rejected(self):
        with pytest.raises(InvalidSettingError):
            SettingsService().set_target_currency("JPY")


class TestFlags:
    def test_toggle_auto_reset(self):
        service = SettingsService()
        service.toggle_auto_reset()
        assert service.settings.auto_reset is True
        service.toggle_auto_reset()
        assert service.settings.auto_reset is False

    def test_theme(self):
        service = SettingsService()
        service.set_theme("dark")
        assert service.settings.theme is Theme.DARK
        with pytest.raises(InvalidSettingError):
            service.set_theme("neon")

    def test_mark_visited_notifies_once(self):
        service = SettingsService()
        seen = []
        service.subscribe(seen.append)
        service.mark_visited()
        service.mark_visited()
        assert service.settings.first_visit is False
        assert len(seen) == 1


class TestQuickValues:
    def test_added_sorted(self):
        service = SettingsService()
        service.add_quick_value(250)
        assert service.settings.quick_values == (50, 100, 250, 500, 1000)

    def test_duplicates_and_invalid_ignored(self):
        service = SettingsService()
        service.add_quick_value(100)
        service.add_quick_value(0)
        service.add_quick_value(-5)
        assert service.settings.quick_values == DEFAULT_QUICK_VALUES

    def test_remove(self):
        service = SettingsService()
        service.remove_quick_value(500)
        assert 500 not in service.settings.quick_values


class TestMultipliers:
    def test_add_assigns_unique_id(self):
        service = SettingsService()
        first = service.add_multiplier(" +10 ", 10)
        second = service.add_multiplier("-5", -5)
        assert first.label == "+10"
        assert first.id != second.id
        assert service.settings.multipliers[-2:] == (first, second)

    def test_blank_label_ignored(self):
        service = SettingsService()
        assert service.add_multiplier("   ", 10) is None
        assert service.settings.multipliers == DEFAULT_MULTIPLIERS

    def test_update(self):
        service = SettingsService()
        service.update_multiplier("1", percent=20)
        preset = service.settings.multipliers[0]
        assert preset.label == "+KDV"
        assert preset.percent == 20

    def test_unknown_id_ignored(self):
        service = SettingsService()
        before = service.settings
        assert service.update_multiplier("missing", label="x") is before
        assert service.remove_multiplier("missing") is before

    def test_remove(self):
        service = SettingsService()
        service.remove_multiplier("2")
        assert [p.id for p in service.settings.multipliers] == ["1", "3"]


class TestPersistence:
    def test_changes_survive_reload(self, store):
        service = SettingsService(store)
        service.set_target_currency(CurrencyCode.EUR)
        service.set_auto_reset(True)
        service.set_reversed(True)
        preset = service.add_multiplier("+8", 8)
        service.add_quick_value(2000)

        reloaded = SettingsService(store).settings
        assert reloaded.target_currency is CurrencyCode.EUR
        assert reloaded.auto_reset is True
        assert reloaded.is_reversed is True
        assert preset in reloaded.multipliers
        assert reloaded.quick_values[-1] == 2000
