# tests/test_persistence.py
"""
Persistence Tests - File Store and Versioned Records

Files that this module USES:
- trcalc.adapters.persistence.file_store (FileStore)
- trcalc.adapters.persistence.schemas (load_* / save_*)
- pytest (testing framework)
"""
import json

import pytest

from trcalc.adapters.persistence.file_store import (
    HISTORY_KEY,
    RATES_KEY,
    SETTINGS_KEY,
    FileStore,
)
from trcalc.adapters.persistence.schemas import (
    load_history,
    load_rates,
    load_settings,
    save_rates,
    save_settings,
)
from trcalc.application.calculator import build_session
from trcalc.domain.errors import StorageError
from trcalc.domain.models import (
    DEFAULT_MULTIPLIERS,
    DEFAULT_QUICK_VALUES,
    CurrencyCode,
    RateSnapshot,
    UserSettings,
)


class TestFileStore:
    def test_missing_key_reads_none(self, store):
        assert store.read(SETTINGS_KEY) is None

    def test_write_then_read(self, store):
        store.write("sample", {"a": [1, 2]})
        assert store.read("sample") == {"a": [1, 2]}
        assert not list(store.data_dir.glob("*.tmp"))

    def test_corrupt_file_is_backed_up(self, store):
        path = store.path_for(HISTORY_KEY)
        path.write_text("{not json", encoding="utf-8")
        assert store.read(HISTORY_KEY) is None
        assert not path.exists()
        assert path.with_suffix(".json.corrupt").exists()

    def test_undecodable_bytes_are_backed_up(self, store):
        path = store.path_for(SETTINGS_KEY)
        path.write_bytes(b"\xff\xfe{bad")
        assert store.read(SETTINGS_KEY) is None
        assert not path.exists()
        assert path.with_suffix(".json.corrupt").exists()

    def test_session_starts_over_undecodable_files(self, store, provider, clock):
        for key in (SETTINGS_KEY, HISTORY_KEY, RATES_KEY):
            store.path_for(key).write_bytes(b"\xff\xfe")
        session = build_session(provider=provider, store=store, clock=clock)
        assert session.settings.settings == UserSettings()
        assert len(session.history) == 0
        assert session.rates.snapshot == RateSnapshot.fallback()

    def test_unserializable_value_raises(self, store):
        with pytest.raises(StorageError):
            store.write("sample", {"bad": object()})

    def test_unsafe_key_rejected(self, store):
        with pytest.raises(ValueError):
            store.path_for("../escape")

    def test_delete(self, store):
        store.write("sample", 1)
        store.delete("sample")
        store.delete("sample")
        assert store.read("sample") is None

    def test_creates_data_dir(self, tmp_path):
        FileStore(tmp_path / "nested" / "dir")
        assert (tmp_path / "nested" / "dir").is_dir()


class TestSettingsRecord:
    def test_written_with_camel_case_and_version(self, store):
        save_settings(store, UserSettings(auto_reset=True))
        raw = json.loads(store.path_for(SETTINGS_KEY).read_text(encoding="utf-8"))
        assert raw["schemaVersion"] == 1
        assert raw["targetCurrency"] == "TRY"
        assert raw["autoReset"] is True
        assert raw["quickValues"] == [50, 100, 500, 1000]

    def test_round_trip(self, store):
        original = UserSettings(target_currency=CurrencyCode.GBP, is_reversed=True)
        save_settings(store, original)
        assert load_settings(store) == original

    def test_version_mismatch_gives_defaults(self, store):
        save_settings(store, UserSettings(target_currency=CurrencyCode.EUR))
        raw = store.read(SETTINGS_KEY)
        raw["schemaVersion"] = 2
        store.write(SETTINGS_KEY, raw)
        assert load_settings(store) == UserSettings()

    def test_unversioned_blob_gives_defaults(self, store):
        store.write(SETTINGS_KEY, {"targetCurrency": "EUR"})
        assert load_settings(store) == UserSettings()

    def test_usd_target_gives_defaults(self, store):
        store.write(SETTINGS_KEY, {"schemaVersion": 1, "targetCurrency": "USD"})
        assert load_settings(store) == UserSettings()

    def test_omitted_presets_use_defaults(self, store):
        store.write(SETTINGS_KEY, {"schemaVersion": 1, "targetCurrency": "EUR"})
        loaded = load_settings(store)
        assert loaded.target_currency is CurrencyCode.EUR
        assert loaded.multipliers == DEFAULT_MULTIPLIERS
        assert loaded.quick_values == DEFAULT_QUICK_VALUES


class TestHistoryRecord:
    def test_invalid_entry_discards_blob(self, store):
        store.write(HISTORY_KEY, {
            "schemaVersion": 1,
            "entries": [{"id": "1", "inputAmount": -4}],
        })
        assert load_history(store) == []


class TestRatesRecord:
    def test_missing_gives_fallback(self, store):
        assert load_rates(store) == RateSnapshot.fallback()

    def test_round_trip(self, store):
        snapshot = RateSnapshot(
            rates={CurrencyCode.TRY: 35.2, CurrencyCode.EUR: 0.93, CurrencyCode.GBP: 0.8},
            timestamp=1234,
        )
        save_rates(store, snapshot)
        assert load_rates(store) == snapshot

    def test_unknown_codes_dropped(self, store):
        store.write(RATES_KEY, {
            "schemaVersion": 1,
            "rates": {"USD": 1, "EUR": 0.9, "GBP": 0.8, "TRY": 35.0, "JPY": 150.0},
            "timestamp": 10,
        })
        snapshot = load_rates(store)
        assert set(snapshot.rates) == set(CurrencyCode)

    def test_non_positive_rate_gives_fallback(self, store):
        store.write(RATES_KEY, {"schemaVersion": 1, "rates": {"TRY": 0}, "timestamp": 10})
        assert load_rates(store).timestamp == 0

    def test_non_finite_rate_gives_fallback(self, store):
        store.path_for(RATES_KEY).write_text(
            '{"schemaVersion": 1, "rates": {"USD": 1, "EUR": 0.9, "GBP": 0.8, "TRY": NaN},'
            ' "timestamp": 10}',
            encoding="utf-8",
        )
        assert load_rates(store) == RateSnapshot.fallback()

    def test_infinite_rate_gives_fallback(self, store):
        store.path_for(RATES_KEY).write_text(
            '{"schemaVersion": 1, "rates": {"USD": 1, "EUR": 0.9, "GBP": Infinity, "TRY": 35},'
            ' "timestamp": 10}',
            encoding="utf-8",
        )
        assert load_rates(store) == RateSnapshot.fallback()

    def test_missing_currency_gives_fallback(self, store):
        store.write(RATES_KEY, {"schemaVersion": 1, "rates": {"USD": 1}, "timestamp": 10})
        assert load_rates(store) == RateSnapshot.fallback()

    def test_incomplete_fresh_table_does_not_skew_conversion(self, store, provider, clock):
        store.write(RATES_KEY, {"schemaVersion": 1, "rates": {"USD": 1}, "timestamp": clock.now})
        session = build_session(provider=provider, store=store, clock=clock)
        assert session.rates.is_stale()
        session.engine.select_quick_value(100)
        assert session.engine.current_conversion().converted_amount == 3450
