# src/trcalc/adapters/persistence/schemas.py
"""
Persisted Schemas - Versioned Records for Settings, History and Rates

Each persisted key holds a versioned envelope validated with Pydantic on load.
A missing key, a corrupt file, a different schemaVersion or any validation
error falls back to the documented defaults instead of trusting the blob.

On-disk field names are camelCase (inputAmount, fromCurrency, ...).

Files that USE this module:
- trcalc.application.settings_service (load_settings, save_settings)
- trcalc.application.history_log (load_history, save_history)
- trcalc.application.rate_cache (load_rates, save_rates)

Files that this module USES:
- trcalc.adapters.persistence.file_store (FileStore and key names)
- trcalc.domain.models (domain objects built from records)
"""
from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from trcalc.adapters.persistence.file_store import (
    HISTORY_KEY,
    RATES_KEY,
    SETTINGS_KEY,
    FileStore,
)
from trcalc.domain.models import (
    DEFAULT_MULTIPLIERS,
    DEFAULT_QUICK_VALUES,
    MAX_AMOUNT,
    CurrencyCode,
    HistoryEntry,
    Modifier,
    MultiplierPreset,
    RateSnapshot,
    Theme,
    UserSettings,
)

log = logging.getLogger(__name__)

SCHEMA_VERSION = 1


class _Record(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class ModifierRecord(_Record):
    label: str
    percent: int


class HistoryEntryRecord(_Record):
    id: str
    input_amount: int = Field(ge=0)
    output_amount: int = Field(ge=0)
    from_currency: CurrencyCode
    to_currency: CurrencyCode
    rate_used: float = Field(gt=0)
    modifier: Optional[ModifierRecord] = None
    timestamp: int = Field(ge=0)

    def to_domain(self) -> HistoryEntry:
        modifier = None
        if self.modifier is not None:
            modifier = Modifier(label=self.modifier.label, percent=self.modifier.percent)
        return HistoryEntry(
            id=self.id,
            input_amount=self.input_amount,
            output_amount=self.output_amount,
            from_currency=self.from_currency,
            to_currency=self.to_currency,
            rate_used=self.rate_used,
            modifier=modifier,
            timestamp=self.timestamp,
        )

    @classmethod
    def from_domain(cls, entry: HistoryEntry) -> HistoryEntryRecord:
        modifier = None
        if entry.modifier is not None:
            modifier = ModifierRecord(label=entry.modifier.label, percent=entry.modifier.percent)
        return cls(
            id=entry.id,
            input_amount=entry.input_amount,
            output_amount=entry.output_amount,
            from_currency=entry.from_currency,
            to_currency=entry.to_currency,
            rate_used=entry.rate_used,
            modifier=modifier,
            timestamp=entry.timestamp,
        )


class HistoryRecord(_Record):
    schema_version: Literal[1]
    entries: List[HistoryEntryRecord] = Field(default_factory=list)


class RatesRecord(_Record):
    schema_version: Literal[1]
    rates: Dict[str, float]
    timestamp: int = Field(ge=0)

    @field_validator("rates")
    @classmethod
    def validate_rates(cls, v: Dict[str, float]) -> Dict[str, float]:
        """Every stored rate must be finite and positive, and every currency present."""
        for code, rate in v.items():
            if not math.isfinite(rate) or rate <= 0:
                raise ValueError(f"Invalid rate for {code}: {rate}")
        missing = [c.value for c in CurrencyCode if c.value not in v]
        if missing:
            raise ValueError(f"Missing rates for {', '.join(missing)}")
        return v

    def to_domain(self) -> RateSnapshot:
        known = {c.value: c for c in CurrencyCode}
        rates = {known[code]: rate for code, rate in self.rates.items() if code in known}
        return RateSnapshot(rates=rates, timestamp=self.timestamp)


class MultiplierRecord(_Record):
    id: str
    label: str
    percent: int


class SettingsRecord(_Record):
    schema_version: Literal[1]
    target_currency: CurrencyCode = CurrencyCode.TRY
    auto_reset: bool = False
    first_visit: bool = True
    is_reversed: bool = False
    multipliers: List[MultiplierRecord] = Field(
        default_factory=lambda: [
            MultiplierRecord(id=m.id, label=m.label, percent=m.percent)
            for m in DEFAULT_MULTIPLIERS
        ]
    )
    quick_values: List[int] = Field(default_factory=lambda: list(DEFAULT_QUICK_VALUES))
    theme: Theme = Theme.SYSTEM

    @field_validator("target_currency")
    @classmethod
    def validate_target(cls, v: CurrencyCode) -> CurrencyCode:
        """USD is the pivot and can never be the target."""
        if v is CurrencyCode.USD:
            raise ValueError("targetCurrency cannot be USD")
        return v

    @field_validator("quick_values")
    @classmethod
    def validate_quick_values(cls, v: List[int]) -> List[int]:
        """Quick values must be positive amounts."""
        for value in v:
            if not 0 < value <= MAX_AMOUNT:
                raise ValueError(f"Quick value out of range: {value}")
        return v

    def to_domain(self) -> UserSettings:
        return UserSettings(
            target_currency=self.target_currency,
            auto_reset=self.auto_reset,
            first_visit=self.first_visit,
            is_reversed=self.is_reversed,
            multipliers=tuple(
                MultiplierPreset(id=m.id, label=m.label, percent=m.percent)
                for m in self.multipliers
            ),
            quick_values=tuple(self.quick_values),
            theme=self.theme,
        )

    @classmethod
    def from_domain(cls, s: UserSettings) -> SettingsRecord:
        return cls(
            schema_version=SCHEMA_VERSION,
            target_currency=s.target_currency,
            auto_reset=s.auto_reset,
            first_visit=s.first_visit,
            is_reversed=s.is_reversed,
            multipliers=[
                MultiplierRecord(id=m.id, label=m.label, percent=m.percent)
                for m in s.multipliers
            ],
            quick_values=list(s.quick_values),
            theme=s.theme,
        )


def _dump(record: _Record) -> Dict[str, Any]:
    return record.model_dump(mode="json", by_alias=True)


def _validate(model: type, key: str, data: Any) -> Optional[Any]:
    """Validate a raw blob, logging and returning None on schema mismatch."""
    if data is None:
        return None
    try:
        return model.model_validate(data)
    except ValidationError as e:
        log.warning("Store key %s failed schema validation, using defaults: %s",
                    key, e.error_count())
        log.debug("Validation errors for %s: %s", key, e)
        return None


def load_settings(store: FileStore) -> UserSettings:
    """
    Load user settings, falling back to defaults.

    Returns:
        Stored UserSettings, or UserSettings() when missing/invalid
    """
    record = _validate(SettingsRecord, SETTINGS_KEY, store.read(SETTINGS_KEY))
    if record is None:
        return UserSettings()
    return record.to_domain()


def save_settings(store: FileStore, user_settings: UserSettings) -> None:
    store.write(SETTINGS_KEY, _dump(SettingsRecord.from_domain(user_settings)))


def load_history(store: FileStore) -> List[HistoryEntry]:
    """
    Load history entries (most recent first), falling back to an empty list.
    """
    record = _validate(HistoryRecord, HISTORY_KEY, store.read(HISTORY_KEY))
    if record is None:
        return []
    return [e.to_domain() for e in record.entries]


def save_history(store: FileStore, entries: List[HistoryEntry]) -> None:
    record = HistoryRecord(
        schema_version=SCHEMA_VERSION,
        entries=[HistoryEntryRecord.from_domain(e) for e in entries],
    )
    store.write(HISTORY_KEY, _dump(record))


def load_rates(store: FileStore) -> RateSnapshot:
    """
    Load the cached rate snapshot.

    Returns:
        Stored RateSnapshot, or the never-fetched fallback snapshot
    """
    record = _validate(RatesRecord, RATES_KEY, store.read(RATES_KEY))
    if record is None:
        return RateSnapshot.fallback()
    return record.to_domain()


def save_rates(store: FileStore, snapshot: RateSnapshot) -> None:
    record = RatesRecord(
        schema_version=SCHEMA_VERSION,
        rates={code.value: rate for code, rate in snapshot.rates.items()},
        timestamp=snapshot.timestamp,
    )
    store.write(RATES_KEY, _dump(record))
