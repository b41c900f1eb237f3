# src/trcalc/adapters/formatting/formatter.py
"""
Display Formatter - Text Formatting and Presentation

This module turns engine, cache and history values into display text: grouped
amounts with currency symbols, compact quick-value labels, the rate info line,
"last updated" labels and history lines.

Files that USE this module:
- trcalc.application.rate_cache (format_last_updated)
- trcalc.adapters.console.handlers (all display formatting)
- tests.test_formatter (unit tests)

Files that this module USES:
- trcalc.domain.models (CurrencyCode, ConversionView, HistoryEntry, MultiplierPreset)
"""
from __future__ import annotations

from typing import Iterable, List, Optional

from trcalc.domain.models import ConversionView, CurrencyCode, HistoryEntry, MultiplierPreset

_MINUTE_MS = 60 * 1000


def format_amount(value: int) -> str:
    """
    Format a whole amount with thousands separators.

    Args:
        value: Amount to format

    Returns:
        e.g. '1,234,567'
    """
    return f"{value:,}"


def currency_symbol(code: CurrencyCode) -> str:
    try:
        return CurrencyCode(code).symbol
    except ValueError:
        return str(code)


def format_money(value: int, code: CurrencyCode) -> str:
    """Amount prefixed by its currency symbol, e.g. '₺34,500'."""
    return f"{currency_symbol(code)}{format_amount(value)}"


def _one_decimal(value: float) -> str:
    return str(int(value)) if value % 1 == 0 else f"{value:.1f}"


def format_compact(value: int) -> str:
    """
    Short label for a quick-value button.

    Returns:
        '50', '1k', '2.5k', '1m', '1.5m'
    """
    if value >= 1_000_000:
        return f"{_one_decimal(value / 1_000_000)}m"
    if value >= 1000:
        return f"{_one_decimal(value / 1000)}k"
    return str(value)


def format_percent(percent: int) -> str:
    return f"{percent:+d}%"


def format_multiplier(preset: MultiplierPreset) -> str:
    """e.g. '+KDV (+18%)'."""
    return f"{preset.label} ({format_percent(preset.percent)})"


def format_last_updated(timestamp: int, now: int) -> str:
    """
    Describe how long ago the rate table was fetched.

    Args:
        timestamp: Fetch time in epoch milliseconds (0 = never)
        now: Current epoch milliseconds

    Returns:
        'Never', 'Just now', 'N min ago' or 'N hour(s) ago'
    """
    if not timestamp:
        return "Never"
    minutes = max(now - timestamp, 0) // _MINUTE_MS
    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes} min ago"
    hours = minutes // 60
    return f"{hours} hour{'s' if hours > 1 else ''} ago"


def format_age_short(timestamp: int, now: int) -> str:
    """
    Compact age for history rows.

    Returns:
        'now', '5m', '3h' or '2d'
    """
    minutes = max(now - timestamp, 0) // _MINUTE_MS
    if minutes < 1:
        return "now"
    if minutes < 60:
        return f"{minutes}m"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h"
    return f"{hours // 24}d"


def format_rate_info(target: CurrencyCode, target_rate: float,
                     updated_label: str, is_loading: bool = False) -> str:
    """
    Status line for the target currency rate.

    Always quoted as 1 USD in the target currency, regardless of direction.

    Returns:
        e.g. '1 USD = 34.50 TRY · 5 min ago'
    """
    status = "Updating..." if is_loading else updated_label
    return f"1 USD = {target_rate:.2f} {CurrencyCode(target).value} · {status}"


def format_conversion(view: ConversionView) -> str:
    """
    Two-row display of the in-progress amount and its converted counterpart.
    """
    return (
        f"{format_money(view.displayed_amount, view.from_currency)} {view.from_currency.value}\n"
        f"{format_money(view.converted_amount, view.to_currency)} {view.to_currency.value}"
    )


def format_history_entry(entry: HistoryEntry, now: Optional[int] = None) -> str:
    """
    One history row, e.g. '$100 (+KDV) → ₺4,071 · 5m'.

    Args:
        entry: Entry to format
        now: Current epoch milliseconds; the age suffix is omitted when None
    """
    line = format_money(entry.input_amount, entry.from_currency)
    if entry.modifier is not None:
        line += f" ({entry.modifier.label})"
    line += f" → {format_money(entry.output_amount, entry.to_currency)}"
    if now is not None:
        line += f" · {format_age_short(entry.timestamp, now)}"
    return line


def format_history(entries: Iterable[HistoryEntry], now: Optional[int] = None,
                   limit: Optional[int] = None) -> str:
    lines: List[str] = []
    for i, entry in enumerate(entries):
        if limit is not None and i >= limit:
            break
        lines.append(format_history_entry(entry, now))
    if not lines:
        return "No history yet"
    return "\n".join(lines)
