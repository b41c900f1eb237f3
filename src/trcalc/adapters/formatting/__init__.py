# src/trcalc/adapters/formatting/__init__.py
"""
Formatting Adapters - Display Text

This package turns calculator state into display text.
"""

from trcalc.adapters.formatting.formatter import (
    format_amount,
    format_compact,
    format_conversion,
    format_history,
    format_history_entry,
    format_last_updated,
    format_money,
    format_rate_info,
)

__all__ = [
    "format_amount",
    "format_compact",
    "format_conversion",
    "format_history",
    "format_history_entry",
    "format_last_updated",
    "format_money",
    "format_rate_info",
]
