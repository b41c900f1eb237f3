# src/trcalc/shared/validators.py
"""
Input Validation Utilities - Settings and Keypad Input Validation

This module provides validation functions for configuration values and for
user-editable presets (quick values, multiplier labels and percentages).

Files that USE this module:
- trcalc.config.settings (uses validate_api_key in Settings field validators)
- trcalc.application.settings_service (validates presets before persisting)
- trcalc.adapters.console.handlers (parses numeric command arguments)

Files that this module USES:
- trcalc.domain.models (MAX_AMOUNT bound)
"""
import re
from typing import Optional

from trcalc.domain.models import MAX_AMOUNT


def validate_api_key(api_key: str, min_length: int = 10) -> bool:
    """
    Validate API key / app id format.

    Args:
        api_key: API key to validate
        min_length: Minimum length requirement

    Returns:
        True if valid, False otherwise
    """
    if not api_key:
        return False

    return len(api_key) >= min_length and bool(re.match(r'^[A-Za-z0-9]+$', api_key))


def validate_amount(value: int) -> bool:
    """
    Check that a value is a valid calculator amount (0..MAX_AMOUNT inclusive).

    Args:
        value: Candidate amount

    Returns:
        True if valid, False otherwise
    """
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return 0 <= value <= MAX_AMOUNT


def validate_quick_value(value: int) -> bool:
    """Quick values must be positive amounts."""
    return validate_amount(value) and value > 0


def validate_multiplier_label(label: str, max_length: int = 16) -> bool:
    """
    Validate a multiplier preset label (e.g. '+KDV').

    Args:
        label: Label to validate
        max_length: Maximum allowed length after stripping

    Returns:
        True if valid, False otherwise
    """
    if not label or label.isspace():
        return False
    return len(label.strip()) <= max_length


def parse_int(value: str, min_val: Optional[int] = None,
              max_val: Optional[int] = None) -> Optional[int]:
    """
    Parse a signed integer string, returning None when it is not a valid integer
    or falls outside the given bounds.

    Args:
        value: String value to parse
        min_val: Minimum allowed value
        max_val: Maximum allowed value

    Returns:
        Parsed integer or None
    """
    if not value:
        return None

    if not re.match(r'^[+-]?\d+$', value.strip()):
        return None
    num_val = int(value.strip())
    if min_val is not None and num_val < min_val:
        return None
    if max_val is not None and num_val > max_val:
        return None
    return num_val
