# src/trcalc/shared/__init__.py
"""
Shared Utilities - Cross-cutting Concerns

This package contains shared utilities used across all layers:
- Validation
- Clock and id generation
- Logging configuration
"""

from trcalc.shared.validators import (
    parse_int,
    validate_amount,
    validate_api_key,
    validate_multiplier_label,
    validate_quick_value,
)
from trcalc.shared.clock import IdGenerator, now_ms

__all__ = [
    "validate_api_key",
    "validate_amount",
    "validate_quick_value",
    "validate_multiplier_label",
    "parse_int",
    "IdGenerator",
    "now_ms",
]
