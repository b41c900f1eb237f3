# src/trcalc/adapters/__init__.py
"""
Adapters Layer - External Interfaces

This package contains all adapters for external systems:
- Providers (rate APIs)
- Persistence (storage)
- Formatting (display text)
- Console (presentation driver)
"""

__all__ = []
