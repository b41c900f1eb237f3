# src/trcalc/__init__.py
"""
TRCalc - Currency Conversion Calculator Core

A keypad-driven USD ↔ EUR/GBP/TRY conversion engine with a cached
exchange-rate table, a bounded conversion history, and a visibility-aware
auto-reset state machine.
"""

__version__ = "1.0.0"
