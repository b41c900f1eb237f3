# src/trcalc/adapters/console/__init__.py
"""
Console Adapter - Line-Oriented Presentation Layer

Drives a calculator session from text commands.
"""

from trcalc.adapters.console.handlers import ConsoleHandlers, run_console

__all__ = ["ConsoleHandlers", "run_console"]
