# src/trcalc/adapters/console/handlers.py
"""
Console Handlers - Keypad and Command Processing

This module is a line-oriented presentation layer for the calculator. Each
input line is one event: digits, keypad keys, visibility changes or settings
commands (see HELP_TEXT). Events are processed one at a time on the event
loop; the only awaited command is `refresh`.

Files that USE this module:
- trcalc.app (run_console in the composition root)
- tests.test_console (unit tests)

Files that this module USES:
- trcalc.application.calculator (CalculatorSession)
- trcalc.adapters.formatting.formatter (all display formatting)
- trcalc.shared.validators (parse_int for command arguments)
"""
from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Awaitable, Callable, Dict, Optional, Union

from trcalc.adapters.formatting.formatter import (
    format_compact,
    format_conversion,
    format_history,
    format_history_entry,
    format_multiplier,
    format_rate_info,
)
from trcalc.application.calculator import CalculatorSession
from trcalc.application.rate_cache import RateCache
from trcalc.domain.errors import InvalidSettingError
from trcalc.shared.clock import Clock, now_ms
from trcalc.shared.validators import parse_int

logger = logging.getLogger(__name__)

HELP_TEXT = """\
0-9 (or a run of digits)  type digits
c / <                     clear / backspace
=  /  =N                  commit, optionally with multiplier preset N
mN / qN                   apply multiplier preset N / select quick value N
swap                      flip conversion direction
hide / show               application visibility changes
refresh                   fetch fresh rates
history [N] / clear-history  list / clear history
currency CODE             set target currency (EUR, GBP, TRY)
autoreset on|off          toggle auto-reset
theme NAME                light, dark or system
presets                   list multiplier and quick-value presets
help, quit"""

CommandResult = Union[str, Awaitable[str]]


class ConsoleHandlers:
    """Routes console lines to the calculator session and renders the result."""

    def __init__(
        self,
        session: CalculatorSession,
        output: Optional[Callable[[str], None]] = None,
        clock: Clock = now_ms,
        history_preview: int = 5,
    ):
        """
        Initialize handlers and subscribe to rate updates.

        Args:
            session: Calculator session to drive
            output: Sink for asynchronous notices (rate updates)
            clock: Epoch-milliseconds clock used for age labels
            history_preview: Number of history rows shown by `history`
        """
        self.session = session
        self._output = output
        self._clock = clock
        self._history_preview = history_preview
        self._commands: Dict[str, Callable[[str], CommandResult]] = {
            "c": self.clear,
            "<": self.backspace,
            "swap": self.swap,
            "hide": self.hide,
            "show": self.show,
            "refresh": self.refresh,
            "history": self.history,
            "clear-history": self.clear_history,
            "currency": self.currency,
            "autoreset": self.autoreset,
            "theme": self.theme,
            "presets": self.presets,
            "help": self.help,
        }
        self._unsubscribe = session.rates.subscribe(self._on_rates_changed)

    def close(self) -> None:
        self._unsubscribe()

    # --- Rendering ---

    def render(self) -> str:
        """Current display: conversion rows plus the rate/status line."""
        s = self.session
        target = s.engine.target_currency
        lines = [
            format_conversion(s.engine.current_conversion()),
            format_rate_info(target, s.rates.get_rate(target),
                             s.rates.last_updated_label(self._clock()), s.rates.is_loading),
        ]
        if s.rates.has_error:
            lines.append("Rate update failed, using last known rates")
        if s.settings.settings.auto_reset:
            lines.append("Auto-reset: on" + (" (pending)" if s.focus.is_reset_pending else ""))
        return "\n".join(lines)

    def _on_rates_changed(self, rates: RateCache) -> None:
        if self._output is None or rates.is_loading:
            return
        target = self.session.engine.target_currency
        self._output(format_rate_info(target, rates.get_rate(target),
                                      rates.last_updated_label(self._clock())))

    # --- Dispatch ---

    async def handle(self, line: str) -> str:
        """
        Process one input line.

        Args:
            line: Raw console input

        Returns:
            Text to show the user
        """
        line = line.strip()
        if not line:
            return self.render()

        if line.isdigit():
            for ch in line:
                self.session.focus.press_digit(int(ch))
            return self.render()

        if line.startswith("="):
            return self.equals(line[1:].strip())

        if line[0] in "mq" and line[1:].isdigit():
            if line[0] == "m":
                return self.multiplier(line[1:])
            return self.quick_value(line[1:])

        cmd, _, arg = line.partition(" ")
        handler = self._commands.get(cmd.lower())
        if handler is None:
            return f"Unknown command: {cmd}. Type 'help' for commands."

        result = handler(arg.strip())
        if inspect.isawaitable(result):
            result = await result
        return result

    # --- Keypad ---

    def clear(self, _arg: str = "") -> str:
        self.session.focus.clear()
        return self.render()

    def backspace(self, _arg: str = "") -> str:
        self.session.engine.backspace()
        return self.render()

    def equals(self, arg: str = "") -> str:
        modifier = None
        if arg:
            preset = self._preset(arg)
            if preset is None:
                return f"No multiplier preset {arg}"
            modifier = preset.to_modifier()
        entry = self.session.engine.commit_equals(modifier)
        if entry is None:
            return self.render()
        return f"Saved: {format_history_entry(entry)}\n{self.render()}"

    def multiplier(self, arg: str) -> str:
        preset = self._preset(arg)
        if preset is None:
            return f"No multiplier preset {arg}"
        self.session.engine.apply_multiplier(preset.to_modifier())
        return self.render()

    def quick_value(self, arg: str) -> str:
        values = self.session.settings.settings.quick_values
        index = parse_int(arg, min_val=1, max_val=len(values))
        if index is None:
            return f"No quick value {arg}"
        self.session.focus.select_quick_value(values[index - 1])
        return self.render()

    def swap(self, _arg: str = "") -> str:
        self.session.engine.swap_direction()
        return self.render()

    def _preset(self, arg: str):
        presets = self.session.settings.settings.multipliers
        index = parse_int(arg, min_val=1, max_val=len(presets))
        if index is None:
            return None
        return presets[index - 1]

    # --- Visibility ---

    def hide(self, _arg: str = "") -> str:
        entry = self.session.focus.on_visibility_change(False)
        if entry is None:
            return "Hidden"
        return f"Hidden, saved: {format_history_entry(entry)}"

    def show(self, _arg: str = "") -> str:
        self.session.focus.on_visibility_change(True)
        return self.render()

    # --- Rates / history ---

    async def refresh(self, _arg: str = "") -> str:
        ok = await self.session.rates.refresh()
        if not ok:
            return f"Rate update failed: {self.session.rates.last_error}\n{self.render()}"
        return self.render()

    def history(self, arg: str = "") -> str:
        limit = parse_int(arg, min_val=1) if arg else self._history_preview
        if limit is None:
            return "Usage: history [N]"
        return format_history(self.session.history, now=self._clock(), limit=limit)

    def clear_history(self, _arg: str = "") -> str:
        self.session.history.clear()
        return "History cleared"

    # --- Settings ---

    def currency(self, arg: str) -> str:
        try:
            self.session.settings.set_target_currency(arg.upper())
        except InvalidSettingError as e:
            return str(e)
        return self.render()

    def autoreset(self, arg: str) -> str:
        value = arg.lower()
        if value not in ("on", "off"):
            return "Usage: autoreset on|off"
        self.session.settings.set_auto_reset(value == "on")
        return self.render()

    def theme(self, arg: str) -> str:
        try:
            s = self.session.settings.set_theme(arg.lower())
        except InvalidSettingError as e:
            return str(e)
        return f"Theme: {s.theme.value}"

    def presets(self, _arg: str = "") -> str:
        s = self.session.settings.settings
        multipliers = "  ".join(
            f"m{i}: {format_multiplier(p)}" for i, p in enumerate(s.multipliers, start=1)
        )
        quick = "  ".join(
            f"q{i}: {format_compact(v)}" for i, v in enumerate(s.quick_values, start=1)
        )
        return f"Multipliers: {multipliers or '-'}\nQuick values: {quick or '-'}"

    def help(self, _arg: str = "") -> str:
        return HELP_TEXT


async def run_console(
    session: CalculatorSession,
    input_fn: Callable[[str], str] = input,
    output: Callable[[str], None] = print,
) -> None:
    """
    Run the interactive console until EOF or `quit`.

    Schedules the startup rate refresh if the cached snapshot is stale.

    Args:
        session: Calculator session
        input_fn: Blocking line reader (run in a worker thread)
        output: Line writer
    """
    handlers = ConsoleHandlers(session, output=output)
    startup_refresh = session.rates.start()
    session.settings.mark_visited()
    output(handlers.render())
    try:
        while True:
            try:
                line = await asyncio.to_thread(input_fn, "> ")
            except EOFError:
                break
            if line.strip().lower() in ("quit", "exit"):
                break
            output(await handlers.handle(line))
    finally:
        handlers.close()
        if startup_refresh is not None and not startup_refresh.done():
            await startup_refresh
