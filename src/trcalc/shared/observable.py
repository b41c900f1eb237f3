# src/trcalc/shared/observable.py
"""
Observable - Subscription Contract for the Presentation Layer

Services expose computed display values through subscribe(); the presentation
layer renders whatever it is handed and never reaches into service state.

Files that USE this module:
- trcalc.application.rate_cache, history_log, settings_service, conversion_engine
"""
from __future__ import annotations

import logging
from typing import Callable, Generic, List, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
Listener = Callable[[T], None]


class Observable(Generic[T]):
    """Keeps a list of listeners and notifies them with a value."""

    def __init__(self):
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener.

        Args:
            listener: Callable receiving the published value

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, value: T) -> None:
        for listener in list(self._listeners):
            try:
                listener(value)
            except Exception:
                # A broken view must not break the calculator
                logger.exception("Listener %r failed", listener)
