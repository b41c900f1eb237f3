# src/trcalc/app.py
"""
Application Entry Point - Calculator Initialization and Startup

This module serves as the composition root for TRCalc.
It wires all dependencies and starts the console calculator.

Files that USE this module:
- python -m trcalc / the `trcalc` console script

Files that this module USES:
- trcalc.shared.logging_conf (setup_logging for logging configuration)
- trcalc.config (settings for configuration management)
- trcalc.adapters.persistence.file_store (FileStore for the data directory)
- trcalc.application.rates_service (build_rate_provider)
- trcalc.application.calculator (build_session)
- trcalc.adapters.console.handlers (run_console)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations for forward references

import asyncio  # Event loop for the console and rate refreshes
import logging  # Standard library for logging messages and errors
import os  # Working directory for startup diagnostics
from typing import Optional  # Type hints for optional values

from trcalc.shared.logging_conf import setup_logging  # Configure logging with file rotation
from trcalc.adapters.persistence.file_store import FileStore  # JSON key-value persistence
from trcalc.application.rates_service import build_rate_provider  # Provider chain with fallback
from trcalc.application.calculator import CalculatorSession, build_session  # Core wiring
from trcalc.adapters.console.handlers import run_console  # Console presentation layer


def create_session(config=None, store: Optional[FileStore] = None) -> CalculatorSession:
    """
    Build a calculator session from configuration.

    Args:
        config: Settings instance (defaults to the global settings)
        store: Optional store override (defaults to a FileStore in config.data_dir)

    Returns:
        Wired CalculatorSession
    """
    if config is None:
        from trcalc.config import settings as config

    if store is None:
        store = FileStore(config.data_dir)
    provider = build_rate_provider(
        app_id=config.open_exchange_rates_app_id,
        fallback_enabled=config.rate_fallback_enabled,
    )
    return build_session(
        provider=provider,
        store=store,
        ttl_ms=config.rate_cache_ttl_ms,
        history_limit=config.history_limit,
    )


def main() -> None:
    """
    Initialize and start the console calculator.

    This function:
    1. Sets up logging from configuration
    2. Wires the store, provider chain and calculator session
    3. Runs the console loop (scheduling one startup refresh if rates are stale)
    """
    from trcalc.config import settings

    setup_logging(
        level=settings.log_level,
        log_file=settings.log_file,
        log_dir=settings.log_dir,
        log_stdout=settings.log_stdout,
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
    )
    logger = logging.getLogger(__name__)
    logger.info("Working directory: %s", os.getcwd())
    logger.info("Data directory: %s", settings.data_dir)

    session = create_session(settings)

    try:
        asyncio.run(run_console(session))
    except KeyboardInterrupt:
        logger.info("Calculator stopped by user (KeyboardInterrupt)")


if __name__ == "__main__":
    main()
