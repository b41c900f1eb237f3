# src/trcalc/adapters/persistence/file_store.py
"""
File Store - Key-Value JSON Persistence

This module is the persistence substrate for the calculator: each key maps to
one JSON file in the data directory. Values are opaque JSON-serializable blobs;
typed, versioned records are layered on top by
trcalc.adapters.persistence.schemas.

Writes are atomic (temp file + rename). Corrupt files are backed up next to the
original with a `.corrupt` suffix and then treated as missing.

Files that USE this module:
- trcalc.adapters.persistence.schemas (load_* / save_* read and write keys)
- trcalc.app (creates the store for the configured data directory)

Files that this module USES:
- trcalc.config (settings for the default data directory)
- trcalc.domain.errors (StorageError for failed writes)
"""
from __future__ import annotations

import json
import logging
import os
import re
import shutil
import tempfile
from pathlib import Path
from typing import Any, Optional, Union

from trcalc.domain.errors import StorageError

log = logging.getLogger(__name__)

SETTINGS_KEY = "trcalc-settings"
HISTORY_KEY = "trcalc-history"
RATES_KEY = "trcalc-rates"

_KEY_PATTERN = re.compile(r'^[A-Za-z0-9_.-]+$')


class FileStore:
    """JSON file per key under a single data directory."""

    def __init__(self, data_dir: Optional[Union[str, Path]] = None):
        """
        Initialize file store.

        Args:
            data_dir: Directory holding the JSON files (defaults to settings.data_dir)
        """
        if data_dir is None:
            from trcalc.config import settings
            data_dir = settings.data_dir
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str) -> Path:
        """
        Get the file path backing a key.

        Raises:
            ValueError: If the key contains characters unsafe for a file name
        """
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid store key: {key!r}")
        return self.data_dir / f"{key}.json"

    def read(self, key: str) -> Optional[Any]:
        """
        Read the JSON value stored under a key.

        Handles corrupt files gracefully by backing them up and returning None.

        Returns:
            Decoded JSON value, or None if missing or unreadable
        """
        p = self.path_for(key)
        if not p.exists():
            return None

        try:
            with p.open("r", encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            backup_path = p.with_suffix(".json.corrupt")
            try:
                shutil.copy2(p, backup_path)
                p.unlink()
                log.warning("Store key %s corrupted (undecodable JSON), backed up to %s: %s",
                            key, backup_path, e)
            except OSError as backup_error:
                log.error("Failed to backup corrupt store file %s: %s", p, backup_error)
            return None
        except OSError as e:
            log.error("Unexpected error reading store key %s: %s", key, e)
            return None

    def write(self, key: str, value: Any) -> None:
        """
        Write a JSON value under a key using an atomic replace.

        Args:
            key: Store key
            value: JSON-serializable value

        Raises:
            StorageError: If the value cannot be serialized or written
        """
        p = self.path_for(key)
        temp_fd, temp_path = tempfile.mkstemp(
            suffix=".json.tmp",
            dir=str(p.parent),
            text=True,
        )

        try:
            with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
                json.dump(value, f, ensure_ascii=False, indent=2)
                f.flush()
                os.fsync(f.fileno())

            os.replace(temp_path, str(p))
        except (OSError, TypeError, ValueError) as e:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise StorageError(f"Failed to save store key {key}: {e}") from e

    def delete(self, key: str) -> None:
        """Remove a key if present."""
        p = self.path_for(key)
        if p.exists():
            p.unlink()
