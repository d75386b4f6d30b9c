"""Persistence utilities for the finance tracker core."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from .exceptions import PersistenceError


class JSONStorage:
    """Simple file-based JSON storage with crash-safe writes.

    Each key maps to one file under ``base_path`` holding a single JSON
    document that is always overwritten as a whole.
    """

    def __init__(self, base_path: Path) -> None:
        self._base_path = Path(base_path)
        try:
            self._base_path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PersistenceError(f"Unable to create data directory {self._base_path}") from exc

    def load(self, key: str) -> Optional[Any]:
        """Return the decoded document stored under ``key`` or ``None`` if absent."""
        path = self._base_path / key
        if not path.exists():
            return None
        try:
            with path.open("r", encoding="utf-8") as handle:
                return json.load(handle)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise PersistenceError(f"Corrupted JSON data in {path}") from exc
        except OSError as exc:
            raise PersistenceError(f"Unable to read from {path}") from exc

    def save(self, key: str, document: Any) -> None:
        path = self._base_path / key
        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            with temp_path.open("w", encoding="utf-8") as handle:
                json.dump(document, handle, indent=2)
                handle.flush()
            # Use replace for atomic move on POSIX; ensures crash-safe persistence.
            temp_path.replace(path)
        except (OSError, TypeError, ValueError) as exc:
            raise PersistenceError(f"Unable to write to {path}") from exc

    @property
    def base_path(self) -> Path:
        return self._base_path
