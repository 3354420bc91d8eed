from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)


class KeyValueStore:
    """Opaque key-value storage persisted as one JSON object on disk.

    Values must be JSON serialisable. A missing or unreadable file behaves like
    an empty store, and a failed write is logged and skipped.
    """

    def __init__(self, path: Path | str | None = None) -> None:
        self._path = Path(path) if path is not None else self._default_path()
        self._data: Dict[str, Any] = {}
        self._load()

    @staticmethod
    def _default_path() -> Path:
        return Path.home() / ".nebula-match" / "save.json"

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> None:
        try:
            with self._path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except FileNotFoundError:
            self._data = {}
            return
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("Ignoring unreadable save file %s: %s", self._path, exc)
            self._data = {}
            return
        if not isinstance(payload, dict):
            logger.warning("Ignoring save file %s: expected an object", self._path)
            self._data = {}
            return
        self._data = payload

    def _flush(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("w", encoding="utf-8") as handle:
                json.dump(self._data, handle, indent=2, sort_keys=True)
        except OSError as exc:
            # The in-memory values stay authoritative for the rest of the session.
            logger.warning("Could not write save file %s: %s", self._path, exc)

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._flush()

    def clear(self) -> None:
        self._data = {}
        self._flush()


class MemoryStore(KeyValueStore):
    """In-memory store for tests and throwaway sessions."""

    def __init__(self, initial: Dict[str, Any] | None = None) -> None:
        self._path = Path()
        self._data = dict(initial or {})

    def _flush(self) -> None:
        return
