"""
JSON file store adapter - Implements KeyValueStore protocol.

A small key-value store backed by one JSON object on disk, used as the
desktop client's local secure store.

- Writes are staged in memory and only reach disk on save().
- save() writes a temporary file in the same directory and moves it
  over the target with os.replace(), so the file on disk is either the
  old state or the new state, never a mix.
- The file is created with 0600 permissions.
- A missing file loads as empty. An unreadable or non-object file is
  logged and also loads as empty.
"""

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class JsonFileStore:
    """
    Implements KeyValueStore protocol over a JSON file.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()
        self._data = self._load()

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str) -> Any | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def save(self) -> None:
        """
        Flush the in-memory state to disk atomically.

        Raises:
            OSError: If the directory or file could not be written
        """
        with self._lock:
            payload = json.dumps(self._data, indent=2)

        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=".store-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, self._path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _load(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}

        try:
            with open(self._path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Local store unreadable, starting empty: {self._path.name} - {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Local store is not a JSON object, starting empty: {self._path.name}")
            return {}
        return data
