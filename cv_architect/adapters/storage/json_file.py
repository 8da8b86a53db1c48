"""Key-value store persisted as a single JSON object on disk.

Notes:
- Writes go to a temporary file that replaces the target, so a crash never
  leaves a half-written store behind.
- Per-process lock only; one worker should own the file.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path

from cv_architect.adapters.storage.base import AbstractKeyValueStore

logger = logging.getLogger(__name__)


class JsonFileKeyValueStore(AbstractKeyValueStore):
    """Stores ``{key: value}`` pairs in one JSON file.

    A missing file reads as an empty store. A file that is not a UTF-8 JSON object
    is treated as empty on read and overwritten on the next write.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = threading.RLock()

    def _read_all(self) -> dict[str, str]:
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return {}

        try:
            data = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning(
                "storage.corrupt_file",
                extra={"path": str(self.path), "error": str(exc)},
            )
            return {}

        if not isinstance(data, dict):
            logger.warning(
                "storage.corrupt_file",
                extra={"path": str(self.path), "error": "top-level value is not an object"},
            )
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read_all()
            data[key] = value
            self._write_all(data)
