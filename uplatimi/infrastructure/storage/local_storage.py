"""
Durable key/value text storage for the payment record (the server-side stand-in for
browser localStorage). One file per key under the storage directory.
"""

from __future__ import annotations

import os
import re
import tempfile
from pathlib import Path
from typing import Protocol

from uplatimi.utils.config import storage_dir
from uplatimi.utils.logger import get_logger

logger = get_logger()

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class KeyValueStorage(Protocol):
    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...


class FileStorage:
    """
    Stores each key as ``<base_dir>/<key>.json``. Whole-value replace, last write wins.

    IO errors are logged and treated as a missing value (read) or a skipped write.
    """

    def __init__(self, base_dir: Path | None = None) -> None:
        self._base = Path(base_dir) if base_dir is not None else storage_dir()

    def _path(self, key: str) -> Path:
        return self._base / f"{_UNSAFE_KEY_CHARS.sub('_', key)}.json"

    def get_item(self, key: str) -> str | None:
        path = self._path(key)
        if not path.is_file():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Storage read failed for %s: %s", key, e)
            return None

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp_name: str | None = None
        try:
            self._base.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", delete=False, dir=self._base, encoding="utf-8", suffix=".tmp"
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(value)
                tmp.flush()
            os.replace(tmp_name, path)
        except OSError as e:
            logger.warning("Storage write failed for %s: %s", key, e)
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)


class MemoryStorage:
    """In-process storage; for tests and sessions that must not touch disk."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.items: dict[str, str] = dict(initial or {})
        self.writes: list[tuple[str, str]] = []

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value
        self.writes.append((key, value))
