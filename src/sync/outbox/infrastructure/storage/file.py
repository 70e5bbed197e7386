"""JSON file key-value storage.

All keys live in one JSON object on disk. Writes go to a temporary file
in the same directory and are moved into place with os.replace(), so a
crash mid-write leaves the previous contents intact. Blocking file I/O
runs in a worker thread to keep the event loop responsive.
"""

from __future__ import annotations

import asyncio
import json
import os
import tempfile
from pathlib import Path

from outbox.ports.exceptions import StorageError
from outbox.ports.protocols import KeyValueStorage


class JsonFileStorage(KeyValueStorage):
    """KeyValueStorage persisted to a single JSON file."""

    def __init__(self, path: Path | str) -> None:
        """Initialize the storage.

        Args:
            path: File holding the key-value document. Parent directories
                are created on first write.
        """
        self._path = Path(path)
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        """File holding the key-value document."""
        return self._path

    async def get(self, key: str) -> str | None:
        """Return the value stored under key, or None.

        Raises:
            StorageError: If the file exists but cannot be read or parsed
        """
        async with self._lock:
            values = await asyncio.to_thread(self._read_all)
        return values.get(key)

    async def set(self, key: str, value: str) -> None:
        """Store value under key, keeping the other keys.

        Raises:
            StorageError: If the file cannot be written
        """
        async with self._lock:
            await asyncio.to_thread(self._write_key, key, value)

    def _read_all(self) -> dict[str, str]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise StorageError(f"Cannot read {self._path}: {e}") from e
        except UnicodeDecodeError as e:
            raise StorageError(f"Corrupt storage file {self._path}: {e}") from e

        try:
            data = json.loads(raw)
        except (ValueError, RecursionError) as e:
            raise StorageError(f"Corrupt storage file {self._path}: {e}") from e

        if not isinstance(data, dict):
            raise StorageError(f"Corrupt storage file {self._path}: not an object")
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _write_key(self, key: str, value: str) -> None:
        try:
            values = self._read_all()
        except StorageError:
            # An unreadable document is replaced rather than blocking writes
            values = {}
        values[key] = value

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(values, f, ensure_ascii=False)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Cannot write {self._path}: {e}", key=key) from e
