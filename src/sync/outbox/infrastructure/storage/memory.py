"""In-memory key-value storage.

Keeps values for the life of the process only. Useful for tests and for
clients that accept losing queued jobs on exit.
"""

from __future__ import annotations

from outbox.ports.protocols import KeyValueStorage


class InMemoryStorage(KeyValueStorage):
    """KeyValueStorage backed by a dictionary."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self._values.get(key)

    async def set(self, key: str, value: str) -> None:
        self._values[key] = value
