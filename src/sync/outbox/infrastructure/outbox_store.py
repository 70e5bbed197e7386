"""Outbox store backed by a durable key-value storage.

The whole job sequence is serialized under a single key. Loading never
raises: missing, unreadable or corrupt data yields an empty outbox.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from outbox.domain.value_objects import Job
from outbox.infrastructure.observability import (
    DefaultOutboxStoreProbe,
    OutboxStoreProbe,
)
from outbox.infrastructure.serialization import dumps_jobs, loads_jobs
from outbox.ports.exceptions import StorageError
from outbox.ports.repositories import IOutboxStore

if TYPE_CHECKING:
    from outbox.ports.protocols import KeyValueStorage

DEFAULT_STORAGE_KEY = "outbox:v1"


class KeyValueOutboxStore(IOutboxStore):
    """IOutboxStore implementation over a KeyValueStorage.

    This class implements the IOutboxStore protocol from outbox.ports.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = DEFAULT_STORAGE_KEY,
        save_retries: int = 2,
        probe: OutboxStoreProbe | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            storage: Durable key-value storage to write to
            key: Key the serialized outbox is stored under
            save_retries: Extra save attempts after the first failure
            probe: Optional observability probe (default: DefaultOutboxStoreProbe)
        """
        if save_retries < 0:
            raise ValueError(f"save_retries must be >= 0, got {save_retries}")

        self._storage = storage
        self._key = key
        self._save_retries = save_retries
        self._probe = probe or DefaultOutboxStoreProbe()

    @property
    def key(self) -> str:
        """Storage key holding the serialized outbox."""
        return self._key

    async def load(self) -> list[Job]:
        """Load the persisted jobs, or an empty list if none are readable."""
        try:
            raw = await self._storage.get(self._key)
        except StorageError as e:
            self._probe.outbox_load_failed(self._key, str(e))
            return []

        if not raw:
            return []

        try:
            return loads_jobs(raw)
        except (ValueError, KeyError, TypeError, RecursionError) as e:
            self._probe.outbox_load_failed(self._key, str(e))
            return []

    async def save(self, jobs: Sequence[Job]) -> None:
        """Overwrite the persisted outbox, retrying failed writes.

        Raises:
            StorageError: If every attempt failed
        """
        raw = dumps_jobs(jobs)

        for attempt in range(1, self._save_retries + 2):
            try:
                await self._storage.set(self._key, raw)
                return
            except StorageError as e:
                if attempt > self._save_retries:
                    self._probe.outbox_save_failed(self._key, str(e))
                    raise
                self._probe.outbox_save_retrying(self._key, attempt, str(e))
