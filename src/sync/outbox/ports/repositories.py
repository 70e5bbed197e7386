"""Repository protocols for the outbox bounded context."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from outbox.domain.value_objects import Job


@runtime_checkable
class IOutboxStore(Protocol):
    """Durable, ordered persistence for the whole outbox.

    The outbox is always persisted as a whole: save() overwrites what
    was stored before, and load() returns jobs in the order they were
    saved.
    """

    async def load(self) -> list["Job"]:
        """Load the persisted jobs in stored order.

        Returns an empty list when nothing is persisted or the persisted
        data is corrupt. Never raises for unreadable or unparseable data.
        """
        ...

    async def save(self, jobs: Sequence["Job"]) -> None:
        """Durably overwrite the persisted outbox with jobs.

        Raises:
            StorageError: If the outbox could not be persisted
        """
        ...
