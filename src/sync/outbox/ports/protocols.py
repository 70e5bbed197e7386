"""Protocols for the collaborators the outbox depends on.

The remote store, the connectivity monitor and the durable key-value
storage live outside this bounded context. Adapters in the
infrastructure layer implement these protocols; tests substitute fakes.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

ConnectivityCallback = Callable[[bool], None]
Unsubscribe = Callable[[], None]


@runtime_checkable
class RemoteStore(Protocol):
    """Accepts delivery of one record to a remote collection."""

    async def deliver(self, target: str, payload: dict[str, Any]) -> None:
        """Deliver a record to the given remote collection.

        Args:
            target: Remote collection/resource name (e.g., "visitantes")
            payload: JSON-compatible record fields

        Raises:
            DeliveryError: If the remote store rejects the delivery. Any
                other exception is treated as a transient failure.
        """
        ...


@runtime_checkable
class ConnectivityMonitor(Protocol):
    """Reports online/offline transitions.

    The initial state is assumed online until the first signal.
    """

    def subscribe(self, callback: ConnectivityCallback) -> Unsubscribe:
        """Register a callback fired on every observed transition.

        Args:
            callback: Called with True when online, False when offline

        Returns:
            A function that removes the subscription
        """
        ...


@runtime_checkable
class KeyValueStorage(Protocol):
    """Durable storage for opaque string values."""

    async def get(self, key: str) -> str | None:
        """Return the stored value, or None if nothing is stored.

        Raises:
            StorageError: If the storage medium cannot be read
        """
        ...

    async def set(self, key: str, value: str) -> None:
        """Durably overwrite the value stored under key.

        Raises:
            StorageError: If the storage medium cannot be written
        """
        ...
