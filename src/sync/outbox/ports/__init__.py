"""Ports (interfaces) for the outbox bounded context."""

from outbox.ports.exceptions import (
    AttemptsExceededError,
    DeliveryError,
    FatalDeliveryError,
    StorageError,
    TransientDeliveryError,
)
from outbox.ports.protocols import ConnectivityMonitor, KeyValueStorage, RemoteStore
from outbox.ports.repositories import IOutboxStore

__all__ = [
    "AttemptsExceededError",
    "ConnectivityMonitor",
    "DeliveryError",
    "FatalDeliveryError",
    "IOutboxStore",
    "KeyValueStorage",
    "RemoteStore",
    "StorageError",
    "TransientDeliveryError",
]
