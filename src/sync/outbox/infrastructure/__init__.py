"""Infrastructure layer for the outbox bounded context.

Contains the key-value backed outbox store and the adapters for durable
storage, the remote store and connectivity monitoring.
"""

from outbox.infrastructure.connectivity import (
    HttpConnectivityMonitor,
    ManualConnectivityMonitor,
)
from outbox.infrastructure.outbox_store import KeyValueOutboxStore
from outbox.infrastructure.remote import PostgrestRemoteStore
from outbox.infrastructure.storage import InMemoryStorage, JsonFileStorage

__all__ = [
    "HttpConnectivityMonitor",
    "InMemoryStorage",
    "JsonFileStorage",
    "KeyValueOutboxStore",
    "ManualConnectivityMonitor",
    "PostgrestRemoteStore",
]
