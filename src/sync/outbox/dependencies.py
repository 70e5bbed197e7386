"""Dependency wiring for the outbox bounded context.

Builds the storage, remote store, connectivity monitor and outbox service
from settings. Each collaborator can be overridden, which is how tests
and host applications substitute their own adapters.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

from infrastructure.settings import (
    ConnectivitySettings,
    OutboxSettings,
    RemoteStoreSettings,
    get_connectivity_settings,
    get_outbox_settings,
    get_remote_store_settings,
)
from outbox.application.backoff import BackoffPolicy
from outbox.application.engine import SyncEngine
from outbox.application.queue import OutboxQueue
from outbox.application.services import OutboxService
from outbox.infrastructure.connectivity import (
    HttpConnectivityMonitor,
    ManualConnectivityMonitor,
)
from outbox.infrastructure.outbox_store import KeyValueOutboxStore
from outbox.infrastructure.remote import PostgrestRemoteStore
from outbox.infrastructure.storage import JsonFileStorage
from outbox.ports.protocols import ConnectivityMonitor, KeyValueStorage, RemoteStore


def get_key_value_storage(settings: OutboxSettings | None = None) -> KeyValueStorage:
    """Get the durable storage configured for the outbox.

    Args:
        settings: Outbox settings (default: cached environment settings)

    Returns:
        JsonFileStorage at the configured path
    """
    settings = settings or get_outbox_settings()
    return JsonFileStorage(settings.storage_path)


def get_remote_store(
    settings: RemoteStoreSettings | None = None,
) -> PostgrestRemoteStore:
    """Get the PostgREST remote store.

    Args:
        settings: Remote store settings (default: cached environment settings)

    Returns:
        PostgrestRemoteStore instance; call aclose() on shutdown
    """
    settings = settings or get_remote_store_settings()
    return PostgrestRemoteStore(
        base_url=settings.url,
        api_key=settings.api_key.get_secret_value(),
        timeout_seconds=settings.timeout_seconds,
    )


def get_connectivity_monitor(
    settings: ConnectivitySettings | None = None,
) -> ManualConnectivityMonitor:
    """Get the connectivity monitor.

    Returns an HttpConnectivityMonitor when a probe URL is configured,
    otherwise a ManualConnectivityMonitor fed by the host application.
    """
    settings = settings or get_connectivity_settings()
    if settings.probe_url:
        return HttpConnectivityMonitor(
            url=settings.probe_url,
            interval_seconds=settings.interval_seconds,
            timeout_seconds=settings.timeout_seconds,
        )
    return ManualConnectivityMonitor()


def create_outbox_service(
    remote_store: RemoteStore,
    storage: KeyValueStorage | None = None,
    monitor: ConnectivityMonitor | None = None,
    settings: OutboxSettings | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> OutboxService:
    """Build an OutboxService with its queue and sync engine.

    Args:
        remote_store: Destination for delivered jobs
        storage: Durable storage (default: from settings)
        monitor: Connectivity monitor (default: none, always online)
        settings: Outbox settings (default: cached environment settings)
        sleep: Cooperative wait used for backoff

    Returns:
        An OutboxService; call start() before use
    """
    settings = settings or get_outbox_settings()
    store = KeyValueOutboxStore(
        storage=storage or get_key_value_storage(settings),
        key=settings.storage_key,
        save_retries=settings.save_retries,
    )
    queue = OutboxQueue(store)
    engine = SyncEngine(
        queue=queue,
        remote_store=remote_store,
        backoff=BackoffPolicy(
            base_seconds=settings.backoff_base_seconds,
            max_seconds=settings.backoff_max_seconds,
        ),
        max_attempts=settings.max_attempts,
        sleep=sleep,
    )
    return OutboxService(
        queue=queue,
        engine=engine,
        monitor=monitor,
        default_target=settings.target,
    )
