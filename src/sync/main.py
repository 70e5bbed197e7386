"""Outbox client entry point.

Host applications enter outbox_lifespan() once per process and use the
yielded OutboxService for the rest of the process lifetime.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from importlib.metadata import PackageNotFoundError, version

import structlog

from infrastructure.logging import configure_logging
from infrastructure.settings import get_settings
from outbox.application.services import OutboxService
from outbox.dependencies import (
    create_outbox_service,
    get_connectivity_monitor,
    get_remote_store,
)
from outbox.infrastructure.connectivity import HttpConnectivityMonitor


def get_version() -> str:
    """Installed package version, or "unknown" when not installed."""
    try:
        return version("visitantes-outbox")
    except PackageNotFoundError:
        return "unknown"


@asynccontextmanager
async def outbox_lifespan() -> AsyncIterator[OutboxService]:
    """Application lifespan context.

    Manages:
    - Logging configuration and process-wide log context
    - Remote store client lifecycle
    - Connectivity polling (when a probe URL is configured)
    - Outbox load on startup, waiting for in-flight drains on shutdown
    """
    settings = get_settings()
    configure_logging(debug=settings.debug)
    structlog.contextvars.bind_contextvars(
        app=settings.app_name, version=get_version()
    )

    remote_store = get_remote_store(settings.remote)
    monitor = get_connectivity_monitor(settings.connectivity)
    service = create_outbox_service(
        remote_store=remote_store,
        monitor=monitor,
        settings=settings.outbox,
    )

    await service.start()
    if isinstance(monitor, HttpConnectivityMonitor):
        await monitor.start()

    try:
        yield service
    finally:
        if isinstance(monitor, HttpConnectivityMonitor):
            await monitor.stop()
        await service.close()
        await remote_store.aclose()
