"""Domain probes for outbox infrastructure observability.

These probes capture persistence and connectivity events of the outbox
adapters, following the Domain Oriented Observability pattern.
"""

from __future__ import annotations

from typing import Protocol

import structlog


class OutboxStoreProbe(Protocol):
    """Domain probe for the durable outbox store."""

    def outbox_load_failed(self, key: str, error: str) -> None:
        """Record that the persisted outbox was unreadable and was dropped."""
        ...

    def outbox_save_retrying(self, key: str, attempt: int, error: str) -> None:
        """Record that a save failed and will be retried."""
        ...

    def outbox_save_failed(self, key: str, error: str) -> None:
        """Record that a save failed after all retries."""
        ...


class DefaultOutboxStoreProbe:
    """Default implementation of OutboxStoreProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
    ):
        self._logger = logger or structlog.get_logger().bind(component="outbox_store")

    def outbox_load_failed(self, key: str, error: str) -> None:
        """Record that the persisted outbox was unreadable and was dropped."""
        self._logger.warning("outbox_load_failed", key=key, error=error)

    def outbox_save_retrying(self, key: str, attempt: int, error: str) -> None:
        """Record that a save failed and will be retried."""
        self._logger.warning(
            "outbox_save_retrying",
            key=key,
            attempt=attempt,
            error=error,
        )

    def outbox_save_failed(self, key: str, error: str) -> None:
        """Record that a save failed after all retries."""
        self._logger.error("outbox_save_failed", key=key, error=error)


class ConnectivityProbe(Protocol):
    """Domain probe for connectivity monitors."""

    def monitor_started(self, url: str, interval: float) -> None:
        """Record that a polling monitor started."""
        ...

    def monitor_stopped(self) -> None:
        """Record that a polling monitor stopped."""
        ...

    def connectivity_check_failed(self, url: str, error: str) -> None:
        """Record that a reachability check failed."""
        ...

    def subscriber_failed(self, error: str) -> None:
        """Record that a subscriber callback raised."""
        ...


class DefaultConnectivityProbe:
    """Default implementation of ConnectivityProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
    ):
        self._logger = logger or structlog.get_logger().bind(component="connectivity")

    def monitor_started(self, url: str, interval: float) -> None:
        """Record that a polling monitor started."""
        self._logger.info(
            "connectivity_monitor_started",
            url=url,
            interval_seconds=interval,
        )

    def monitor_stopped(self) -> None:
        """Record that a polling monitor stopped."""
        self._logger.info("connectivity_monitor_stopped")

    def connectivity_check_failed(self, url: str, error: str) -> None:
        """Record that a reachability check failed."""
        self._logger.debug("connectivity_check_failed", url=url, error=error)

    def subscriber_failed(self, error: str) -> None:
        """Record that a subscriber callback raised."""
        self._logger.error("connectivity_subscriber_failed", error=error)
