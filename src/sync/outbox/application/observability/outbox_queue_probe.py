"""Protocol for outbox queue observability."""

from __future__ import annotations

from typing import Protocol

import structlog


class OutboxQueueProbe(Protocol):
    """Domain probe for the in-memory outbox queue."""

    def queue_loaded(self, count: int, quarantined: int) -> None:
        """Record that the persisted outbox was loaded."""
        ...

    def queue_save_failed(self, count: int, error: str) -> None:
        """Record that a mutation could not be persisted."""
        ...


class DefaultOutboxQueueProbe:
    """Default implementation of OutboxQueueProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
    ):
        self._logger = logger or structlog.get_logger().bind(component="outbox_queue")

    def queue_loaded(self, count: int, quarantined: int) -> None:
        """Record that the persisted outbox was loaded."""
        self._logger.info(
            "outbox_queue_loaded",
            count=count,
            quarantined=quarantined,
        )

    def queue_save_failed(self, count: int, error: str) -> None:
        """Record that a mutation could not be persisted.

        Queued jobs exist only in memory until the next successful save.
        """
        self._logger.warning(
            "outbox_queue_save_failed",
            count=count,
            error=error,
        )
