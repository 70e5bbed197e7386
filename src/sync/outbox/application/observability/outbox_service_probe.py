"""Protocol for outbox service observability.

Defines the interface for domain probes that capture application-level
events of the outbox API used by the presentation layer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

import structlog

if TYPE_CHECKING:
    from outbox.domain.value_objects import JobId


class OutboxServiceProbe(Protocol):
    """Domain probe for outbox service operations."""

    def service_started(self, pending: int, online: bool) -> None:
        """Record that the service loaded its outbox and subscribed."""
        ...

    def service_closed(self, pending: int) -> None:
        """Record that the service was shut down."""
        ...

    def job_submitted(self, job_id: JobId, target: str, pending: int) -> None:
        """Record that a job was enqueued."""
        ...

    def job_discarded(self, job_id: JobId, pending: int) -> None:
        """Record that a job was removed without delivery."""
        ...

    def flush_requested(self, pending: int) -> None:
        """Record that an immediate drain was requested."""
        ...


class DefaultOutboxServiceProbe:
    """Default implementation of OutboxServiceProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
    ):
        self._logger = logger or structlog.get_logger().bind(
            component="outbox_service"
        )

    def service_started(self, pending: int, online: bool) -> None:
        """Record that the service started."""
        self._logger.info("outbox_service_started", pending=pending, online=online)

    def service_closed(self, pending: int) -> None:
        """Record that the service was shut down."""
        self._logger.info("outbox_service_closed", pending=pending)

    def job_submitted(self, job_id: JobId, target: str, pending: int) -> None:
        """Record that a job was enqueued."""
        self._logger.info(
            "outbox_job_submitted",
            job_id=str(job_id),
            target=target,
            pending=pending,
        )

    def job_discarded(self, job_id: JobId, pending: int) -> None:
        """Record that a job was removed without delivery."""
        self._logger.warning(
            "outbox_job_discarded",
            job_id=str(job_id),
            pending=pending,
        )

    def flush_requested(self, pending: int) -> None:
        """Record that an immediate drain was requested."""
        self._logger.info("outbox_flush_requested", pending=pending)
