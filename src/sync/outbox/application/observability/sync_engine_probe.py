"""Protocol for sync engine observability.

Defines the interface for domain probes that capture drain cycle,
delivery and connectivity events of the sync engine.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

import structlog

if TYPE_CHECKING:
    from outbox.domain.value_objects import JobId


class SyncEngineProbe(Protocol):
    """Domain probe for sync engine operations."""

    def drain_started(self, pending: int, manual: bool) -> None:
        """Record that a drain cycle started."""
        ...

    def drain_skipped(self, reason: str) -> None:
        """Record that a drain trigger was a no-op (busy, offline, empty)."""
        ...

    def drain_finished(self, outcome: str, delivered: int) -> None:
        """Record that a drain cycle ended."""
        ...

    def drain_crashed(self, error: str) -> None:
        """Record that a background drain cycle raised unexpectedly."""
        ...

    def drain_blocked_by_quarantine(self, job_id: JobId, pending: int) -> None:
        """Record that a quarantined head job stopped an automatic drain."""
        ...

    def backoff_waiting(self, job_id: JobId, attempts: int, delay: float) -> None:
        """Record that the engine is waiting before retrying a job."""
        ...

    def job_delivered(self, job_id: JobId, target: str, attempts: int) -> None:
        """Record that a job was delivered and removed from the outbox."""
        ...

    def job_delivery_failed(self, job_id: JobId, error: str, attempts: int) -> None:
        """Record a transient delivery failure that will be retried."""
        ...

    def job_quarantined(
        self,
        job_id: JobId,
        error: str,
        attempts: int,
        attempts_exceeded: bool,
    ) -> None:
        """Record that a job was excluded from automatic retry."""
        ...

    def connectivity_changed(self, online: bool, pending: int) -> None:
        """Record an online/offline transition."""
        ...


class DefaultSyncEngineProbe:
    """Default implementation of SyncEngineProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
    ):
        self._logger = logger or structlog.get_logger().bind(component="sync_engine")

    def drain_started(self, pending: int, manual: bool) -> None:
        """Record that a drain cycle started."""
        self._logger.info("outbox_drain_started", pending=pending, manual=manual)

    def drain_skipped(self, reason: str) -> None:
        """Record that a drain trigger was a no-op."""
        self._logger.debug("outbox_drain_skipped", reason=reason)

    def drain_finished(self, outcome: str, delivered: int) -> None:
        """Record that a drain cycle ended."""
        self._logger.info(
            "outbox_drain_finished",
            outcome=outcome,
            delivered=delivered,
        )

    def drain_crashed(self, error: str) -> None:
        """Record that a background drain cycle raised unexpectedly."""
        self._logger.error("outbox_drain_crashed", error=error)

    def drain_blocked_by_quarantine(self, job_id: JobId, pending: int) -> None:
        """Record that a quarantined head job stopped an automatic drain."""
        self._logger.warning(
            "outbox_drain_blocked_by_quarantine",
            job_id=str(job_id),
            pending=pending,
        )

    def backoff_waiting(self, job_id: JobId, attempts: int, delay: float) -> None:
        """Record that the engine is waiting before retrying a job."""
        self._logger.debug(
            "outbox_backoff_waiting",
            job_id=str(job_id),
            attempts=attempts,
            delay_seconds=delay,
        )

    def job_delivered(self, job_id: JobId, target: str, attempts: int) -> None:
        """Record that a job was delivered."""
        self._logger.info(
            "outbox_job_delivered",
            job_id=str(job_id),
            target=target,
            attempts=attempts,
        )

    def job_delivery_failed(self, job_id: JobId, error: str, attempts: int) -> None:
        """Record a transient delivery failure."""
        self._logger.warning(
            "outbox_job_delivery_failed",
            job_id=str(job_id),
            error=error,
            attempts=attempts,
        )

    def job_quarantined(
        self,
        job_id: JobId,
        error: str,
        attempts: int,
        attempts_exceeded: bool,
    ) -> None:
        """Record that a job was excluded from automatic retry."""
        self._logger.error(
            "outbox_job_quarantined",
            job_id=str(job_id),
            error=error,
            attempts=attempts,
            attempts_exceeded=attempts_exceeded,
        )

    def connectivity_changed(self, online: bool, pending: int) -> None:
        """Record an online/offline transition."""
        self._logger.info(
            "outbox_connectivity_changed",
            online=online,
            pending=pending,
        )
