"""Outbox application service.

OutboxService is the only surface the presentation layer uses: it
submits jobs, reports outbox status, and requests immediate flushes.
Submission only appends to the durable queue; delivery happens in the
background through the sync engine.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from outbox.application.engine import DrainReport
from outbox.application.observability import (
    DefaultOutboxServiceProbe,
    OutboxServiceProbe,
)
from outbox.domain.value_objects import Job, JobId, JobKind, VisitorRecord

if TYPE_CHECKING:
    from outbox.application.engine import SyncEngine
    from outbox.application.queue import OutboxQueue
    from outbox.ports.protocols import ConnectivityMonitor, Unsubscribe

DEFAULT_TARGET = "visitantes"


@dataclass(frozen=True)
class OutboxStatus:
    """Point-in-time summary of the outbox for UI feedback.

    Attributes:
        pending: Jobs not yet delivered, including quarantined ones
        quarantined: Jobs awaiting manual intervention
        draining: Whether a drain cycle is in progress
        online: Whether the last connectivity signal reported online
    """

    pending: int
    quarantined: int
    draining: bool
    online: bool


class OutboxService:
    """Application service for the offline outbox.

    Constructed once per process with an explicitly owned queue and
    engine. Call start() before use and close() on shutdown.
    """

    def __init__(
        self,
        queue: OutboxQueue,
        engine: SyncEngine,
        monitor: ConnectivityMonitor | None = None,
        probe: OutboxServiceProbe | None = None,
        default_target: str = DEFAULT_TARGET,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            queue: The outbox queue shared with the engine
            engine: Sync engine that drains the queue
            monitor: Optional connectivity monitor feeding the engine
            probe: Optional observability probe (default: DefaultOutboxServiceProbe)
            default_target: Remote collection used when submit() gets none
            clock: Source of job creation timestamps
        """
        self._queue = queue
        self._engine = engine
        self._monitor = monitor
        self._probe = probe or DefaultOutboxServiceProbe()
        self._default_target = default_target
        self._clock = clock or (lambda: datetime.now(UTC))
        self._unsubscribe: Unsubscribe | None = None

    async def start(self) -> None:
        """Load the persisted outbox and start following connectivity.

        If the engine is online and jobs survived a restart, a drain cycle
        is requested right away.
        """
        await self._queue.load()

        if self._monitor is not None and self._unsubscribe is None:
            self._unsubscribe = self._monitor.subscribe(self._engine.set_online)

        self._probe.service_started(len(self._queue), self._engine.is_online)

        if self._engine.is_online and len(self._queue) > 0:
            self._engine.request_drain()

    async def close(self) -> None:
        """Stop following connectivity and wait for background drains.

        In-flight cycles are not cancelled; they run to their natural end.
        """
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

        await self._engine.wait_idle()
        self._probe.service_closed(len(self._queue))

    async def submit(
        self,
        payload: VisitorRecord | Mapping[str, Any],
        target: str | None = None,
    ) -> JobId:
        """Enqueue a record for delivery.

        The job is persisted before this returns. When online, a drain
        cycle is requested in the background; this never waits on the
        network.

        Args:
            payload: The record, or a mapping validated into one
            target: Remote collection to write to (default: the service's)

        Returns:
            The id of the new job

        Raises:
            pydantic.ValidationError: If the payload is not a valid record
        """
        record = (
            payload
            if isinstance(payload, VisitorRecord)
            else VisitorRecord.model_validate(dict(payload))
        )
        job = Job(
            id=JobId.generate(),
            kind=JobKind.INSERT,
            target=target or self._default_target,
            payload=record,
            created_at=self._clock(),
        )

        await self._queue.append(job)
        self._probe.job_submitted(job.id, job.target, len(self._queue))

        if self._engine.is_online:
            self._engine.request_drain()

        return job.id

    def pending_count(self) -> int:
        """Return the number of undelivered jobs, quarantined ones included."""
        return len(self._queue)

    def quarantined_count(self) -> int:
        """Return the number of jobs awaiting manual intervention."""
        return self._queue.quarantined_count()

    def is_draining(self) -> bool:
        """Return whether a drain cycle is in progress."""
        return self._engine.is_draining

    def is_online(self) -> bool:
        """Return whether the last connectivity signal reported online."""
        return self._engine.is_online

    def jobs(self) -> tuple[Job, ...]:
        """Return the pending jobs in delivery order."""
        return self._queue.snapshot()

    def status(self) -> OutboxStatus:
        """Return a summary of the outbox."""
        return OutboxStatus(
            pending=len(self._queue),
            quarantined=self._queue.quarantined_count(),
            draining=self._engine.is_draining,
            online=self._engine.is_online,
        )

    async def flush(self) -> DrainReport:
        """Run a drain cycle now, retrying a quarantined head job.

        Subject to the single-flight guard and the online check: a flush
        during an active cycle, while offline, or with nothing queued is a
        no-op reported in the returned DrainReport.
        """
        self._probe.flush_requested(len(self._queue))
        return await self._engine.drain(manual=True)

    async def discard(self, job_id: JobId) -> bool:
        """Remove a job without delivering it.

        Meant for quarantined jobs that will never be accepted.

        Returns:
            False if no job with that id is queued
        """
        removed = await self._queue.remove(job_id)
        if removed:
            self._probe.job_discarded(job_id, len(self._queue))
        return removed

    async def wait_idle(self) -> None:
        """Wait for background drain cycles to finish."""
        await self._engine.wait_idle()
