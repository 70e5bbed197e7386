"""Sync engine that drains the outbox into the remote store.

The engine delivers queued jobs one at a time, in submission order, and
is driven by three triggers: a connectivity transition to online, a new
submission while online, and a manual flush. At most one drain cycle runs
at a time; a trigger that arrives during a cycle is folded into it.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING, assert_never

from outbox.application.backoff import BackoffPolicy
from outbox.application.classifier import to_delivery_error
from outbox.application.observability import (
    DefaultSyncEngineProbe,
    SyncEngineProbe,
)
from outbox.domain.value_objects import Job, JobId, JobKind
from outbox.ports.exceptions import (
    AttemptsExceededError,
    DeliveryError,
    FatalDeliveryError,
)

if TYPE_CHECKING:
    from outbox.application.queue import OutboxQueue
    from outbox.ports.protocols import RemoteStore

DEFAULT_MAX_ATTEMPTS = 8


class DrainOutcome(StrEnum):
    """How a drain cycle (or a drain request) ended."""

    SKIPPED_BUSY = "skipped_busy"
    SKIPPED_OFFLINE = "skipped_offline"
    SKIPPED_EMPTY = "skipped_empty"
    COMPLETED = "completed"
    STOPPED_ON_FAILURE = "stopped_on_failure"
    BLOCKED_BY_QUARANTINE = "blocked_by_quarantine"


@dataclass(frozen=True)
class DrainReport:
    """Summary of one drain cycle.

    Attributes:
        outcome: How the cycle ended
        delivered: Number of jobs delivered and removed during the cycle
        failed_job_id: The job that stopped the cycle, if any
    """

    outcome: DrainOutcome
    delivered: int = 0
    failed_job_id: JobId | None = None


def _utc_now() -> datetime:
    return datetime.now(UTC)


class SyncEngine:
    """Drives queued jobs to the remote store.

    State is a single-flight flag and an online flag mirroring the last
    connectivity signal (online until told otherwise). The flag is set
    before the first suspension of a cycle and cleared after the last one,
    so overlapping triggers never start a second cycle.

    A cycle never skips past a failure: the first failed delivery records
    the failure on the job, persists, and ends the cycle. Jobs behind a
    quarantined head job wait until it is delivered or discarded.
    """

    def __init__(
        self,
        queue: OutboxQueue,
        remote_store: RemoteStore,
        probe: SyncEngineProbe | None = None,
        backoff: BackoffPolicy | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """Initialize the engine.

        Args:
            queue: The outbox queue to drain
            remote_store: Destination for delivered jobs
            probe: Optional observability probe (default: DefaultSyncEngineProbe)
            backoff: Delay policy between attempts of the same job
            max_attempts: Attempt ceiling after which a job is quarantined
            sleep: Cooperative wait used for backoff
            clock: Source of quarantine timestamps
        """
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")

        self._queue = queue
        self._remote = remote_store
        self._probe = probe or DefaultSyncEngineProbe()
        self._backoff = backoff or BackoffPolicy()
        self._max_attempts = max_attempts
        self._sleep = sleep
        self._clock = clock
        self._online = True
        self._draining = False
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def is_online(self) -> bool:
        """Whether the last connectivity signal reported online."""
        return self._online

    @property
    def is_draining(self) -> bool:
        """Whether a drain cycle is in progress."""
        return self._draining

    def set_online(self, online: bool) -> None:
        """Apply a connectivity signal.

        Suitable as a ConnectivityMonitor callback. A transition from
        offline to online with a non-empty outbox requests a drain cycle.
        """
        was_online = self._online
        self._online = online
        if online == was_online:
            return

        self._probe.connectivity_changed(online, len(self._queue))
        if online and len(self._queue) > 0:
            self.request_drain()

    def request_drain(self) -> asyncio.Task[None] | None:
        """Schedule a drain cycle in the background.

        Must be called from within a running event loop.

        Returns:
            The scheduled task, or None when a cycle is already active
            and the request was folded into it
        """
        if self._draining:
            self._probe.drain_skipped(DrainOutcome.SKIPPED_BUSY.value)
            return None

        task = asyncio.get_running_loop().create_task(self._run_drain())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def wait_idle(self) -> None:
        """Wait for background drain cycles scheduled so far to finish."""
        while self._tasks:
            await asyncio.gather(*tuple(self._tasks))

    async def _run_drain(self) -> None:
        """Background wrapper that keeps a crashed cycle from going unnoticed."""
        try:
            await self.drain()
        except Exception as e:
            self._probe.drain_crashed(str(e))

    async def drain(self, *, manual: bool = False) -> DrainReport:
        """Run one drain cycle.

        Returns immediately when a cycle is already active, the engine is
        offline, or the outbox is empty.

        Args:
            manual: True for an explicit flush, which re-attempts a
                quarantined job at the head of the queue instead of
                stopping at it

        Returns:
            A DrainReport describing how the cycle ended
        """
        if self._draining:
            return self._skipped(DrainOutcome.SKIPPED_BUSY)
        if not self._online:
            return self._skipped(DrainOutcome.SKIPPED_OFFLINE)
        if len(self._queue) == 0:
            return self._skipped(DrainOutcome.SKIPPED_EMPTY)

        self._draining = True
        try:
            self._probe.drain_started(len(self._queue), manual)
            report = await self._drain_cycle(manual)
        finally:
            self._draining = False

        self._probe.drain_finished(report.outcome.value, report.delivered)
        return report

    def _skipped(self, outcome: DrainOutcome) -> DrainReport:
        self._probe.drain_skipped(outcome.value)
        return DrainReport(outcome=outcome)

    async def _drain_cycle(self, manual: bool) -> DrainReport:
        """Deliver jobs from the head of the queue until empty or a failure."""
        delivered = 0

        while (job := self._queue.head()) is not None:
            if job.is_quarantined and not manual:
                self._probe.drain_blocked_by_quarantine(job.id, len(self._queue))
                return DrainReport(
                    outcome=DrainOutcome.BLOCKED_BY_QUARANTINE,
                    delivered=delivered,
                    failed_job_id=job.id,
                )

            delay = self._backoff.delay_for(job.attempts)
            if delay > 0:
                self._probe.backoff_waiting(job.id, job.attempts, delay)
                await self._sleep(delay)

            try:
                await self._deliver(job)
            except Exception as e:
                await self._handle_failure(job, to_delivery_error(e))
                return DrainReport(
                    outcome=DrainOutcome.STOPPED_ON_FAILURE,
                    delivered=delivered,
                    failed_job_id=job.id,
                )

            await self._queue.remove(job.id)
            delivered += 1
            self._probe.job_delivered(job.id, job.target, job.attempts + 1)

        return DrainReport(outcome=DrainOutcome.COMPLETED, delivered=delivered)

    async def _deliver(self, job: Job) -> None:
        """Send a job to the remote store according to its kind."""
        match job.kind:
            case JobKind.INSERT:
                await self._remote.deliver(
                    job.target, job.payload.model_dump(mode="json")
                )
            case _:
                assert_never(job.kind)

    async def _handle_failure(self, job: Job, error: DeliveryError) -> None:
        """Record a failed attempt and quarantine the job when appropriate.

        Fatal failures quarantine after a single attempt. Transient
        failures quarantine once the attempt ceiling is reached.
        """
        failed = job.record_failure(str(error), error.reason)

        cause: FatalDeliveryError | None = None
        if isinstance(error, FatalDeliveryError):
            cause = error
        elif failed.attempts >= self._max_attempts:
            cause = AttemptsExceededError(failed.attempts, error)

        if cause is None:
            self._probe.job_delivery_failed(job.id, str(error), failed.attempts)
        else:
            failed = failed.quarantine(self._clock())
            self._probe.job_quarantined(
                job.id,
                str(cause),
                failed.attempts,
                attempts_exceeded=isinstance(cause, AttemptsExceededError),
            )

        await self._queue.replace(failed)
