"""In-memory view of the outbox with write-through persistence.

OutboxQueue is the single owner of the ordered job sequence inside a
process. Every mutation builds a new sequence, persists it, and only then
publishes it, all under one lock. Readers such as pending_count() see the
sequence before or after a mutation, never in between.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence

from outbox.application.observability import (
    DefaultOutboxQueueProbe,
    OutboxQueueProbe,
)
from outbox.domain.value_objects import Job, JobId
from outbox.ports.exceptions import StorageError
from outbox.ports.repositories import IOutboxStore


class OutboxQueue:
    """Ordered, FIFO collection of pending jobs backed by an IOutboxStore.

    Persistence failures are reported through the probe and never raised:
    the in-memory sequence stays authoritative, and the next mutation
    writes the whole sequence again.
    """

    def __init__(
        self,
        store: IOutboxStore,
        probe: OutboxQueueProbe | None = None,
    ) -> None:
        """Initialize an empty queue.

        Args:
            store: Durable store the queue writes through to
            probe: Optional observability probe (default: DefaultOutboxQueueProbe)
        """
        self._store = store
        self._probe = probe or DefaultOutboxQueueProbe()
        self._jobs: tuple[Job, ...] = ()
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._jobs)

    def snapshot(self) -> tuple[Job, ...]:
        """Return the current jobs in delivery order."""
        return self._jobs

    def head(self) -> Job | None:
        """Return the first unresolved job, or None if the queue is empty."""
        return self._jobs[0] if self._jobs else None

    def get(self, job_id: JobId) -> Job | None:
        """Return the job with the given id, if it is queued."""
        for job in self._jobs:
            if job.id == job_id:
                return job
        return None

    def quarantined_count(self) -> int:
        """Return how many queued jobs await manual intervention."""
        return sum(1 for job in self._jobs if job.is_quarantined)

    async def load(self) -> int:
        """Replace the in-memory sequence with the persisted one.

        Returns:
            Number of jobs loaded
        """
        async with self._lock:
            self._jobs = tuple(await self._store.load())
            self._probe.queue_loaded(len(self._jobs), self.quarantined_count())
            return len(self._jobs)

    async def append(self, job: Job) -> None:
        """Add a job at the end of the queue and persist.

        Raises:
            ValueError: If a job with the same id is already queued
        """
        async with self._lock:
            if any(queued.id == job.id for queued in self._jobs):
                raise ValueError(f"Job {job.id} is already queued")
            await self._commit((*self._jobs, job))

    async def replace(self, job: Job) -> bool:
        """Swap in an updated copy of a queued job, keeping its position.

        Returns:
            False if no job with that id is queued (e.g., it was discarded)
        """
        return await self._rewrite(
            job.id, lambda jobs, index: (*jobs[:index], job, *jobs[index + 1 :])
        )

    async def remove(self, job_id: JobId) -> bool:
        """Remove a job and persist.

        Returns:
            False if no job with that id is queued
        """
        return await self._rewrite(
            job_id, lambda jobs, index: (*jobs[:index], *jobs[index + 1 :])
        )

    async def _rewrite(
        self,
        job_id: JobId,
        change: Callable[[tuple[Job, ...], int], tuple[Job, ...]],
    ) -> bool:
        async with self._lock:
            for index, queued in enumerate(self._jobs):
                if queued.id == job_id:
                    await self._commit(change(self._jobs, index))
                    return True
            return False

    async def _commit(self, jobs: Sequence[Job]) -> None:
        """Persist then publish a new sequence. Caller must hold the lock."""
        jobs = tuple(jobs)
        try:
            await self._store.save(jobs)
        except StorageError as e:
            self._probe.queue_save_failed(len(jobs), str(e))
        self._jobs = jobs
