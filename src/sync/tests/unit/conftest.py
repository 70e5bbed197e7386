"""Unit test fixtures with fake collaborators.

The remote store and the backoff sleep are replaced with recording fakes
so drain cycles run instantly and every delivery call can be asserted.
"""

import asyncio
from datetime import UTC, datetime
from typing import Any
from unittest.mock import MagicMock

import pytest

from outbox.application.backoff import BackoffPolicy
from outbox.application.engine import SyncEngine
from outbox.application.queue import OutboxQueue
from outbox.application.services import OutboxService
from outbox.domain.value_objects import Job, JobId, JobKind, VisitorRecord
from outbox.infrastructure.connectivity import ManualConnectivityMonitor
from outbox.infrastructure.outbox_store import KeyValueOutboxStore
from outbox.infrastructure.storage import InMemoryStorage


class FakeRemoteStore:
    """RemoteStore double that records calls and replays scripted failures.

    Failures queued with fail_next() are raised in order, one per call
    (None means that call succeeds). Once they run out, the error given
    to fail_always() is raised, or the call succeeds.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self._scripted: list[BaseException | None] = []
        self._always: BaseException | None = None
        self.gate: asyncio.Event | None = None

    def fail_next(self, *errors: BaseException | None) -> None:
        self._scripted.extend(errors)

    def fail_always(self, error: BaseException | None) -> None:
        self._always = error

    async def deliver(self, target: str, payload: dict[str, Any]) -> None:
        self.calls.append((target, payload))
        if self.gate is not None:
            await self.gate.wait()
        if self._scripted:
            error = self._scripted.pop(0)
            if error is not None:
                raise error
            return
        if self._always is not None:
            raise self._always


class RecordingSleep:
    """Backoff sleep that records delays and only yields to the loop."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        await asyncio.sleep(0)


FIXED_NOW = datetime(2025, 9, 9, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def visitor_payload() -> dict[str, Any]:
    """Provide the visitor record used throughout the tests."""
    return {
        "fecha": "2025-09-09",
        "nombre": "Ana Ruiz",
        "localidad": "San Martín",
        "adultos": 2,
        "menores": 1,
        "jubi_pens": 0,
        "total": 3,
    }


@pytest.fixture
def visitor_record(visitor_payload) -> VisitorRecord:
    """Provide a validated visitor record."""
    return VisitorRecord.model_validate(visitor_payload)


@pytest.fixture
def make_job(visitor_record):
    """Provide a factory for queued jobs."""

    def _make_job(**overrides: Any) -> Job:
        fields: dict[str, Any] = {
            "id": JobId.generate(),
            "kind": JobKind.INSERT,
            "target": "visitantes",
            "payload": visitor_record,
            "created_at": FIXED_NOW,
        }
        fields.update(overrides)
        return Job(**fields)

    return _make_job


@pytest.fixture
def storage() -> InMemoryStorage:
    """Provide empty in-memory key-value storage."""
    return InMemoryStorage()


@pytest.fixture
def outbox_store(storage) -> KeyValueOutboxStore:
    """Provide an outbox store over the in-memory storage."""
    return KeyValueOutboxStore(storage=storage, probe=MagicMock())


@pytest.fixture
def queue_probe() -> MagicMock:
    """Provide a mock queue probe."""
    return MagicMock()


@pytest.fixture
def outbox_queue(outbox_store, queue_probe) -> OutboxQueue:
    """Provide an empty outbox queue."""
    return OutboxQueue(store=outbox_store, probe=queue_probe)


@pytest.fixture
def remote_store() -> FakeRemoteStore:
    """Provide a recording remote store that accepts every delivery."""
    return FakeRemoteStore()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    """Provide a backoff sleep that returns immediately."""
    return RecordingSleep()


@pytest.fixture
def engine_probe() -> MagicMock:
    """Provide a mock sync engine probe."""
    return MagicMock()


@pytest.fixture
def sync_engine(
    outbox_queue, remote_store, engine_probe, recording_sleep
) -> SyncEngine:
    """Provide a sync engine with the default backoff and attempt ceiling."""
    return SyncEngine(
        queue=outbox_queue,
        remote_store=remote_store,
        probe=engine_probe,
        backoff=BackoffPolicy(base_seconds=1.0, max_seconds=10.0),
        max_attempts=8,
        sleep=recording_sleep,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def connectivity_monitor() -> ManualConnectivityMonitor:
    """Provide a manual connectivity monitor (initially online)."""
    return ManualConnectivityMonitor(probe=MagicMock())


@pytest.fixture
def service_probe() -> MagicMock:
    """Provide a mock outbox service probe."""
    return MagicMock()


@pytest.fixture
def outbox_service(
    outbox_queue, sync_engine, connectivity_monitor, service_probe
) -> OutboxService:
    """Provide an outbox service wired to the fakes (not started)."""
    return OutboxService(
        queue=outbox_queue,
        engine=sync_engine,
        monitor=connectivity_monitor,
        probe=service_probe,
        clock=lambda: FIXED_NOW,
    )
