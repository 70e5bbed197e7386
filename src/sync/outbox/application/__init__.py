"""Application layer for the outbox bounded context."""

from outbox.application.backoff import BackoffPolicy
from outbox.application.classifier import classify, to_delivery_error
from outbox.application.engine import DrainOutcome, DrainReport, SyncEngine
from outbox.application.queue import OutboxQueue
from outbox.application.services import OutboxService, OutboxStatus

__all__ = [
    "BackoffPolicy",
    "DrainOutcome",
    "DrainReport",
    "OutboxQueue",
    "OutboxService",
    "OutboxStatus",
    "SyncEngine",
    "classify",
    "to_delivery_error",
]
