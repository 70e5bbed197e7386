"""Domain probes for the outbox application layer."""

from outbox.application.observability.outbox_queue_probe import (
    DefaultOutboxQueueProbe,
    OutboxQueueProbe,
)
from outbox.application.observability.outbox_service_probe import (
    DefaultOutboxServiceProbe,
    OutboxServiceProbe,
)
from outbox.application.observability.sync_engine_probe import (
    DefaultSyncEngineProbe,
    SyncEngineProbe,
)

__all__ = [
    "DefaultOutboxQueueProbe",
    "DefaultOutboxServiceProbe",
    "DefaultSyncEngineProbe",
    "OutboxQueueProbe",
    "OutboxServiceProbe",
    "SyncEngineProbe",
]
