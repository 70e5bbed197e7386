"""Domain layer for the outbox bounded context."""

from outbox.domain.value_objects import (
    FATAL_REASONS,
    PAYLOAD_REGISTRY,
    FailureReason,
    Job,
    JobId,
    JobKind,
    Severity,
    VisitorRecord,
)

__all__ = [
    "FATAL_REASONS",
    "PAYLOAD_REGISTRY",
    "FailureReason",
    "Job",
    "JobId",
    "JobKind",
    "Severity",
    "VisitorRecord",
]
