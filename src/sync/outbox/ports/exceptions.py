"""Exceptions for the outbox bounded context.

Remote store adapters raise DeliveryError subclasses to report a failed
delivery with a structured reason. Storage adapters raise StorageError.
Both are caught by the application layer at the delivery and persistence
boundaries; neither reaches callers of the outbox API.
"""

from __future__ import annotations

from outbox.domain.value_objects import FATAL_REASONS, FailureReason


class DeliveryError(Exception):
    """Raised when the remote store does not accept a delivery.

    Use DeliveryError.from_reason() to get the subclass matching the
    reason's severity.
    """

    def __init__(self, reason: FailureReason, message: str = ""):
        super().__init__(message or reason.value)
        self.reason = reason
        self.message = message or reason.value

    def __str__(self) -> str:
        """Return the reason code followed by the message."""
        if self.message == self.reason.value:
            return self.reason.value
        return f"{self.reason.value}: {self.message}"

    @classmethod
    def from_reason(cls, reason: FailureReason, message: str = "") -> DeliveryError:
        """Build a TransientDeliveryError or FatalDeliveryError for a reason."""
        if reason in FATAL_REASONS:
            return FatalDeliveryError(reason, message)
        return TransientDeliveryError(reason, message)


class TransientDeliveryError(DeliveryError):
    """Raised for failures expected to succeed if retried later.

    Network failures, timeouts and server-side faults. The job stays
    queued and is retried on the next drain trigger with backoff.
    """

    pass


class FatalDeliveryError(DeliveryError):
    """Raised for client-side failures that will not succeed on retry.

    Authentication, authorization, missing resource or validation
    rejection. The job is quarantined after a single attempt.
    """

    pass


class AttemptsExceededError(FatalDeliveryError):
    """Raised when a job reaches the attempt ceiling.

    Treated exactly like a fatal failure, even though the last individual
    failure was transient.
    """

    def __init__(self, attempts: int, cause: DeliveryError):
        super().__init__(cause.reason, cause.message)
        self.attempts = attempts
        self.__cause__ = cause

    def __str__(self) -> str:
        """Return the attempt count followed by the last failure."""
        return f"attempts exceeded ({self.attempts}): {super().__str__()}"


class StorageError(Exception):
    """Raised when the durable key-value storage cannot be read or written."""

    def __init__(self, message: str, key: str | None = None):
        super().__init__(message)
        self.key = key
