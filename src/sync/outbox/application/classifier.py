"""Delivery failure classification.

Decides whether a failed delivery is worth retrying. Classification is a
pure function of the failure's reason code; it never looks at how many
attempts a job has made.
"""

from __future__ import annotations

from outbox.domain.value_objects import FATAL_REASONS, FailureReason, Severity
from outbox.ports.exceptions import (
    DeliveryError,
    FatalDeliveryError,
    TransientDeliveryError,
)


def classify(error: BaseException) -> Severity:
    """Return the severity of a failure raised by a remote store.

    Args:
        error: The exception raised by RemoteStore.deliver()

    Returns:
        Severity.FATAL for unauthorized, forbidden, not-found and
        validation-rejected failures; Severity.TRANSIENT otherwise,
        including exceptions that are not DeliveryErrors.
    """
    if isinstance(error, DeliveryError) and error.reason in FATAL_REASONS:
        return Severity.FATAL
    return Severity.TRANSIENT


def to_delivery_error(error: BaseException) -> DeliveryError:
    """Normalize a failure into a TransientDeliveryError or FatalDeliveryError.

    DeliveryErrors keep their reason and message. Anything else becomes a
    transient failure with reason UNKNOWN.
    """
    if isinstance(error, DeliveryError):
        expected = (
            FatalDeliveryError
            if classify(error) is Severity.FATAL
            else TransientDeliveryError
        )
        if isinstance(error, expected):
            return error
        return DeliveryError.from_reason(error.reason, error.message)

    message = str(error) or type(error).__name__
    return TransientDeliveryError(FailureReason.UNKNOWN, message)
