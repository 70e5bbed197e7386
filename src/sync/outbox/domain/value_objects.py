"""Value objects for the outbox domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for queued jobs, their payloads and failure metadata.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from ulid import ULID


class JobKind(StrEnum):
    """Closed set of operations a job can carry to the remote store."""

    INSERT = "insert"


class FailureReason(StrEnum):
    """Structured reason attached to a failed delivery."""

    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    VALIDATION_REJECTED = "validation_rejected"
    NETWORK = "network"
    TIMEOUT = "timeout"
    SERVER_ERROR = "server_error"
    RATE_LIMITED = "rate_limited"
    UNKNOWN = "unknown"


class Severity(StrEnum):
    """Whether a failed delivery is worth retrying automatically."""

    TRANSIENT = "transient"
    FATAL = "fatal"


# Client-side failures that will not succeed on retry with the same payload
FATAL_REASONS: frozenset[FailureReason] = frozenset(
    {
        FailureReason.UNAUTHORIZED,
        FailureReason.FORBIDDEN,
        FailureReason.NOT_FOUND,
        FailureReason.VALIDATION_REJECTED,
    }
)


@dataclass(frozen=True)
class JobId:
    """Identifier for a queued job.

    Uses ULID for sortability and distribution-friendly generation.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> JobId:
        """Generate a new JobId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> JobId:
        """Create JobId from string value.

        Args:
            value: ULID string

        Returns:
            JobId instance

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid JobId: {value}") from e

        return cls(value=value)


_COUNTER_FIELDS = ("adultos", "menores", "jubi_pens")


class VisitorRecord(BaseModel):
    """A visitor entry captured on the device.

    Attributes:
        fecha: Visit date
        nombre: Visitor name
        localidad: Visitor locality
        adultos: Number of adults
        menores: Number of minors
        jubi_pens: Number of retirees/pensioners
        total: Sum of the three counters (derived when omitted)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    fecha: date
    nombre: str = Field(min_length=1)
    localidad: str
    adultos: int = Field(ge=0)
    menores: int = Field(ge=0)
    jubi_pens: int = Field(ge=0)
    total: int = Field(ge=0)

    @model_validator(mode="before")
    @classmethod
    def derive_total(cls, data: Any) -> Any:
        """Fill in the total from the counters when it is omitted."""
        if isinstance(data, dict) and data.get("total") is None:
            try:
                total = sum(int(data[key]) for key in _COUNTER_FIELDS)
            except (KeyError, TypeError, ValueError):
                # Field validation reports the bad counter
                return data
            data = {**data, "total": total}
        return data

    @model_validator(mode="after")
    def check_total(self) -> VisitorRecord:
        """Reject a total that disagrees with the counters."""
        expected = self.adultos + self.menores + self.jubi_pens
        if self.total != expected:
            raise ValueError(
                f"total ({self.total}) must equal adultos + menores + jubi_pens "
                f"({expected})"
            )
        return self


# Payload model for each job kind, used for (de)serialization
PAYLOAD_REGISTRY: dict[JobKind, type[BaseModel]] = {
    JobKind.INSERT: VisitorRecord,
}


@dataclass(frozen=True)
class Job:
    """One pending write awaiting delivery to the remote store.

    The identifying fields never change. Retry metadata moves forward
    through the transition methods, which return a new Job.

    Attributes:
        id: Unique identifier for the job
        kind: Operation the job performs
        target: Remote collection the job writes to (e.g., "visitantes")
        payload: The record to deliver
        created_at: When the job was enqueued
        attempts: Number of delivery attempts already made
        last_error: Most recent failure description, for diagnostics
        failure_reason: Structured reason of the most recent failure
        quarantined_at: When the job was excluded from automatic retry
    """

    id: JobId
    kind: JobKind
    target: str
    payload: BaseModel
    created_at: datetime
    attempts: int = 0
    last_error: str | None = None
    failure_reason: FailureReason | None = None
    quarantined_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.attempts < 0:
            raise ValueError(f"attempts must be non-negative, got {self.attempts}")

    @property
    def is_quarantined(self) -> bool:
        """Check if this job is excluded from automatic retry."""
        return self.quarantined_at is not None

    def record_failure(self, error: str, reason: FailureReason) -> Job:
        """Return a copy with one more attempt and the failure recorded."""
        return replace(
            self,
            attempts=self.attempts + 1,
            last_error=error,
            failure_reason=reason,
        )

    def quarantine(self, at: datetime) -> Job:
        """Return a copy flagged for manual intervention.

        A job that is already quarantined keeps its original timestamp.
        """
        if self.quarantined_at is not None:
            return self
        return replace(self, quarantined_at=at)
