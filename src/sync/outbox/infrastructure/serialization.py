"""Job serialization for the persisted outbox.

The outbox is stored as a JSON array of job objects. Every Job field
round-trips exactly, including attempts, last_error and quarantine state.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from datetime import datetime
from typing import Any

from outbox.domain.value_objects import (
    PAYLOAD_REGISTRY,
    FailureReason,
    Job,
    JobId,
    JobKind,
)


def serialize_job(job: Job) -> dict[str, Any]:
    """Convert a job to a JSON-serializable dictionary."""
    return {
        "id": job.id.value,
        "kind": job.kind.value,
        "target": job.target,
        "payload": job.payload.model_dump(mode="json"),
        "attempts": job.attempts,
        "last_error": job.last_error,
        "failure_reason": (
            job.failure_reason.value if job.failure_reason is not None else None
        ),
        "created_at": job.created_at.isoformat(),
        "quarantined_at": (
            job.quarantined_at.isoformat() if job.quarantined_at is not None else None
        ),
    }


def deserialize_job(data: dict[str, Any]) -> Job:
    """Reconstruct a job from a dictionary.

    Raises:
        KeyError: If a required field is missing
        ValueError: If a field has an invalid value, or the kind is unknown
        TypeError: If a field has the wrong type
    """
    kind = JobKind(data["kind"])
    payload_model = PAYLOAD_REGISTRY.get(kind)
    if payload_model is None:
        raise ValueError(f"No payload model registered for job kind: {kind}")

    attempts = data.get("attempts", 0)
    if not isinstance(attempts, int) or isinstance(attempts, bool):
        raise TypeError(f"attempts must be an integer, got {attempts!r}")

    failure_reason = data.get("failure_reason")
    quarantined_at = data.get("quarantined_at")

    return Job(
        id=JobId.from_string(data["id"]),
        kind=kind,
        target=str(data["target"]),
        payload=payload_model.model_validate(data["payload"]),
        created_at=datetime.fromisoformat(data["created_at"]),
        attempts=attempts,
        last_error=data.get("last_error"),
        failure_reason=(
            FailureReason(failure_reason) if failure_reason is not None else None
        ),
        quarantined_at=(
            datetime.fromisoformat(quarantined_at)
            if quarantined_at is not None
            else None
        ),
    )


def dumps_jobs(jobs: Sequence[Job]) -> str:
    """Serialize an ordered job sequence to a JSON document."""
    return json.dumps([serialize_job(job) for job in jobs], ensure_ascii=False)


def loads_jobs(raw: str) -> list[Job]:
    """Parse a JSON document produced by dumps_jobs().

    Raises:
        ValueError: If the document is not valid JSON, is not a list of
            job objects, contains an invalid job, or repeats a job id
            (pydantic ValidationError is a ValueError)
        KeyError: If a job is missing a required field
        TypeError: If a job field has the wrong type
    """
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array of jobs, got {type(data).__name__}")

    jobs: list[Job] = []
    seen: set[JobId] = set()
    for item in data:
        if not isinstance(item, dict):
            raise ValueError(f"Expected a job object, got {type(item).__name__}")
        job = deserialize_job(item)
        if job.id in seen:
            raise ValueError(f"Duplicate job id in persisted outbox: {job.id}")
        seen.add(job.id)
        jobs.append(job)
    return jobs
