"""Unit tests for persisted outbox serialization."""

import json
from datetime import UTC, datetime

import pytest

from outbox.domain.value_objects import FailureReason
from outbox.infrastructure.serialization import (
    deserialize_job,
    dumps_jobs,
    loads_jobs,
    serialize_job,
)


class TestSerializeJob:
    """Tests for the persisted job shape."""

    def test_serialized_shape(self, make_job, visitor_payload):
        """A job is stored as a flat JSON object with ISO timestamps."""
        job = make_job()

        data = serialize_job(job)

        assert data == {
            "id": job.id.value,
            "kind": "insert",
            "target": "visitantes",
            "payload": visitor_payload,
            "attempts": 0,
            "last_error": None,
            "failure_reason": None,
            "created_at": "2025-09-09T12:00:00+00:00",
            "quarantined_at": None,
        }

    def test_keeps_retry_metadata(self, make_job):
        """Failure and quarantine state survive a reload."""
        job = (
            make_job()
            .record_failure("not_found: HTTP 404", FailureReason.NOT_FOUND)
            .quarantine(datetime(2025, 9, 10, 8, 30, tzinfo=UTC))
        )

        restored = deserialize_job(serialize_job(job))

        assert restored == job
        assert restored.failure_reason is FailureReason.NOT_FOUND
        assert restored.quarantined_at == datetime(2025, 9, 10, 8, 30, tzinfo=UTC)

    def test_missing_optional_fields_default(self, make_job):
        """Older documents without retry metadata load as fresh jobs."""
        data = serialize_job(make_job())
        for field in ("attempts", "last_error", "failure_reason", "quarantined_at"):
            del data[field]

        job = deserialize_job(data)

        assert job.attempts == 0
        assert job.is_quarantined is False

    def test_rejects_non_integer_attempts(self, make_job):
        """attempts must be an integer, and booleans do not count."""
        data = serialize_job(make_job())
        data["attempts"] = True

        with pytest.raises(TypeError, match="attempts"):
            deserialize_job(data)

    def test_rejects_unknown_kind(self, make_job):
        """Unknown job kinds cannot be reconstructed."""
        data = serialize_job(make_job())
        data["kind"] = "delete"

        with pytest.raises(ValueError):
            deserialize_job(data)


class TestJobDocuments:
    """Tests for dumps_jobs() and loads_jobs()."""

    def test_preserves_order_and_non_ascii(self, make_job):
        """The document keeps FIFO order and stores text unescaped."""
        jobs = [make_job(), make_job(attempts=2)]

        raw = dumps_jobs(jobs)

        assert "San Martín" in raw
        assert loads_jobs(raw) == jobs

    def test_empty_sequence(self):
        """An empty outbox is stored as an empty array."""
        assert dumps_jobs([]) == "[]"
        assert loads_jobs("[]") == []

    @pytest.mark.parametrize(
        "raw",
        ["{not json", '{"id": "x"}', "[1, 2]"],
    )
    def test_rejects_malformed_documents(self, raw):
        """Anything but an array of job objects is rejected."""
        with pytest.raises(ValueError):
            loads_jobs(raw)

    def test_rejects_duplicate_ids(self, make_job):
        """A document repeating a job id is corrupt."""
        job = make_job()
        raw = json.dumps([serialize_job(job), serialize_job(job)])

        with pytest.raises(ValueError, match="Duplicate job id"):
            loads_jobs(raw)

    def test_rejects_missing_required_field(self, make_job):
        """A job without an id cannot be loaded."""
        data = serialize_job(make_job())
        del data["id"]

        with pytest.raises(KeyError):
            loads_jobs(json.dumps([data]))
