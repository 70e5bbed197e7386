"""Unit tests for outbox domain value objects."""

from dataclasses import FrozenInstanceError
from datetime import UTC, date, datetime

import pytest
from pydantic import ValidationError

from outbox.domain.value_objects import (
    FATAL_REASONS,
    PAYLOAD_REGISTRY,
    FailureReason,
    JobId,
    JobKind,
    VisitorRecord,
)


class TestJobId:
    """Tests for JobId value object."""

    def test_generate_creates_valid_ulid(self):
        """JobId.generate() should create a valid ULID string."""
        job_id = JobId.generate()
        assert len(job_id.value) == 26
        assert JobId.from_string(job_id.value) == job_id

    def test_generate_creates_unique_ids(self):
        """Each generated JobId should be different."""
        ids = {JobId.generate() for _ in range(100)}
        assert len(ids) == 100

    def test_str_returns_value(self):
        """str(JobId) should return the raw ULID."""
        job_id = JobId.generate()
        assert str(job_id) == job_id.value

    def test_from_string_rejects_invalid_ulid(self):
        """JobId.from_string() should reject non-ULID values."""
        with pytest.raises(ValueError, match="Invalid JobId"):
            JobId.from_string("job_1725880000000_abc123")

    def test_is_immutable(self):
        """JobId should be frozen."""
        job_id = JobId.generate()
        with pytest.raises(FrozenInstanceError):
            job_id.value = "other"  # type: ignore[misc]


class TestVisitorRecord:
    """Tests for VisitorRecord payload model."""

    def test_accepts_consistent_total(self, visitor_payload):
        """A record whose total matches the counters is valid."""
        record = VisitorRecord.model_validate(visitor_payload)
        assert record.fecha == date(2025, 9, 9)
        assert record.total == 3

    def test_derives_total_when_omitted(self, visitor_payload):
        """The total is computed from the counters when not given."""
        del visitor_payload["total"]
        visitor_payload["jubi_pens"] = 4
        record = VisitorRecord.model_validate(visitor_payload)
        assert record.total == 7

    def test_rejects_inconsistent_total(self, visitor_payload):
        """A total that disagrees with the counters is rejected."""
        visitor_payload["total"] = 5
        with pytest.raises(ValidationError, match="must equal"):
            VisitorRecord.model_validate(visitor_payload)

    def test_rejects_negative_counters(self, visitor_payload):
        """Counters cannot be negative."""
        visitor_payload["menores"] = -1
        del visitor_payload["total"]
        with pytest.raises(ValidationError):
            VisitorRecord.model_validate(visitor_payload)

    def test_rejects_unknown_fields(self, visitor_payload):
        """Unexpected fields are not silently dropped."""
        visitor_payload["telefono"] = "555-1234"
        with pytest.raises(ValidationError):
            VisitorRecord.model_validate(visitor_payload)

    def test_rejects_empty_name(self, visitor_payload):
        """A record needs a visitor name."""
        visitor_payload["nombre"] = ""
        with pytest.raises(ValidationError):
            VisitorRecord.model_validate(visitor_payload)

    def test_json_dump_uses_iso_date(self, visitor_record):
        """The delivered payload uses an ISO date string."""
        assert visitor_record.model_dump(mode="json") == {
            "fecha": "2025-09-09",
            "nombre": "Ana Ruiz",
            "localidad": "San Martín",
            "adultos": 2,
            "menores": 1,
            "jubi_pens": 0,
            "total": 3,
        }

    def test_is_frozen(self, visitor_record):
        """Records cannot be mutated after validation."""
        with pytest.raises(ValidationError):
            visitor_record.nombre = "Otro"  # type: ignore[misc]


class TestJob:
    """Tests for Job transitions."""

    def test_new_job_has_no_retry_metadata(self, make_job):
        """A fresh job has zero attempts and no error."""
        job = make_job()
        assert job.attempts == 0
        assert job.last_error is None
        assert job.failure_reason is None
        assert job.is_quarantined is False

    def test_rejects_negative_attempts(self, make_job):
        """attempts is a non-negative counter."""
        with pytest.raises(ValueError, match="non-negative"):
            make_job(attempts=-1)

    def test_record_failure_increments_attempts(self, make_job):
        """record_failure() bumps attempts and records the error."""
        job = make_job(attempts=2)
        failed = job.record_failure("network: offline", FailureReason.NETWORK)

        assert failed.attempts == 3
        assert failed.last_error == "network: offline"
        assert failed.failure_reason is FailureReason.NETWORK
        assert failed.id == job.id
        assert job.attempts == 2

    def test_quarantine_sets_timestamp(self, make_job):
        """quarantine() flags the job for manual intervention."""
        at = datetime(2025, 9, 10, tzinfo=UTC)
        job = make_job().quarantine(at)
        assert job.is_quarantined
        assert job.quarantined_at == at

    def test_quarantine_keeps_first_timestamp(self, make_job):
        """Re-quarantining does not move the original timestamp."""
        first = datetime(2025, 9, 10, tzinfo=UTC)
        later = datetime(2025, 9, 11, tzinfo=UTC)
        job = make_job().quarantine(first).quarantine(later)
        assert job.quarantined_at == first


class TestFailureReasons:
    """Tests for failure reason classification constants."""

    def test_fatal_reasons_are_client_side(self):
        """Only client-side failures are fatal."""
        assert FATAL_REASONS == {
            FailureReason.UNAUTHORIZED,
            FailureReason.FORBIDDEN,
            FailureReason.NOT_FOUND,
            FailureReason.VALIDATION_REJECTED,
        }

    def test_every_kind_has_a_payload_model(self):
        """Each job kind can be deserialized."""
        assert set(PAYLOAD_REGISTRY) == set(JobKind)
        assert PAYLOAD_REGISTRY[JobKind.INSERT] is VisitorRecord
