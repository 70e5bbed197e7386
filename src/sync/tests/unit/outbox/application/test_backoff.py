"""Unit tests for BackoffPolicy."""

import pytest

from outbox.application.backoff import BackoffPolicy


class TestBackoffPolicy:
    """Tests for delay computation."""

    @pytest.mark.parametrize(
        ("attempts", "expected"),
        [(0, 0.0), (1, 2.0), (2, 4.0), (3, 8.0), (4, 10.0), (5, 10.0), (7, 10.0)],
    )
    def test_default_delays(self, attempts, expected):
        """Delays follow min(1 * 2**attempts, 10), with no wait before the first try."""
        assert BackoffPolicy().delay_for(attempts) == expected

    def test_scales_with_base(self):
        """A larger base scales every delay."""
        policy = BackoffPolicy(base_seconds=0.5, max_seconds=100.0)
        assert [policy.delay_for(n) for n in range(1, 5)] == [1.0, 2.0, 4.0, 8.0]

    def test_huge_attempt_counts_stay_capped(self):
        """Very large attempt counts do not overflow."""
        assert BackoffPolicy().delay_for(10_000) == 10.0

    def test_rejects_non_positive_base(self):
        """The base delay must be positive."""
        with pytest.raises(ValueError, match="base_seconds"):
            BackoffPolicy(base_seconds=0)

    def test_rejects_cap_below_base(self):
        """The cap cannot be smaller than the base."""
        with pytest.raises(ValueError, match="max_seconds"):
            BackoffPolicy(base_seconds=5.0, max_seconds=1.0)
