"""Backoff policy for outbox retries."""

from __future__ import annotations

from dataclasses import dataclass

# 2**62 seconds already dwarfs any sensible cap
_MAX_EXPONENT = 62


@dataclass(frozen=True, slots=True)
class BackoffPolicy:
    """Exponential backoff with an upper bound.

    A job that has never been attempted is delivered without waiting.
    After that the wait is base * 2**attempts, capped at max_seconds:
    with the defaults, attempts 1, 2, 3 and 4+ wait 2, 4, 8 and 10 seconds.
    """

    base_seconds: float = 1.0
    max_seconds: float = 10.0

    def __post_init__(self) -> None:
        if self.base_seconds <= 0:
            raise ValueError(f"base_seconds must be positive, got {self.base_seconds}")
        if self.max_seconds < self.base_seconds:
            raise ValueError(
                f"max_seconds ({self.max_seconds}) must be >= "
                f"base_seconds ({self.base_seconds})"
            )

    def delay_for(self, attempts: int) -> float:
        """Return the wait in seconds before the next attempt of a job."""
        if attempts <= 0:
            return 0.0
        exponent = min(attempts, _MAX_EXPONENT)
        return float(min(self.base_seconds * (2**exponent), self.max_seconds))
