"""Remote store adapters for the outbox."""

from outbox.infrastructure.remote.postgrest import (
    PostgrestRemoteStore,
    reason_for_status,
)

__all__ = ["PostgrestRemoteStore", "reason_for_status"]
