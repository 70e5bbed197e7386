"""PostgREST remote store.

Delivers records as row inserts through a PostgREST-compatible REST
endpoint (as exposed by Supabase at /rest/v1). HTTP statuses and
transport errors are mapped to structured failure reasons so the sync
engine never has to interpret error messages.
"""

from __future__ import annotations

from typing import Any

import httpx

from outbox.domain.value_objects import FailureReason
from outbox.ports.exceptions import DeliveryError
from outbox.ports.protocols import RemoteStore

_STATUS_REASONS: dict[int, FailureReason] = {
    400: FailureReason.VALIDATION_REJECTED,
    401: FailureReason.UNAUTHORIZED,
    403: FailureReason.FORBIDDEN,
    404: FailureReason.NOT_FOUND,
    408: FailureReason.TIMEOUT,
    422: FailureReason.VALIDATION_REJECTED,
    429: FailureReason.RATE_LIMITED,
}


def reason_for_status(status_code: int) -> FailureReason:
    """Map a non-success HTTP status to a failure reason."""
    if status_code in _STATUS_REASONS:
        return _STATUS_REASONS[status_code]
    if status_code >= 500:
        return FailureReason.SERVER_ERROR
    return FailureReason.UNKNOWN


class PostgrestRemoteStore(RemoteStore):
    """RemoteStore that inserts rows through a PostgREST API.

    This class implements the RemoteStore protocol from outbox.ports.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            base_url: Project URL; rows are posted to {base_url}/rest/v1/{target}
            api_key: API key sent as apikey and bearer token
            timeout_seconds: Per-request timeout for the default client
            client: Optional preconfigured client (owned by the caller)
        """
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout_seconds)

    async def deliver(self, target: str, payload: dict[str, Any]) -> None:
        """Insert payload as a row of the target table.

        Raises:
            DeliveryError: With a reason derived from the HTTP status or
                transport failure
        """
        url = f"{self._base_url}/rest/v1/{target}"
        headers = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "Prefer": "return=minimal",
        }

        try:
            response = await self._client.post(url, json=payload, headers=headers)
        except httpx.TimeoutException as e:
            raise DeliveryError.from_reason(FailureReason.TIMEOUT, str(e)) from e
        except httpx.TransportError as e:
            raise DeliveryError.from_reason(FailureReason.NETWORK, str(e)) from e

        if response.is_success:
            return

        raise DeliveryError.from_reason(
            reason_for_status(response.status_code),
            f"HTTP {response.status_code}: {self._error_message(response)}",
        )

    async def aclose(self) -> None:
        """Close the underlying client if this store created it."""
        if self._owns_client:
            await self._client.aclose()

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Extract PostgREST's error message, falling back to the body."""
        try:
            body = response.json()
        except ValueError:
            return response.text or response.reason_phrase
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return response.text
