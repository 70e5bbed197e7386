"""Connectivity monitor that polls a reachability URL.

A device is considered online when the probe URL answers at all, with
any HTTP status. Transport failures and timeouts mean offline.
"""

from __future__ import annotations

import asyncio

import httpx

from outbox.infrastructure.connectivity.manual import ManualConnectivityMonitor
from outbox.infrastructure.observability import ConnectivityProbe


class HttpConnectivityMonitor(ManualConnectivityMonitor):
    """ConnectivityMonitor that checks reachability every interval.

    The poll loop runs as a background task between start() and stop().
    """

    def __init__(
        self,
        url: str,
        interval_seconds: float = 15.0,
        timeout_seconds: float = 5.0,
        client: httpx.AsyncClient | None = None,
        probe: ConnectivityProbe | None = None,
    ) -> None:
        """Initialize the monitor.

        Args:
            url: URL to send reachability requests to
            interval_seconds: Delay between checks
            timeout_seconds: Per-check timeout for the default client
            client: Optional preconfigured client (owned by the caller)
            probe: Optional observability probe (default: DefaultConnectivityProbe)
        """
        super().__init__(online=True, probe=probe)
        self._url = url
        self._interval = interval_seconds
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout_seconds)
        self._running = False
        self._task: asyncio.Task[None] | None = None

    async def check(self) -> bool:
        """Check reachability once and publish the result."""
        try:
            await self._client.head(self._url)
        except httpx.HTTPError as e:
            self._probe.connectivity_check_failed(self._url, str(e))
            online = False
        else:
            online = True

        self.set_online(online)
        return online

    async def start(self) -> None:
        """Start the poll loop."""
        if self._running:
            return

        self._running = True
        self._task = asyncio.create_task(self._poll_loop())
        self._probe.monitor_started(self._url, self._interval)

    async def stop(self) -> None:
        """Stop the poll loop and release the client if owned."""
        self._running = False

        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        if self._owns_client:
            await self._client.aclose()

        self._probe.monitor_stopped()

    async def _poll_loop(self) -> None:
        while self._running:
            await self.check()
            await asyncio.sleep(self._interval)
