"""Connectivity monitor driven by explicit signals.

The host application (or a platform network callback) tells the monitor
when the device goes online or offline. Subscribers hear only actual
transitions; repeated signals of the same state are ignored.
"""

from __future__ import annotations

from outbox.infrastructure.observability import (
    ConnectivityProbe,
    DefaultConnectivityProbe,
)
from outbox.ports.protocols import (
    ConnectivityCallback,
    ConnectivityMonitor,
    Unsubscribe,
)


class ManualConnectivityMonitor(ConnectivityMonitor):
    """ConnectivityMonitor fed through set_online().

    This class implements the ConnectivityMonitor protocol from outbox.ports.
    """

    def __init__(
        self,
        online: bool = True,
        probe: ConnectivityProbe | None = None,
    ) -> None:
        """Initialize the monitor.

        Args:
            online: Initial state (default: online)
            probe: Optional observability probe (default: DefaultConnectivityProbe)
        """
        self._online = online
        self._probe = probe or DefaultConnectivityProbe()
        self._callbacks: list[ConnectivityCallback] = []

    @property
    def online(self) -> bool:
        """Last known state."""
        return self._online

    def subscribe(self, callback: ConnectivityCallback) -> Unsubscribe:
        """Register a callback fired on every transition.

        Subscribers assume online, so a subscriber joining while offline
        is told right away.
        """
        self._callbacks.append(callback)
        if not self._online:
            callback(False)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    def set_online(self, online: bool) -> None:
        """Record the current state, notifying subscribers on a change."""
        if online == self._online:
            return
        self._online = online

        for callback in list(self._callbacks):
            try:
                callback(online)
            except Exception as e:
                # One failing subscriber must not starve the others
                self._probe.subscriber_failed(str(e))
