"""Connectivity monitors for the outbox."""

from outbox.infrastructure.connectivity.http_probe import HttpConnectivityMonitor
from outbox.infrastructure.connectivity.manual import ManualConnectivityMonitor

__all__ = ["HttpConnectivityMonitor", "ManualConnectivityMonitor"]
