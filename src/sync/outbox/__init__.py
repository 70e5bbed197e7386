"""Outbox bounded context.

Keeps captured records in a durable, ordered outbox while the device is
offline and delivers them to the remote store, one at a time and in
submission order, once connectivity returns.
"""
