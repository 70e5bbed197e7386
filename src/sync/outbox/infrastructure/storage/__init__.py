"""Durable key-value storage adapters for the outbox."""

from outbox.infrastructure.storage.file import JsonFileStorage
from outbox.infrastructure.storage.memory import InMemoryStorage

__all__ = ["InMemoryStorage", "JsonFileStorage"]
