"""
Persistence adapters.

The key-value store backends live in ``kv_store``; ``entity_repository``
builds one typed collection per entity kind on top of a store. Services
depend on repositories and never touch the store directly.
"""

from .entity_repository import EntityRepository, EventRegistrationRepository
from .keys import EntityKind, storage_key
from .kv_store import (
    JsonFileKeyValueStore,
    KeyValueStore,
    MemoryKeyValueStore,
    SQLKeyValueStore,
    StorageIOError,
    build_store,
)

__all__ = [
    "EntityKind",
    "EntityRepository",
    "EventRegistrationRepository",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "SQLKeyValueStore",
    "StorageIOError",
    "build_store",
    "storage_key",
]
