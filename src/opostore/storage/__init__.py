"""Persistent key-value storage.

Backends hold the bytes; the shared area fans out change events between
browsing contexts the way ``storage`` events work across browser tabs.
"""

from opostore.storage.area import SharedStorageArea, StorageHandle, StorageListener
from opostore.storage.backends import FileStorage, MemoryStorage, StorageBackend
from opostore.storage.events import StorageEvent

__all__ = [
    "FileStorage",
    "MemoryStorage",
    "SharedStorageArea",
    "StorageBackend",
    "StorageEvent",
    "StorageHandle",
    "StorageListener",
]
