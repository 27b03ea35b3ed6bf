"""
Persistence layer.

Provides:
- Blob storage contract and host backends (memory, JSON file, SQLite)
- SQLite-backed KV store
- Stable hashing of saved payloads
- Namespaced read-modify-write adapter
"""

from .hashing import stable_hash
from .sqlite_store import KVStore
from .blob_storage import (
    BlobStorage,
    InMemoryBlobStorage,
    JsonFileBlobStorage,
    SQLiteBlobStorage,
    is_blob_storage,
)
from .namespaced import AdapterStats, NamespacedStateAdapter, create

__all__ = [
    "stable_hash",
    "KVStore",
    "BlobStorage",
    "InMemoryBlobStorage",
    "JsonFileBlobStorage",
    "SQLiteBlobStorage",
    "is_blob_storage",
    "AdapterStats",
    "NamespacedStateAdapter",
    "create",
]
