"""
snap-state
==========
Namespaced JSON state store for agent data kept in a host's single-document
blob storage.

Provides:
- Seven observable tables (identifiers, keys, privateKeys, credentials,
  claims, presentations, messages) with change notification
- Tolerant loading of missing or corrupt host state
- Read-modify-write persistence under a namespace key
"""

from .errors import (
    BlobStorageError,
    SnapStateConfigError,
    SnapStateError,
    StorageUnavailableError,
    StoreNotReadyError,
)
from .store import CacheSnapshot, JsonStore, StateTable, normalize
from .persist import (
    BlobStorage,
    InMemoryBlobStorage,
    JsonFileBlobStorage,
    NamespacedStateAdapter,
    SQLiteBlobStorage,
    create,
)
from .factory import create_from_settings

__all__ = [
    "BlobStorageError",
    "SnapStateConfigError",
    "SnapStateError",
    "StorageUnavailableError",
    "StoreNotReadyError",
    "CacheSnapshot",
    "JsonStore",
    "StateTable",
    "normalize",
    "BlobStorage",
    "InMemoryBlobStorage",
    "JsonFileBlobStorage",
    "NamespacedStateAdapter",
    "SQLiteBlobStorage",
    "create",
    "create_from_settings",
]
