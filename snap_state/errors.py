"""Exception hierarchy for the state store.

Each failure class maps to one recovery policy: precondition errors are fatal
at construction, storage errors propagate from the host unchanged.
"""

from __future__ import annotations


class SnapStateError(Exception):
    """Base exception for all state store failures."""


class SnapStateConfigError(SnapStateError):
    """Raised for invalid settings, namespace keys or storage providers."""


class StorageUnavailableError(SnapStateError):
    """Raised when no blob storage facility is available to the store."""


class StoreNotReadyError(SnapStateError):
    """Raised when the store is requested before it has been loaded."""


class BlobStorageError(SnapStateError):
    """Raised by bundled blob storage backends for host-level I/O failures."""
