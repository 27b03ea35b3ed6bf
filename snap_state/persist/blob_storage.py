"""
Blob storage facilities.

The host exposes a single undifferentiated JSON document with whole-document
``get``/``set`` semantics: no partial writes, no transactions. The store only
depends on the ``BlobStorage`` protocol; the classes below are concrete hosts:

- InMemoryBlobStorage: process-local document (tests, embedded use)
- JsonFileBlobStorage: one JSON file on disk
- SQLiteBlobStorage: one row of a SQLite KVStore
"""

import asyncio
import inspect
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Optional, Protocol, runtime_checkable

from snap_state.errors import BlobStorageError
from .sqlite_store import KVStore


@runtime_checkable
class BlobStorage(Protocol):
    """
    Async whole-document storage contract.

    ``get`` returns the stored JSON value or None when nothing was ever
    written. ``set`` overwrites the entire document and returns the host's
    acknowledgement.
    """

    async def get(self) -> Optional[Any]:
        ...

    async def set(self, value: Any) -> Any:
        ...


def is_blob_storage(obj: object) -> bool:
    """Check that ``obj`` provides async ``get``/``set``."""
    if obj is None or not isinstance(obj, BlobStorage):
        return False
    return all(
        inspect.iscoroutinefunction(getattr(obj, name))
        for name in ("get", "set")
    )


class InMemoryBlobStorage:
    """
    Process-local blob storage.

    Keeps the document JSON-encoded so values handed out by ``get`` never
    alias what was passed to ``set``.

    Usage:
        >>> storage = InMemoryBlobStorage({"other-ns": "{}"})
        >>> store = await create("veramo-state", storage)
    """

    def __init__(self, initial: Optional[Any] = None):
        self._encoded: Optional[str] = None
        if initial is not None:
            self._encoded = json.dumps(initial)

        self.reads = 0
        self.writes = 0

    async def get(self) -> Optional[Any]:
        self.reads += 1
        if self._encoded is None:
            return None
        return json.loads(self._encoded)

    async def set(self, value: Any) -> bool:
        self.writes += 1
        self._encoded = json.dumps(value)
        return True

    def peek(self) -> Optional[Any]:
        """Return the stored document without counting a read."""
        return None if self._encoded is None else json.loads(self._encoded)


class JsonFileBlobStorage:
    """
    Blob storage backed by a single JSON file.

    Writes go to a temporary file in the same directory and are moved into
    place, so readers never observe a half-written document.
    """

    def __init__(self, path: Path):
        """
        Args:
            path: Location of the JSON document
        """
        self.path = Path(path)

    def _read(self) -> Optional[Any]:
        if not self.path.exists():
            return None

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise BlobStorageError(f"Stored document at {self.path} is not valid JSON: {e}") from e
        except OSError as e:
            raise BlobStorageError(f"Cannot read {self.path}: {e}") from e

    def _write(self, value: Any) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=str(self.path.parent), prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(value, f, ensure_ascii=False)
                os.replace(tmp_name, self.path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise BlobStorageError(f"Cannot write {self.path}: {e}") from e
        return True

    async def get(self) -> Optional[Any]:
        return await asyncio.to_thread(self._read)

    async def set(self, value: Any) -> bool:
        return await asyncio.to_thread(self._write, value)


class SQLiteBlobStorage:
    """
    Blob storage kept in one row of a SQLite KVStore.

    Several hosts may share a database file by using different slots.
    """

    TABLE = "blobs"

    def __init__(self, kv: KVStore, slot: str = "state"):
        """
        Args:
            kv: KVStore created with a ``blobs`` table
            slot: Row key holding this host's document
        """
        self.kv = kv
        self.slot = slot

    def _read(self) -> Optional[Any]:
        raw = self.kv.get(self.TABLE, self.slot)
        if raw is None:
            return None

        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise BlobStorageError(f"Slot {self.slot!r} does not hold a JSON document: {e}") from e

    def _write(self, value: Any) -> bool:
        data = json.dumps(value, ensure_ascii=False).encode("utf-8")
        self.kv.set(self.TABLE, self.slot, data)
        return True

    async def get(self) -> Optional[Any]:
        return await asyncio.to_thread(self._read)

    async def set(self, value: Any) -> bool:
        return await asyncio.to_thread(self._write, value)
