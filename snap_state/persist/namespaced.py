"""
Namespaced persistence adapter.

Persists a JsonStore into one key of a shared host document. The host offers
only whole-document get/set, so every save re-reads the document, replaces
this adapter's namespace entry and writes everything back. Entries written
by other namespaces pass through untouched.

Host layout:
    {"veramo-state": "<serialized snapshot>", "<other namespace>": ...}
"""

import asyncio
import json
from dataclasses import dataclass, asdict
from typing import Any, Literal, Optional

from snap_state.errors import SnapStateConfigError, StorageUnavailableError, StoreNotReadyError
from snap_state.store.cache import CacheSnapshot, normalize, serialize_snapshot
from snap_state.store.json_store import JsonStore
from snap_state.telemetry import get_logger
from .blob_storage import BlobStorage, is_blob_storage
from .hashing import stable_hash

logger = get_logger(__name__)


AdapterState = Literal["constructed", "loading", "ready"]


@dataclass
class AdapterStats:
    """Counters for load/save activity and cache corruption."""

    loads: int = 0
    corrupt_loads: int = 0
    saves: int = 0
    failed_saves: int = 0
    last_saved_digest: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dict for logging."""
        return asdict(self)


class NamespacedStateAdapter:
    """
    Diff callback that writes the new snapshot under a namespace key.

    Lifecycle: ``constructed`` → ``loading`` → ``ready``. The store is only
    reachable once ``load()`` has hydrated it. A failed save leaves the
    adapter ``ready``; only the persisted copy is stale.

    Usage:
        >>> adapter = NamespacedStateAdapter("veramo-state", storage)
        >>> store = await adapter.load()
        >>> store.identifiers["did:example:1"] = {"did": "did:example:1"}
        >>> await store.drain()
    """

    def __init__(self, namespace_key: str, storage: BlobStorage, serialize_saves: bool = True):
        """
        Args:
            namespace_key: Key owned by this adapter in the host document
            storage: Host blob storage
            serialize_saves: Run saves one at a time, in mutation order
        """
        if not isinstance(namespace_key, str) or not namespace_key:
            raise SnapStateConfigError(f"Namespace key must be a non-empty string, got {namespace_key!r}")

        self.namespace_key = namespace_key
        self.storage = storage
        self.serialize_saves = serialize_saves

        self.state: AdapterState = "constructed"
        self.stats = AdapterStats()

        self._store = JsonStore(self.notify)
        self._save_lock = asyncio.Lock()

    @property
    def store(self) -> JsonStore:
        """The hydrated store."""
        if self.state != "ready":
            raise StoreNotReadyError(
                f"Store for namespace {self.namespace_key!r} is {self.state}, not ready"
            )
        return self._store

    async def _read_document(self) -> dict:
        raw = await self.storage.get()
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            logger.warning(
                "state_blob_not_object",
                namespace=self.namespace_key,
                found=type(raw).__name__,
            )
            return {}
        return raw

    def _decode_entry(self, entry: Any) -> Any:
        """Decode this namespace's entry; corrupt entries count as empty."""
        if entry is None:
            return {}

        if not isinstance(entry, str):
            self.stats.corrupt_loads += 1
            logger.warning(
                "state_cache_corrupt",
                namespace=self.namespace_key,
                reason=f"entry is {type(entry).__name__}, expected str",
            )
            return {}

        try:
            return json.loads(entry)
        except json.JSONDecodeError as e:
            self.stats.corrupt_loads += 1
            logger.warning(
                "state_cache_corrupt",
                namespace=self.namespace_key,
                reason=str(e),
                payload_chars=len(entry),
            )
            return {}

    async def load(self) -> JsonStore:
        """
        Hydrate the store from the host document.

        Missing or unparseable state yields empty tables; host I/O errors
        propagate.

        Returns:
            The ready JsonStore
        """
        self.state = "loading"
        try:
            document = await self._read_document()
            snapshot = normalize(self._decode_entry(document.get(self.namespace_key)))
        except BaseException:
            self.state = "constructed"
            raise

        self._store.assign(snapshot)
        self.stats.loads += 1
        self.state = "ready"

        logger.info(
            "state_loaded",
            namespace=self.namespace_key,
            **{name: len(table) for name, table in snapshot.to_wire().items()},
        )
        return self._store

    async def save(self, snapshot: CacheSnapshot) -> Any:
        """
        Write ``snapshot`` under the namespace key.

        Re-reads the host document right before writing; every other
        namespace entry is carried over as-is.

        Returns:
            The host's acknowledgement of ``set``
        """
        if self.serialize_saves:
            async with self._save_lock:
                return await self._write(snapshot)
        return await self._write(snapshot)

    async def _write(self, snapshot: CacheSnapshot) -> Any:
        payload = serialize_snapshot(snapshot)
        document = await self._read_document()
        merged = {**document, self.namespace_key: payload}
        ack = await self.storage.set(merged)

        self.stats.saves += 1
        self.stats.last_saved_digest = stable_hash(payload)
        logger.debug(
            "state_saved",
            namespace=self.namespace_key,
            payload_chars=len(payload),
            digest=self.stats.last_saved_digest,
        )
        return ack

    async def notify(self, old: CacheSnapshot, new: CacheSnapshot) -> Any:
        """Diff callback: persist ``new``; ``old`` is not needed for a full write."""
        try:
            return await self.save(new)
        except Exception as e:
            self.stats.failed_saves += 1
            logger.error(
                "state_save_failed",
                namespace=self.namespace_key,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise


async def create(namespace_key: str, storage: Optional[BlobStorage], serialize_saves: bool = True) -> JsonStore:
    """
    Build a store persisted under ``namespace_key`` and load it.

    Args:
        namespace_key: Key owned by the store in the host document
        storage: Host blob storage providing async get/set
        serialize_saves: Run saves one at a time, in mutation order

    Returns:
        Ready JsonStore

    Raises:
        StorageUnavailableError: ``storage`` is missing or not a blob storage
        SnapStateConfigError: ``namespace_key`` is empty
    """
    if not is_blob_storage(storage):
        raise StorageUnavailableError(
            "No blob storage facility available: expected an object with async get() and set()"
        )

    adapter = NamespacedStateAdapter(namespace_key, storage, serialize_saves=serialize_saves)
    return await adapter.load()
