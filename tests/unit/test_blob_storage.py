"""
Unit tests for snap_state/persist/blob_storage.py

Tests the whole-document get/set contract of each bundled host backend.
"""
import json

import pytest

from snap_state.errors import BlobStorageError
from snap_state.persist.blob_storage import (
    BlobStorage,
    InMemoryBlobStorage,
    JsonFileBlobStorage,
    SQLiteBlobStorage,
    is_blob_storage,
)
from snap_state.persist.sqlite_store import KVStore

pytestmark = pytest.mark.asyncio


@pytest.fixture(params=["memory", "file", "sqlite"])
def backend(request, tmp_path):
    if request.param == "memory":
        yield InMemoryBlobStorage()
    elif request.param == "file":
        yield JsonFileBlobStorage(tmp_path / "host" / "blob.json")
    else:
        kv = KVStore(tmp_path / "host.db")
        yield SQLiteBlobStorage(kv)
        kv.close()


async def test_fresh_backend_returns_none(backend):
    assert await backend.get() is None


async def test_set_overwrites_whole_document(backend):
    await backend.set({"ns-a": "1", "ns-b": "2"})
    ack = await backend.set({"ns-a": "3"})

    assert ack is True
    assert await backend.get() == {"ns-a": "3"}


async def test_unicode_document(backend):
    await backend.set({"veramo-state": '{"messages":{"m":"héllo ✓"}}'})
    assert await backend.get() == {"veramo-state": '{"messages":{"m":"héllo ✓"}}'}


async def test_backends_satisfy_protocol(backend):
    assert isinstance(backend, BlobStorage)
    assert is_blob_storage(backend)


async def test_is_blob_storage_rejects_missing_and_partial():
    class OnlyGet:
        async def get(self):
            return None

    assert not is_blob_storage(None)
    assert not is_blob_storage(object())
    assert not is_blob_storage(OnlyGet())


async def test_in_memory_values_do_not_alias():
    storage = InMemoryBlobStorage()
    document = {"ns": "payload"}

    await storage.set(document)
    document["ns"] = "changed after set"
    first = await storage.get()
    first["ns"] = "changed after get"

    assert await storage.get() == {"ns": "payload"}
    assert storage.writes == 1
    assert storage.reads == 2


async def test_in_memory_initial_document():
    storage = InMemoryBlobStorage({"ns": "x"})
    assert storage.peek() == {"ns": "x"}
    assert storage.reads == 0


async def test_file_backend_writes_json_atomically(tmp_path):
    path = tmp_path / "blob.json"
    storage = JsonFileBlobStorage(path)

    await storage.set({"veramo-state": "{}"})

    assert json.loads(path.read_text(encoding="utf-8")) == {"veramo-state": "{}"}
    assert [p.name for p in tmp_path.iterdir()] == ["blob.json"]


async def test_file_backend_invalid_document_is_host_error(tmp_path):
    path = tmp_path / "blob.json"
    path.write_text("{truncated", encoding="utf-8")

    with pytest.raises(BlobStorageError):
        await JsonFileBlobStorage(path).get()


async def test_sqlite_backend_slots_are_independent(tmp_path):
    with KVStore(tmp_path / "shared.db") as kv:
        first = SQLiteBlobStorage(kv, slot="snap-a")
        second = SQLiteBlobStorage(kv, slot="snap-b")

        await first.set({"ns": "a"})

        assert await second.get() is None
        assert await first.get() == {"ns": "a"}


async def test_sqlite_backend_invalid_row_is_host_error(kv):
    kv.set("blobs", "state", b"\xff\xfe not json")

    with pytest.raises(BlobStorageError):
        await SQLiteBlobStorage(kv).get()
