"""
Shared fixtures for store unit tests.
"""

import pytest

from snap_state.persist.blob_storage import InMemoryBlobStorage
from snap_state.persist.sqlite_store import KVStore
from snap_state.store.json_store import JsonStore


@pytest.fixture
def kv(tmp_path):
    """Create a temporary KVStore instance."""
    store = KVStore(tmp_path / "state.db")
    yield store
    store.close()


@pytest.fixture
def storage():
    """Empty in-memory host storage."""
    return InMemoryBlobStorage()


@pytest.fixture
def notifications():
    """List collecting (old, new) pairs."""
    return []


@pytest.fixture
def recording_store(notifications):
    """JsonStore whose diff callback records every notification."""
    return JsonStore(lambda old, new: notifications.append((old, new)))


class FlakyBlobStorage(InMemoryBlobStorage):
    """In-memory host that can be told to reject writes."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.fail_writes = False

    async def set(self, value):
        if self.fail_writes:
            raise ConnectionError("host rejected update")
        return await super().set(value)


@pytest.fixture
def flaky_storage():
    return FlakyBlobStorage()
