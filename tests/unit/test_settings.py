"""Unit tests for store settings and the storage factory."""

import pytest

from snap_state.config.settings import Settings, StorageCfg, load_blob_storage
from snap_state.errors import SnapStateConfigError
from snap_state.persist.blob_storage import InMemoryBlobStorage, JsonFileBlobStorage, SQLiteBlobStorage


def test_default_settings():
    """Test that default settings are correctly configured."""
    settings = Settings()
    assert settings.namespace_key == "veramo-state"
    assert settings.serialize_saves is True
    assert settings.storage.provider == "memory"


def test_empty_namespace_rejected():
    with pytest.raises(ValueError):
        Settings(namespace_key="")


def test_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("SNAP_STATE_NAMESPACE", "wallet-state")
    monkeypatch.setenv("SNAP_STATE_SERIALIZE_SAVES", "false")
    monkeypatch.setenv("SNAP_STATE_STORAGE_PROVIDER", "file")
    monkeypatch.setenv("SNAP_STATE_FILE_PATH", str(tmp_path / "blob.json"))

    settings = Settings.from_env()

    assert settings.namespace_key == "wallet-state"
    assert settings.serialize_saves is False
    assert settings.storage.provider == "file"
    assert settings.storage.file_path == str(tmp_path / "blob.json")


def test_from_env_defaults(monkeypatch):
    for name in ("SNAP_STATE_NAMESPACE", "SNAP_STATE_SERIALIZE_SAVES", "SNAP_STATE_STORAGE_PROVIDER"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()

    assert settings.namespace_key == "veramo-state"
    assert settings.serialize_saves is True


def test_from_env_unknown_provider(monkeypatch):
    monkeypatch.setenv("SNAP_STATE_STORAGE_PROVIDER", "s3")

    with pytest.raises(SnapStateConfigError):
        Settings.from_env()


def test_load_memory_storage():
    assert isinstance(load_blob_storage(Settings()), InMemoryBlobStorage)


def test_load_file_storage(tmp_path):
    settings = Settings(storage=StorageCfg(provider="file", file_path=str(tmp_path / "b.json")))
    storage = load_blob_storage(settings)

    assert isinstance(storage, JsonFileBlobStorage)
    assert storage.path == tmp_path / "b.json"


def test_load_sqlite_storage(tmp_path):
    settings = Settings(storage=StorageCfg(provider="sqlite", sqlite_path=str(tmp_path / "s.db"), slot="snap"))
    storage = load_blob_storage(settings)

    assert isinstance(storage, SQLiteBlobStorage)
    assert storage.slot == "snap"
    storage.kv.close()


def test_load_unknown_provider():
    settings = Settings(storage=StorageCfg.model_construct(provider="redis"))

    with pytest.raises(SnapStateConfigError):
        load_blob_storage(settings)
