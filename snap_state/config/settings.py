"""Store settings and configuration schema."""

import os
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from snap_state.errors import SnapStateConfigError
from snap_state.persist.blob_storage import (
    BlobStorage,
    InMemoryBlobStorage,
    JsonFileBlobStorage,
    SQLiteBlobStorage,
)
from snap_state.persist.sqlite_store import KVStore


class StorageCfg(BaseModel):
    """Host blob storage configuration."""
    provider: Literal["memory", "file", "sqlite"] = "memory"
    file_path: str = "data/state/blob.json"
    sqlite_path: str = "data/state/state.db"
    slot: str = "state"


class Settings(BaseModel):
    """Main store settings."""
    namespace_key: str = Field("veramo-state", description="Key owned by the store in the host document")
    serialize_saves: bool = Field(True, description="Run saves one at a time, in mutation order")
    log_level: str = "INFO"
    storage: StorageCfg = StorageCfg()

    @field_validator("namespace_key")
    @classmethod
    def _non_empty_namespace(cls, value: str) -> str:
        if not value:
            raise ValueError("namespace_key must not be empty")
        return value

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from SNAP_STATE_* environment variables."""
        storage = StorageCfg()
        storage_data = storage.model_dump()
        if os.getenv("SNAP_STATE_STORAGE_PROVIDER"):
            storage_data["provider"] = os.getenv("SNAP_STATE_STORAGE_PROVIDER")
        if os.getenv("SNAP_STATE_FILE_PATH"):
            storage_data["file_path"] = os.getenv("SNAP_STATE_FILE_PATH")
        if os.getenv("SNAP_STATE_SQLITE_PATH"):
            storage_data["sqlite_path"] = os.getenv("SNAP_STATE_SQLITE_PATH")

        data = {
            "namespace_key": os.getenv("SNAP_STATE_NAMESPACE", "veramo-state"),
            "log_level": os.getenv("SNAP_STATE_LOG_LEVEL", "INFO"),
            "storage": storage_data,
        }
        serialize = os.getenv("SNAP_STATE_SERIALIZE_SAVES")
        if serialize is not None:
            data["serialize_saves"] = serialize.strip().lower() not in ("0", "false", "no", "off")

        try:
            return cls.model_validate(data)
        except ValueError as e:
            raise SnapStateConfigError(f"Invalid SNAP_STATE_* configuration: {e}") from e


def load_blob_storage(settings: Optional[Settings] = None) -> BlobStorage:
    """
    Factory resolver for the host blob storage backend.

    - memory (default)
    - file
    - sqlite
    """
    settings = settings or Settings()
    cfg = settings.storage

    if cfg.provider == "memory":
        return InMemoryBlobStorage()

    if cfg.provider == "file":
        return JsonFileBlobStorage(Path(cfg.file_path))

    if cfg.provider == "sqlite":
        return SQLiteBlobStorage(KVStore(Path(cfg.sqlite_path)), slot=cfg.slot)

    raise SnapStateConfigError(f"Unknown storage provider: {cfg.provider}")
