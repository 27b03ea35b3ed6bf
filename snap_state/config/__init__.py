"""Store configuration."""

from .settings import Settings, StorageCfg, load_blob_storage

__all__ = ["Settings", "StorageCfg", "load_blob_storage"]
