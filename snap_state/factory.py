"""
Settings-driven construction of a ready store.
"""

from typing import Optional

from snap_state.config.settings import Settings, load_blob_storage
from snap_state.persist.namespaced import create
from snap_state.store.json_store import JsonStore
from snap_state.telemetry import configure_logging


async def create_from_settings(settings: Optional[Settings] = None) -> JsonStore:
    """
    Resolve the storage backend from settings and load the store.

    Args:
        settings: Store settings (defaults to ``Settings.from_env()``)

    Returns:
        Ready JsonStore
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    storage = load_blob_storage(settings)
    return await create(
        settings.namespace_key,
        storage,
        serialize_saves=settings.serialize_saves,
    )
