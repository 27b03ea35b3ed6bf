"""
In-memory state: snapshot model, observable tables and the store facade.
"""

from .cache import (
    TABLE_NAMES,
    CacheSnapshot,
    copy_snapshot,
    deserialize_snapshot,
    normalize,
    serialize_snapshot,
)
from .table import StateTable
from .json_store import DiffCallback, JsonStore

__all__ = [
    "TABLE_NAMES",
    "CacheSnapshot",
    "copy_snapshot",
    "deserialize_snapshot",
    "normalize",
    "serialize_snapshot",
    "StateTable",
    "DiffCallback",
    "JsonStore",
]
