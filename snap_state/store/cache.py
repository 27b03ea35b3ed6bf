"""
Cache snapshot model and defaulting.

A snapshot is the whole store at one point in time: seven tables, each a
mapping from a string id to an opaque JSON record owned by the subsystem that
writes it (key manager, credential issuer, message handler, ...).
"""

import copy
import json
from collections.abc import Mapping
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

from snap_state.telemetry import get_logger

logger = get_logger(__name__)


# Wire names, in serialization order
TABLE_NAMES = (
    "identifiers",
    "keys",
    "privateKeys",
    "credentials",
    "claims",
    "presentations",
    "messages",
)

# Wire name → Python attribute
TABLE_ATTRS = {
    "identifiers": "identifiers",
    "keys": "keys",
    "privateKeys": "private_keys",
    "credentials": "credentials",
    "claims": "claims",
    "presentations": "presentations",
    "messages": "messages",
}

# Older schema name of the identifiers table
LEGACY_IDENTIFIERS = "dids"


class CacheSnapshot(BaseModel):
    """
    Immutable-by-convention copy of all seven tables.

    Every table is always present, possibly empty. Records are passed through
    untouched; only the table level is typed.
    """

    model_config = ConfigDict(populate_by_name=True)

    identifiers: Dict[str, Any] = Field(default_factory=dict, description="DID → identifier record")
    keys: Dict[str, Any] = Field(default_factory=dict, description="Key id → managed key info")
    private_keys: Dict[str, Any] = Field(
        default_factory=dict, alias="privateKeys", description="Alias → managed private key"
    )
    credentials: Dict[str, Any] = Field(default_factory=dict, description="Credential hash → entry")
    claims: Dict[str, Any] = Field(default_factory=dict, description="Claim hash → entry")
    presentations: Dict[str, Any] = Field(default_factory=dict, description="Presentation hash → entry")
    messages: Dict[str, Any] = Field(default_factory=dict, description="Message id → message")

    def table(self, name: str) -> Dict[str, Any]:
        """Return a table by wire name (``privateKeys``) or attribute name."""
        attr = TABLE_ATTRS.get(name, name)
        if attr not in TABLE_ATTRS.values():
            raise KeyError(name)
        return getattr(self, attr)

    def to_wire(self) -> Dict[str, Dict[str, Any]]:
        """Return the tables keyed by wire name, in serialization order."""
        return {name: getattr(self, TABLE_ATTRS[name]) for name in TABLE_NAMES}

    def is_empty(self) -> bool:
        return not any(getattr(self, attr) for attr in TABLE_ATTRS.values())


def normalize(raw: Any) -> CacheSnapshot:
    """
    Turn any decoded JSON value into a complete snapshot.

    Total: never raises. Non-objects count as ``{}``, missing tables become
    empty, a table whose value is not an object is replaced by an empty one,
    unknown top-level keys are dropped. Records inside a table are not
    validated. State from the older schema that kept identifiers under
    ``dids`` is read as ``identifiers`` when the latter is absent.

    Args:
        raw: Result of ``json.loads`` on stored state, or None

    Returns:
        CacheSnapshot with all seven tables present
    """
    if not isinstance(raw, Mapping):
        raw = {}

    if "identifiers" not in raw and isinstance(raw.get(LEGACY_IDENTIFIERS), Mapping):
        logger.info(
            "state_table_migrated",
            table="identifiers",
            legacy=LEGACY_IDENTIFIERS,
            entries=len(raw[LEGACY_IDENTIFIERS]),
        )
        raw = {**raw, "identifiers": raw[LEGACY_IDENTIFIERS]}

    tables: Dict[str, Dict[str, Any]] = {}
    for name in TABLE_NAMES:
        if name not in raw:
            tables[name] = {}
            continue

        value = raw[name]
        if isinstance(value, Mapping) and all(isinstance(k, str) for k in value):
            tables[name] = dict(value)
        else:
            logger.warning("state_table_invalid", table=name, found=type(value).__name__)
            tables[name] = {}

    return CacheSnapshot.model_construct(
        **{TABLE_ATTRS[name]: table for name, table in tables.items()}
    )


def copy_snapshot(snapshot: CacheSnapshot) -> CacheSnapshot:
    """Deep copy, sharing no mutable structure with ``snapshot``."""
    return CacheSnapshot.model_construct(
        **{attr: copy.deepcopy(getattr(snapshot, attr)) for attr in TABLE_ATTRS.values()}
    )


def serialize_snapshot(snapshot: CacheSnapshot) -> str:
    """Serialize to the compact JSON payload stored under a namespace."""
    return json.dumps(snapshot.to_wire(), separators=(",", ":"), ensure_ascii=False)


def deserialize_snapshot(payload: str) -> CacheSnapshot:
    """
    Parse a stored payload.

    Raises:
        json.JSONDecodeError: payload is not valid JSON
    """
    return normalize(json.loads(payload))
