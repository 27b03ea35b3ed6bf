"""
Stable hashing of state payloads.

Used to fingerprint what each save wrote, so repeated or diverging writes of
the same namespace can be told apart in logs and stats.
"""

import hashlib
import json
import unicodedata
from typing import Any


def stable_hash(obj: Any) -> str:
    """
    Compute a stable hash of a JSON value or a serialized payload.

    - Dicts/lists: canonical JSON (sorted keys, compact separators)
    - Strings: NFC-normalized UTF-8
    - Bytes: used directly

    Returns:
        64-character hex string (blake2b)

    Examples:
        >>> stable_hash({"b": 2, "a": 1}) == stable_hash({"a": 1, "b": 2})
        True
    """
    if isinstance(obj, (dict, list)):
        canonical = json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
        data = canonical.encode("utf-8")
    elif isinstance(obj, str):
        data = unicodedata.normalize("NFC", obj).encode("utf-8")
    elif isinstance(obj, bytes):
        data = obj
    else:
        raise TypeError(f"Cannot hash type {type(obj)}: {obj}")

    h = hashlib.blake2b(data, digest_size=32)
    return h.hexdigest()
