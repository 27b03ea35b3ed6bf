"""
Observable table.

A dict-like view over one table of the store. Every change goes through the
owning store so it can snapshot before/after and notify exactly once.
"""

from collections.abc import MutableMapping
from typing import Any, Callable, Dict, Iterator


class StateTable(MutableMapping):
    """
    Mutable mapping of string ids to opaque records.

    Reads hit the backing dict directly. Writes are wrapped in
    ``owner._mutate`` which fires one notification per call; ``update`` and
    ``clear`` count as a single mutation.
    """

    def __init__(self, name: str, owner: Any):
        """
        Args:
            name: Wire name of the table (e.g. ``privateKeys``)
            owner: Store providing ``_mutate(apply)``
        """
        self.name = name
        self._owner = owner
        self._data: Dict[str, Any] = {}

    @staticmethod
    def _check_key(key: Any) -> None:
        if not isinstance(key, str):
            raise TypeError(f"Table keys must be str, got {type(key).__name__}")

    def _apply(self, change: Callable[[Dict[str, Any]], None]) -> None:
        self._owner._mutate(lambda: change(self._data))

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._check_key(key)
        self._apply(lambda data: data.__setitem__(key, value))

    def __delitem__(self, key: str) -> None:
        if key not in self._data:
            raise KeyError(key)
        self._apply(lambda data: data.__delitem__(key))

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def update(self, *args, **kwargs) -> None:
        items = dict(*args, **kwargs)
        if not items:
            return
        for key in items:
            self._check_key(key)
        self._apply(lambda data: data.update(items))

    def clear(self) -> None:
        if not self._data:
            return
        self._apply(lambda data: data.clear())

    def _replace(self, records: Dict[str, Any]) -> None:
        """Swap in a new backing dict without notifying (hydration)."""
        self._data = dict(records)

    def to_dict(self) -> Dict[str, Any]:
        """Shallow copy of the table."""
        return dict(self._data)

    def __repr__(self) -> str:
        return f"StateTable({self.name!r}, {self._data!r})"
