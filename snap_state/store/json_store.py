"""
JSON store facade.

Holds the seven tables in memory and, after every mutation, hands the state
before and after the change to a diff callback. The facade does no I/O; what
the callback does with the diff (persist, replicate, ignore) is up to it.
"""

import asyncio
import concurrent.futures
import inspect
from typing import Any, Awaitable, Callable, Dict, Optional, Set, Union

from snap_state.telemetry import get_logger
from .cache import TABLE_ATTRS, TABLE_NAMES, CacheSnapshot, copy_snapshot
from .table import StateTable

logger = get_logger(__name__)


# Called as callback(old, new); may be a plain function or a coroutine function
DiffCallback = Callable[[CacheSnapshot, CacheSnapshot], Union[None, Awaitable[Any]]]


async def _await(awaitable: Awaitable[Any]) -> Any:
    return await awaitable


class JsonStore:
    """
    In-memory store of seven observable tables.

    Attributes mirror the snapshot: ``identifiers``, ``keys``,
    ``private_keys``, ``credentials``, ``claims``, ``presentations``,
    ``messages``. Each is a ``StateTable`` that callers mutate like a dict.

    Notification is synchronous and in mutation order. When the callback
    returns an awaitable it is scheduled on the running loop and the mutation
    returns immediately; ``last_save``, ``pending_saves`` and ``drain()`` let
    callers observe how that work ended. Without a running loop the callback
    runs inline and ``last_save`` is an already finished future; a failure
    never escapes the mutation.

    Example:
        >>> seen = []
        >>> store = JsonStore(lambda old, new: seen.append((old, new)))
        >>> store.keys["k1"] = {"kid": "k1"}
        >>> len(seen)
        1
    """

    def __init__(self, notify: Optional[DiffCallback] = None):
        """
        Args:
            notify: Diff callback invoked after each mutation
        """
        self.notify = notify

        self.identifiers = StateTable("identifiers", self)
        self.keys = StateTable("keys", self)
        self.private_keys = StateTable("privateKeys", self)
        self.credentials = StateTable("credentials", self)
        self.claims = StateTable("claims", self)
        self.presentations = StateTable("presentations", self)
        self.messages = StateTable("messages", self)

        self.last_save: Optional[Union[asyncio.Future, concurrent.futures.Future]] = None
        self._pending: Set[asyncio.Future] = set()

    @property
    def tables(self) -> Dict[str, StateTable]:
        """Tables keyed by wire name."""
        return {name: getattr(self, TABLE_ATTRS[name]) for name in TABLE_NAMES}

    def table(self, name: str) -> StateTable:
        """Look up a table by wire name or attribute name."""
        attr = TABLE_ATTRS.get(name, name)
        if attr not in TABLE_ATTRS.values():
            raise KeyError(name)
        return getattr(self, attr)

    def snapshot(self) -> CacheSnapshot:
        """Deep copy of the current state."""
        return copy_snapshot(CacheSnapshot.model_construct(
            **{attr: getattr(self, attr)._data for attr in TABLE_ATTRS.values()}
        ))

    def assign(self, snapshot: CacheSnapshot) -> None:
        """Replace every table with the contents of ``snapshot``; no notification."""
        fresh = copy_snapshot(snapshot)
        for attr in TABLE_ATTRS.values():
            getattr(self, attr)._replace(getattr(fresh, attr))

    def _mutate(self, apply: Callable[[], None]) -> None:
        old = self.snapshot()
        apply()
        if self.notify is None:
            return
        self._dispatch(old, self.snapshot())

    def _dispatch(self, old: CacheSnapshot, new: CacheSnapshot) -> None:
        result = self.notify(old, new)
        if not inspect.isawaitable(result):
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self.last_save = self._run_inline(result)
            return

        task = loop.create_task(_await(result))
        self.last_save = task
        self._pending.add(task)
        task.add_done_callback(self._on_done)

    def _run_inline(self, awaitable: Awaitable[Any]) -> concurrent.futures.Future:
        """Run the callback to completion without a loop; failures stay on the returned future."""
        outcome: concurrent.futures.Future = concurrent.futures.Future()
        try:
            outcome.set_result(asyncio.run(_await(awaitable)))
        except Exception as e:
            outcome.set_exception(e)
            logger.debug("state_notify_failed", error=str(e), error_type=type(e).__name__)
        return outcome

    def _on_done(self, task: asyncio.Future) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.debug("state_notify_failed", error=str(exc), error_type=type(exc).__name__)

    @property
    def pending_saves(self) -> int:
        """Number of notification tasks still running."""
        return len(self._pending)

    async def drain(self) -> None:
        """
        Wait for all in-flight notification tasks.

        Raises:
            The first exception raised by a drained task
        """
        while self._pending:
            batch = list(self._pending)
            results = await asyncio.gather(*batch, return_exceptions=True)
            self._pending.difference_update(batch)
            for result in results:
                if isinstance(result, BaseException):
                    raise result

    def __repr__(self) -> str:
        sizes = ", ".join(f"{name}={len(t)}" for name, t in self.tables.items())
        return f"JsonStore({sizes})"
