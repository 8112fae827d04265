"""
The cache layer that sits in front of every network fetch.

Each key maps to one entry that wraps an asyncio task. While the task runs,
every caller asking for the same key joins it instead of starting a second
fetch; once it succeeds, the value is memoized; once it fails, the next call
for the key starts a fresh fetch. Eviction of completed entries is delegated
to a pluggable policy.
"""

import asyncio
import enum
import functools
import logging
import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Any, Awaitable, Callable, Hashable, List, Optional

from .exceptions import CacheStateError

Producer = Callable[[], Awaitable[Any]]


class EntryState(enum.Enum):
    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"


class CacheEntry:
    """The in-flight or completed fetch for a single key."""

    def __init__(self, key: Hashable, task: "asyncio.Future[Any]"):
        self.key = key
        self.task = task
        self.state = EntryState.PENDING
        self.error: Optional[BaseException] = None
        self.completed_at: Optional[float] = None

    @property
    def value(self) -> Any:
        if self.state is not EntryState.READY:
            raise CacheStateError(
                f"Entry for {self.key} has no value in state {self.state.value}"
            )
        return self.task.result()

    def _transition(self, state: EntryState, now: float):
        if self.state is not EntryState.PENDING:
            raise CacheStateError(
                f"Illegal transition {self.state.value} -> {state.value} "
                f"for {self.key}"
            )
        self.state = state
        self.completed_at = now

    def mark_ready(self, now: float):
        self._transition(EntryState.READY, now)

    def mark_failed(self, error: BaseException, now: float):
        self._transition(EntryState.FAILED, now)
        self.error = error

    def __repr__(self) -> str:
        return f"CacheEntry({self.key!r}, {self.state.value})"


# --- Eviction Policies ---

class EvictionPolicy(ABC):
    """Decides which completed entries are dropped from the cache."""

    def is_stale(self, entry: CacheEntry, now: float) -> bool:
        """Whether a ready entry must be refetched instead of served."""
        return False

    @abstractmethod
    def select_victims(
        self, entries: "OrderedDict[Hashable, CacheEntry]", now: float
    ) -> List[Hashable]:
        """
        Returns the keys to evict. Entries are ordered from least to most
        recently used; pending entries must never be selected.
        """
        pass


class NoEviction(EvictionPolicy):
    """Keeps every completed entry for the lifetime of the cache."""

    def select_victims(self, entries, now):
        return []


class SizeBoundEviction(EvictionPolicy):
    """Keeps at most max_entries ready entries, dropping the least recently used."""

    def __init__(self, max_entries: int):
        if max_entries < 1:
            raise ValueError(f"max_entries must be at least 1, got {max_entries}")
        self.max_entries = max_entries

    def select_victims(self, entries, now):
        ready = [
            key for key, entry in entries.items()
            if entry.state is EntryState.READY
        ]
        excess = len(ready) - self.max_entries
        return ready[:excess] if excess > 0 else []


class TtlEviction(EvictionPolicy):
    """Expires ready entries ttl_seconds after they completed."""

    def __init__(self, ttl_seconds: float):
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        self.ttl_seconds = ttl_seconds

    def is_stale(self, entry, now):
        return (
            entry.state is EntryState.READY
            and now - entry.completed_at >= self.ttl_seconds
        )

    def select_victims(self, entries, now):
        return [key for key, entry in entries.items() if self.is_stale(entry, now)]


# --- Cache ---

class ResourceCache:
    """
    A keyed store of in-flight or completed fetches.

    All bookkeeping runs on the event loop thread, and the lookup and the
    registration of a new entry happen without an await in between, so two
    callers racing on the same key can never both start a producer.
    """

    def __init__(
        self,
        eviction_policy: Optional[EvictionPolicy] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initializes an empty cache."""
        self.logger = logging.getLogger(self.__class__.__name__)
        self.eviction_policy = eviction_policy or NoEviction()
        self.clock = clock
        self._entries: "OrderedDict[Hashable, CacheEntry]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries

    def state_of(self, key: Hashable) -> Optional[EntryState]:
        entry = self._entries.get(key)
        return entry.state if entry is not None else None

    def invalidate(self, key: Hashable) -> bool:
        """
        Drops the entry for a key. Callers already waiting on a pending
        fetch still receive its outcome, but it is no longer cached.
        """
        return self._entries.pop(key, None) is not None

    def clear(self):
        self._entries.clear()

    async def get_or_fetch(self, key: Hashable, producer: Producer) -> Any:
        """
        Returns the value for a key, running producer only when needed.

        Args:
            key: Any hashable cache key.
            producer: A zero-argument callable returning an awaitable that
                      resolves to the value for key.

        Returns:
            The memoized value, or the outcome of the (possibly shared)
            in-flight fetch.

        Raises:
            Whatever the producer raised. Failures are never memoized.
        """

        entry = self._entries.get(key)

        if entry is not None and entry.state is EntryState.READY:
            if not self.eviction_policy.is_stale(entry, self.clock()):
                self._entries.move_to_end(key)
                self.logger.debug(f"Cache hit for {key}")
                return entry.value
            self.logger.debug(f"Cache entry for {key} is stale, refetching")

        elif entry is not None and entry.state is EntryState.PENDING:
            self.logger.debug(f"Joining in-flight fetch for {key}")
            return await asyncio.shield(entry.task)

        entry = self._start(key, producer)
        return await asyncio.shield(entry.task)

    def _start(self, key: Hashable, producer: Producer) -> CacheEntry:
        """Registers a pending entry; must not await before returning."""
        task = asyncio.ensure_future(producer())
        entry = CacheEntry(key, task)
        self._entries[key] = entry
        self._entries.move_to_end(key)
        task.add_done_callback(functools.partial(self._on_done, entry))
        return entry

    def _on_done(self, entry: CacheEntry, task: "asyncio.Future[Any]"):
        now = self.clock()

        if task.cancelled():
            entry.mark_failed(asyncio.CancelledError(), now)
            self._discard(entry)
            self.logger.debug(f"Fetch for {entry.key} was cancelled")
            return

        error = task.exception()
        if error is not None:
            entry.mark_failed(error, now)
            self._discard(entry)
            self.logger.info(f"Fetch for {entry.key} failed: {error}")
            return

        entry.mark_ready(now)
        if self._entries.get(entry.key) is entry:
            self._entries.move_to_end(entry.key)
        self._evict(now)

    def _discard(self, entry: CacheEntry):
        """Drops a finished entry unless a newer fetch already replaced it."""
        if self._entries.get(entry.key) is entry:
            del self._entries[entry.key]

    def _evict(self, now: float):
        for key in self.eviction_policy.select_victims(self._entries, now):
            entry = self._entries.get(key)
            if entry is None:
                continue
            if entry.state is EntryState.PENDING:
                raise CacheStateError(f"Eviction policy selected pending {key}")
            del self._entries[key]
            self.logger.debug(f"Evicted {key}")
