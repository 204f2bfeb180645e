"""Fixed-capacity least-recently-used cache.

The cache pairs a dict index (key -> entry) with a doubly-linked recency chain
running from the oldest entry to the newest one. Both structures are only ever
changed together, inside the methods of `LRUCache`, so the index and the chain
always hold the same key set.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable, Iterator
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from lrucache.config import DEFAULT_MAX_SIZE, normalize_max_size

logger = logging.getLogger("lrucache.cache")

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class CacheEntry(Generic[K, V]):
    """One key/value association and its position in the recency chain."""

    __slots__ = ("key", "value", "older", "newer")

    def __init__(
        self,
        key: K,
        value: V,
        older: CacheEntry[K, V] | None = None,
        newer: CacheEntry[K, V] | None = None,
    ) -> None:
        self.key = key
        self.value = value
        self.older = older
        self.newer = newer

    def __repr__(self) -> str:
        return f"CacheEntry(key={self.key!r}, value={self.value!r})"


@dataclass(frozen=True, slots=True)
class CacheStats:
    max_size: int
    size: int
    hits: int
    misses: int

    @property
    def hit_rate(self) -> float:
        lookups = self.hits + self.misses
        if lookups == 0:
            return 0.0
        return self.hits / lookups


class LRUCache(Generic[K, V]):
    """Key/value store holding at most `max_size` entries.

    Inserting a new key into a full cache evicts the least recently used entry,
    where both `get` and `put` count as a use. `peek`, membership tests and
    traversal do not affect recency.

    Lookups of missing keys are normal outcomes: they return the caller's
    `default` and are counted as misses. Nothing here raises for an absent key
    or a full cache.

    Not thread-safe. The chain is mutated in place on every `get` and `put`,
    so concurrent callers must serialize access to an instance themselves.
    """

    def __init__(self, max_size: int | None = DEFAULT_MAX_SIZE) -> None:
        self._max_size = normalize_max_size(max_size)
        self._index: dict[K, CacheEntry[K, V]] = {}
        self._oldest: CacheEntry[K, V] | None = None
        self._newest: CacheEntry[K, V] | None = None
        self._size = 0
        self._hits = 0
        self._misses = 0

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def oldest(self) -> CacheEntry[K, V] | None:
        """Least recently used entry (treat as read-only)."""

        return self._oldest

    @property
    def newest(self) -> CacheEntry[K, V] | None:
        """Most recently used entry (treat as read-only)."""

        return self._newest

    # --- chain maintenance ---

    def _unlink(self, entry: CacheEntry[K, V]) -> None:
        if entry.older is not None:
            entry.older.newer = entry.newer
        else:
            self._oldest = entry.newer

        if entry.newer is not None:
            entry.newer.older = entry.older
        else:
            self._newest = entry.older

        entry.older = entry.newer = None

    def _append(self, entry: CacheEntry[K, V]) -> None:
        entry.older = self._newest
        entry.newer = None
        if self._newest is not None:
            self._newest.newer = entry
        else:
            self._oldest = entry
        self._newest = entry

    # --- operations ---

    def get(self, key: K, default: Any = None) -> V | Any:
        """Return the value for `key` and mark it most recently used.

        Returns `default` (and counts a miss) when the key is not cached.
        """

        entry = self._index.get(key)
        if entry is None:
            self._misses += 1
            return default

        # Fast path: already the newest, nothing to relink.
        if entry is not self._newest:
            self._unlink(entry)
            self._append(entry)

        self._hits += 1
        return entry.value

    def put(self, key: K, value: V) -> V | None:
        """Store `value` under `key` as the newest entry.

        Returns the evicted value when the cache was already full, otherwise
        `None`. Replacing the value of a cached key never evicts.
        """

        existing = self._index.get(key)
        if existing is not None:
            # Drop the old position from the chain before re-adding the key.
            self._unlink(existing)
            existing.value = value
            self._append(existing)
            return None

        entry = CacheEntry(key, value)
        self._index[key] = entry
        self._append(entry)

        if self._size == self._max_size:
            evicted = self._oldest
            assert evicted is not None
            self._unlink(evicted)
            del self._index[evicted.key]
            logger.debug("Evicted %r (max_size=%s)", evicted.key, self._max_size)
            return evicted.value

        self._size += 1
        return None

    def peek(self, key: K, default: Any = None) -> V | Any:
        """Return the value for `key` without touching recency or counters."""

        entry = self._index.get(key)
        if entry is None:
            return default
        return entry.value

    def items(self) -> Iterator[tuple[K, V]]:
        """Yield `(key, value)` pairs from newest to oldest.

        Each call starts a fresh traversal at the newest entry. The cache must
        not be modified while a traversal is in progress.
        """

        entry = self._newest
        while entry is not None:
            yield entry.key, entry.value
            entry = entry.older

    def for_each(self, fn: Callable[[V], object]) -> None:
        """Call `fn(value)` for every entry, newest to oldest."""

        for _, value in self.items():
            fn(value)

    def keys(self) -> list[K]:
        return [key for key, _ in self.items()]

    def values(self) -> list[V]:
        return [value for _, value in self.items()]

    def size(self) -> int:
        return self._size

    def hits(self) -> int:
        return self._hits

    def misses(self) -> int:
        return self._misses

    def stats(self) -> CacheStats:
        return CacheStats(
            max_size=self._max_size,
            size=self._size,
            hits=self._hits,
            misses=self._misses,
        )

    def clear(self) -> None:
        """Remove every entry and reset the hit/miss counters.

        `max_size` is kept.
        """

        dropped = self._size
        self._index = {}
        self._oldest = self._newest = None
        self._size = 0
        self._hits = 0
        self._misses = 0
        logger.debug("Cleared cache (%s entries dropped)", dropped)

    clear_all = clear

    # --- container protocol ---

    def __len__(self) -> int:
        return self._size

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def __iter__(self) -> Iterator[K]:
        for key, _ in self.items():
            yield key

    def __repr__(self) -> str:
        return f"LRUCache(max_size={self._max_size}, size={self._size})"
