from __future__ import annotations

import logging
import time
import typing as t
from collections import OrderedDict
from dataclasses import dataclass

_logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 60.0 * 60.0
DEFAULT_MAX_ENTRIES = 50
METAL_PRICES_KEY_PREFIX = "metal-prices:"

K = t.TypeVar("K", bound=t.Hashable)
V = t.TypeVar("V")

Clock = t.Callable[[], float]


@dataclass(frozen=True)
class CacheStats:
    hits: int
    misses: int
    size: int

    @property
    def hit_ratio(self) -> float:
        lookups = self.hits + self.misses
        return self.hits / lookups if lookups else 0.0


@dataclass
class _CacheEntry(t.Generic[V]):
    value: V
    expires_at: float


class BoundedCache(t.Generic[K, V]):
    """LRU + TTL cache for memoizing metal-price lookups.

    Entries expire lazily: a stale entry stays stored until a ``get``, ``set``
    at capacity, or a ``size`` read touches it, but it always reports as absent.
    The most recently used entry sits at the end of the ordered store.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: t.Optional[Clock] = None,
    ) -> None:
        if max_entries < 1:
            raise ValueError(f"max_entries must be at least 1, got {max_entries}")
        if not ttl_seconds > 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        self._store: "OrderedDict[K, _CacheEntry[V]]" = OrderedDict()
        self._ttl = float(ttl_seconds)
        self._max_entries = max_entries
        self._clock: Clock = clock or time.monotonic
        self._hits = 0
        self._misses = 0

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def get(self, key: K) -> t.Optional[V]:
        entry = self._store.get(key)
        if entry is None:
            self._misses += 1
            return None
        if self._clock() >= entry.expires_at:
            del self._store[key]
            self._misses += 1
            _logger.debug("Cache entry %r expired", key)
            return None
        self._hits += 1
        # mark as recently used
        self._store.move_to_end(key)
        return entry.value

    def set(self, key: K, value: V) -> None:
        now = self._clock()
        if key in self._store:
            self._store[key] = _CacheEntry(value=value, expires_at=now + self._ttl)
            self._store.move_to_end(key)
            return
        if len(self._store) >= self._max_entries:
            self._purge_expired(now)
        while len(self._store) >= self._max_entries:
            # evict LRU
            evicted, _ = self._store.popitem(last=False)
            _logger.debug("Evicted least recently used cache entry %r", evicted)
        self._store[key] = _CacheEntry(value=value, expires_at=now + self._ttl)

    def has(self, key: K) -> bool:
        entry = self._store.get(key)
        if entry is None:
            return False
        return self._clock() < entry.expires_at

    def delete(self, key: K) -> bool:
        return self._store.pop(key, None) is not None

    def clear(self) -> None:
        self._store.clear()
        self._hits = 0
        self._misses = 0

    @property
    def size(self) -> int:
        self._purge_expired(self._clock())
        return len(self._store)

    @property
    def stats(self) -> CacheStats:
        return CacheStats(hits=self._hits, misses=self._misses, size=self.size)

    def _purge_expired(self, now: float) -> None:
        expired = [key for key, entry in self._store.items() if now >= entry.expires_at]
        for key in expired:
            del self._store[key]


def generate_cache_key(currency: str) -> str:
    """Build the cache key for a currency's metal prices.

    Currency codes are case-insensitive, so ``"usd"`` and ``"USD"`` share a slot.
    """
    return f"{METAL_PRICES_KEY_PREFIX}{currency.strip().upper()}"
