"""
Caching Module - Per-source global maximum level cache.

The 3D balloon pins its brightest color and largest radius to the loudest
level across ALL frequencies, so switching frequency does not rescale the
mesh. Finding that level means scanning every response once; this module
memoizes the result.

Provides:
- Global max caching keyed by a stable source key (never object identity)
- LRU eviction
- Thread-safe access
- Statistics tracking

Usage:
    cache = GlobalMaxCache()

    # First call: scans all responses
    cache.compute(source)

    # Second call: cache hit, no scan
    cache.compute(source)

    # Measurements changed under the same source_id
    cache.invalidate(source)
"""

from __future__ import annotations

import logging
import math
import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Generic, Iterable, TypeVar

import numpy as np

from gll_balloon.source import Response, SourceDirectivity

logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass
class CacheStats:
    """Cache statistics."""
    hits: int = 0
    misses: int = 0
    evictions: int = 0
    size: int = 0
    max_size: int = 0
    scans: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    def reset(self):
        self.hits = 0
        self.misses = 0
        self.evictions = 0
        self.scans = 0


class LRUCache(Generic[T]):
    """Thread-safe LRU cache with size limit.

    Example:
        cache = LRUCache[float](max_size=100)
        cache.put("speaker-a", -20.0)
        level = cache.get("speaker-a")
    """

    def __init__(self, max_size: int = 128):
        """Initialize cache.

        Args:
            max_size: Maximum number of items to cache
        """
        if max_size < 1:
            raise ValueError(f"max_size must be >= 1, got {max_size}")
        self.max_size = max_size
        self._cache: OrderedDict[str, T] = OrderedDict()
        self._lock = threading.Lock()
        self._stats = CacheStats(max_size=max_size)

    def get(self, key: str) -> T | None:
        """Get item from cache, or None if not found."""
        with self._lock:
            if key not in self._cache:
                self._stats.misses += 1
                return None

            self._cache.move_to_end(key)
            self._stats.hits += 1
            return self._cache[key]

    def put(self, key: str, value: T):
        """Put item in cache, evicting the least recently used if full."""
        with self._lock:
            if key in self._cache:
                del self._cache[key]

            while len(self._cache) >= self.max_size:
                oldest_key = next(iter(self._cache))
                del self._cache[oldest_key]
                self._stats.evictions += 1

            self._cache[key] = value
            self._stats.size = len(self._cache)

    def remove(self, key: str) -> bool:
        """Remove item from cache.

        Returns:
            True if removed, False if not found
        """
        with self._lock:
            if key in self._cache:
                del self._cache[key]
                self._stats.size = len(self._cache)
                return True
            return False

    def record_scan(self):
        """Count one recomputation of a cached value."""
        with self._lock:
            self._stats.scans += 1

    def clear(self):
        """Clear all cached items."""
        with self._lock:
            self._cache.clear()
            self._stats.size = 0

    def contains(self, key: str) -> bool:
        """Check if key exists in cache."""
        with self._lock:
            return key in self._cache

    @property
    def stats(self) -> CacheStats:
        """Get cache statistics."""
        return self._stats

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, key: str) -> bool:
        return self.contains(key)


def scan_global_max(responses: Iterable[Response]) -> float:
    """
    Maximum finite level across every response and every frequency.

    Returns:
        The maximum, or 0.0 if no finite level exists
    """
    global_max = -math.inf
    for response in responses:
        if not response.levels:
            continue
        levels = np.asarray(response.levels, dtype=float)
        finite = levels[np.isfinite(levels)]
        if finite.size and finite.max() > global_max:
            global_max = float(finite.max())

    if global_max == -math.inf:
        return 0.0
    return global_max


class GlobalMaxCache:
    """Memoized global maximum level per source.

    Entries are keyed by ``SourceDirectivity.cache_key``: the caller's
    stable source_id, or a content digest when no id was given. The cache
    never detects mutation; callers that replace a source's measurements
    under the same id must call invalidate().

    Usage:
        cache = GlobalMaxCache(max_size=64)
        global_max = cache.compute(source)
        cache.invalidate("speaker-a")
    """

    def __init__(self, max_size: int = 128, enabled: bool = True):
        """Initialize the cache.

        Args:
            max_size: Maximum sources to remember
            enabled: Whether caching is enabled (disabled = always scan)
        """
        self.enabled = enabled
        self._cache = LRUCache[float](max_size=max_size)

    @staticmethod
    def make_key(source: SourceDirectivity | str) -> str:
        """Cache key for a source or an explicit id."""
        if isinstance(source, str):
            return source
        return source.cache_key

    def compute(self, source: SourceDirectivity) -> float:
        """Global max level for a source, scanning only on a cache miss."""
        key = self.make_key(source)

        if self.enabled:
            cached = self._cache.get(key)
            if cached is not None:
                return cached

        global_max = scan_global_max(source.responses)
        self._cache.record_scan()
        logger.debug(
            "Scanned %d responses for %s: global max %.2f dB",
            len(source.responses), key, global_max,
        )

        if self.enabled:
            self._cache.put(key, global_max)
        return global_max

    def get(self, source: SourceDirectivity | str) -> float | None:
        """Cached value without scanning, or None."""
        return self._cache.get(self.make_key(source))

    def invalidate(self, source: SourceDirectivity | str) -> bool:
        """Drop the cached value for a source (or source id)."""
        removed = self._cache.remove(self.make_key(source))
        if removed:
            logger.debug("Invalidated global max for %s", self.make_key(source))
        return removed

    def clear(self):
        """Clear all cached values."""
        self._cache.clear()

    @property
    def stats(self) -> CacheStats:
        """Get cache statistics."""
        return self._cache.stats

    @property
    def hit_rate(self) -> float:
        return self._cache.stats.hit_rate

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, source: SourceDirectivity | str) -> bool:
        return self.make_key(source) in self._cache


def compute_global_max(
    source: SourceDirectivity,
    cache: GlobalMaxCache | None = None,
) -> float:
    """Global max level, through ``cache`` when one is supplied."""
    if cache is None:
        return scan_global_max(source.responses)
    return cache.compute(source)
