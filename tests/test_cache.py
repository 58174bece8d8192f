"""
Tests for the global max cache.

Tests LRUCache and GlobalMaxCache memoization, keys and invalidation.
"""

import math
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

import pytest

from gll_balloon.runtime import (
    CacheStats,
    GlobalMaxCache,
    LRUCache,
    compute_global_max,
    scan_global_max,
)
from gll_balloon.source import Response
from gll_balloon.testing import make_source


def scan_patch():
    return patch("gll_balloon.runtime.cache.scan_global_max", wraps=scan_global_max)


class TestLRUCache:
    """Tests for generic LRUCache."""

    def test_basic_put_get(self):
        """Basic put and get operations."""
        cache = LRUCache(max_size=10)

        cache.put("key1", 1.5)
        cache.put("key2", -3.0)

        assert cache.get("key1") == 1.5
        assert cache.get("key2") == -3.0

    def test_get_missing(self):
        """Getting missing key returns None."""
        cache = LRUCache(max_size=10)

        assert cache.get("nonexistent") is None

    def test_eviction_on_full(self):
        """LRU item is evicted when cache is full."""
        cache = LRUCache(max_size=3)

        cache.put("a", 1)
        cache.put("b", 2)
        cache.put("c", 3)

        # Access 'a' to make it recently used
        cache.get("a")

        cache.put("d", 4)

        assert cache.get("a") == 1
        assert cache.get("b") is None
        assert cache.get("c") == 3
        assert cache.get("d") == 4
        assert cache.stats.evictions == 1

    def test_replace_does_not_evict(self):
        cache = LRUCache(max_size=2)

        cache.put("a", 1)
        cache.put("b", 2)
        cache.put("a", 10)

        assert cache.get("a") == 10
        assert cache.get("b") == 2
        assert cache.stats.evictions == 0

    def test_remove(self):
        cache = LRUCache(max_size=10)
        cache.put("a", 1)

        assert cache.remove("a") is True
        assert cache.remove("a") is False
        assert "a" not in cache

    def test_clear(self):
        """Clear removes all items."""
        cache = LRUCache(max_size=10)

        cache.put("key1", 1)
        cache.put("key2", 2)

        cache.clear()

        assert cache.get("key1") is None
        assert len(cache) == 0
        assert cache.stats.size == 0

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            LRUCache(max_size=0)

    def test_thread_safety(self):
        """Cache is thread-safe."""
        cache = LRUCache(max_size=100)

        def writer(n):
            for i in range(100):
                cache.put(f"key-{n}-{i}", i)

        def reader(n):
            for i in range(100):
                cache.get(f"key-{n}-{i}")

        with ThreadPoolExecutor(max_workers=10) as executor:
            futures = []
            for i in range(5):
                futures.append(executor.submit(writer, i))
                futures.append(executor.submit(reader, i))

            for f in futures:
                f.result()

        assert len(cache) <= 100

    def test_record_scan(self):
        cache = LRUCache(max_size=4)
        cache.record_scan()
        cache.record_scan()

        assert cache.stats.scans == 2
        assert len(cache) == 0

    def test_stores_plain_values(self):
        cache = LRUCache(max_size=4)
        cache.put("a", -12.5)

        assert cache.get("a") == -12.5
        assert cache.stats.hits == 1


class TestCacheStats:
    """Tests for CacheStats."""

    def test_hit_rate(self):
        stats = CacheStats(hits=2, misses=1)
        assert stats.hit_rate == pytest.approx(2 / 3, abs=0.01)

    def test_empty_stats(self):
        assert CacheStats().hit_rate == 0.0

    def test_reset(self):
        stats = CacheStats(hits=3, misses=2, evictions=1, scans=4)

        stats.reset()

        assert stats.hits == 0
        assert stats.misses == 0
        assert stats.evictions == 0
        assert stats.scans == 0


class TestScanGlobalMax:

    def test_max_across_frequencies(self):
        responses = [
            Response(levels=(-30.0, -12.5)),
            Response(levels=(-8.0, -40.0)),
            Response(levels=(-20.0,)),
        ]
        assert scan_global_max(responses) == -8.0

    def test_ignores_non_finite(self):
        responses = [Response(levels=(math.nan, -15.0, math.inf))]
        assert scan_global_max(responses) == -15.0

    def test_empty_responses(self):
        assert scan_global_max([]) == 0.0

    def test_no_finite_levels(self):
        responses = [Response(levels=()), Response(levels=(math.nan,))]
        assert scan_global_max(responses) == 0.0


class TestGlobalMaxCache:
    """Tests for GlobalMaxCache."""

    @pytest.fixture
    def source(self):
        return make_source(
            level_fn=lambda m, p, f: -20.0 - p / 10 + f,
            frequencies=(500.0, 1000.0, 2000.0),
            source_id="speaker-a",
        )

    def test_compute_value(self, source):
        cache = GlobalMaxCache()
        assert cache.compute(source) == pytest.approx(-18.0)

    def test_scans_once(self, source):
        cache = GlobalMaxCache()

        with scan_patch() as scan:
            first = cache.compute(source)
            second = cache.compute(source)

        assert first == second
        assert scan.call_count == 1
        assert cache.stats.scans == 1
        assert cache.stats.hits == 1
        assert cache.stats.misses == 1

    def test_keyed_by_source_id(self, source):
        cache = GlobalMaxCache()
        cache.compute(source)

        assert "speaker-a" in cache
        assert cache.get("speaker-a") == pytest.approx(-18.0)

    def test_equal_content_shares_entry_without_id(self):
        cache = GlobalMaxCache()
        a = make_source()
        b = make_source()

        with scan_patch() as scan:
            cache.compute(a)
            cache.compute(b)

        assert a is not b
        assert scan.call_count == 1

    def test_different_content_different_keys(self):
        cache = GlobalMaxCache()
        quiet = make_source(level_fn=lambda m, p, f: -30.0)
        loud = make_source(level_fn=lambda m, p, f: -5.0)

        assert cache.compute(quiet) == -30.0
        assert cache.compute(loud) == -5.0
        assert len(cache) == 2

    def test_same_id_returns_cached_until_invalidated(self, source):
        cache = GlobalMaxCache()
        cache.compute(source)

        remeasured = make_source(level_fn=lambda m, p, f: 3.0, source_id="speaker-a")
        assert cache.compute(remeasured) == pytest.approx(-18.0)

        assert cache.invalidate("speaker-a") is True
        assert cache.compute(remeasured) == 3.0

    def test_invalidate_missing(self):
        assert GlobalMaxCache().invalidate("nobody") is False

    def test_invalidate_by_source(self, source):
        cache = GlobalMaxCache()
        cache.compute(source)

        assert cache.invalidate(source) is True
        assert source not in cache

    def test_clear(self, source):
        cache = GlobalMaxCache()
        cache.compute(source)
        cache.clear()

        assert len(cache) == 0
        assert cache.get(source) is None

    def test_disabled_always_scans(self, source):
        cache = GlobalMaxCache(enabled=False)

        with scan_patch() as scan:
            cache.compute(source)
            cache.compute(source)

        assert scan.call_count == 2
        assert len(cache) == 0

    def test_lru_limit(self):
        cache = GlobalMaxCache(max_size=2)
        for i in range(3):
            cache.compute(make_source(source_id=f"s{i}"))

        assert "s0" not in cache
        assert "s2" in cache
        assert cache.stats.evictions == 1

    def test_concurrent_compute(self, source):
        cache = GlobalMaxCache()

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(lambda _: cache.compute(source), range(32)))

        assert all(r == pytest.approx(-18.0) for r in results)
        assert len(cache) == 1

    def test_concurrent_scans_all_counted(self, source):
        cache = GlobalMaxCache(enabled=False)

        def scan_many(_):
            for _ in range(50):
                cache.compute(source)

        with ThreadPoolExecutor(max_workers=8) as executor:
            list(executor.map(scan_many, range(8)))

        assert cache.stats.scans == 400


class TestComputeGlobalMax:

    def test_without_cache(self, uniform_source):
        assert compute_global_max(uniform_source) == -20.0

    def test_with_cache(self, uniform_source):
        cache = GlobalMaxCache()

        assert compute_global_max(uniform_source, cache) == -20.0
        assert "uniform" in cache
