"""
Runtime - Shared state for repeated builds.

Components:
    GlobalMaxCache  - Per-source loudest level, keyed by stable source id
    LRUCache        - Thread-safe LRU map backing the cache
"""

from gll_balloon.runtime.cache import (
    CacheStats,
    LRUCache,
    GlobalMaxCache,
    scan_global_max,
    compute_global_max,
)

__all__ = [
    "CacheStats",
    "LRUCache",
    "GlobalMaxCache",
    "scan_global_max",
    "compute_global_max",
]
