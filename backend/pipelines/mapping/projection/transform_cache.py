"""
Transform Cache
Bounded, thread-safe memoization of projection transforms keyed by (source, target)
"""
import logging
import threading
from collections import OrderedDict
from typing import Any, Callable, Dict, List, Optional, Tuple

from config.settings import CRS_TRANSFORM_CACHE_SIZE

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, str]


class TransformCache:
    """
    Least-recently-used cache of transform instances.

    The same key returns the same instance until the entry is evicted; a
    later request for an evicted key builds a fresh one.
    """

    def __init__(self, capacity: Optional[int] = None):
        capacity = CRS_TRANSFORM_CACHE_SIZE if capacity is None else capacity
        if capacity < 1:
            raise ValueError(f"Transform cache capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._entries: "OrderedDict[CacheKey, Any]" = OrderedDict()
        self._lock = threading.Lock()
        self.cache_stats = {
            "hits": 0,
            "misses": 0,
            "evictions": 0
        }

    def get(self, key: CacheKey) -> Optional[Any]:
        """Return the cached transform for key, or None"""
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                self._entries.move_to_end(key)
                self.cache_stats["hits"] += 1
            return entry

    def get_or_create(self, key: CacheKey, factory: Callable[[], Any]) -> Any:
        """
        Return the cached transform for key, building it with factory on a miss.

        Construction happens under the cache lock so concurrent callers for
        one key always share a single instance. A factory that raises leaves
        the cache untouched.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                self._entries.move_to_end(key)
                self.cache_stats["hits"] += 1
                return entry

            self.cache_stats["misses"] += 1
            logger.debug(f"📥 Transform cache miss for {key[0]} → {key[1]}")
            entry = factory()
            self._entries[key] = entry
            self._evict_overflow()
            return entry

    def _evict_overflow(self) -> None:
        while len(self._entries) > self.capacity:
            evicted_key, _ = self._entries.popitem(last=False)
            self.cache_stats["evictions"] += 1
            logger.debug(f"🧹 Evicted transform {evicted_key[0]} → {evicted_key[1]}")

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
        logger.info("🧹 Transform cache cleared")

    def keys(self) -> List[CacheKey]:
        with self._lock:
            return list(self._entries.keys())

    def stats(self) -> Dict[str, Any]:
        """Cache statistics for monitoring"""
        with self._lock:
            return {
                **self.cache_stats,
                "size": len(self._entries),
                "capacity": self.capacity
            }

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
