"""
Caller-owned cache for profiling reports.

Keys are content fingerprints, so a cached report can only ever be
returned for byte-for-byte the same rows and options.
"""

import hashlib
import json
import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


def dataset_fingerprint(rows: List[Dict[str, Any]], options: Optional[Dict[str, Any]] = None) -> str:
    """SHA-256 over the rows (key order kept) and the options (key order ignored)."""
    hasher = hashlib.sha256()
    hasher.update(json.dumps(rows, default=str, separators=(",", ":")).encode("utf-8"))
    hasher.update(b"\x00")
    hasher.update(json.dumps(options or {}, default=str, sort_keys=True).encode("utf-8"))
    return hasher.hexdigest()


@dataclass
class CacheStats:
    """Cache statistics."""

    hits: int = 0
    misses: int = 0
    size: int = 0
    evictions: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate": round(self.hit_rate, 4),
            "size": self.size,
            "evictions": self.evictions
        }


class ProfileCache:
    """In-memory LRU cache keyed by dataset fingerprint."""

    def __init__(self, max_size: int = 32):
        self.max_size = max_size
        self._cache: "OrderedDict[str, Any]" = OrderedDict()
        self._stats = CacheStats()

    def get(self, key: str) -> Optional[Any]:
        """Get value from cache."""
        if key not in self._cache:
            self._stats.misses += 1
            return None

        self._cache.move_to_end(key)
        self._stats.hits += 1
        return self._cache[key]

    def set(self, key: str, value: Any) -> None:
        """Set value in cache."""
        if key in self._cache:
            self._cache.move_to_end(key)
        self._cache[key] = value

        while len(self._cache) > self.max_size:
            evicted, _ = self._cache.popitem(last=False)
            self._stats.evictions += 1
            logger.debug("evicted profile %s", evicted[:12])

        self._stats.size = len(self._cache)

    def invalidate(self, key: str) -> bool:
        """Drop one entry."""
        if key in self._cache:
            del self._cache[key]
            self._stats.size = len(self._cache)
            return True
        return False

    def clear(self) -> None:
        """Clear all cache entries."""
        self._cache.clear()
        self._stats.size = 0

    def __len__(self) -> int:
        return len(self._cache)

    @property
    def stats(self) -> CacheStats:
        return self._stats
