"""
Tests for the profile cache
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from quality_agents.data_profiler.cache import ProfileCache, dataset_fingerprint


def test_fingerprint_tracks_content():
    rows = [{"a": 1, "b": "x"}]

    assert dataset_fingerprint(rows) == dataset_fingerprint([{"a": 1, "b": "x"}])
    assert dataset_fingerprint(rows) != dataset_fingerprint([{"a": 2, "b": "x"}])
    # option key order does not matter
    assert dataset_fingerprint(rows, {"x": 1, "y": 2}) == dataset_fingerprint(rows, {"y": 2, "x": 1})
    assert dataset_fingerprint(rows, {"x": 1}) != dataset_fingerprint(rows, {"x": 2})


def test_lru_eviction():
    cache = ProfileCache(max_size=2)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.get("a")
    cache.set("c", 3)

    assert cache.get("b") is None
    assert cache.get("a") == 1
    assert cache.get("c") == 3
    assert cache.stats.evictions == 1
    assert len(cache) == 2


def test_stats():
    cache = ProfileCache()
    cache.set("k", "report")
    cache.get("k")
    cache.get("k")
    cache.get("missing")

    stats = cache.stats.to_dict()
    assert stats["hits"] == 2
    assert stats["misses"] == 1
    assert stats["hit_rate"] == round(2 / 3, 4)
    assert stats["size"] == 1
    assert ProfileCache().stats.hit_rate == 0


def test_invalidate_and_clear():
    cache = ProfileCache()
    cache.set("k", 1)

    assert cache.invalidate("k")
    assert not cache.invalidate("k")

    cache.set("k", 1)
    cache.clear()
    assert len(cache) == 0
    assert cache.stats.size == 0
