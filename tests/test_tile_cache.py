"""
Tests for the in-memory tile cache.
"""

import pytest

from terrain_party.tiles import TileCache


class TestTileCache:
    """Test LRU behaviour."""

    def test_get_and_put(self):
        cache = TileCache(max_entries=2)
        assert cache.get((1, 0, 0)) is None
        cache.put((1, 0, 0), b"a")
        assert cache.get((1, 0, 0)) == b"a"
        assert cache.hits == 1
        assert cache.misses == 1

    def test_evicts_least_recently_used(self):
        cache = TileCache(max_entries=2)
        cache.put((1, 0, 0), b"a")
        cache.put((1, 0, 1), b"b")
        cache.get((1, 0, 0))
        cache.put((1, 1, 1), b"c")

        assert (1, 0, 0) in cache
        assert (1, 0, 1) not in cache
        assert (1, 1, 1) in cache
        assert len(cache) == 2

    def test_zero_capacity_stores_nothing(self):
        cache = TileCache(max_entries=0)
        cache.put((0, 0, 0), b"a")
        assert len(cache) == 0
        assert cache.get((0, 0, 0)) is None

    def test_clear(self):
        cache = TileCache(max_entries=4)
        cache.put((0, 0, 0), b"a")
        cache.get((0, 0, 0))
        cache.clear()
        assert len(cache) == 0
        assert cache.hits == 0

    def test_negative_capacity_rejected(self):
        with pytest.raises(ValueError):
            TileCache(max_entries=-1)
