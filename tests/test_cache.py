"""Tests for the simulated FIFO vertex cache."""

import pytest

from meshorder.optimize.cache import NOT_CACHED, SimulatedCache


class TestSimulatedCache:
    """Test FIFO insertion, reuse and eviction."""

    def test_insert_at_front(self):
        """New vertices enter at position 0."""
        cache = SimulatedCache(4, 10)
        for v in (0, 1, 2):
            hit, evicted = cache.touch(v)
            assert not hit
            assert evicted is None

        assert cache.contents() == [2, 1, 0]
        assert cache.position_of(2) == 0
        assert cache.position_of(0) == 2
        assert len(cache) == 3

    def test_hit_does_not_reorder(self):
        """Reusing a resident vertex keeps its position."""
        cache = SimulatedCache(4, 10)
        for v in (0, 1, 2):
            cache.touch(v)

        hit, evicted = cache.touch(0)
        assert hit
        assert evicted is None
        assert cache.contents() == [2, 1, 0]
        assert cache.position_of(0) == 2

    def test_eviction_when_full(self):
        """Oldest entry is pushed out once capacity is reached."""
        cache = SimulatedCache(3, 10)
        for v in (0, 1, 2):
            cache.touch(v)

        hit, evicted = cache.touch(3)
        assert not hit
        assert evicted == 0
        assert cache.contents() == [3, 2, 1]
        assert cache.position_of(0) == NOT_CACHED
        assert 0 not in cache
        assert cache.position_of(1) == 2

    def test_capacity_never_exceeded(self):
        """Cache holds at most capacity distinct vertices."""
        cache = SimulatedCache(5, 100)
        for v in range(100):
            cache.touch(v)
            contents = cache.contents()
            assert len(contents) <= 5
            assert len(set(contents)) == len(contents)

        assert cache.contents() == [99, 98, 97, 96, 95]

    def test_single_slot(self):
        """A one-entry cache only ever remembers the latest vertex."""
        cache = SimulatedCache(1, 3)
        cache.touch(0)
        assert cache.touch(0) == (True, None)
        assert cache.touch(1) == (False, 0)
        assert cache.contents() == [1]

    def test_positions_consistent_with_contents(self):
        """position_of agrees with contents() ordering after wraparound."""
        cache = SimulatedCache(4, 20)
        for v in (5, 6, 5, 7, 8, 9, 6, 10, 11):
            cache.touch(v)

        for pos, v in enumerate(cache.contents()):
            assert cache.position_of(v) == pos

    def test_unknown_vertex_not_cached(self):
        cache = SimulatedCache(4, 3)
        assert cache.position_of(2) == NOT_CACHED
