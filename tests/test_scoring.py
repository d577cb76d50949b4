"""Tests for vertex scoring."""

import pytest

from meshorder.optimize.config import OptimizerConfig
from meshorder.optimize.scoring import (
    DEAD_VERTEX_SCORE,
    ScoreTable,
    VALENCE_TABLE_SIZE,
    vertex_score,
)


class TestVertexScore:
    """Test the reference score function."""

    def test_no_remaining_triangles(self):
        """A finished vertex never scores positively, cached or not."""
        assert vertex_score(-1, 0) == DEAD_VERTEX_SCORE
        assert vertex_score(0, 0) == DEAD_VERTEX_SCORE
        assert DEAD_VERTEX_SCORE < 0

    def test_uncached_is_valence_only(self):
        """Uncached vertex gets only the valence boost."""
        assert vertex_score(-1, 1) == pytest.approx(2.0)
        assert vertex_score(-1, 4) == pytest.approx(1.0)

    def test_last_triangle_bonus(self):
        """Positions 0-2 share the fixed bonus."""
        for pos in range(3):
            assert vertex_score(pos, 1) == pytest.approx(2.75)

    def test_decay_with_position(self):
        """Older cache entries score lower, down to zero past capacity."""
        scores = [vertex_score(pos, 2) for pos in range(3, 32)]
        assert scores == sorted(scores, reverse=True)
        assert vertex_score(3, 4) == pytest.approx(2.0)
        assert vertex_score(32, 2) == pytest.approx(vertex_score(-1, 2))

    def test_low_valence_preferred(self):
        """Fewer remaining triangles means a higher score."""
        assert vertex_score(-1, 1) > vertex_score(-1, 2) > vertex_score(-1, 10)

    def test_custom_constants(self):
        """Constants come from configuration."""
        config = OptimizerConfig(last_triangles_bonus=1.0, valence_boost_scale=0.0)
        assert vertex_score(1, 5, config) == pytest.approx(1.0)
        assert vertex_score(-1, 5, config) == pytest.approx(0.0)

    def test_small_cache_all_bonus(self):
        """Caches of three or fewer slots only hold last-triangle vertices."""
        config = OptimizerConfig(cache_size=3)
        assert vertex_score(2, 1, config) == pytest.approx(2.75)
        assert vertex_score(3, 1, config) == pytest.approx(2.0)


class TestScoreTable:
    """Test the precomputed lookup table."""

    @pytest.mark.parametrize("cache_size", [1, 3, 4, 16, 32])
    def test_matches_reference(self, cache_size):
        """Table lookups equal the reference function exactly."""
        config = OptimizerConfig(cache_size=cache_size)
        table = ScoreTable(config)
        for pos in range(-1, cache_size + 2):
            for remaining in range(0, VALENCE_TABLE_SIZE + 8):
                assert table.score(pos, remaining) == vertex_score(pos, remaining, config)
