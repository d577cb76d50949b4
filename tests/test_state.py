"""Tests for vertex/triangle state tables and input validation."""

import numpy as np
import pytest

from meshorder.errors import InvalidInput
from meshorder.optimize.cache import SimulatedCache
from meshorder.optimize.config import OptimizerConfig
from meshorder.optimize.scoring import ScoreTable, vertex_score
from meshorder.optimize.state import MeshState, as_triangle_array

FAN = [0, 1, 2, 0, 2, 3, 0, 3, 4]


@pytest.fixture
def table():
    return ScoreTable(OptimizerConfig())


class TestValidation:
    """Test index stream validation."""

    def test_flat_and_shaped(self):
        """Flat and Tx3 inputs give the same triangles."""
        flat = as_triangle_array(FAN, 5)
        shaped = as_triangle_array(np.array(FAN).reshape(-1, 3), 5)
        assert flat.shape == (3, 3)
        assert flat.dtype == np.int64
        assert np.array_equal(flat, shaped)

    def test_empty(self):
        assert as_triangle_array([], 0).shape == (0, 3)

    def test_not_multiple_of_three(self):
        with pytest.raises(InvalidInput):
            as_triangle_array([0, 1, 2, 3], 4)

    def test_index_equal_to_vertex_count(self):
        with pytest.raises(InvalidInput):
            as_triangle_array([0, 1, 3], 3)

    def test_negative_index(self):
        with pytest.raises(InvalidInput):
            as_triangle_array([0, -1, 2], 3)

    def test_float_indices(self):
        with pytest.raises(InvalidInput):
            as_triangle_array([0.0, 1.0, 2.0], 3)

    def test_bad_vertex_count(self):
        with pytest.raises(InvalidInput):
            as_triangle_array([0, 1, 2], -1)
        with pytest.raises(InvalidInput):
            as_triangle_array([0, 1, 2], 3.0)

    def test_wrong_shape(self):
        with pytest.raises(InvalidInput):
            as_triangle_array(np.zeros((2, 4), dtype=np.int64), 3)

    def test_invalid_input_is_value_error(self):
        """Callers catching ValueError also see InvalidInput."""
        with pytest.raises(ValueError):
            as_triangle_array([0, 1], 3)


class TestMeshState:
    """Test initialization and emission bookkeeping."""

    def test_initial_valence(self, table):
        state = MeshState.initialize(FAN, 6, table)
        assert state.remaining == [3, 1, 2, 2, 1, 0]
        assert state.triangle_refs[0] == {0, 1, 2}
        assert state.triangle_refs[5] == set()
        assert state.emitted == [False, False, False]
        assert state.triangle_count == 3
        assert not state.done

    def test_initial_scores(self, table):
        """Scores start uncached and triangles sum their vertices."""
        state = MeshState.initialize(FAN, 5, table)
        assert state.vertex_scores[1] == vertex_score(-1, 1)
        expected = sum(vertex_score(-1, state.remaining[v]) for v in (0, 2, 3))
        assert state.triangle_scores[1] == pytest.approx(expected)

    def test_emit(self, table):
        state = MeshState.initialize(FAN, 5, table)
        changed = state.emit(0)

        assert changed == {0, 1, 2}
        assert state.remaining == [2, 0, 1, 2, 1]
        assert state.triangle_refs[0] == {1, 2}
        assert state.triangle_refs[1] == set()
        assert state.emitted[0]
        assert state.emitted_count == 1

    def test_emit_all(self, table):
        state = MeshState.initialize(FAN, 5, table)
        for ti in range(3):
            state.emit(ti)

        assert state.done
        assert state.remaining == [0, 0, 0, 0, 0]
        assert all(not refs for refs in state.triangle_refs)

    def test_emit_twice(self, table):
        state = MeshState.initialize(FAN, 5, table)
        state.emit(1)
        with pytest.raises(ValueError):
            state.emit(1)

    def test_degenerate_triangle(self, table):
        """A vertex repeated within one triangle counts once."""
        state = MeshState.initialize([0, 0, 1, 0, 1, 2], 3, table)
        assert state.remaining == [2, 2, 1]
        assert state.emit(0) == {0, 1}
        assert state.remaining == [1, 1, 1]

    def test_rescore_and_candidates(self, table):
        """Cached vertices are rescored and expose their live triangles."""
        state = MeshState.initialize(FAN, 5, table)
        cache = SimulatedCache(32, 5)
        assert state.candidates(cache) == set()

        changed = state.emit(0)
        for v in (0, 1, 2):
            cache.touch(v)
        touched = state.rescore(changed, cache)

        assert touched == {1, 2}
        assert state.vertex_scores[1] == vertex_score(1, 0)
        assert state.vertex_scores[2] == vertex_score(0, 1)
        assert state.candidates(cache) == {1, 2}
