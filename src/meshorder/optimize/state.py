"""
Per-vertex and per-triangle bookkeeping for the reordering pass.

All tables are scoped to a single optimization run and indexed by
vertex id or triangle id.
"""

from __future__ import annotations

from numbers import Integral
from typing import Iterable
import numpy as np

from meshorder.errors import InvalidInput
from meshorder.optimize.cache import NOT_CACHED, SimulatedCache
from meshorder.optimize.scoring import ScoreTable


def as_triangle_array(indices, vertex_count: int) -> np.ndarray:
    """
    Validate an index stream and return it as a Tx3 int64 array.

    Accepts a flat sequence whose length is a multiple of three, or an
    array already shaped (T, 3).

    Raises:
        InvalidInput: If the stream is malformed or any index falls
            outside [0, vertex_count).
    """
    if isinstance(vertex_count, bool) or not isinstance(vertex_count, Integral):
        raise InvalidInput(f"vertex_count must be an integer, got {vertex_count!r}")
    if vertex_count < 0:
        raise InvalidInput(f"vertex_count must be non-negative, got {vertex_count}")

    try:
        arr = np.asarray(indices)
    except (TypeError, ValueError) as e:
        raise InvalidInput(f"Indices are not a regular integer array: {e}") from e

    if arr.size == 0:
        return np.empty((0, 3), dtype=np.int64)

    if arr.dtype.kind not in "iu":
        raise InvalidInput(f"Indices must be integers, got dtype {arr.dtype}")

    if arr.ndim == 2 and arr.shape[1] == 3:
        triangles = arr
    elif arr.ndim == 1:
        if arr.size % 3 != 0:
            raise InvalidInput(
                f"Index count {arr.size} is not a multiple of 3"
            )
        triangles = arr.reshape(-1, 3)
    else:
        raise InvalidInput(f"Indices must be flat or Tx3, got shape {arr.shape}")

    lo = int(triangles.min())
    hi = int(triangles.max())
    if lo < 0 or hi >= vertex_count:
        bad = lo if lo < 0 else hi
        raise InvalidInput(
            f"Index {bad} out of range for vertex_count={vertex_count}"
        )

    return triangles.astype(np.int64, copy=True)


class MeshState:
    """
    Vertex and triangle tables for one reordering pass.

    Attributes:
        triangles: Triangle vertex ids as tuples, in input order
        remaining: Per-vertex count of not-yet-emitted triangles using it
        triangle_refs: Per-vertex set of not-yet-emitted triangle ids
        emitted: Per-triangle emitted flag
        vertex_scores: Per-vertex cached score
        triangle_scores: Per-triangle sum of its vertex scores
    """

    def __init__(self, triangles: list[tuple[int, int, int]], vertex_count: int,
                 scores: ScoreTable):
        self.triangles = triangles
        self.vertex_count = vertex_count
        self.scores = scores

        self.triangle_refs: list[set[int]] = [set() for _ in range(vertex_count)]
        for ti, tri in enumerate(triangles):
            for v in tri:
                self.triangle_refs[v].add(ti)

        self.remaining = [len(refs) for refs in self.triangle_refs]
        self.emitted = [False] * len(triangles)
        self.emitted_count = 0

        self.vertex_scores = [scores.score(NOT_CACHED, n) for n in self.remaining]
        self.triangle_scores = [self._triangle_score(tri) for tri in triangles]

    @classmethod
    def initialize(cls, indices, vertex_count: int, scores: ScoreTable) -> MeshState:
        """Build state tables from a validated or raw index stream."""
        triangles = as_triangle_array(indices, vertex_count)
        return cls([tuple(int(v) for v in tri) for tri in triangles], vertex_count, scores)

    @property
    def triangle_count(self) -> int:
        return len(self.triangles)

    @property
    def done(self) -> bool:
        return self.emitted_count == len(self.triangles)

    def _triangle_score(self, tri: tuple[int, int, int]) -> float:
        s = self.vertex_scores
        return s[tri[0]] + s[tri[1]] + s[tri[2]]

    def emit(self, triangle: int) -> set[int]:
        """
        Mark a triangle emitted and release its vertices.

        Returns:
            Vertices whose remaining count changed
        """
        if self.emitted[triangle]:
            raise ValueError(f"Triangle {triangle} already emitted")

        self.emitted[triangle] = True
        self.emitted_count += 1

        # Degenerate triangles list a vertex more than once; count it once
        changed = set(self.triangles[triangle])
        for v in changed:
            self.triangle_refs[v].discard(triangle)
            self.remaining[v] -= 1

        return changed

    def rescore(self, vertices: Iterable[int], cache: SimulatedCache) -> set[int]:
        """
        Refresh scores of the given vertices and of the live triangles using them.

        Returns:
            Ids of the triangles that were rescored
        """
        touched: set[int] = set()
        for v in vertices:
            self.vertex_scores[v] = self.scores.score(cache.position_of(v), self.remaining[v])
            touched.update(self.triangle_refs[v])

        for ti in touched:
            self.triangle_scores[ti] = self._triangle_score(self.triangles[ti])

        return touched

    def candidates(self, cache: SimulatedCache) -> set[int]:
        """Live triangles that use at least one cached vertex."""
        result: set[int] = set()
        for v in cache.contents():
            result.update(self.triangle_refs[v])
        return result
