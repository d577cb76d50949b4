"""
Cache efficiency metrics.

Replays an index stream against the same FIFO cache model the optimizer
uses and reports how often vertices were reused. Used to compare a
mesh's original triangle order, the optimized order, and a random
shuffle.

Metrics:
- hit_rate: fraction of index references served from the cache
- ACMR (average cache miss ratio): misses per triangle, 0.5..3.0 for
  typical meshes, lower is better
- ATVR (average transform to vertex ratio): misses per referenced
  vertex, 1.0 is optimal
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional
import numpy as np

from meshorder.errors import InvalidInput
from meshorder.optimize.cache import SimulatedCache
from meshorder.optimize.config import OptimizerConfig
from meshorder.optimize.reorder import VertexCacheOptimizer
from meshorder.optimize.state import as_triangle_array

logger = logging.getLogger("meshorder.evaluation")


@dataclass
class CacheStatistics:
    """Result of replaying an index stream through the simulated cache."""
    hits: int
    misses: int
    triangle_count: int
    vertex_count: int  # distinct vertices referenced
    cache_size: int

    @property
    def references(self) -> int:
        return self.hits + self.misses

    @property
    def hit_rate(self) -> float:
        return self.hits / self.references if self.references else 0.0

    @property
    def acmr(self) -> float:
        return self.misses / self.triangle_count if self.triangle_count else 0.0

    @property
    def atvr(self) -> float:
        return self.misses / self.vertex_count if self.vertex_count else 0.0

    def to_dict(self) -> dict:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "triangle_count": self.triangle_count,
            "vertex_count": self.vertex_count,
            "cache_size": self.cache_size,
            "hit_rate": self.hit_rate,
            "acmr": self.acmr,
            "atvr": self.atvr,
        }

    def summary(self) -> str:
        return (f"{self.triangle_count} triangles, cache {self.cache_size}: "
                f"hit rate {self.hit_rate:.1%}, ACMR {self.acmr:.3f}, ATVR {self.atvr:.3f}")


def simulate_cache(indices, vertex_count: int, cache_size: int = 32) -> CacheStatistics:
    """
    Replay an index stream through a FIFO cache of the given size.

    Raises:
        InvalidInput: If the index stream is malformed
        ConfigurationError: If cache_size is not positive
    """
    OptimizerConfig(cache_size=cache_size).validate()
    triangles = as_triangle_array(indices, vertex_count)

    cache = SimulatedCache(cache_size, vertex_count)
    hits = 0
    misses = 0
    for v in triangles.reshape(-1).tolist():
        hit, _ = cache.touch(v)
        if hit:
            hits += 1
        else:
            misses += 1

    return CacheStatistics(
        hits=hits,
        misses=misses,
        triangle_count=len(triangles),
        vertex_count=len(np.unique(triangles)),
        cache_size=cache_size,
    )


def shuffle_triangles(
    indices,
    seed: Optional[int] = None,
    vertex_count: Optional[int] = None,
) -> np.ndarray:
    """
    Randomly permute whole triangles, keeping each triangle's vertex order.

    Args:
        indices: Flat index stream or Tx3 array
        seed: Seed for the permutation (None = fresh entropy)
        vertex_count: Number of addressable vertices (None = largest index + 1)

    Returns:
        Flat int64 index array

    Raises:
        InvalidInput: If the index stream is malformed
    """
    if vertex_count is None:
        vertex_count = _implied_vertex_count(indices)
    triangles = as_triangle_array(indices, vertex_count)
    rng = np.random.default_rng(seed)
    return triangles[rng.permutation(len(triangles))].reshape(-1)


def _implied_vertex_count(indices) -> int:
    try:
        arr = np.asarray(indices)
    except (TypeError, ValueError) as e:
        raise InvalidInput(f"Index stream is not a numeric array: {e}") from e
    if arr.size == 0 or arr.dtype.kind not in "iu":
        # as_triangle_array reports the problem, if any
        return 0
    return max(int(arr.max()) + 1, 0)


@dataclass
class OrderComparison:
    """Cache statistics for the three triangle orders of one mesh."""
    original: CacheStatistics
    optimized: CacheStatistics
    shuffled: CacheStatistics

    @property
    def improvement(self) -> float:
        """Relative ACMR reduction of the optimized order over the original."""
        if self.original.acmr == 0:
            return 0.0
        return 1.0 - self.optimized.acmr / self.original.acmr

    def to_dict(self) -> dict:
        return {
            "original": self.original.to_dict(),
            "optimized": self.optimized.to_dict(),
            "shuffled": self.shuffled.to_dict(),
            "improvement": self.improvement,
        }


def compare_orders(
    indices,
    vertex_count: int,
    config: Optional[OptimizerConfig] = None,
    seed: Optional[int] = None,
) -> OrderComparison:
    """Compare original, optimized and shuffled triangle orders."""
    optimizer = VertexCacheOptimizer(config)
    cache_size = optimizer.config.cache_size

    original = as_triangle_array(indices, vertex_count).reshape(-1)
    optimized = optimizer.optimize(original, vertex_count)
    shuffled = shuffle_triangles(original, seed=seed, vertex_count=vertex_count)

    comparison = OrderComparison(
        original=simulate_cache(original, vertex_count, cache_size),
        optimized=simulate_cache(optimized, vertex_count, cache_size),
        shuffled=simulate_cache(shuffled, vertex_count, cache_size),
    )
    logger.info(f"ACMR original {comparison.original.acmr:.3f}, "
                f"optimized {comparison.optimized.acmr:.3f}, "
                f"shuffled {comparison.shuffled.acmr:.3f}")
    return comparison
