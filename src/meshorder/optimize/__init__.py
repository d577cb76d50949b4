"""Vertex cache optimization."""

from meshorder.optimize.config import OptimizerConfig, create_default_config
from meshorder.optimize.scoring import ScoreTable, vertex_score, DEAD_VERTEX_SCORE
from meshorder.optimize.cache import SimulatedCache, NOT_CACHED
from meshorder.optimize.state import MeshState, as_triangle_array
from meshorder.optimize.reorder import (
    VertexCacheOptimizer,
    ReorderStep,
    optimize_indices,
)

__all__ = [
    "OptimizerConfig",
    "create_default_config",
    "ScoreTable",
    "vertex_score",
    "DEAD_VERTEX_SCORE",
    "SimulatedCache",
    "NOT_CACHED",
    "MeshState",
    "as_triangle_array",
    "VertexCacheOptimizer",
    "ReorderStep",
    "optimize_indices",
]
