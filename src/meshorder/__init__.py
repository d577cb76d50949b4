"""
MeshOrder: vertex cache optimization for triangle meshes.

Reorders triangle lists so a small FIFO post-transform cache is reused
as often as possible.
"""

__version__ = "0.1.0"

# Suppress trimesh's verbose load logs by default
import logging
logging.getLogger("trimesh").setLevel(logging.WARNING)

from meshorder.errors import MeshOrderError, InvalidInput, ConfigurationError
from meshorder.core.mesh import Mesh
from meshorder.core.io import load_mesh, save_mesh
from meshorder.optimize import OptimizerConfig, VertexCacheOptimizer, optimize_indices
from meshorder.evaluation import CacheStatistics, simulate_cache, compare_orders
from meshorder.pipeline import OptimizationPipeline, OptimizationResult

__all__ = [
    "Mesh",
    "load_mesh",
    "save_mesh",
    "OptimizerConfig",
    "VertexCacheOptimizer",
    "optimize_indices",
    "CacheStatistics",
    "simulate_cache",
    "compare_orders",
    "OptimizationPipeline",
    "OptimizationResult",
    "MeshOrderError",
    "InvalidInput",
    "ConfigurationError",
    "__version__",
]
