"""Cache efficiency evaluation."""

from meshorder.evaluation.metrics import (
    CacheStatistics,
    OrderComparison,
    simulate_cache,
    shuffle_triangles,
    compare_orders,
)

__all__ = [
    "CacheStatistics",
    "OrderComparison",
    "simulate_cache",
    "shuffle_triangles",
    "compare_orders",
]
