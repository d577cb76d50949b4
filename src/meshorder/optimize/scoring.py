"""Vertex scoring for Tom Forsyth's linear-speed vertex cache optimization."""

from __future__ import annotations

from typing import Optional

from meshorder.optimize.config import OptimizerConfig

# Score of a vertex whose triangles have all been emitted
DEAD_VERTEX_SCORE = -1.0

# Remaining counts up to this value are served from the lookup table
VALENCE_TABLE_SIZE = 32

# Vertices of the most recently emitted triangle
LAST_TRIANGLE_SLOTS = 3


def _cache_score(cache_position: int, config: OptimizerConfig) -> float:
    if cache_position < 0 or cache_position >= config.cache_size:
        return 0.0

    if cache_position < LAST_TRIANGLE_SLOTS:
        # Vertices from the most recent triangle get a fixed bonus
        return config.last_triangles_bonus

    # Score decays with position in cache
    t = (cache_position - LAST_TRIANGLE_SLOTS) / (config.cache_size - LAST_TRIANGLE_SLOTS)
    return (1.0 - t) ** config.cache_decay_power


def _valence_score(remaining: int, config: OptimizerConfig) -> float:
    # Fewer remaining triangles = higher priority
    return config.valence_boost_scale * (remaining ** -config.valence_boost_power)


def vertex_score(
    cache_position: int,
    remaining: int,
    config: Optional[OptimizerConfig] = None,
) -> float:
    """
    Compute Forsyth vertex score.

    cache_position: -1 if not in cache, otherwise 0..cache_size-1
    remaining: number of not-yet-emitted triangles using this vertex
    """
    if config is None:
        config = OptimizerConfig()

    if remaining <= 0:
        return DEAD_VERTEX_SCORE

    return _cache_score(cache_position, config) + _valence_score(remaining, config)


class ScoreTable:
    """
    Precomputed vertex scores for one optimizer configuration.

    Cache scores are tabulated for every slot and valence scores for
    small remaining counts, so per-step rescoring is a pair of lookups.
    Results are identical to vertex_score().
    """

    def __init__(self, config: OptimizerConfig):
        self.config = config
        self.cache_scores = [_cache_score(p, config) for p in range(config.cache_size)]
        self.valence_scores = [DEAD_VERTEX_SCORE] + [
            _valence_score(n, config) for n in range(1, VALENCE_TABLE_SIZE + 1)
        ]

    def score(self, cache_position: int, remaining: int) -> float:
        if remaining <= 0:
            return DEAD_VERTEX_SCORE

        if 0 <= cache_position < len(self.cache_scores):
            cache = self.cache_scores[cache_position]
        else:
            cache = 0.0

        if remaining <= VALENCE_TABLE_SIZE:
            valence = self.valence_scores[remaining]
        else:
            valence = _valence_score(remaining, self.config)

        return cache + valence
