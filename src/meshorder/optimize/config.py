"""
Optimizer configuration.

Scoring constants default to the values published with Forsyth's
linear-speed vertex cache optimization. Configurations can be stored as
YAML and overridden key by key.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from numbers import Integral, Real
from pathlib import Path
from typing import Union
import yaml

from meshorder.errors import ConfigurationError


@dataclass
class OptimizerConfig:
    """
    Configuration for the vertex cache optimizer.

    Attributes:
        cache_size: Number of vertices held by the simulated FIFO cache.
            Larger values let the optimizer look further back when it
            rewards cache residency.
        last_triangles_bonus: Fixed score for the three most recently
            inserted vertices (cache positions 0-2). Lower values make the
            optimizer less eager to continue the current strip.
        cache_decay_power: Exponent of the falloff applied to positions
            3..cache_size-1. Higher values favour recent vertices more.
        valence_boost_scale: Weight of the remaining-valence term. Higher
            values push the optimizer to finish off nearly-done vertices.
        valence_boost_power: Exponent of the inverse power law applied to
            a vertex's remaining triangle count.
        progress_log_interval: Seconds between progress log lines on
            long runs, 0 to disable them.
    """
    cache_size: int = 32
    last_triangles_bonus: float = 0.75
    cache_decay_power: float = 1.5
    valence_boost_scale: float = 2.0
    valence_boost_power: float = 0.5
    progress_log_interval: float = 5.0

    def validate(self) -> OptimizerConfig:
        """Check all values, raising ConfigurationError on the first bad one."""
        if isinstance(self.cache_size, bool) or not isinstance(self.cache_size, Integral):
            raise ConfigurationError(
                f"cache_size must be an integer, got {self.cache_size!r}"
            )
        if self.cache_size <= 0:
            raise ConfigurationError(f"cache_size must be positive, got {self.cache_size}")

        for name in ("last_triangles_bonus", "cache_decay_power",
                     "valence_boost_scale", "valence_boost_power",
                     "progress_log_interval"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, Real):
                raise ConfigurationError(f"{name} must be a number, got {value!r}")
            if value < 0:
                raise ConfigurationError(f"{name} must be non-negative, got {value}")

        return self

    def to_dict(self) -> dict:
        return {
            "cache_size": self.cache_size,
            "last_triangles_bonus": self.last_triangles_bonus,
            "cache_decay_power": self.cache_decay_power,
            "valence_boost_scale": self.valence_boost_scale,
            "valence_boost_power": self.valence_boost_power,
            "progress_log_interval": self.progress_log_interval,
        }

    def save(self, path: Union[str, Path]) -> None:
        """Save configuration to YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    @classmethod
    def load(cls, path: Union[str, Path]) -> OptimizerConfig:
        """Load configuration from YAML file.

        Raises:
            ConfigurationError: If the file is not valid YAML or holds bad values
        """
        with open(path, 'r') as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Config file {path} is not valid YAML: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping")

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> OptimizerConfig:
        """Create config from dictionary."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown config keys: {', '.join(unknown)}")

        return cls(**data).validate()

    def with_overrides(self, **kwargs) -> OptimizerConfig:
        """Create new config with overrides. None values are ignored."""
        data = self.to_dict()
        data.update({k: v for k, v in kwargs.items() if v is not None})
        return OptimizerConfig.from_dict(data)


def create_default_config() -> OptimizerConfig:
    """Create a default optimizer configuration."""
    return OptimizerConfig()
