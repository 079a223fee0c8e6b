"""
FitPool Core Module

Bounded, fitness-ranked candidate pools for iterative search.

This module provides:
- Population: a capacity-bounded pool bucketed by exact fitness score
- Merge strategies for exchanging candidates between pools
  (fittest, masked subset, uniform sample, everything)
- Random index picking for sampling without replacement
- Composite lexicographic scores
- Island pools with ring migration
- YAML configuration (load_config, save_config)
"""

__version__ = "0.1.0"

from .config import load_config, save_config
from .errors import FitPoolError, InvalidArgumentError, LogicalInconsistencyError
from .islands import Island, IslandManager
from .picker import IndexPicker, RandomIndexPicker
from .population import Population
from .schemas import IslandConfig, MigrationConfig, PoolConfig
from .scores import ScoreVector

__all__ = [
    "FitPoolError",
    "IndexPicker",
    "InvalidArgumentError",
    "Island",
    "IslandConfig",
    "IslandManager",
    "LogicalInconsistencyError",
    "MigrationConfig",
    "load_config",
    "save_config",
    "PoolConfig",
    "Population",
    "RandomIndexPicker",
    "ScoreVector",
]
