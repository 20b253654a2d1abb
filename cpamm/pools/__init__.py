"""Pool management package.

Provides the Pool data model and the PairRegistry that owns every pool.
"""

from .pool import PairKey, Pool, PoolSnapshot
from .registry import PairRegistry

__all__ = [
    "PairKey",
    "Pool",
    "PoolSnapshot",
    "PairRegistry",
]
