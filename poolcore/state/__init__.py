"""
Pool state records
"""

from .pools import AssetId, LifecycleState, PoolState, PoolStats, PoolStatus, lifecycle_state
from .canonical import pool_state_digest, pool_state_size_bytes, pool_state_to_dict

__all__ = [
    "AssetId",
    "LifecycleState",
    "PoolState",
    "PoolStats",
    "PoolStatus",
    "lifecycle_state",
    "pool_state_digest",
    "pool_state_size_bytes",
    "pool_state_to_dict",
]
