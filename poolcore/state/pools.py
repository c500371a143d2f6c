"""
Pool state for a single constant-product pool container.

A pool lives in exactly one spendable container on the ledger. Every
transition consumes the current record and produces a new one, so the state
types here are immutable; use `dataclasses.replace` to derive successors.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple


# Type aliases
Amount = int  # Non-negative integer (arbitrary precision)
Identity = str  # Admin identity (key hash / address), opaque to the engine


class AssetId(NamedTuple):
    """Native asset identifier: (policy_id, asset_name), both hex strings."""

    policy_id: str
    asset_name: str

    def __str__(self) -> str:
        return f"{self.policy_id}.{self.asset_name}"


class PoolStatus(Enum):
    """Pool status enumeration."""
    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"


class LifecycleState(Enum):
    """Derived state-machine position of a pool record."""
    UNINITIALIZED = "UNINITIALIZED"
    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


@dataclass(frozen=True)
class PoolStats:
    """
    Bookkeeping counters carried in the pool record.

    Fee totals are denominated in whatever asset was paid in, summed as plain
    integers. Nothing here feeds back into pricing.
    """

    swap_count: int = 0
    total_volume_ada: Amount = 0
    total_volume_token: Amount = 0
    total_lp_fees: Amount = 0
    total_protocol_fees: Amount = 0
    created_at: int = 0
    last_interaction_time: int = 0

    def __post_init__(self) -> None:
        for name in (
            "swap_count",
            "total_volume_ada",
            "total_volume_token",
            "total_lp_fees",
            "total_protocol_fees",
            "created_at",
            "last_interaction_time",
        ):
            _require_int(name, getattr(self, name))


@dataclass(frozen=True)
class PoolState:
    """
    State of an ADA/token liquidity pool.

    Attributes:
        ada_reserve: Base-asset reserve (lovelace) held by the pool container
        token_reserve: Reserve of the traded token
        lp_total_supply: Outstanding LP tokens; 0 iff the pool is uninitialized
        fee_bps: Trading fee in basis points
        protocol_fee_bps: Protocol cut in basis points, additive to fee_bps
        status: ACTIVE or PAUSED
        identity_token_count: Count of the pool identity token in the container (must be 1)
        token_id: Traded token (policy_id, asset_name)
        lp_token_id: LP token (policy_id, asset_name)
        admin: Identity allowed to pause/unpause
        stats: Volume/fee counters and timestamps

    Only types are checked on construction. Semantic invariants are checked by
    `poolcore.core.invariants` so that a malformed decoded record can be
    reported as a broken invariant instead of failing at decode time.
    """
    ada_reserve: Amount
    token_reserve: Amount
    lp_total_supply: Amount
    fee_bps: int
    protocol_fee_bps: int
    status: PoolStatus
    identity_token_count: int
    token_id: AssetId
    lp_token_id: AssetId
    admin: Identity
    stats: PoolStats = field(default_factory=PoolStats)

    def __post_init__(self) -> None:
        for name in (
            "ada_reserve",
            "token_reserve",
            "lp_total_supply",
            "fee_bps",
            "protocol_fee_bps",
            "identity_token_count",
        ):
            _require_int(name, getattr(self, name))
        if not isinstance(self.status, PoolStatus):
            raise TypeError(f"status must be a PoolStatus, got {type(self.status).__name__}")
        if not isinstance(self.token_id, AssetId) or not isinstance(self.lp_token_id, AssetId):
            raise TypeError("token_id and lp_token_id must be AssetId values")
        if not isinstance(self.admin, str):
            raise TypeError("admin must be a string identity")

    @classmethod
    def uninitialized(
        cls,
        token_id: AssetId,
        lp_token_id: AssetId,
        admin: Identity,
        protocol_fee_bps: int = 0,
    ) -> "PoolState":
        """
        Pre-state of a CreatePool transition.

        The identity token has been minted into the container, nothing else
        has been deposited yet. `fee_bps` is chosen by the CreatePool action.
        """
        return cls(
            ada_reserve=0,
            token_reserve=0,
            lp_total_supply=0,
            fee_bps=0,
            protocol_fee_bps=protocol_fee_bps,
            status=PoolStatus.ACTIVE,
            identity_token_count=1,
            token_id=token_id,
            lp_token_id=lp_token_id,
            admin=admin,
        )

    @property
    def is_initialized(self) -> bool:
        return self.lp_total_supply > 0

    @property
    def total_fee_bps(self) -> int:
        """Consolidated fee charged on swap input (trading fee + protocol cut)."""
        return self.fee_bps + self.protocol_fee_bps

    def get_constant_product(self) -> int:
        """
        Compute k = ada_reserve * token_reserve.

        Returns:
            Constant product k
        """
        return self.ada_reserve * self.token_reserve

    def __repr__(self) -> str:
        return (
            f"PoolState(token={self.token_id}, "
            f"reserves=({self.ada_reserve}, {self.token_reserve}), "
            f"lp_total_supply={self.lp_total_supply}, "
            f"fees=({self.fee_bps}, {self.protocol_fee_bps}), status={self.status.value})"
        )


def lifecycle_state(pool: PoolState) -> LifecycleState:
    """Map a pool record onto the transition state machine."""
    if not pool.is_initialized:
        return LifecycleState.UNINITIALIZED
    if pool.status == PoolStatus.PAUSED:
        return LifecycleState.PAUSED
    return LifecycleState.ACTIVE
