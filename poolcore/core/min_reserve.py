"""
Minimum container balance.

On a UTXO-style ledger the container holding the pool record must itself
carry a minimum base-asset balance that grows with the number of distinct
assets it holds and the size of the data attached to it. A container that
falls below that floor can never be spent again, so the floor is checked on
every transition that leaves live LP holders behind.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..state.canonical import pool_state_size_bytes
from ..state.pools import PoolState
from .errors import PoolUnderfunded
from .types import MinReserveProfile


BPS_DENOM = 10_000


@dataclass(frozen=True)
class MinReserveReport:
    base: int
    asset_cost: int
    byte_cost: int
    buffer: int
    required: int
    actual: int
    deficit: int

    @property
    def ok(self) -> bool:
        return self.deficit == 0


def calculate_min_reserve(asset_count: int, state_size_bytes: int, profile: MinReserveProfile) -> int:
    """
    Minimum base-asset balance for a container.

        raw = base + asset_count * per_asset_cost + state_size_bytes * per_byte_cost
        min_reserve = raw + floor(raw * buffer_bps / 10_000)
    """
    return _breakdown(asset_count, state_size_bytes, profile)[-1]


def _breakdown(asset_count: int, state_size_bytes: int, profile: MinReserveProfile) -> tuple[int, int, int, int, int]:
    for name, v in (("asset_count", asset_count), ("state_size_bytes", state_size_bytes)):
        if not isinstance(v, int) or isinstance(v, bool):
            raise TypeError(f"{name} must be an int")
        if v < 0:
            raise ValueError(f"{name} must be non-negative: {v}")

    asset_cost = asset_count * profile.per_asset_cost
    byte_cost = state_size_bytes * profile.per_byte_cost
    raw = profile.base + asset_cost + byte_cost
    buffer = (raw * profile.buffer_bps) // BPS_DENOM
    return profile.base, asset_cost, byte_cost, buffer, raw + buffer


def pool_asset_count(pool: PoolState) -> int:
    """Distinct non-base assets in the pool container: identity token plus the traded token if held."""
    count = 1 if pool.identity_token_count > 0 else 0
    if pool.token_reserve > 0:
        count += 1
    return count


def pool_min_reserve(pool: PoolState, profile: MinReserveProfile) -> int:
    return calculate_min_reserve(pool_asset_count(pool), pool_state_size_bytes(pool), profile)


def check_min_reserve(pool: PoolState, profile: MinReserveProfile) -> MinReserveReport:
    """Full breakdown of the requirement for `pool` against its ADA reserve."""
    base, asset_cost, byte_cost, buffer, required = _breakdown(
        pool_asset_count(pool), pool_state_size_bytes(pool), profile
    )
    actual = pool.ada_reserve
    return MinReserveReport(
        base=base,
        asset_cost=asset_cost,
        byte_cost=byte_cost,
        buffer=buffer,
        required=required,
        actual=actual,
        deficit=max(0, required - actual),
    )


def require_min_reserve(pool: PoolState, profile: MinReserveProfile) -> int:
    """
    Enforce the floor on a post-state and return the required minimum.

    A fully drained pool (no LP outstanding) is exempt and requires 0.

    Raises:
        PoolUnderfunded: If live LP holders would be left in an unspendable container
    """
    if pool.lp_total_supply == 0:
        return 0
    report = check_min_reserve(pool, profile)
    if not report.ok:
        raise PoolUnderfunded(
            f"ada_reserve ({report.actual}) below container minimum ({report.required}), "
            f"deficit {report.deficit}"
        )
    return report.required
