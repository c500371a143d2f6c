"""
Constant-product swap engine.

This module maps pool records onto the integer swap kernel and applies the
action-level rules (deadline, minimum output) with typed errors.

Algorithm Design:
- Type: Fixed-Point Integer Arithmetic / Floor Rounding
- Time Complexity: O(1) per swap
- Invariant: new_reserve_in * new_reserve_out >= reserve_in * reserve_out
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Tuple

from ..kernels.python.cpmm_swap import BPS_DENOM, swap_exact_in
from ..state.pools import PoolState
from .errors import InvalidAmount, SlippageExceeded
from .guards import require_before_deadline
from .types import Swap, SwapDirection, TransitionContext


@dataclass(frozen=True)
class SwapResult:
    amount_out: int
    new_reserve_in: int
    new_reserve_out: int
    effective_in: int
    lp_fee: int
    protocol_fee: int
    k_before: int
    k_after: int


def reserves_for(pool: PoolState, direction: SwapDirection) -> Tuple[int, int]:
    """Return (reserve_in, reserve_out) for a swap direction."""
    if direction == SwapDirection.ADA_TO_TOKEN:
        return pool.ada_reserve, pool.token_reserve
    return pool.token_reserve, pool.ada_reserve


def swap(
    pool: PoolState,
    amount_in: int,
    direction: SwapDirection,
    fee_bps: int,
    *,
    protocol_fee_bps: int = 0,
) -> SwapResult:
    """
    Price an exact-in swap against `pool` without touching it.

        effective_in = floor(amount_in * (10_000 - fee_bps) / 10_000)
        amount_out = floor(reserve_out * effective_in / (reserve_in + effective_in))
        new_reserve_in = reserve_in + amount_in   (fee retained in the pool)
        new_reserve_out = reserve_out - amount_out

    Args:
        pool: Pre-swap pool record
        amount_in: Gross input amount
        direction: Which reserve receives the input
        fee_bps: Total fee charged on input
        protocol_fee_bps: Portion of `fee_bps` reported as protocol fee

    Raises:
        InvalidAmount: If amount_in <= 0, a reserve is empty or the fee is out of range
    """
    if amount_in <= 0:
        raise InvalidAmount(f"amount_in must be positive: {amount_in}")
    reserve_in, reserve_out = reserves_for(pool, direction)
    if reserve_in <= 0 or reserve_out <= 0:
        raise InvalidAmount(f"cannot swap against an empty reserve: ({reserve_in}, {reserve_out})")
    if not (0 <= protocol_fee_bps <= fee_bps < BPS_DENOM):
        raise InvalidAmount(f"invalid fee configuration: fee_bps={fee_bps}, protocol_fee_bps={protocol_fee_bps}")

    res = swap_exact_in(
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        amount_in=amount_in,
        fee_bps=fee_bps,
        protocol_fee_bps=protocol_fee_bps,
    )
    return SwapResult(
        amount_out=res.amount_out,
        new_reserve_in=res.new_reserve_in,
        new_reserve_out=res.new_reserve_out,
        effective_in=res.effective_in,
        lp_fee=res.lp_fee,
        protocol_fee=res.protocol_fee,
        k_before=res.k_before,
        k_after=res.k_after,
    )


def apply_swap_result(pool: PoolState, direction: SwapDirection, result: SwapResult, current_time: int) -> PoolState:
    """Build the post-swap pool record (reserves + stats)."""
    stats = pool.stats
    if direction == SwapDirection.ADA_TO_TOKEN:
        new_ada, new_token = result.new_reserve_in, result.new_reserve_out
        ada_volume = result.new_reserve_in - pool.ada_reserve
        token_volume = result.amount_out
    else:
        new_token, new_ada = result.new_reserve_in, result.new_reserve_out
        ada_volume = result.amount_out
        token_volume = result.new_reserve_in - pool.token_reserve

    return replace(
        pool,
        ada_reserve=new_ada,
        token_reserve=new_token,
        stats=replace(
            stats,
            swap_count=stats.swap_count + 1,
            total_volume_ada=stats.total_volume_ada + ada_volume,
            total_volume_token=stats.total_volume_token + token_volume,
            total_lp_fees=stats.total_lp_fees + result.lp_fee,
            total_protocol_fees=stats.total_protocol_fees + result.protocol_fee,
            last_interaction_time=current_time,
        ),
    )


def execute_swap(pool: PoolState, action: Swap, context: TransitionContext) -> Tuple[PoolState, SwapResult]:
    """
    Run a Swap action: amount checks, deadline, pricing, slippage.

    Uses the pool's consolidated fee (`fee_bps + protocol_fee_bps`).

    Raises:
        DeadlineExceeded: If context.current_time > action.deadline
        InvalidAmount: If amount_in <= 0, min_out < 0 or the trade is too small to output anything
        SlippageExceeded: If amount_out < min_out
    """
    if action.amount_in <= 0:
        raise InvalidAmount(f"amount_in must be positive: {action.amount_in}")
    if action.min_out < 0:
        raise InvalidAmount(f"min_out must be non-negative: {action.min_out}")
    require_before_deadline(action.deadline, context)

    result = swap(
        pool,
        action.amount_in,
        action.direction,
        pool.total_fee_bps,
        protocol_fee_bps=pool.protocol_fee_bps,
    )
    if result.amount_out <= 0:
        raise InvalidAmount(f"amount_out is zero (trade too small): amount_in={action.amount_in}")
    if result.amount_out < action.min_out:
        raise SlippageExceeded(f"amount_out ({result.amount_out}) < min_out ({action.min_out})")

    return apply_swap_result(pool, action.direction, result, context.current_time), result
