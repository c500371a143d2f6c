"""
Liquidity management: create pool, add/remove liquidity.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Tuple

from ..kernels.python.lp_math import burn, mint_initial, mint_proportional
from ..state.pools import PoolState, PoolStatus
from .errors import InvalidAmount, SlippageExceeded
from .guards import require_before_deadline
from .min_reserve import require_min_reserve
from .types import (
    CARDANO_POOL_PROFILE,
    AddLiquidity,
    CreatePool,
    MinReserveProfile,
    RemoveLiquidity,
    TransitionContext,
)


@dataclass(frozen=True)
class AddLiquidityResult:
    lp_minted: int
    new_ada_reserve: int
    new_token_reserve: int
    new_lp_supply: int


@dataclass(frozen=True)
class RemoveLiquidityResult:
    ada_out: int
    token_out: int
    new_ada_reserve: int
    new_token_reserve: int
    new_lp_supply: int


def _check_deposit_amounts(ada_amount: int, token_amount: int, min_lp_out: int) -> None:
    if ada_amount <= 0 or token_amount <= 0:
        raise InvalidAmount(f"deposit amounts must be positive: ({ada_amount}, {token_amount})")
    if min_lp_out < 0:
        raise InvalidAmount(f"min_lp_out must be non-negative: {min_lp_out}")


def _check_burn_amounts(pool: PoolState, lp_amount: int, min_ada_out: int, min_token_out: int) -> None:
    if lp_amount <= 0:
        raise InvalidAmount(f"lp_amount must be positive: {lp_amount}")
    if lp_amount > pool.lp_total_supply:
        raise InvalidAmount(f"cannot burn more LP than supply: {lp_amount} > {pool.lp_total_supply}")
    if min_ada_out < 0 or min_token_out < 0:
        raise InvalidAmount(f"minimum outputs must be non-negative: ({min_ada_out}, {min_token_out})")


def add_liquidity(
    pool: PoolState,
    ada_amount: int,
    token_amount: int,
    min_lp_out: int,
) -> AddLiquidityResult:
    """
    Deposit both assets and compute the LP tokens owed.

    First deposit (lp_total_supply == 0):
        lp = floor(sqrt(ada_amount * token_amount))

    Subsequent deposits:
        lp = min(floor(ada_amount * S / A), floor(token_amount * S / T))

    Both amounts are credited in full. Whatever the binding ratio does not
    pay for stays in the pool for existing holders.

    Raises:
        InvalidAmount: If an amount is <= 0, min_lp_out < 0 or nothing would be minted
        SlippageExceeded: If lp_minted < min_lp_out
    """
    _check_deposit_amounts(ada_amount, token_amount, min_lp_out)

    if pool.lp_total_supply == 0:
        res = mint_initial(ada_amount=ada_amount, token_amount=token_amount)
    else:
        if pool.ada_reserve <= 0 or pool.token_reserve <= 0:
            raise InvalidAmount("cannot add liquidity to a pool with an empty reserve")
        res = mint_proportional(
            ada_reserve=pool.ada_reserve,
            token_reserve=pool.token_reserve,
            lp_supply=pool.lp_total_supply,
            ada_amount=ada_amount,
            token_amount=token_amount,
        )

    if res.lp_minted <= 0:
        raise InvalidAmount(f"deposit too small to mint LP: ({ada_amount}, {token_amount})")
    if res.lp_minted < min_lp_out:
        raise SlippageExceeded(f"lp_minted ({res.lp_minted}) < min_lp_out ({min_lp_out})")

    return AddLiquidityResult(
        lp_minted=res.lp_minted,
        new_ada_reserve=res.new_ada_reserve,
        new_token_reserve=res.new_token_reserve,
        new_lp_supply=res.new_lp_supply,
    )


def remove_liquidity(
    pool: PoolState,
    lp_amount: int,
    min_ada_out: int,
    min_token_out: int,
    profile: MinReserveProfile = CARDANO_POOL_PROFILE,
) -> RemoveLiquidityResult:
    """
    Burn LP tokens for a pro-rata share of both reserves.

    Outputs:
        ada_out = floor(ada_reserve * lp_amount / lp_total_supply)
        token_out = floor(token_reserve * lp_amount / lp_total_supply)

    The remaining container is checked against its minimum balance under
    `profile` (reserves and supply only; callers that also update other
    record fields should check the final record as well). A full drain is
    exempt.

    Raises:
        InvalidAmount: If lp_amount <= 0, lp_amount > lp_total_supply or a minimum is negative
        SlippageExceeded: If either output is below its minimum
        PoolUnderfunded: If LP holders remain and the container falls below its minimum
    """
    _check_burn_amounts(pool, lp_amount, min_ada_out, min_token_out)

    res = burn(
        ada_reserve=pool.ada_reserve,
        token_reserve=pool.token_reserve,
        lp_supply=pool.lp_total_supply,
        lp_amount=lp_amount,
    )

    if res.ada_out < min_ada_out:
        raise SlippageExceeded(f"ada_out ({res.ada_out}) < min_ada_out ({min_ada_out})")
    if res.token_out < min_token_out:
        raise SlippageExceeded(f"token_out ({res.token_out}) < min_token_out ({min_token_out})")

    result = RemoveLiquidityResult(
        ada_out=res.ada_out,
        token_out=res.token_out,
        new_ada_reserve=res.new_ada_reserve,
        new_token_reserve=res.new_token_reserve,
        new_lp_supply=res.new_lp_supply,
    )
    candidate = _with_reserves(pool, result.new_ada_reserve, result.new_token_reserve, result.new_lp_supply)
    require_min_reserve(candidate, profile)
    return result


def _with_reserves(pool: PoolState, ada: int, token: int, lp_supply: int, **changes) -> PoolState:
    return replace(pool, ada_reserve=ada, token_reserve=token, lp_total_supply=lp_supply, **changes)


def execute_add_liquidity(
    pool: PoolState,
    action: AddLiquidity,
    context: TransitionContext,
) -> Tuple[PoolState, AddLiquidityResult]:
    _check_deposit_amounts(action.ada_amount, action.token_amount, action.min_lp_out)
    require_before_deadline(action.deadline, context)
    result = add_liquidity(pool, action.ada_amount, action.token_amount, action.min_lp_out)
    new_pool = _with_reserves(
        pool,
        result.new_ada_reserve,
        result.new_token_reserve,
        result.new_lp_supply,
        stats=replace(pool.stats, last_interaction_time=context.current_time),
    )
    return new_pool, result


def execute_remove_liquidity(
    pool: PoolState,
    action: RemoveLiquidity,
    context: TransitionContext,
) -> Tuple[PoolState, RemoveLiquidityResult]:
    _check_burn_amounts(pool, action.lp_amount, action.min_ada_out, action.min_token_out)
    require_before_deadline(action.deadline, context)
    result = remove_liquidity(
        pool,
        action.lp_amount,
        action.min_ada_out,
        action.min_token_out,
        profile=context.min_reserve_profile,
    )
    new_pool = _with_reserves(
        pool,
        result.new_ada_reserve,
        result.new_token_reserve,
        result.new_lp_supply,
        stats=replace(pool.stats, last_interaction_time=context.current_time),
    )
    require_min_reserve(new_pool, context.min_reserve_profile)
    return new_pool, result


def create_pool(
    pool: PoolState,
    action: CreatePool,
    context: TransitionContext,
    max_fee_bps: int,
) -> Tuple[PoolState, AddLiquidityResult]:
    """
    Seed an uninitialized pool.

    The fee chosen here is frozen for the life of the pool. LP minted for
    the seed deposit becomes the entire LP supply.

    Raises:
        InvalidAmount: If an initial amount is <= 0 or the fee is out of range
        PoolUnderfunded: If the seed ADA does not cover the container minimum
    """
    if action.fee_bps < 0 or action.fee_bps + pool.protocol_fee_bps > max_fee_bps:
        raise InvalidAmount(
            f"fee_bps + protocol_fee_bps must be in [0, {max_fee_bps}]: "
            f"{action.fee_bps} + {pool.protocol_fee_bps}"
        )
    if action.initial_ada <= 0 or action.initial_token <= 0:
        raise InvalidAmount(f"initial deposits must be positive: ({action.initial_ada}, {action.initial_token})")

    result = add_liquidity(pool, action.initial_ada, action.initial_token, 0)

    new_pool = _with_reserves(
        pool,
        result.new_ada_reserve,
        result.new_token_reserve,
        result.new_lp_supply,
        fee_bps=action.fee_bps,
        status=PoolStatus.ACTIVE,
        stats=replace(pool.stats, created_at=context.current_time, last_interaction_time=context.current_time),
    )
    require_min_reserve(new_pool, context.min_reserve_profile)
    return new_pool, result
