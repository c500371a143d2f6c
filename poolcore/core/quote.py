"""
Off-chain quoting.

Previews what `validate_transition` would produce for a trade or liquidity
change, using the same kernels and rounding, so a quote for an unchanged pool
is exactly what the on-chain check accepts. Price impact is reported in basis
points with integer arithmetic only.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..kernels.python.cpmm_swap import BPS_DENOM
from ..state.pools import PoolState
from .errors import InvalidAmount
from .liquidity import add_liquidity, remove_liquidity
from .swap import reserves_for, swap
from .types import CARDANO_POOL_PROFILE, MinReserveProfile, SwapDirection


DEFAULT_SLIPPAGE_BPS = 50  # 0.5%


@dataclass(frozen=True)
class SwapQuote:
    amount_in: int
    amount_out: int
    min_out: int
    lp_fee: int
    protocol_fee: int
    price_impact_bps: int
    new_ada_reserve: int
    new_token_reserve: int


@dataclass(frozen=True)
class LiquidityQuote:
    lp_amount: int
    ada_amount: int
    token_amount: int
    share_bps: int  # share of the post-transition LP supply


def min_out_for_slippage(amount_out: int, slippage_bps: int) -> int:
    """Smallest acceptable output for a tolerance of `slippage_bps`."""
    if not (0 <= slippage_bps <= BPS_DENOM):
        raise InvalidAmount(f"slippage_bps must be in [0, {BPS_DENOM}]: {slippage_bps}")
    return (amount_out * (BPS_DENOM - slippage_bps)) // BPS_DENOM


def price_impact_bps(reserve_in: int, reserve_out: int, amount_in: int, amount_out: int) -> int:
    """
    Shortfall of the execution price against the pre-trade spot price, fees included.

        impact = 10_000 - floor(amount_out * reserve_in * 10_000 / (amount_in * reserve_out))
    """
    if amount_in <= 0 or reserve_in <= 0 or reserve_out <= 0:
        raise InvalidAmount("price impact needs a positive input and non-empty reserves")
    ratio = (amount_out * reserve_in * BPS_DENOM) // (amount_in * reserve_out)
    return max(0, BPS_DENOM - ratio)


def quote_swap(
    pool: PoolState,
    amount_in: int,
    direction: SwapDirection,
    slippage_bps: int = DEFAULT_SLIPPAGE_BPS,
) -> SwapQuote:
    res = swap(pool, amount_in, direction, pool.total_fee_bps, protocol_fee_bps=pool.protocol_fee_bps)
    reserve_in, reserve_out = reserves_for(pool, direction)
    if direction == SwapDirection.ADA_TO_TOKEN:
        new_ada, new_token = res.new_reserve_in, res.new_reserve_out
    else:
        new_token, new_ada = res.new_reserve_in, res.new_reserve_out
    return SwapQuote(
        amount_in=amount_in,
        amount_out=res.amount_out,
        min_out=min_out_for_slippage(res.amount_out, slippage_bps),
        lp_fee=res.lp_fee,
        protocol_fee=res.protocol_fee,
        price_impact_bps=price_impact_bps(reserve_in, reserve_out, amount_in, res.amount_out),
        new_ada_reserve=new_ada,
        new_token_reserve=new_token,
    )


def quote_add_liquidity(pool: PoolState, ada_amount: int, token_amount: int) -> LiquidityQuote:
    res = add_liquidity(pool, ada_amount, token_amount, 0)
    return LiquidityQuote(
        lp_amount=res.lp_minted,
        ada_amount=ada_amount,
        token_amount=token_amount,
        share_bps=(res.lp_minted * BPS_DENOM) // res.new_lp_supply,
    )


def quote_remove_liquidity(
    pool: PoolState,
    lp_amount: int,
    profile: MinReserveProfile = CARDANO_POOL_PROFILE,
) -> LiquidityQuote:
    """
    Assets returned for burning `lp_amount`; share is of the pre-burn supply.

    Raises PoolUnderfunded for a partial withdrawal the container minimum
    under `profile` would refuse.
    """
    res = remove_liquidity(pool, lp_amount, 0, 0, profile=profile)
    return LiquidityQuote(
        lp_amount=lp_amount,
        ada_amount=res.ada_out,
        token_amount=res.token_out,
        share_bps=(lp_amount * BPS_DENOM) // pool.lp_total_supply,
    )
