"""
Liquidity math kernel.

Pure functions with explicit rounding rules:
- initial mint: floor(sqrt(ada * token)) via `math.isqrt` (exact for any size)
- proportional mint: min(floor(ada * S / A), floor(token * S / T))
- burn: floor(A * lp / S), floor(T * lp / S)

No minimum-liquidity lock: the first depositor receives the whole initial supply.
"""

from __future__ import annotations

import math
from dataclasses import dataclass


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


@dataclass(frozen=True)
class MintResult:
    lp_minted: int
    new_ada_reserve: int
    new_token_reserve: int
    new_lp_supply: int


@dataclass(frozen=True)
class BurnResult:
    ada_out: int
    token_out: int
    new_ada_reserve: int
    new_token_reserve: int
    new_lp_supply: int


def mint_initial(*, ada_amount: int, token_amount: int) -> MintResult:
    """
    First deposit into an empty pool.

    The minted amount becomes the whole LP supply.
    """
    _require_int("ada_amount", ada_amount)
    _require_int("token_amount", token_amount)
    if ada_amount <= 0 or token_amount <= 0:
        raise ValueError("initial amounts must be positive")

    lp = math.isqrt(ada_amount * token_amount)
    return MintResult(
        lp_minted=lp,
        new_ada_reserve=ada_amount,
        new_token_reserve=token_amount,
        new_lp_supply=lp,
    )


def mint_proportional(
    *,
    ada_reserve: int,
    token_reserve: int,
    lp_supply: int,
    ada_amount: int,
    token_amount: int,
) -> MintResult:
    """
    Deposit into a live pool.

    Both amounts are credited in full; LP is minted against the binding
    (smaller) ratio so an unbalanced deposit never dilutes existing holders.
    """
    for name, v in (
        ("ada_reserve", ada_reserve),
        ("token_reserve", token_reserve),
        ("lp_supply", lp_supply),
        ("ada_amount", ada_amount),
        ("token_amount", token_amount),
    ):
        _require_int(name, v)

    if ada_reserve <= 0 or token_reserve <= 0:
        raise ValueError("cannot add proportional liquidity to an empty reserve")
    if lp_supply <= 0:
        raise ValueError("lp_supply must be positive for a proportional mint")
    if ada_amount <= 0 or token_amount <= 0:
        raise ValueError("deposit amounts must be positive")

    lp_from_ada = (ada_amount * lp_supply) // ada_reserve
    lp_from_token = (token_amount * lp_supply) // token_reserve
    lp = min(lp_from_ada, lp_from_token)

    return MintResult(
        lp_minted=lp,
        new_ada_reserve=ada_reserve + ada_amount,
        new_token_reserve=token_reserve + token_amount,
        new_lp_supply=lp_supply + lp,
    )


def burn(
    *,
    ada_reserve: int,
    token_reserve: int,
    lp_supply: int,
    lp_amount: int,
) -> BurnResult:
    """
    Burn `lp_amount` LP tokens for a pro-rata share of both reserves.

    Burning the whole supply returns both reserves exactly.
    """
    for name, v in (
        ("ada_reserve", ada_reserve),
        ("token_reserve", token_reserve),
        ("lp_supply", lp_supply),
        ("lp_amount", lp_amount),
    ):
        _require_int(name, v)

    if ada_reserve < 0 or token_reserve < 0:
        raise ValueError("reserves must be non-negative")
    if lp_supply <= 0:
        raise ValueError("lp_supply must be positive")
    if lp_amount <= 0:
        raise ValueError("lp_amount must be positive")
    if lp_amount > lp_supply:
        raise ValueError(f"cannot burn more LP than supply: {lp_amount} > {lp_supply}")

    ada_out = (ada_reserve * lp_amount) // lp_supply
    token_out = (token_reserve * lp_amount) // lp_supply

    return BurnResult(
        ada_out=ada_out,
        token_out=token_out,
        new_ada_reserve=ada_reserve - ada_out,
        new_token_reserve=token_reserve - token_out,
        new_lp_supply=lp_supply - lp_amount,
    )
