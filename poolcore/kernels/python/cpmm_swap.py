"""
CPMM swap kernel.

- The fee is taken off the gross input with floor rounding:
      effective_in = floor(amount_in * (10_000 - fee_bps) / 10_000)
- Pricing uses `effective_in` (Uniswap-v2 style):
      amount_out = floor(reserve_out * effective_in / (reserve_in + effective_in))
- The full gross input is credited to the input reserve, so the fee stays in
  the pool and k never decreases.

Small, auditable, integer-only. Callers are expected to map ValueError to
their own error vocabulary.
"""

from __future__ import annotations

from dataclasses import dataclass


BPS_DENOM = 10_000


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


@dataclass(frozen=True)
class SwapExactInResult:
    amount_out: int
    effective_in: int
    fee_total: int
    protocol_fee: int
    lp_fee: int
    gross_in: int
    new_reserve_in: int
    new_reserve_out: int
    k_before: int
    k_after: int


def compute_effective_in(*, gross_in: int, fee_bps: int) -> int:
    """
    Compute `effective_in = floor(gross_in * (10_000 - fee_bps) / 10_000)`.
    """
    _require_int("gross_in", gross_in)
    _require_int("fee_bps", fee_bps)
    if gross_in < 0:
        raise ValueError("gross_in must be non-negative")
    if not (0 <= fee_bps <= BPS_DENOM):
        raise ValueError(f"fee_bps must be in [0, {BPS_DENOM}]")
    return (gross_in * (BPS_DENOM - fee_bps)) // BPS_DENOM


def compute_protocol_fee(*, gross_in: int, protocol_fee_bps: int) -> int:
    """
    Compute `protocol_fee = floor(gross_in * protocol_fee_bps / 10_000)`.
    """
    _require_int("gross_in", gross_in)
    _require_int("protocol_fee_bps", protocol_fee_bps)
    if gross_in < 0:
        raise ValueError("gross_in must be non-negative")
    if not (0 <= protocol_fee_bps <= BPS_DENOM):
        raise ValueError(f"protocol_fee_bps must be in [0, {BPS_DENOM}]")
    return (gross_in * protocol_fee_bps) // BPS_DENOM


def swap_exact_in(
    *,
    reserve_in: int,
    reserve_out: int,
    amount_in: int,
    fee_bps: int,
    protocol_fee_bps: int = 0,
) -> SwapExactInResult:
    """
    Exact-in swap quote + post-reserves.

    `fee_bps` is the total fee charged on input; `protocol_fee_bps` is the part
    of it attributed to the protocol (reported only, it stays in the pool).

    A zero `amount_out` is returned as-is; rejecting dust trades is a policy
    decision left to the caller.

    Raises ValueError on invalid inputs.
    """
    for name, v in (
        ("reserve_in", reserve_in),
        ("reserve_out", reserve_out),
        ("amount_in", amount_in),
        ("fee_bps", fee_bps),
        ("protocol_fee_bps", protocol_fee_bps),
    ):
        _require_int(name, v)

    if reserve_in <= 0 or reserve_out <= 0:
        raise ValueError("cannot swap against an empty reserve")
    if amount_in <= 0:
        raise ValueError("amount_in must be positive")
    if not (0 <= protocol_fee_bps <= fee_bps <= BPS_DENOM):
        raise ValueError(f"fees must satisfy 0 <= protocol_fee_bps <= fee_bps <= {BPS_DENOM}")

    k_before = reserve_in * reserve_out

    effective_in = compute_effective_in(gross_in=amount_in, fee_bps=fee_bps)
    fee_total = amount_in - effective_in
    protocol_fee = compute_protocol_fee(gross_in=amount_in, protocol_fee_bps=protocol_fee_bps)
    if protocol_fee > fee_total:
        raise AssertionError("protocol_fee exceeds fee_total")
    lp_fee = fee_total - protocol_fee

    amount_out = (reserve_out * effective_in) // (reserve_in + effective_in)
    # floor(r * e / (r_in + e)) < r for any r_in > 0
    if amount_out >= reserve_out:
        raise AssertionError("amount_out drains reserve_out")

    new_reserve_in = reserve_in + amount_in
    new_reserve_out = reserve_out - amount_out
    k_after = new_reserve_in * new_reserve_out

    return SwapExactInResult(
        amount_out=amount_out,
        effective_in=effective_in,
        fee_total=fee_total,
        protocol_fee=protocol_fee,
        lp_fee=lp_fee,
        gross_in=amount_in,
        new_reserve_in=new_reserve_in,
        new_reserve_out=new_reserve_out,
        k_before=k_before,
        k_after=k_after,
    )
