# [TESTER] v1
"""Property tests over randomly sized pools and trades."""

from __future__ import annotations

import math
from dataclasses import replace

import hypothesis.strategies as st
from hypothesis import assume, given, settings

from poolcore.core import Swap, SwapDirection, TransitionContext, ZERO_PROFILE, validate_transition
from poolcore.core.liquidity import add_liquidity, remove_liquidity
from poolcore.core.min_reserve import calculate_min_reserve
from poolcore.core.types import CARDANO_POOL_PROFILE
from poolcore.kernels.python.cpmm_swap import swap_exact_in
from poolcore.state import AssetId, PoolState, pool_state_digest

TOKEN = AssetId("11" * 28, "746f6b656e")
LP_TOKEN = AssetId("22" * 28, "6c70")
ADMIN = "ab" * 28

reserves = st.integers(min_value=1, max_value=10**15)
amounts = st.integers(min_value=1, max_value=10**15)


def _pool(ada: int, token: int, lp: int | None = None) -> PoolState:
    return replace(
        PoolState.uninitialized(TOKEN, LP_TOKEN, ADMIN),
        ada_reserve=ada,
        token_reserve=token,
        lp_total_supply=math.isqrt(ada * token) if lp is None else lp,
        fee_bps=30,
    )


@st.composite
def fee_pairs(draw):
    fee = draw(st.integers(min_value=0, max_value=1_000))
    protocol = draw(st.integers(min_value=0, max_value=fee))
    return fee, protocol


@settings(max_examples=300, deadline=None)
@given(reserve_in=reserves, reserve_out=reserves, amount_in=amounts, fees=fee_pairs())
def test_swap_never_decreases_k(reserve_in, reserve_out, amount_in, fees) -> None:
    fee_bps, protocol_fee_bps = fees
    res = swap_exact_in(
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        amount_in=amount_in,
        fee_bps=fee_bps,
        protocol_fee_bps=protocol_fee_bps,
    )
    assert 0 <= res.amount_out < reserve_out
    assert res.k_after >= res.k_before
    assert res.protocol_fee + res.lp_fee == res.fee_total
    assert res.new_reserve_in == reserve_in + amount_in


@settings(max_examples=300, deadline=None)
@given(ada=reserves, token=reserves, ada_in=amounts, token_in=amounts)
def test_deposit_then_withdraw_never_profits(ada, token, ada_in, token_in) -> None:
    pool = _pool(ada, token)
    s = pool.lp_total_supply
    assume(min(ada_in * s // ada, token_in * s // token) > 0)
    added = add_liquidity(pool, ada_in, token_in, 0)

    after = replace(
        pool,
        ada_reserve=added.new_ada_reserve,
        token_reserve=added.new_token_reserve,
        lp_total_supply=added.new_lp_supply,
    )
    removed = remove_liquidity(after, added.lp_minted, 0, 0, profile=ZERO_PROFILE)
    assert removed.ada_out <= ada_in
    assert removed.token_out <= token_in


@settings(max_examples=300, deadline=None)
@given(
    ada=st.integers(min_value=1, max_value=10**12),
    ratio=st.integers(min_value=1, max_value=1_000),
    ada_in=st.integers(min_value=1, max_value=10**12),
)
def test_proportional_round_trip_loss_is_bounded(ada, ratio, ada_in) -> None:
    token, token_in = ada * ratio, ada_in * ratio
    pool = _pool(ada, token)
    s = pool.lp_total_supply
    assume(ada_in * s >= ada)
    added = add_liquidity(pool, ada_in, token_in, 0)

    after = replace(
        pool,
        ada_reserve=added.new_ada_reserve,
        token_reserve=added.new_token_reserve,
        lp_total_supply=added.new_lp_supply,
    )
    removed = remove_liquidity(after, added.lp_minted, 0, 0, profile=ZERO_PROFILE)
    # rounding loss is below one LP unit's worth of each reserve, plus one
    assert 0 <= ada_in - removed.ada_out <= ada // s + 1
    assert 0 <= token_in - removed.token_out <= token // s + 1


@settings(max_examples=200, deadline=None)
@given(amount_in=st.integers(min_value=-10, max_value=10**13), a_to_t=st.booleans())
def test_validated_swaps_are_deterministic_and_safe(amount_in, a_to_t) -> None:
    pool = _pool(100_000_000_000, 2_301_952_000_000)
    direction = SwapDirection.ADA_TO_TOKEN if a_to_t else SwapDirection.TOKEN_TO_ADA
    action = Swap(amount_in=amount_in, direction=direction, min_out=0, deadline=10)
    ctx = TransitionContext(current_time=5, min_reserve_profile=ZERO_PROFILE)
    before = pool_state_digest(pool)

    first = validate_transition(pool, action, ctx)
    second = validate_transition(pool, action, ctx)

    assert pool_state_digest(pool) == before
    assert first.accepted == second.accepted
    if first.accepted:
        assert pool_state_digest(first.state) == pool_state_digest(second.state)
        assert first.state.get_constant_product() >= pool.get_constant_product()
        assert first.state.ada_reserve > 0 and first.state.token_reserve > 0
    else:
        assert first.state is None
        assert first.error == second.error


@given(
    assets=st.integers(min_value=0, max_value=64),
    size=st.integers(min_value=0, max_value=16_384),
)
def test_min_reserve_grows_with_assets_and_size(assets, size) -> None:
    required = calculate_min_reserve(assets, size, CARDANO_POOL_PROFILE)
    assert required >= CARDANO_POOL_PROFILE.base
    assert calculate_min_reserve(assets + 1, size, CARDANO_POOL_PROFILE) > required
    assert calculate_min_reserve(assets, size + 1, CARDANO_POOL_PROFILE) > required
