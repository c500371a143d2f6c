# [TESTER] v1

from __future__ import annotations

import math
from dataclasses import replace

import pytest

from poolcore.core.errors import DeadlineExceeded, InvalidAmount, SlippageExceeded
from poolcore.core.swap import execute_swap, swap
from poolcore.core.types import Swap, SwapDirection, TransitionContext, ZERO_PROFILE
from poolcore.state import AssetId, PoolState, PoolStatus

TOKEN = AssetId("11" * 28, "746f6b656e")
LP_TOKEN = AssetId("22" * 28, "6c70")
ADMIN = "ab" * 28

ADA_RESERVE = 100_000_000_000
TOKEN_RESERVE = 2_301_952_000_000


def _pool(ada: int = ADA_RESERVE, token: int = TOKEN_RESERVE, fee_bps: int = 30, protocol_fee_bps: int = 0) -> PoolState:
    return PoolState(
        ada_reserve=ada,
        token_reserve=token,
        lp_total_supply=math.isqrt(ada * token),
        fee_bps=fee_bps,
        protocol_fee_bps=protocol_fee_bps,
        status=PoolStatus.ACTIVE,
        identity_token_count=1,
        token_id=TOKEN,
        lp_token_id=LP_TOKEN,
        admin=ADMIN,
    )


def _ctx(now: int = 100) -> TransitionContext:
    return TransitionContext(current_time=now, min_reserve_profile=ZERO_PROFILE)


def test_ada_to_token_scenario() -> None:
    res = swap(_pool(), 1_000_000, SwapDirection.ADA_TO_TOKEN, 30)
    assert 22_000_000 < res.amount_out < 25_000_000
    assert res.effective_in == 997_000
    assert res.amount_out == (TOKEN_RESERVE * 997_000) // (ADA_RESERVE + 997_000)
    assert res.new_reserve_in == ADA_RESERVE + 1_000_000
    assert res.new_reserve_out == TOKEN_RESERVE - res.amount_out


def test_token_to_ada_scenario() -> None:
    res = swap(_pool(), 23_019_520, SwapDirection.TOKEN_TO_ADA, 30)
    assert 900_000 < res.amount_out < 1_000_000
    assert res.new_reserve_in == TOKEN_RESERVE + 23_019_520
    assert res.new_reserve_out == ADA_RESERVE - res.amount_out


def test_swap_does_not_mutate_pool() -> None:
    pool = _pool()
    snapshot = replace(pool)
    swap(pool, 1_000_000, SwapDirection.ADA_TO_TOKEN, 30)
    assert pool == snapshot


def test_fixed_ratio_variant_is_fee_30_without_protocol_cut() -> None:
    # 997/1000 pricing
    res = swap(_pool(ada=1_000_000, token=1_000_000), 1_000, SwapDirection.ADA_TO_TOKEN, 30)
    assert res.amount_out == (1_000 * 997 * 1_000_000) // (1_000_000 * 1_000 + 1_000 * 997)


@pytest.mark.parametrize("amount_in", [0, -1])
def test_non_positive_input_rejected(amount_in: int) -> None:
    with pytest.raises(InvalidAmount):
        swap(_pool(), amount_in, SwapDirection.ADA_TO_TOKEN, 30)


def test_execute_swap_uses_consolidated_fee_and_updates_stats() -> None:
    pool = _pool(ada=10_000_000, token=10_000_000, fee_bps=25, protocol_fee_bps=5)
    action = Swap(amount_in=1_000_000, direction=SwapDirection.ADA_TO_TOKEN, min_out=0, deadline=200)

    new_pool, res = execute_swap(pool, action, _ctx(now=150))

    assert res.effective_in == 997_000
    assert res.protocol_fee == 500
    assert res.lp_fee == 2_500
    assert new_pool.ada_reserve == 11_000_000
    assert new_pool.token_reserve == 10_000_000 - res.amount_out
    assert new_pool.lp_total_supply == pool.lp_total_supply
    assert new_pool.stats.swap_count == 1
    assert new_pool.stats.total_volume_ada == 1_000_000
    assert new_pool.stats.total_volume_token == res.amount_out
    assert new_pool.stats.total_protocol_fees == 500
    assert new_pool.stats.last_interaction_time == 150


def test_execute_swap_slippage() -> None:
    action = Swap(amount_in=1_000_000, direction=SwapDirection.ADA_TO_TOKEN, min_out=25_000_000, deadline=200)
    with pytest.raises(SlippageExceeded):
        execute_swap(_pool(), action, _ctx())


def test_execute_swap_deadline_is_inclusive() -> None:
    action = Swap(amount_in=1_000_000, direction=SwapDirection.ADA_TO_TOKEN, min_out=0, deadline=100)
    execute_swap(_pool(), action, _ctx(now=100))
    with pytest.raises(DeadlineExceeded):
        execute_swap(_pool(), action, _ctx(now=101))


def test_execute_swap_rejects_zero_output() -> None:
    action = Swap(amount_in=1, direction=SwapDirection.ADA_TO_TOKEN, min_out=0, deadline=200)
    with pytest.raises(InvalidAmount, match="too small"):
        execute_swap(_pool(ada=1_000_000, token=1_000_000), action, _ctx())


def test_execute_swap_rejects_negative_min_out() -> None:
    action = Swap(amount_in=1_000, direction=SwapDirection.ADA_TO_TOKEN, min_out=-1, deadline=200)
    with pytest.raises(InvalidAmount):
        execute_swap(_pool(), action, _ctx())


@pytest.mark.parametrize("amount_in, min_out", [(0, 0), (1_000, -1)])
def test_execute_swap_amounts_checked_before_deadline(amount_in, min_out) -> None:
    action = Swap(amount_in=amount_in, direction=SwapDirection.ADA_TO_TOKEN, min_out=min_out, deadline=5)
    with pytest.raises(InvalidAmount):
        execute_swap(_pool(), action, _ctx(now=10))
