# [TESTER] v1

from __future__ import annotations

import math
from dataclasses import replace

import pytest

from poolcore.core.errors import InvalidAmount, PoolUnderfunded, SlippageExceeded
from poolcore.core.liquidity import (
    add_liquidity,
    create_pool,
    execute_add_liquidity,
    execute_remove_liquidity,
    remove_liquidity,
)
from poolcore.core.types import (
    AddLiquidity,
    CreatePool,
    MinReserveProfile,
    RemoveLiquidity,
    TransitionContext,
    ZERO_PROFILE,
)
from poolcore.state import AssetId, PoolState, PoolStatus

TOKEN = AssetId("11" * 28, "746f6b656e")
LP_TOKEN = AssetId("22" * 28, "6c70")
ADMIN = "ab" * 28

FLAT_2_ADA = MinReserveProfile(base=2_000_000, per_asset_cost=0, per_byte_cost=0, buffer_bps=0)


def _empty() -> PoolState:
    return PoolState.uninitialized(TOKEN, LP_TOKEN, ADMIN)


def _pool(ada: int, token: int, lp: int | None = None) -> PoolState:
    return replace(
        _empty(),
        ada_reserve=ada,
        token_reserve=token,
        lp_total_supply=math.isqrt(ada * token) if lp is None else lp,
        fee_bps=30,
    )


def _ctx(profile: MinReserveProfile = ZERO_PROFILE, now: int = 100) -> TransitionContext:
    return TransitionContext(current_time=now, authorized=True, min_reserve_profile=profile)


class TestAddLiquidity:
    def test_initial_deposit_mints_isqrt(self):
        res = add_liquidity(_empty(), 1_000_000_000, 2_301_952_000_000, 0)
        assert res.lp_minted == math.isqrt(1_000_000_000 * 2_301_952_000_000)
        assert res.new_lp_supply == res.lp_minted
        assert (res.new_ada_reserve, res.new_token_reserve) == (1_000_000_000, 2_301_952_000_000)

    def test_proportional_deposit(self):
        pool = _pool(1_000_000, 2_000_000)
        res = add_liquidity(pool, 1_000, 2_000, 0)
        assert res.lp_minted == 1_414
        assert res.new_lp_supply == 1_414_213 + 1_414

    def test_unbalanced_deposit_mints_against_weaker_side(self):
        pool = _pool(1_000_000, 2_000_000)
        res = add_liquidity(pool, 1_000, 1_000, 0)
        # token side binds: 1000 * 1414213 // 2000000 = 707
        assert res.lp_minted == 707
        assert res.new_ada_reserve == 1_001_000
        assert res.new_token_reserve == 2_001_000

    @pytest.mark.parametrize("ada, token", [(0, 1_000), (1_000, 0), (-1, 1_000)])
    def test_non_positive_amounts_rejected(self, ada, token):
        with pytest.raises(InvalidAmount):
            add_liquidity(_pool(1_000_000, 2_000_000), ada, token, 0)

    def test_dust_deposit_rejected(self):
        pool = _pool(1_000_000_000, 1_000_000_000, lp=1_000)
        with pytest.raises(InvalidAmount, match="too small"):
            add_liquidity(pool, 1, 1, 0)

    def test_slippage(self):
        with pytest.raises(SlippageExceeded):
            add_liquidity(_pool(1_000_000, 2_000_000), 1_000, 2_000, 1_415)


class TestRemoveLiquidity:
    def test_pro_rata_outputs(self):
        pool = _pool(4_000_000, 8_000_000, lp=4_000_000)
        res = remove_liquidity(pool, 1_000_000, 0, 0, profile=ZERO_PROFILE)
        assert (res.ada_out, res.token_out) == (1_000_000, 2_000_000)
        assert (res.new_ada_reserve, res.new_token_reserve, res.new_lp_supply) == (3_000_000, 6_000_000, 3_000_000)

    @pytest.mark.parametrize("lp_amount", [0, -5, 4_000_001])
    def test_invalid_lp_amount(self, lp_amount):
        with pytest.raises(InvalidAmount):
            remove_liquidity(_pool(4_000_000, 4_000_000, lp=4_000_000), lp_amount, 0, 0)

    def test_slippage_on_either_side(self):
        pool = _pool(4_000_000, 8_000_000, lp=4_000_000)
        with pytest.raises(SlippageExceeded, match="ada_out"):
            remove_liquidity(pool, 1_000_000, 1_000_001, 0)
        with pytest.raises(SlippageExceeded, match="token_out"):
            remove_liquidity(pool, 1_000_000, 0, 2_000_001)

    def test_partial_drain_below_floor_rejected(self):
        pool = _pool(4_000_000, 4_000_000, lp=4_000_000)
        remove_liquidity(pool, 1_000_000, 0, 0, profile=FLAT_2_ADA)
        with pytest.raises(PoolUnderfunded):
            remove_liquidity(pool, 2_500_000, 0, 0, profile=FLAT_2_ADA)

    def test_full_drain_is_exempt_from_floor(self):
        pool = _pool(4_000_000, 4_000_000, lp=4_000_000)
        res = remove_liquidity(pool, 4_000_000, 0, 0, profile=FLAT_2_ADA)
        assert (res.new_ada_reserve, res.new_token_reserve, res.new_lp_supply) == (0, 0, 0)


def test_round_trip_loses_at_most_one_unit() -> None:
    pool = _pool(1_000_000, 2_000_000)
    ctx = _ctx()

    after_add, added = execute_add_liquidity(pool, AddLiquidity(1_000, 2_000, 0, deadline=200), ctx)
    _, removed = execute_remove_liquidity(after_add, RemoveLiquidity(added.lp_minted, 0, 0, deadline=200), ctx)

    assert (removed.ada_out, removed.token_out) == (999, 1_999)
    assert 0 <= 1_000 - removed.ada_out <= 1
    assert 0 <= 2_000 - removed.token_out <= 1


def test_execute_remove_checks_final_record() -> None:
    pool = _pool(4_000_000, 4_000_000, lp=4_000_000)
    with pytest.raises(PoolUnderfunded):
        execute_remove_liquidity(pool, RemoveLiquidity(2_500_000, 0, 0, deadline=200), _ctx(FLAT_2_ADA))


class TestCreatePool:
    def test_seeds_reserves_fee_and_supply(self):
        new_pool, res = create_pool(_empty(), CreatePool(1_000_000_000, 2_301_952_000_000, 30), _ctx(now=7), 1_000)
        assert new_pool.fee_bps == 30
        assert new_pool.status == PoolStatus.ACTIVE
        assert new_pool.lp_total_supply == res.lp_minted == math.isqrt(1_000_000_000 * 2_301_952_000_000)
        assert new_pool.stats.created_at == 7

    def test_fee_above_cap_rejected(self):
        pool = PoolState.uninitialized(TOKEN, LP_TOKEN, ADMIN, protocol_fee_bps=10)
        with pytest.raises(InvalidAmount, match="fee_bps"):
            create_pool(pool, CreatePool(1_000_000, 1_000_000, 995), _ctx(), 1_000)

    def test_seed_must_cover_container_minimum(self):
        with pytest.raises(PoolUnderfunded):
            create_pool(_empty(), CreatePool(1_999_999, 5_000_000, 30), _ctx(FLAT_2_ADA), 1_000)


def test_remove_checks_ledger_profile_by_default() -> None:
    # 4 ADA is below the default container minimum once LP holders remain
    pool = _pool(4_000_000, 4_000_000, lp=4_000_000)
    with pytest.raises(PoolUnderfunded):
        remove_liquidity(pool, 1, 0, 0)
    assert remove_liquidity(pool, 4_000_000, 0, 0).new_lp_supply == 0


@pytest.mark.parametrize(
    "action",
    [
        AddLiquidity(0, 2_000, 0, deadline=50),
        AddLiquidity(1_000, 2_000, -1, deadline=50),
    ],
)
def test_add_amounts_checked_before_deadline(action) -> None:
    with pytest.raises(InvalidAmount):
        execute_add_liquidity(_pool(1_000_000, 2_000_000), action, _ctx(now=100))


@pytest.mark.parametrize("lp_amount", [0, 1_414_214])
def test_remove_amounts_checked_before_deadline(lp_amount) -> None:
    action = RemoveLiquidity(lp_amount, 0, 0, deadline=50)
    with pytest.raises(InvalidAmount):
        execute_remove_liquidity(_pool(1_000_000, 2_000_000), action, _ctx(now=100))
