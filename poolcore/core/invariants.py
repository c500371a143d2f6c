"""Invariant checkers for pool records and pool transitions.

Record invariants: each function returns True when the invariant holds, and
`check_all()` returns the list of violated invariant IDs (empty = all pass).
They are run on the pre-state (a violation there is a bug, not user input)
and again on every post-state.

Transition invariants: `check_transition()` compares a pre-state with the
engine-computed post-state and raises the first violated rule.
"""

from __future__ import annotations

from typing import Callable

from ..state.pools import PoolState
from .config import EngineConfig
from .errors import ConfigImmutableViolation, IdentityMismatch, InvariantViolation
from .types import Action, ActionKind, TransitionOutputs


def inv_identity_token_unique(s: PoolState, config: EngineConfig) -> bool:
    return s.identity_token_count == 1


def inv_amounts_non_negative(s: PoolState, config: EngineConfig) -> bool:
    return min(s.ada_reserve, s.token_reserve, s.lp_total_supply, s.fee_bps, s.protocol_fee_bps) >= 0


def inv_fee_within_cap(s: PoolState, config: EngineConfig) -> bool:
    return s.fee_bps + s.protocol_fee_bps <= config.max_fee_bps


def inv_uninitialized_empty(s: PoolState, config: EngineConfig) -> bool:
    if s.lp_total_supply != 0:
        return True
    return s.ada_reserve == 0 and s.token_reserve == 0


def inv_initialized_funded(s: PoolState, config: EngineConfig) -> bool:
    if s.lp_total_supply == 0:
        return True
    return s.ada_reserve > 0 and s.token_reserve > 0


def inv_stats_non_negative(s: PoolState, config: EngineConfig) -> bool:
    st = s.stats
    return min(
        st.swap_count,
        st.total_volume_ada,
        st.total_volume_token,
        st.total_lp_fees,
        st.total_protocol_fees,
        st.created_at,
        st.last_interaction_time,
    ) >= 0


# ---------------------------------------------------------------------------
# Registry + check_all
# ---------------------------------------------------------------------------

INVARIANT_REGISTRY: dict[str, Callable[[PoolState, EngineConfig], bool]] = {
    "inv_identity_token_unique": inv_identity_token_unique,
    "inv_amounts_non_negative": inv_amounts_non_negative,
    "inv_fee_within_cap": inv_fee_within_cap,
    "inv_uninitialized_empty": inv_uninitialized_empty,
    "inv_initialized_funded": inv_initialized_funded,
    "inv_stats_non_negative": inv_stats_non_negative,
}


def check_all(state: PoolState, config: EngineConfig) -> list[str]:
    """Return list of violated invariant IDs (empty = all pass)."""
    return [
        inv_id
        for inv_id, check_fn in INVARIANT_REGISTRY.items()
        if not check_fn(state, config)
    ]


# ---------------------------------------------------------------------------
# Transition post-conditions
# ---------------------------------------------------------------------------

_IMMUTABLE_FIELDS = ("protocol_fee_bps", "token_id", "lp_token_id", "admin")
_STATUS_ACTIONS = frozenset({ActionKind.CREATE_POOL, ActionKind.PAUSE, ActionKind.UNPAUSE})


def check_transition(
    pre: PoolState,
    post: PoolState,
    action: Action,
    outputs: TransitionOutputs,
    config: EngineConfig,
) -> None:
    """
    Verify a computed transition, in order:

    (a) identity token count is exactly 1 before and after
    (b) configuration fields are unchanged (CreatePool may set fee_bps on an empty pool)
    (c) Swap: new_k >= old_k
    (d) both reserves remain non-negative
    (e) lp_total_supply moved by exactly lp_minted - lp_burned

    followed by the record invariants on the post-state.

    Rule (a) is a backstop: `validate_transition` already refuses a pre-state
    whose identity count is not 1 (InternalInvariantBroken) and no handler
    touches the count, so IdentityMismatch only surfaces when this is called
    directly on a hand-built post-state.

    Raises:
        IdentityMismatch, ConfigImmutableViolation, InvariantViolation
    """
    kind = action.kind

    if pre.identity_token_count != 1 or post.identity_token_count != 1:
        raise IdentityMismatch(
            f"identity token count must be 1 (pre={pre.identity_token_count}, post={post.identity_token_count})"
        )

    for name in _IMMUTABLE_FIELDS:
        if getattr(pre, name) != getattr(post, name):
            raise ConfigImmutableViolation(f"{name} changed by {kind.value}")
    fee_settable = kind == ActionKind.CREATE_POOL and not pre.is_initialized
    if pre.fee_bps != post.fee_bps and not fee_settable:
        raise ConfigImmutableViolation(f"fee_bps changed by {kind.value}")
    if pre.status != post.status and kind not in _STATUS_ACTIONS:
        raise ConfigImmutableViolation(f"status changed by {kind.value}")

    if kind == ActionKind.SWAP:
        k_before = pre.get_constant_product()
        k_after = post.get_constant_product()
        if k_after < k_before:
            raise InvariantViolation(f"constant product decreased: {k_after} < {k_before}")

    if post.ada_reserve < 0 or post.token_reserve < 0:
        raise InvariantViolation(f"negative reserves: ({post.ada_reserve}, {post.token_reserve})")

    expected_delta = outputs.lp_minted - outputs.lp_burned
    actual_delta = post.lp_total_supply - pre.lp_total_supply
    if actual_delta != expected_delta:
        raise InvariantViolation(
            f"lp_total_supply delta {actual_delta} != minted - burned {expected_delta}"
        )

    violations = check_all(post, config)
    if violations:
        raise InvariantViolation(f"post-state invariant violations: {', '.join(violations)}")
