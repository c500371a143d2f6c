"""Dispatch-table transition validator.

``validate_transition(pre_state, action, context)`` is the single entry point. It:

1. Checks the pre-state record invariants (a violation is fatal).
2. Gates the action: paused pools, the lifecycle table, admin authorization.
3. Recomputes the post-state with the engine for the action's kind.
4. Enforces the container minimum balance on the post-state.
5. Checks the transition post-conditions.
6. Returns a ``TransitionResult`` (accepted, or rejected with a typed error).

The post-state is always derived here; nothing proposed by the caller is
compared against or trusted.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Tuple

from ..state.pools import PoolState, PoolStatus
from .config import DEFAULT_CONFIG, EngineConfig
from .errors import ErrorKind, InternalInvariantBroken, PoolError, TransitionError, TransitionRejected
from .guards import check_preconditions
from .invariants import check_all, check_transition
from .liquidity import create_pool, execute_add_liquidity, execute_remove_liquidity
from .min_reserve import require_min_reserve
from .swap import execute_swap
from .types import (
    Action,
    ActionKind,
    AddLiquidity,
    CreatePool,
    RemoveLiquidity,
    Swap,
    TransitionContext,
    TransitionOutputs,
    TransitionResult,
)

logger = logging.getLogger(__name__)

HandlerFn = Callable[[PoolState, Action, TransitionContext, EngineConfig], Tuple[PoolState, TransitionOutputs]]


def _handle_swap(
    pool: PoolState, action: Swap, context: TransitionContext, config: EngineConfig
) -> Tuple[PoolState, TransitionOutputs]:
    new_pool, res = execute_swap(pool, action, context)
    return new_pool, TransitionOutputs(
        amount_out=res.amount_out,
        lp_fee=res.lp_fee,
        protocol_fee=res.protocol_fee,
    )


def _handle_add_liquidity(
    pool: PoolState, action: AddLiquidity, context: TransitionContext, config: EngineConfig
) -> Tuple[PoolState, TransitionOutputs]:
    new_pool, res = execute_add_liquidity(pool, action, context)
    return new_pool, TransitionOutputs(lp_minted=res.lp_minted)


def _handle_remove_liquidity(
    pool: PoolState, action: RemoveLiquidity, context: TransitionContext, config: EngineConfig
) -> Tuple[PoolState, TransitionOutputs]:
    new_pool, res = execute_remove_liquidity(pool, action, context)
    return new_pool, TransitionOutputs(
        lp_burned=action.lp_amount,
        ada_out=res.ada_out,
        token_out=res.token_out,
    )


def _handle_create_pool(
    pool: PoolState, action: CreatePool, context: TransitionContext, config: EngineConfig
) -> Tuple[PoolState, TransitionOutputs]:
    new_pool, res = create_pool(pool, action, context, config.max_fee_bps)
    return new_pool, TransitionOutputs(lp_minted=res.lp_minted)


def _set_status(pool: PoolState, status: PoolStatus, context: TransitionContext) -> PoolState:
    return replace(
        pool,
        status=status,
        stats=replace(pool.stats, last_interaction_time=context.current_time),
    )


def _handle_pause(
    pool: PoolState, action: Action, context: TransitionContext, config: EngineConfig
) -> Tuple[PoolState, TransitionOutputs]:
    return _set_status(pool, PoolStatus.PAUSED, context), TransitionOutputs()


def _handle_unpause(
    pool: PoolState, action: Action, context: TransitionContext, config: EngineConfig
) -> Tuple[PoolState, TransitionOutputs]:
    return _set_status(pool, PoolStatus.ACTIVE, context), TransitionOutputs()


_DISPATCH: dict[ActionKind, HandlerFn] = {
    ActionKind.SWAP: _handle_swap,
    ActionKind.ADD_LIQUIDITY: _handle_add_liquidity,
    ActionKind.REMOVE_LIQUIDITY: _handle_remove_liquidity,
    ActionKind.CREATE_POOL: _handle_create_pool,
    ActionKind.PAUSE: _handle_pause,
    ActionKind.UNPAUSE: _handle_unpause,
}


def _reject(kind: ActionKind, err: TransitionError) -> TransitionResult:
    logger.info("transition rejected: action=%s error=%s", kind.value, err)
    return TransitionResult(accepted=False, error=err)


def validate_transition(
    pre_state: PoolState,
    action: Action,
    context: TransitionContext,
    config: EngineConfig = DEFAULT_CONFIG,
) -> TransitionResult:
    """Validate one action against a pool record and derive its successor.

    Returns ``TransitionResult`` with ``accepted=True`` and the canonical
    post-state on success, or ``accepted=False`` with a ``TransitionError``.
    The input record is never modified.

    Raises:
        InternalInvariantBroken: The pre-state already violates a record invariant.
    """
    violations = check_all(pre_state, config)
    if violations:
        logger.error("pre-state invariant violations: %s (%r)", ", ".join(violations), pre_state)
        raise InternalInvariantBroken(violations)

    kind = getattr(action, "kind", None)
    handler = _DISPATCH.get(kind) if isinstance(kind, ActionKind) else None
    if handler is None:
        err = TransitionError(ErrorKind.INVALID_TRANSITION, f"unknown action: {action!r}")
        logger.info("transition rejected: %s", err)
        return TransitionResult(accepted=False, error=err)

    try:
        check_preconditions(pre_state, kind, context)
        post_state, outputs = handler(pre_state, action, context, config)
        min_reserve = require_min_reserve(post_state, context.min_reserve_profile)
        outputs = replace(outputs, min_reserve=min_reserve)
        check_transition(pre_state, post_state, action, outputs, config)
    except PoolError as exc:
        return _reject(kind, exc.to_error())

    logger.debug(
        "transition accepted: action=%s reserves=(%d, %d) lp_total_supply=%d",
        kind.value,
        post_state.ada_reserve,
        post_state.token_reserve,
        post_state.lp_total_supply,
    )
    return TransitionResult(accepted=True, state=post_state, outputs=outputs)


def validate_transition_or_raise(
    pre_state: PoolState,
    action: Action,
    context: TransitionContext,
    config: EngineConfig = DEFAULT_CONFIG,
) -> TransitionResult:
    """Like ``validate_transition()`` but raises on rejection instead of returning a result.

    Raises:
        TransitionRejected: The transition was rejected; ``.kind`` carries the error kind.
        InternalInvariantBroken: The pre-state already violates a record invariant.
    """
    result = validate_transition(pre_state, action, context, config)
    if result.accepted:
        return result
    if result.error is None:
        raise AssertionError("rejected transition carries no error")
    raise TransitionRejected(result.error)
