"""Pre-condition guards.

One function per gate, each raising the matching `PoolError` when the gate is
closed. Guards only look at the pre-state, the action and the context; they
never compute a post-state.
"""

from __future__ import annotations

from ..state.pools import LifecycleState, PoolState, PoolStatus, lifecycle_state
from .errors import DeadlineExceeded, InvalidTransition, PoolPaused, Unauthorized
from .types import ADMIN_ACTIONS, ActionKind, TransitionContext


# Lifecycle state -> actions it accepts.
TRANSITIONS: dict[LifecycleState, frozenset[ActionKind]] = {
    LifecycleState.UNINITIALIZED: frozenset({ActionKind.CREATE_POOL}),
    LifecycleState.ACTIVE: frozenset(
        {
            ActionKind.SWAP,
            ActionKind.ADD_LIQUIDITY,
            ActionKind.REMOVE_LIQUIDITY,
            ActionKind.PAUSE,
        }
    ),
    LifecycleState.PAUSED: frozenset({ActionKind.UNPAUSE}),
}


def require_not_paused(pool: PoolState, kind: ActionKind) -> None:
    # Keyed on the record flag so an empty paused record stays gated too.
    if pool.status == PoolStatus.PAUSED and kind != ActionKind.UNPAUSE:
        raise PoolPaused(f"pool is paused; {kind.value} rejected")


def require_transition(pool: PoolState, kind: ActionKind) -> None:
    state = lifecycle_state(pool)
    if kind not in TRANSITIONS[state]:
        raise InvalidTransition(f"{kind.value} is not valid from {state.value}")


def require_authorized(kind: ActionKind, context: TransitionContext) -> None:
    if kind in ADMIN_ACTIONS and not context.authorized:
        raise Unauthorized(f"{kind.value} requires the admin signer set")


def require_before_deadline(deadline: int, context: TransitionContext) -> None:
    if context.current_time > deadline:
        raise DeadlineExceeded(f"current_time ({context.current_time}) > deadline ({deadline})")


def check_preconditions(pool: PoolState, kind: ActionKind, context: TransitionContext) -> None:
    """
    Gate an action against the pre-state, in order:

    1. paused pools accept only Unpause (PoolPaused)
    2. the lifecycle table (InvalidTransition)
    3. admin actions need `context.authorized` (Unauthorized)
    """
    require_not_paused(pool, kind)
    require_transition(pool, kind)
    require_authorized(kind, context)
