"""
Pool transition engine
"""

from .config import DEFAULT_CONFIG, EngineConfig, load_config
from .engine import validate_transition, validate_transition_or_raise
from .errors import (
    ErrorKind,
    InternalInvariantBroken,
    PoolError,
    TransitionError,
    TransitionRejected,
)
from .liquidity import add_liquidity, remove_liquidity
from .min_reserve import calculate_min_reserve, check_min_reserve
from .quote import quote_add_liquidity, quote_remove_liquidity, quote_swap
from .swap import swap
from .types import (
    CARDANO_POOL_PROFILE,
    ZERO_PROFILE,
    Action,
    ActionKind,
    AddLiquidity,
    CreatePool,
    MinReserveProfile,
    Pause,
    RemoveLiquidity,
    Swap,
    SwapDirection,
    TransitionContext,
    TransitionOutputs,
    TransitionResult,
    Unpause,
)

__all__ = [
    "DEFAULT_CONFIG",
    "EngineConfig",
    "load_config",
    "validate_transition",
    "validate_transition_or_raise",
    "ErrorKind",
    "InternalInvariantBroken",
    "PoolError",
    "TransitionError",
    "TransitionRejected",
    "add_liquidity",
    "remove_liquidity",
    "calculate_min_reserve",
    "check_min_reserve",
    "quote_add_liquidity",
    "quote_remove_liquidity",
    "quote_swap",
    "swap",
    "CARDANO_POOL_PROFILE",
    "ZERO_PROFILE",
    "Action",
    "ActionKind",
    "AddLiquidity",
    "CreatePool",
    "MinReserveProfile",
    "Pause",
    "RemoveLiquidity",
    "Swap",
    "SwapDirection",
    "TransitionContext",
    "TransitionOutputs",
    "TransitionResult",
    "Unpause",
]
