"""Data types for the pool transition engine.

All types are frozen dataclasses (immutable).

Units/conventions:
- ADA amounts are lovelace, token amounts are the token's smallest unit.
- `*_bps` values are basis points (1/10_000).
- `current_time` and `deadline` share whatever clock the caller uses
  (slot number or POSIX milliseconds); the engine only compares them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from typing import ClassVar, Optional, Union

from ..state.pools import PoolState
from .errors import TransitionError


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


def _require_ints(obj: object, names: tuple[str, ...]) -> None:
    for name in names:
        _require_int(name, getattr(obj, name))


@unique
class ActionKind(Enum):
    """One member per pool action."""
    SWAP = "swap"
    ADD_LIQUIDITY = "add_liquidity"
    REMOVE_LIQUIDITY = "remove_liquidity"
    CREATE_POOL = "create_pool"
    PAUSE = "pause"
    UNPAUSE = "unpause"


@unique
class SwapDirection(Enum):
    ADA_TO_TOKEN = "ada_to_token"
    TOKEN_TO_ADA = "token_to_ada"


# -- Actions -------------------------------------------------------------------


@dataclass(frozen=True)
class Swap:
    kind: ClassVar[ActionKind] = ActionKind.SWAP

    amount_in: int
    direction: SwapDirection
    min_out: int
    deadline: int

    def __post_init__(self) -> None:
        _require_ints(self, ("amount_in", "min_out", "deadline"))
        if not isinstance(self.direction, SwapDirection):
            raise TypeError("direction must be a SwapDirection")


@dataclass(frozen=True)
class AddLiquidity:
    kind: ClassVar[ActionKind] = ActionKind.ADD_LIQUIDITY

    ada_amount: int
    token_amount: int
    min_lp_out: int
    deadline: int

    def __post_init__(self) -> None:
        _require_ints(self, ("ada_amount", "token_amount", "min_lp_out", "deadline"))


@dataclass(frozen=True)
class RemoveLiquidity:
    kind: ClassVar[ActionKind] = ActionKind.REMOVE_LIQUIDITY

    lp_amount: int
    min_ada_out: int
    min_token_out: int
    deadline: int

    def __post_init__(self) -> None:
        _require_ints(self, ("lp_amount", "min_ada_out", "min_token_out", "deadline"))


@dataclass(frozen=True)
class CreatePool:
    kind: ClassVar[ActionKind] = ActionKind.CREATE_POOL

    initial_ada: int
    initial_token: int
    fee_bps: int

    def __post_init__(self) -> None:
        _require_ints(self, ("initial_ada", "initial_token", "fee_bps"))


@dataclass(frozen=True)
class Pause:
    kind: ClassVar[ActionKind] = ActionKind.PAUSE


@dataclass(frozen=True)
class Unpause:
    kind: ClassVar[ActionKind] = ActionKind.UNPAUSE


Action = Union[Swap, AddLiquidity, RemoveLiquidity, CreatePool, Pause, Unpause]

ADMIN_ACTIONS: frozenset[ActionKind] = frozenset(
    {ActionKind.CREATE_POOL, ActionKind.PAUSE, ActionKind.UNPAUSE}
)


# -- Context ---------------------------------------------------------------------


@dataclass(frozen=True)
class MinReserveProfile:
    """Ledger parameters for the minimum base-asset balance of a container."""

    base: int
    per_asset_cost: int
    per_byte_cost: int
    buffer_bps: int

    def __post_init__(self) -> None:
        _require_ints(self, ("base", "per_asset_cost", "per_byte_cost", "buffer_bps"))
        for name in ("base", "per_asset_cost", "per_byte_cost", "buffer_bps"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative: {getattr(self, name)}")


# Script-locked pool container on a Cardano-style ledger: 3 ADA base,
# per-asset and per-datum-byte costs, 10% safety buffer.
CARDANO_POOL_PROFILE = MinReserveProfile(
    base=3_000_000,
    per_asset_cost=344_798,
    per_byte_cost=4_310,
    buffer_bps=1_000,
)

ZERO_PROFILE = MinReserveProfile(base=0, per_asset_cost=0, per_byte_cost=0, buffer_bps=0)


@dataclass(frozen=True)
class TransitionContext:
    """Read-only facts about the enclosing transaction."""

    current_time: int
    authorized: bool = False
    min_reserve_profile: MinReserveProfile = CARDANO_POOL_PROFILE

    def __post_init__(self) -> None:
        _require_int("current_time", self.current_time)
        if not isinstance(self.authorized, bool):
            raise TypeError("authorized must be a bool")


# -- Results ---------------------------------------------------------------------


@dataclass(frozen=True)
class TransitionOutputs:
    """Side outputs of an accepted transition. Unused fields stay 0."""

    amount_out: int = 0
    lp_minted: int = 0
    lp_burned: int = 0
    ada_out: int = 0
    token_out: int = 0
    lp_fee: int = 0
    protocol_fee: int = 0
    min_reserve: int = 0


@dataclass(frozen=True)
class TransitionResult:
    """Result of a single transition validation."""

    accepted: bool
    state: Optional[PoolState] = None
    outputs: Optional[TransitionOutputs] = None
    error: Optional[TransitionError] = None
