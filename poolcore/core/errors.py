"""Error vocabulary for the pool transition engine.

Business-rule failures are raised inside the engines as `PoolError`
subclasses and converted by ``validate_transition()`` into a rejected
``TransitionResult``. ``InternalInvariantBroken`` is different: it signals a
pre-state that should have been impossible and is never converted.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique


@unique
class ErrorKind(Enum):
    INVALID_AMOUNT = "InvalidAmount"
    SLIPPAGE_EXCEEDED = "SlippageExceeded"
    DEADLINE_EXCEEDED = "DeadlineExceeded"
    POOL_PAUSED = "PoolPaused"
    IDENTITY_MISMATCH = "IdentityMismatch"
    CONFIG_IMMUTABLE_VIOLATION = "ConfigImmutableViolation"
    INVARIANT_VIOLATION = "InvariantViolation"
    POOL_UNDERFUNDED = "PoolUnderfunded"
    UNAUTHORIZED = "Unauthorized"
    INVALID_TRANSITION = "InvalidTransition"
    INTERNAL_INVARIANT_BROKEN = "InternalInvariantBroken"


@dataclass(frozen=True)
class TransitionError:
    """A rejected transition: the kind drives behavior, the message is for humans."""

    kind: ErrorKind
    message: str = ""

    def __str__(self) -> str:
        if self.message:
            return f"{self.kind.value}: {self.message}"
        return self.kind.value


class PoolError(ValueError):
    """Base class for expected business-rule rejections."""

    kind: ErrorKind = ErrorKind.INVARIANT_VIOLATION

    def to_error(self) -> TransitionError:
        return TransitionError(kind=self.kind, message=str(self))


class InvalidAmount(PoolError):
    kind = ErrorKind.INVALID_AMOUNT


class SlippageExceeded(PoolError):
    kind = ErrorKind.SLIPPAGE_EXCEEDED


class DeadlineExceeded(PoolError):
    kind = ErrorKind.DEADLINE_EXCEEDED


class PoolPaused(PoolError):
    kind = ErrorKind.POOL_PAUSED


class IdentityMismatch(PoolError):
    kind = ErrorKind.IDENTITY_MISMATCH


class ConfigImmutableViolation(PoolError):
    kind = ErrorKind.CONFIG_IMMUTABLE_VIOLATION


class InvariantViolation(PoolError):
    kind = ErrorKind.INVARIANT_VIOLATION


class PoolUnderfunded(PoolError):
    kind = ErrorKind.POOL_UNDERFUNDED


class Unauthorized(PoolError):
    kind = ErrorKind.UNAUTHORIZED


class InvalidTransition(PoolError):
    kind = ErrorKind.INVALID_TRANSITION


class InternalInvariantBroken(AssertionError):
    """Raised when a pre-state already violates one or more invariants."""

    kind = ErrorKind.INTERNAL_INVARIANT_BROKEN

    def __init__(self, violations: list[str]) -> None:
        self.violations = violations
        super().__init__(f"pre-state invariant violations: {', '.join(violations)}")


class TransitionRejected(Exception):
    """Raised by ``validate_transition_or_raise()`` for a rejected transition."""

    def __init__(self, error: TransitionError) -> None:
        self.error = error
        super().__init__(str(error))

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind
