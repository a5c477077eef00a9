"""Exception types for the pool settlement engine.

Every error aborts the triggering operation with zero state change; nothing
is retried inside the engine. The hierarchy separates:

- ``PoolInputError``: caller-input mistakes (retry with different parameters).
  These subclass ``ValueError`` so callers that only know the kernel contract
  ("raises ValueError on invalid inputs") keep working.
- ``PoolFaultError``: systemic faults (math-kernel defect or attack attempt),
  the caller should abort and alert.
"""

from __future__ import annotations


class PoolError(Exception):
    """Root of all engine errors."""

    retryable: bool = False


class PoolInputError(PoolError, ValueError):
    """Caller supplied parameters the engine refused."""

    retryable = True


class PoolFaultError(PoolError):
    """Post-operation state failed a safety check."""

    retryable = False


class InvalidAmount(PoolInputError):
    """Zero, negative, or out-of-range amount."""


class SlippageExceeded(PoolInputError):
    """Realized output (or shares minted) below the caller's minimum."""


class ExcessiveSlippage(PoolInputError):
    """Realized price worse than the caller's price ceiling."""


class DeadlineExceeded(PoolInputError):
    """Current time is past the caller's deadline."""


class InsufficientLiquidity(PoolInputError):
    """Request exceeds the shares or reserves that exist."""


class WrongPool(PoolInputError):
    """A position was presented against a pool it does not belong to."""


class InvalidAmplification(PoolInputError):
    """Amplification outside its bounds, or a ramp that violates safety bounds."""


class InvalidFeeConfig(PoolInputError):
    """Fee rates outside their bounds."""


class PoolPaused(PoolInputError):
    """Operation blocked while the pool is paused."""


class Unauthorized(PoolInputError):
    """Missing or mismatched capability."""


class PositionExists(PoolInputError):
    """The recipient already holds a position in this pool."""


class InvariantViolation(PoolFaultError):
    """Post-state violates one or more invariants."""

    def __init__(self, violations: list[str]) -> None:
        self.violations = violations
        super().__init__(f"invariant violations: {', '.join(violations)}")


class ConvergenceFailure(PoolFaultError):
    """Newton iteration hit its cap without converging."""
