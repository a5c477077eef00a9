"""Guard functions shared by every pool operation.

Each guard raises the matching `poolcore.errors` type when its condition is
not satisfied and returns None otherwise. Guards never mutate anything.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..config import PRICE_SCALE, EngineConfig
from ..errors import (
    DeadlineExceeded,
    ExcessiveSlippage,
    InvalidAmount,
    InvariantViolation,
    PoolPaused,
    SlippageExceeded,
)
from ..state.pool_state import PoolState


logger = logging.getLogger(__name__)


def guard_amount(name: str, amount: int, config: EngineConfig, *, allow_zero: bool = False) -> None:
    if not isinstance(amount, int) or isinstance(amount, bool):
        raise InvalidAmount(f"{name} must be an int")
    if amount < 0 or (amount == 0 and not allow_zero):
        raise InvalidAmount(f"{name} must be positive: {amount}")
    if amount > config.max_amount:
        raise InvalidAmount(f"{name} overflows the amount domain: {amount} > {config.max_amount}")


def guard_deadline(now: int, deadline: Optional[int]) -> None:
    if deadline is None:
        return
    if now > deadline:
        raise DeadlineExceeded(f"deadline {deadline} passed (now={now})")


def guard_active(pool: PoolState) -> None:
    if pool.paused:
        raise PoolPaused(f"pool {pool.pool_id[:16]}... is paused")


def guard_min_out(name: str, actual: int, minimum: int) -> None:
    if actual < minimum:
        raise SlippageExceeded(f"{name} ({actual}) < minimum ({minimum})")


def guard_max_price(amount_in: int, amount_out: int, max_price: Optional[int]) -> None:
    """
    Reject when `amount_in / amount_out` exceeds `max_price`.

    `max_price` is scaled by PRICE_SCALE (1e9).
    """
    if max_price is None:
        return
    if max_price <= 0:
        raise InvalidAmount(f"max_price must be positive: {max_price}")
    if amount_out <= 0 or amount_in * PRICE_SCALE > max_price * amount_out:
        raise ExcessiveSlippage(f"execution price {amount_in}/{amount_out} exceeds max_price {max_price}/{PRICE_SCALE}")


def guard_price_impact(impact_bps: int, config: EngineConfig) -> None:
    if config.max_price_impact_bps and impact_bps > config.max_price_impact_bps:
        raise ExcessiveSlippage(f"price impact {impact_bps} bps exceeds {config.max_price_impact_bps} bps")


def guard_curve_invariant(*, before: int, after: int, tolerance: int) -> None:
    """Post-swap invariant may not regress by more than `tolerance` units."""
    if after + tolerance < before:
        logger.warning("curve invariant regressed: before=%d after=%d tolerance=%d", before, after, tolerance)
        raise InvariantViolation(["inv_curve_monotone"])
