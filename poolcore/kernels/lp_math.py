"""
Share (LP) math kernel.

A small set of pure functions with explicit rounding rules:
- initial mint: `floor(sqrt(amount_a * amount_b))` via `math.isqrt` (no float sqrt),
- proportional mint: multiply before divide, floor, minimum of both sides,
- burn: floor on both sides.

Every rounding direction favours the pool over the depositor.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..errors import InsufficientLiquidity, InvalidAmount


BPS_DENOM = 10_000


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


@dataclass(frozen=True)
class OptimalDepositResult:
    amount_a_used: int
    amount_b_used: int
    refund_a: int
    refund_b: int


@dataclass(frozen=True)
class BurnSharesResult:
    amount_a_out: int
    amount_b_out: int


def initial_shares(amount_a: int, amount_b: int) -> int:
    """Shares minted by the first deposit: `floor(sqrt(amount_a * amount_b))`."""
    _require_int("amount_a", amount_a)
    _require_int("amount_b", amount_b)
    if amount_a <= 0 or amount_b <= 0:
        raise InvalidAmount(f"initial amounts must be positive: ({amount_a}, {amount_b})")
    return math.isqrt(amount_a * amount_b)


def split_initial_shares(amount_a: int, amount_b: int, minimum_shares: int) -> tuple[int, int]:
    """
    Split the initial mint into (creator_shares, total_shares).

    `minimum_shares` of the total are carved out for the permanent sink.
    """
    _require_int("minimum_shares", minimum_shares)
    if minimum_shares <= 0:
        raise ValueError("minimum_shares must be positive")
    total = initial_shares(amount_a, amount_b)
    if total <= minimum_shares:
        raise InsufficientLiquidity(
            f"insufficient initial liquidity: sqrt(amount_a*amount_b)={total} <= MINIMUM_SHARES={minimum_shares}"
        )
    return total - minimum_shares, total


def ratio_deviation_bps(*, reserve_a: int, reserve_b: int, amount_a: int, amount_b: int) -> int:
    """
    Relative deviation of the deposit ratio from the pool ratio, in bps (floor).

    Compares `amount_a / amount_b` against `reserve_a / reserve_b` by cross
    multiplication: `|amount_a*reserve_b - amount_b*reserve_a| / (amount_b*reserve_a)`.
    """
    for name, v in (
        ("reserve_a", reserve_a),
        ("reserve_b", reserve_b),
        ("amount_a", amount_a),
        ("amount_b", amount_b),
    ):
        _require_int(name, v)
    if reserve_a <= 0 or reserve_b <= 0:
        raise InsufficientLiquidity("pool reserves must be positive")
    if amount_a <= 0 or amount_b <= 0:
        raise InvalidAmount(f"deposit amounts must be positive: ({amount_a}, {amount_b})")
    lhs = amount_a * reserve_b
    rhs = amount_b * reserve_a
    return abs(lhs - rhs) * BPS_DENOM // rhs


def optimal_deposit(*, reserve_a: int, reserve_b: int, amount_a: int, amount_b: int) -> OptimalDepositResult:
    """
    Compute ratio-preserving used amounts and refunds.

    One side is used in full; the other is scaled to the pool ratio (floor)
    and the remainder refunded.
    """
    for name, v in (
        ("reserve_a", reserve_a),
        ("reserve_b", reserve_b),
        ("amount_a", amount_a),
        ("amount_b", amount_b),
    ):
        _require_int(name, v)
    if reserve_a <= 0 or reserve_b <= 0:
        raise InsufficientLiquidity("cannot add liquidity to an empty pool")
    if amount_a <= 0 or amount_b <= 0:
        raise InvalidAmount(f"deposit amounts must be positive: ({amount_a}, {amount_b})")

    b_from_a = (amount_a * reserve_b) // reserve_a
    if b_from_a <= amount_b:
        used_a = amount_a
        used_b = b_from_a
    else:
        used_a = (amount_b * reserve_a) // reserve_b
        used_b = amount_b

    if used_a <= 0 or used_b <= 0:
        raise InvalidAmount("deposit too small for the pool ratio")
    if used_a > amount_a or used_b > amount_b:
        raise AssertionError("used amounts exceed deposited amounts")

    return OptimalDepositResult(
        amount_a_used=used_a,
        amount_b_used=used_b,
        refund_a=amount_a - used_a,
        refund_b=amount_b - used_b,
    )


def mint_shares(*, reserve_a: int, reserve_b: int, total_shares: int, amount_a: int, amount_b: int) -> int:
    """
    Shares minted for a proportional deposit (floor, multiply before divide).

        shares = min(amount_a * total_shares // reserve_a, amount_b * total_shares // reserve_b)
    """
    for name, v in (
        ("reserve_a", reserve_a),
        ("reserve_b", reserve_b),
        ("total_shares", total_shares),
        ("amount_a", amount_a),
        ("amount_b", amount_b),
    ):
        _require_int(name, v)
    if reserve_a <= 0 or reserve_b <= 0:
        raise InsufficientLiquidity("cannot mint into an empty pool")
    if total_shares <= 0:
        raise InsufficientLiquidity("cannot mint proportionally with zero total shares")
    if amount_a < 0 or amount_b < 0:
        raise InvalidAmount("deposit amounts must be non-negative")

    shares_a = (amount_a * total_shares) // reserve_a
    shares_b = (amount_b * total_shares) // reserve_b
    return min(shares_a, shares_b)


def burn_shares(*, shares: int, reserve_a: int, reserve_b: int, total_shares: int) -> BurnSharesResult:
    """Burn shares for underlying reserves (floor rounding)."""
    for name, v in (
        ("shares", shares),
        ("reserve_a", reserve_a),
        ("reserve_b", reserve_b),
        ("total_shares", total_shares),
    ):
        _require_int(name, v)
    if shares <= 0:
        raise InvalidAmount(f"shares must be positive: {shares}")
    if total_shares <= 0:
        raise InsufficientLiquidity("total_shares must be positive")
    if shares > total_shares:
        raise InsufficientLiquidity(f"cannot burn more than total_shares: {shares} > {total_shares}")
    if reserve_a < 0 or reserve_b < 0:
        raise InvalidAmount("reserves must be non-negative")

    return BurnSharesResult(
        amount_a_out=(shares * reserve_a) // total_shares,
        amount_b_out=(shares * reserve_b) // total_shares,
    )
