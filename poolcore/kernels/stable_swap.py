"""
StableSwap kernel (two-coin Curve invariant).

Invariant for n = 2 balances (x, y) and amplification A:

    A * n^n * (x + y) + D = A * n^n * D + D^(n+1) / (n^n * x * y)

with `Ann = A * 4`. Both `D` and the complementary balance `y` are solved by
Newton's method in integer arithmetic only; no floats anywhere, so every
implementation produces bit-identical results for the same inputs.

Iteration stops once successive iterates differ by at most 1, or fails with
`ConvergenceFailure` after `max_iterations` (default 255).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from ..errors import ConvergenceFailure, InsufficientLiquidity, InvalidAmount
from .constant_product import net_input_after_fee


logger = logging.getLogger(__name__)

N_COINS = 2
MAX_ITERATIONS = 255


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


@dataclass(frozen=True)
class StableSwapResult:
    amount_out: int
    fee_total: int
    net_in: int
    gross_in: int
    new_reserve_in: int
    new_reserve_out: int
    d_before: int
    d_after: int


def compute_stable_d(balances: Sequence[int], amplification: int, max_iterations: int = MAX_ITERATIONS) -> int:
    """
    Solve the invariant D for two balances.

        D_p   = D^3 / (4 * x * y)
        D_new = (Ann * S + 2 * D_p) * D / ((Ann - 1) * D + 3 * D_p)

    starting from D = S = x + y.
    """
    if len(balances) != N_COINS:
        raise ValueError(f"expected {N_COINS} balances, got {len(balances)}")
    x, y = balances
    _require_int("x", x)
    _require_int("y", y)
    _require_int("amplification", amplification)
    if x < 0 or y < 0:
        raise InvalidAmount(f"balances must be non-negative: ({x}, {y})")
    if amplification <= 0:
        raise ValueError("amplification must be positive")

    s = x + y
    if s == 0:
        return 0
    if x == 0 or y == 0:
        raise InvalidAmount("stable invariant is undefined with a zero balance")

    ann = amplification * N_COINS * N_COINS
    d = s
    for _ in range(max_iterations):
        d_p = d**3 // (4 * x * y)
        d_prev = d
        d = (ann * s + d_p * N_COINS) * d // ((ann - 1) * d + (N_COINS + 1) * d_p)
        if abs(d - d_prev) <= 1:
            return d

    logger.warning("compute_stable_d did not converge: balances=(%d, %d) A=%d", x, y, amplification)
    raise ConvergenceFailure(f"D did not converge within {max_iterations} iterations")


def compute_stable_y(known_balance: int, d: int, amplification: int, max_iterations: int = MAX_ITERATIONS) -> int:
    """
    Solve for the complementary balance y given x and D.

        c = D^3 / (4 * x * Ann)
        b = x + D / Ann
        y_new = (y^2 + c) / (2y + b - D)

    starting from y = D.
    """
    x = known_balance
    _require_int("known_balance", x)
    _require_int("d", d)
    _require_int("amplification", amplification)
    if x <= 0:
        raise InvalidAmount(f"known_balance must be positive: {x}")
    if d < 0:
        raise InvalidAmount(f"D must be non-negative: {d}")
    if amplification <= 0:
        raise ValueError("amplification must be positive")

    ann = amplification * N_COINS * N_COINS
    c = d**3 // (4 * x * ann)
    b = x + d // ann
    y = d
    for _ in range(max_iterations):
        denominator = 2 * y + b - d
        if denominator <= 0:
            break
        y_prev = y
        y = (y * y + c) // denominator
        if abs(y - y_prev) <= 1:
            return y

    logger.warning("compute_stable_y did not converge: x=%d D=%d A=%d", x, d, amplification)
    raise ConvergenceFailure(f"y did not converge within {max_iterations} iterations")


def swap_stable(
    *,
    reserve_in: int,
    reserve_out: int,
    amount_in: int,
    fee_bps: int,
    amplification: int,
    max_iterations: int = MAX_ITERATIONS,
) -> StableSwapResult:
    """
    Exact-in swap under the stable invariant.

    The fee is deducted from the gross input exactly as in the constant-product
    kernel. One unit of output is held back to absorb Newton rounding, so
    `d_after` stays within one unit of `d_before` or above it.
    """
    for name, v in (
        ("reserve_in", reserve_in),
        ("reserve_out", reserve_out),
        ("amount_in", amount_in),
        ("fee_bps", fee_bps),
    ):
        _require_int(name, v)
    if reserve_in <= 0 or reserve_out <= 0:
        raise InvalidAmount("cannot swap against an empty reserve")
    if amount_in <= 0:
        raise InvalidAmount(f"amount_in must be positive: {amount_in}")

    net_in = net_input_after_fee(amount_in, fee_bps)
    if net_in <= 0:
        raise InvalidAmount("net input is zero after fees (trade too small)")

    d_before = compute_stable_d((reserve_in, reserve_out), amplification, max_iterations)
    new_reserve_in = reserve_in + net_in
    y_after = compute_stable_y(new_reserve_in, d_before, amplification, max_iterations)

    amount_out = reserve_out - y_after - 1
    if amount_out <= 0:
        raise InvalidAmount("amount_out is zero (trade too small)")
    if amount_out >= reserve_out:
        raise InsufficientLiquidity("amount_out would drain reserve_out")

    new_reserve_out = reserve_out - amount_out
    d_after = compute_stable_d((new_reserve_in, new_reserve_out), amplification, max_iterations)

    return StableSwapResult(
        amount_out=amount_out,
        fee_total=amount_in - net_in,
        net_in=net_in,
        gross_in=amount_in,
        new_reserve_in=new_reserve_in,
        new_reserve_out=new_reserve_out,
        d_before=d_before,
        d_after=d_after,
    )
