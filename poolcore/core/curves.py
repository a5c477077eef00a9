"""
Curve dispatch for pool swap quoting.

The engine uses `PoolState.curve.kind` to select the pricing kernel
(constant-product vs stable). Both variants return the same `CurveQuote`
shape; `invariant_before` / `invariant_after` are `k = x*y` for
constant-product pools and `D` for stable pools.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..config import BPS_DENOM, EngineConfig
from ..kernels.constant_product import swap_constant_product
from ..kernels.stable_swap import compute_stable_d, swap_stable
from ..state.pool_state import CurveKind, PoolState, SwapDirection
from .amplification import effective_amplification


@dataclass(frozen=True)
class CurveQuote:
    amount_out: int
    fee_total: int
    net_in: int
    new_reserve_in: int
    new_reserve_out: int
    invariant_before: int
    invariant_after: int
    amplification: Optional[int] = None


def quote_exact_in(
    pool: PoolState,
    *,
    direction: SwapDirection,
    amount_in: int,
    now: int,
    config: EngineConfig,
) -> CurveQuote:
    reserve_in, reserve_out = pool.reserves_for(direction)
    fee_bps = pool.fee_config.fee_bps

    if pool.curve.kind is CurveKind.CONSTANT_PRODUCT:
        res = swap_constant_product(
            reserve_in=reserve_in,
            reserve_out=reserve_out,
            amount_in=amount_in,
            fee_bps=fee_bps,
        )
        return CurveQuote(
            amount_out=res.amount_out,
            fee_total=res.fee_total,
            net_in=res.net_in,
            new_reserve_in=res.new_reserve_in,
            new_reserve_out=res.new_reserve_out,
            invariant_before=res.k_before,
            invariant_after=res.k_after,
        )
    if pool.curve.kind is CurveKind.STABLE:
        amp = effective_amplification(pool.curve, now)
        res = swap_stable(
            reserve_in=reserve_in,
            reserve_out=reserve_out,
            amount_in=amount_in,
            fee_bps=fee_bps,
            amplification=amp,
            max_iterations=config.max_newton_iterations,
        )
        return CurveQuote(
            amount_out=res.amount_out,
            fee_total=res.fee_total,
            net_in=res.net_in,
            new_reserve_in=res.new_reserve_in,
            new_reserve_out=res.new_reserve_out,
            invariant_before=res.d_before,
            invariant_after=res.d_after,
            amplification=amp,
        )
    raise ValueError(f"unsupported curve kind: {pool.curve.kind!r}")


def pool_invariant(pool: PoolState, *, now: int, config: EngineConfig) -> int:
    """Current curve invariant of the pool (k or D)."""
    if pool.curve.kind is CurveKind.CONSTANT_PRODUCT:
        return pool.reserve_a * pool.reserve_b
    if pool.curve.kind is CurveKind.STABLE:
        amp = effective_amplification(pool.curve, now)
        return compute_stable_d((pool.reserve_a, pool.reserve_b), amp, config.max_newton_iterations)
    raise ValueError(f"unsupported curve kind: {pool.curve.kind!r}")


def invariant_tolerance(pool: PoolState, config: EngineConfig) -> int:
    """Allowed rounding regression of the invariant across a swap."""
    if pool.curve.kind is CurveKind.STABLE:
        return config.stable_invariant_tolerance
    return 0


def price_impact_bps(*, reserve_in: int, reserve_out: int, amount_in: int, amount_out: int) -> int:
    """
    Shortfall of the execution price against the pre-trade spot price, in bps.

        1 - (amount_out / amount_in) / (reserve_out / reserve_in)

    Includes the fee. Clamped at 0.
    """
    if amount_in <= 0 or reserve_out <= 0:
        return 0
    spot_scaled = reserve_out * amount_in
    shortfall = spot_scaled - amount_out * reserve_in
    if shortfall <= 0:
        return 0
    return shortfall * BPS_DENOM // spot_scaled
