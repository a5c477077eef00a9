"""
Read-only derived views for analytics and rendering collaborators.

Nothing here is authoritative state: every value is recomputed from a
`PoolState` snapshot and a `Position` on demand.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..config import BPS_DENOM, RATIO_SCALE
from ..state.pool_state import CurveKind, PoolState, PoolStatus
from ..state.positions import Position
from .amplification import effective_amplification, is_ramping
from .fees import pending_fees


@dataclass(frozen=True)
class PoolView:
    pool_id: str
    asset_a: str
    asset_b: str
    reserve_a: int
    reserve_b: int
    total_shares: int
    fee_bps: int
    protocol_fee_share_bps: int
    creator_fee_share_bps: int
    curve_kind: CurveKind
    status: PoolStatus
    # reserve_b per reserve_a, scaled by RATIO_SCALE
    spot_ratio: int
    acc_fee_per_share_a: int
    acc_fee_per_share_b: int
    protocol_fees_a: int
    protocol_fees_b: int
    creator_fees_a: int
    creator_fees_b: int
    amplification: Optional[int] = None
    ramp_target: Optional[int] = None
    ramp_start_time: Optional[int] = None
    ramp_duration: Optional[int] = None
    ramping: bool = False


@dataclass(frozen=True)
class PositionView:
    position_id: str
    pool_id: str
    owner: str
    shares: int
    # share of total_shares in bps (floor)
    share_bps: int
    value_a: int
    value_b: int
    pending_fee_a: int
    pending_fee_b: int
    entry_reserve_ratio: int
    current_reserve_ratio: int
    # signed; positive = loss versus holding, negative = outperformed
    impermanent_loss_bps: int


def reserve_ratio(reserve_a: int, reserve_b: int) -> int:
    """`reserve_b / reserve_a` scaled by RATIO_SCALE (floor)."""
    if reserve_a <= 0:
        return 0
    return reserve_b * RATIO_SCALE // reserve_a


def position_value(position: Position, pool: PoolState) -> tuple[int, int]:
    """Underlying amounts the position would redeem right now (floor)."""
    if pool.total_shares == 0:
        return 0, 0
    return (
        position.shares * pool.reserve_a // pool.total_shares,
        position.shares * pool.reserve_b // pool.total_shares,
    )


def impermanent_loss_bps(position: Position, pool: PoolState) -> int:
    """
    Hold value vs. position value at the current reserve ratio, in bps.

    Both sides are priced in units of asset_b. Accrued (pending) fees are added
    to the position value as an offset, so a result below zero means fees more
    than covered the divergence loss.
    """
    if pool.reserve_a <= 0 or pool.reserve_b <= 0:
        return 0
    value_a, value_b = position_value(position, pool)
    fee_a, fee_b = pending_fees(position, pool.acc_fee_per_share_a, pool.acc_fee_per_share_b)

    # Everything multiplied through by reserve_a to stay in integers.
    hold = position.original_deposit_a * pool.reserve_b + position.original_deposit_b * pool.reserve_a
    if hold == 0:
        return 0
    current = (value_a + fee_a) * pool.reserve_b + (value_b + fee_b) * pool.reserve_a
    diff = hold - current
    if diff >= 0:
        return diff * BPS_DENOM // hold
    return -((-diff) * BPS_DENOM // hold)


def build_pool_view(pool: PoolState, *, now: int) -> PoolView:
    stable = pool.curve.kind is CurveKind.STABLE
    return PoolView(
        pool_id=pool.pool_id,
        asset_a=pool.asset_a,
        asset_b=pool.asset_b,
        reserve_a=pool.reserve_a,
        reserve_b=pool.reserve_b,
        total_shares=pool.total_shares,
        fee_bps=pool.fee_config.fee_bps,
        protocol_fee_share_bps=pool.fee_config.protocol_fee_share_bps,
        creator_fee_share_bps=pool.fee_config.creator_fee_share_bps,
        curve_kind=pool.curve.kind,
        status=pool.status,
        spot_ratio=reserve_ratio(pool.reserve_a, pool.reserve_b),
        acc_fee_per_share_a=pool.acc_fee_per_share_a,
        acc_fee_per_share_b=pool.acc_fee_per_share_b,
        protocol_fees_a=pool.protocol_fees_a,
        protocol_fees_b=pool.protocol_fees_b,
        creator_fees_a=pool.creator_fees_a,
        creator_fees_b=pool.creator_fees_b,
        amplification=effective_amplification(pool.curve, now) if stable else None,
        ramp_target=pool.curve.ramp_target if stable else None,
        ramp_start_time=pool.curve.ramp_start_time if stable else None,
        ramp_duration=pool.curve.ramp_duration if stable else None,
        ramping=is_ramping(pool.curve, now),
    )


def build_position_view(position: Position, pool: PoolState) -> PositionView:
    value_a, value_b = position_value(position, pool)
    fee_a, fee_b = pending_fees(position, pool.acc_fee_per_share_a, pool.acc_fee_per_share_b)
    share_bps = position.shares * BPS_DENOM // pool.total_shares if pool.total_shares else 0
    return PositionView(
        position_id=position.position_id,
        pool_id=position.pool_id,
        owner=position.owner,
        shares=position.shares,
        share_bps=share_bps,
        value_a=value_a,
        value_b=value_b,
        pending_fee_a=fee_a,
        pending_fee_b=fee_b,
        entry_reserve_ratio=position.entry_reserve_ratio,
        current_reserve_ratio=reserve_ratio(pool.reserve_a, pool.reserve_b),
        impermanent_loss_bps=impermanent_loss_bps(position, pool),
    )
