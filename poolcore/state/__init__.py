"""
State records for the settlement engine
"""

from .pool_state import (
    CurveKind,
    CurveParams,
    FeeConfig,
    PoolState,
    PoolStatus,
    SwapDirection,
    compute_pool_id,
)
from .positions import SINK_OWNER, Position, PositionLedger, compute_position_id

__all__ = [
    "CurveKind",
    "CurveParams",
    "FeeConfig",
    "PoolState",
    "PoolStatus",
    "SwapDirection",
    "compute_pool_id",
    "SINK_OWNER",
    "Position",
    "PositionLedger",
    "compute_position_id",
]
