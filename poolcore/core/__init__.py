"""
Pool engine: fee accounting, curve dispatch, guards and invariants
"""

from .fees import ClaimResult, FeeSplit, accrue, pending_fees, settle_claim, split_fee
from .invariants import INVARIANT_REGISTRY, TRANSITION_REGISTRY, check_all, check_transition
from .pool import Pool, create_pool
from .types import (
    AddLiquidityResult,
    AdminCap,
    ClaimFeesResult,
    CompoundResult,
    RemoveLiquidityResult,
    SwapQuote,
    SwapResult,
)
from .views import PoolView, PositionView

__all__ = [
    "ClaimResult",
    "FeeSplit",
    "accrue",
    "pending_fees",
    "settle_claim",
    "split_fee",
    "INVARIANT_REGISTRY",
    "TRANSITION_REGISTRY",
    "check_all",
    "check_transition",
    "Pool",
    "create_pool",
    "AddLiquidityResult",
    "AdminCap",
    "ClaimFeesResult",
    "CompoundResult",
    "RemoveLiquidityResult",
    "SwapQuote",
    "SwapResult",
    "PoolView",
    "PositionView",
]
