"""
poolcore: liquidity-pool settlement engine.

Constant-product and StableSwap pricing, pool reserve and share accounting,
and a per-owner fee-accrual ledger.
"""

from .config import DEFAULT_CONFIG, EngineConfig, load_config
from .core import (
    AdminCap,
    Pool,
    SwapQuote,
    SwapResult,
    create_pool,
)
from .errors import PoolError, PoolFaultError, PoolInputError
from .state import CurveKind, CurveParams, FeeConfig, PoolState, PoolStatus, Position, SwapDirection

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_CONFIG",
    "EngineConfig",
    "load_config",
    "AdminCap",
    "Pool",
    "SwapQuote",
    "SwapResult",
    "create_pool",
    "PoolError",
    "PoolFaultError",
    "PoolInputError",
    "CurveKind",
    "CurveParams",
    "FeeConfig",
    "PoolState",
    "PoolStatus",
    "Position",
    "SwapDirection",
]
