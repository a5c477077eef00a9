"""Data types returned by pool operations.

All types are frozen dataclasses (immutable).

Units/conventions:
- amounts are integer token units,
- `*_bps` values are basis points (1/10_000),
- `price_impact_bps` includes the swap fee.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from typing import Optional

from ..state.pool_state import SwapDirection
from ..state.positions import Position


@dataclass(frozen=True)
class AdminCap:
    """Capability token an admin/governance collaborator presents for gated mutations."""

    cap_id: str

    @classmethod
    def mint(cls) -> "AdminCap":
        return cls(cap_id="0x" + secrets.token_hex(16))


@dataclass(frozen=True)
class SwapQuote:
    direction: SwapDirection
    amount_in: int
    amount_out: int
    fee_total: int
    lp_fee: int
    protocol_fee: int
    creator_fee: int
    net_in: int
    new_reserve_in: int
    new_reserve_out: int
    invariant_before: int
    invariant_after: int
    price_impact_bps: int
    amplification: Optional[int] = None


@dataclass(frozen=True)
class SwapResult:
    direction: SwapDirection
    amount_in: int
    amount_out: int
    fee_total: int
    lp_fee: int
    protocol_fee: int
    creator_fee: int
    price_impact_bps: int
    reserve_a: int
    reserve_b: int


@dataclass(frozen=True)
class AddLiquidityResult:
    position: Position
    shares_minted: int
    amount_a_used: int
    amount_b_used: int
    refund_a: int
    refund_b: int
    # pending fees of an existing position, paid out before the deposit
    fees_a: int = 0
    fees_b: int = 0


@dataclass(frozen=True)
class RemoveLiquidityResult:
    amount_a: int
    amount_b: int
    fees_a: int
    fees_b: int
    # None when the removal destroyed the position
    position: Optional[Position]


@dataclass(frozen=True)
class ClaimFeesResult:
    fees_a: int
    fees_b: int
    position: Position


@dataclass(frozen=True)
class CompoundResult:
    fees_a: int
    fees_b: int
    shares_minted: int
    amount_a_used: int
    amount_b_used: int
    refund_a: int
    refund_b: int
    position: Position
