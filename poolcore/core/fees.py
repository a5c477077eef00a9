"""
Fee splitting and per-share fee accounting (deterministic, integer-only).

Two patterns are combined here:

- **Fee split**: the swap fee is divided into protocol / creator / LP parts with
  floor rounding on the carved-out parts, so the LP part absorbs the remainder.
- **Accumulator-per-share with dust-carry**: LP fees raise
  `acc_fee_per_share += fee * 1e12 / total_shares`; the part that the floor
  cannot represent is carried into the next accrual so value is never
  stranded or double-counted.

Claim bookkeeping keeps `fee_debt` in token units. Whenever a position's share
count changes it is settled first and its debt reset with ceiling division,
and a claim advances the debt by exactly the amount paid. Together these make
the sum of all claims bounded by the fees accrued, whatever the claim order.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from ..config import ACC_SCALE, BPS_DENOM
from ..state.pool_state import FeeConfig
from ..state.positions import Position


def _ceil_div(numerator: int, denominator: int) -> int:
    if denominator <= 0:
        raise ValueError("denominator must be positive")
    if numerator < 0:
        raise ValueError("numerator must be non-negative")
    return (numerator + denominator - 1) // denominator


@dataclass(frozen=True)
class FeeSplit:
    fee_total: int
    lp_fee: int
    protocol_fee: int
    creator_fee: int


@dataclass(frozen=True)
class Accrual:
    acc_delta: int
    distributed: int
    dust: int


@dataclass(frozen=True)
class ClaimResult:
    fees_a: int
    fees_b: int
    position: Position


def split_fee(fee_total: int, fee_config: FeeConfig) -> FeeSplit:
    """Split `fee_total` into (lp, protocol, creator) with floor rounding on the carve-outs."""
    if not isinstance(fee_total, int) or isinstance(fee_total, bool) or fee_total < 0:
        raise ValueError(f"fee_total must be a non-negative int, got {fee_total}")
    protocol = (fee_total * fee_config.protocol_fee_share_bps) // BPS_DENOM
    creator = (fee_total * fee_config.creator_fee_share_bps) // BPS_DENOM
    lp = fee_total - protocol - creator
    if lp < 0:
        raise AssertionError("fee split over-distributed")
    return FeeSplit(fee_total=fee_total, lp_fee=lp, protocol_fee=protocol, creator_fee=creator)


def accrue(lp_fee: int, dust: int, total_shares: int) -> Accrual:
    """
    Fold `lp_fee` (plus carried dust) into the per-share accumulator.

    `distributed` is rounded up so the carried dust never exceeds the true
    remainder; the sum of claims stays bounded by the fees paid in.
    """
    if lp_fee < 0 or dust < 0:
        raise ValueError("lp_fee and dust must be non-negative")
    if total_shares <= 0:
        raise ValueError("total_shares must be positive")
    total = lp_fee + dust
    acc_delta = (total * ACC_SCALE) // total_shares
    distributed = _ceil_div(acc_delta * total_shares, ACC_SCALE)
    if distributed > total:
        raise AssertionError("accrual over-distributed")
    return Accrual(acc_delta=acc_delta, distributed=distributed, dust=total - distributed)


def accrued_fee(shares: int, acc_fee_per_share: int) -> int:
    return (shares * acc_fee_per_share) // ACC_SCALE


def reset_debt(shares: int, acc_fee_per_share: int) -> int:
    """Debt for a freshly sized position: `ceil(shares * acc / 1e12)`."""
    return _ceil_div(shares * acc_fee_per_share, ACC_SCALE)


def pending_fee(shares: int, acc_fee_per_share: int, fee_debt: int) -> int:
    """`max(0, shares * acc / 1e12 - fee_debt)`."""
    return max(0, accrued_fee(shares, acc_fee_per_share) - fee_debt)


def pending_fees(position: Position, acc_a: int, acc_b: int) -> tuple[int, int]:
    return (
        pending_fee(position.shares, acc_a, position.fee_debt_a),
        pending_fee(position.shares, acc_b, position.fee_debt_b),
    )


def settle_claim(position: Position, acc_a: int, acc_b: int) -> ClaimResult:
    """
    Pay out pending fees and advance the debt by exactly the amount paid.

    A second claim against the same accumulators yields zero.
    """
    fees_a, fees_b = pending_fees(position, acc_a, acc_b)
    settled = replace(
        position,
        fee_debt_a=position.fee_debt_a + fees_a,
        fee_debt_b=position.fee_debt_b + fees_b,
    )
    return ClaimResult(fees_a=fees_a, fees_b=fees_b, position=settled)


def resize_position(position: Position, new_shares: int, acc_a: int, acc_b: int) -> Position:
    """
    Change the share count of a settled position (no pending fees).

    The debt is reset with ceiling division on `new_shares`. Settle with
    `settle_claim()` first; resizing with fees still pending would drop the
    rounding remainder of those fees.
    """
    if pending_fees(position, acc_a, acc_b) != (0, 0):
        raise ValueError("position has unclaimed fees; settle before resizing")
    return replace(
        position,
        shares=new_shares,
        fee_debt_a=reset_debt(new_shares, acc_a),
        fee_debt_b=reset_debt(new_shares, acc_b),
    )
