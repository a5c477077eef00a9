"""
Pool state for the settlement engine.

`PoolState` is an immutable snapshot; the engine builds a new snapshot with
`dataclasses.replace` for every operation and commits it only after all guards
and invariants pass.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from enum import Enum

from ..config import BPS_DENOM
from ..errors import InvalidAmplification, InvalidFeeConfig


AssetId = str
Amount = int


class PoolStatus(Enum):
    """Pool status enumeration."""
    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"


class CurveKind(Enum):
    CONSTANT_PRODUCT = "CONSTANT_PRODUCT"
    STABLE = "STABLE"


class SwapDirection(Enum):
    A_TO_B = "A_TO_B"
    B_TO_A = "B_TO_A"


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


@dataclass(frozen=True)
class FeeConfig:
    """
    Swap fee rate and its split.

    `fee_bps` is charged on the gross input. Of the fee, `protocol_fee_share_bps`
    and `creator_fee_share_bps` are carved out; the remainder goes to
    shareholders.
    """

    fee_bps: int
    protocol_fee_share_bps: int = 0
    creator_fee_share_bps: int = 0

    def __post_init__(self) -> None:
        for name, v in (
            ("fee_bps", self.fee_bps),
            ("protocol_fee_share_bps", self.protocol_fee_share_bps),
            ("creator_fee_share_bps", self.creator_fee_share_bps),
        ):
            _require_int(name, v)
            if not (0 <= v <= BPS_DENOM):
                raise InvalidFeeConfig(f"{name} must be in [0, {BPS_DENOM}]: {v}")
        if self.fee_bps == BPS_DENOM:
            raise InvalidFeeConfig("fee_bps of 100% leaves nothing to trade")
        total_share = self.protocol_fee_share_bps + self.creator_fee_share_bps
        if total_share > BPS_DENOM:
            raise InvalidFeeConfig(f"protocol + creator shares must be <= {BPS_DENOM}, got {total_share}")


@dataclass(frozen=True)
class CurveParams:
    """
    Tagged curve variant, chosen once at pool creation.

    Constant-product pools carry no parameters. Stable pools carry the
    amplification ramp: `amplification` is the value at `ramp_start_time`,
    moving linearly to `ramp_target` over `ramp_duration` seconds. With no
    ramp in progress, `ramp_target == amplification` and `ramp_duration == 0`.
    """

    kind: CurveKind
    amplification: int = 0
    ramp_target: int = 0
    ramp_start_time: int = 0
    ramp_duration: int = 0

    def __post_init__(self) -> None:
        for name in ("amplification", "ramp_target", "ramp_start_time", "ramp_duration"):
            _require_int(name, getattr(self, name))
        if self.kind is CurveKind.CONSTANT_PRODUCT:
            if self.amplification or self.ramp_target or self.ramp_start_time or self.ramp_duration:
                raise InvalidAmplification("constant-product pools must not specify curve parameters")
        elif self.kind is CurveKind.STABLE:
            if self.amplification <= 0 or self.ramp_target <= 0:
                raise InvalidAmplification(f"amplification must be positive: {self.amplification}")
            if self.ramp_start_time < 0 or self.ramp_duration < 0:
                raise InvalidAmplification("ramp times must be non-negative")
        else:
            raise ValueError(f"unsupported curve kind: {self.kind!r}")

    @classmethod
    def constant_product(cls) -> "CurveParams":
        return cls(kind=CurveKind.CONSTANT_PRODUCT)

    @classmethod
    def stable(cls, amplification: int, *, now: int = 0) -> "CurveParams":
        return cls(
            kind=CurveKind.STABLE,
            amplification=amplification,
            ramp_target=amplification,
            ramp_start_time=now,
            ramp_duration=0,
        )

    @property
    def is_stable(self) -> bool:
        return self.kind is CurveKind.STABLE


def compute_pool_id(asset_a: AssetId, asset_b: AssetId, fee_bps: int, curve_kind: CurveKind) -> str:
    """
    Deterministically compute a pool_id for (asset pair, fee tier, curve).

    This is the lookup key a registry collaborator indexes pools by. It is
    fixed at creation: a later fee change does not recompute it, so the
    `fee_bps` hashed here is the creation fee tier.
    """
    if not isinstance(asset_a, str) or not isinstance(asset_b, str) or not asset_a or not asset_b:
        raise ValueError("asset ids must be non-empty strings")
    if asset_a >= asset_b:
        raise ValueError(f"Assets must be in canonical order: {asset_a} < {asset_b}")
    _require_int("fee_bps", fee_bps)
    if not (0 <= fee_bps <= BPS_DENOM):
        raise InvalidFeeConfig(f"fee_bps must be in [0, {BPS_DENOM}]: {fee_bps}")

    pool_id_data = (
        b"PoolcorePool"
        + asset_a.encode("utf-8")
        + asset_b.encode("utf-8")
        + str(int(fee_bps)).encode("utf-8")
        + curve_kind.value.encode("utf-8")
    )
    return "0x" + hashlib.sha256(pool_id_data).hexdigest()


@dataclass(frozen=True)
class PoolState:
    """
    State of a two-asset pool.

    Attributes:
        pool_id: pool identifier (hex string)
        asset_a: first asset identifier (must be < asset_b lexicographically)
        asset_b: second asset identifier
        reserve_a: tradable reserve of asset_a (fees excluded)
        reserve_b: tradable reserve of asset_b (fees excluded)
        total_shares: sum of all outstanding shares, sink included
        fee_config: fee rate and LP / protocol / creator split
        curve: curve variant and its parameters
        acc_fee_per_share_a: lifetime LP fee per share of asset_a, scaled by 1e12
        acc_fee_per_share_b: lifetime LP fee per share of asset_b, scaled by 1e12
        fee_dust_a: LP fee of asset_a not yet representable in the accumulator
        fee_dust_b: LP fee of asset_b not yet representable in the accumulator
        fee_balance_a: LP fee tokens of asset_a held for shareholders
        fee_balance_b: LP fee tokens of asset_b held for shareholders
        protocol_fees_a / protocol_fees_b: uncollected protocol fees
        creator_fees_a / creator_fees_b: uncollected creator fees
        status: ACTIVE or PAUSED
        creator: owner id of the pool creator (creator fee recipient)
        created_at: caller-supplied creation timestamp
        position_seq: counter for deterministic position ids
    """

    pool_id: str
    asset_a: AssetId
    asset_b: AssetId
    reserve_a: Amount
    reserve_b: Amount
    total_shares: Amount
    fee_config: FeeConfig
    curve: CurveParams
    creator: str
    created_at: int = 0
    status: PoolStatus = PoolStatus.ACTIVE
    acc_fee_per_share_a: int = 0
    acc_fee_per_share_b: int = 0
    fee_dust_a: Amount = 0
    fee_dust_b: Amount = 0
    fee_balance_a: Amount = 0
    fee_balance_b: Amount = 0
    protocol_fees_a: Amount = 0
    protocol_fees_b: Amount = 0
    creator_fees_a: Amount = 0
    creator_fees_b: Amount = 0
    position_seq: int = 0

    def __post_init__(self) -> None:
        if self.asset_a >= self.asset_b:
            raise ValueError(f"Assets must be in canonical order: {self.asset_a} < {self.asset_b}")
        for name in (
            "reserve_a",
            "reserve_b",
            "total_shares",
            "acc_fee_per_share_a",
            "acc_fee_per_share_b",
            "fee_dust_a",
            "fee_dust_b",
            "fee_balance_a",
            "fee_balance_b",
            "protocol_fees_a",
            "protocol_fees_b",
            "creator_fees_a",
            "creator_fees_b",
            "position_seq",
        ):
            v = getattr(self, name)
            _require_int(name, v)
            if v < 0:
                raise ValueError(f"{name} must be non-negative: {v}")

    @property
    def paused(self) -> bool:
        return self.status is PoolStatus.PAUSED

    def reserves_for(self, direction: SwapDirection) -> tuple[Amount, Amount]:
        """Return (reserve_in, reserve_out) for a swap direction."""
        if direction is SwapDirection.A_TO_B:
            return self.reserve_a, self.reserve_b
        return self.reserve_b, self.reserve_a

    def get_constant_product(self) -> int:
        return self.reserve_a * self.reserve_b

    def __repr__(self) -> str:
        return (
            f"PoolState(pool_id={self.pool_id[:16]}..., "
            f"curve={self.curve.kind.value}, "
            f"reserves=({self.reserve_a}, {self.reserve_b}), "
            f"total_shares={self.total_shares}, status={self.status.value})"
        )
