# [TESTER] v1

from __future__ import annotations

import pytest

from poolcore import config
from poolcore.errors import InvalidAmplification, InvalidFeeConfig
from poolcore.state import pool_state
from poolcore.state.pool_state import (
    CurveKind,
    CurveParams,
    FeeConfig,
    PoolState,
    PoolStatus,
    SwapDirection,
    compute_pool_id,
)


def _state(**overrides) -> PoolState:
    kwargs = dict(
        pool_id="0xpool",
        asset_a="ASSET_A",
        asset_b="ASSET_B",
        reserve_a=1_000,
        reserve_b=2_000,
        total_shares=1_414,
        fee_config=FeeConfig(fee_bps=30),
        curve=CurveParams.constant_product(),
        creator="alice",
    )
    kwargs.update(overrides)
    return PoolState(**kwargs)


def test_pool_id_is_deterministic_per_pair_fee_and_curve() -> None:
    a = compute_pool_id("ASSET_A", "ASSET_B", 30, CurveKind.CONSTANT_PRODUCT)
    assert a == compute_pool_id("ASSET_A", "ASSET_B", 30, CurveKind.CONSTANT_PRODUCT)
    assert a.startswith("0x") and len(a) == 66
    assert a != compute_pool_id("ASSET_A", "ASSET_B", 5, CurveKind.CONSTANT_PRODUCT)
    assert a != compute_pool_id("ASSET_A", "ASSET_B", 30, CurveKind.STABLE)


def test_pool_id_requires_canonical_asset_order() -> None:
    with pytest.raises(ValueError, match="canonical order"):
        compute_pool_id("ASSET_B", "ASSET_A", 30, CurveKind.CONSTANT_PRODUCT)


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(fee_bps=-1),
        dict(fee_bps=10_000),
        dict(fee_bps=30, protocol_fee_share_bps=6_000, creator_fee_share_bps=5_000),
        dict(fee_bps=30, creator_fee_share_bps=10_001),
    ],
)
def test_fee_config_bounds(kwargs: dict) -> None:
    with pytest.raises(InvalidFeeConfig):
        FeeConfig(**kwargs)


def test_fee_bounds_share_the_engine_denominator() -> None:
    assert pool_state.BPS_DENOM is config.BPS_DENOM
    FeeConfig(fee_bps=config.BPS_DENOM - 1, protocol_fee_share_bps=config.BPS_DENOM)


def test_constant_product_curve_carries_no_parameters() -> None:
    with pytest.raises(InvalidAmplification):
        CurveParams(kind=CurveKind.CONSTANT_PRODUCT, amplification=100)


def test_stable_curve_requires_positive_amplification() -> None:
    with pytest.raises(InvalidAmplification):
        CurveParams.stable(0)
    curve = CurveParams.stable(100, now=50)
    assert curve.is_stable
    assert (curve.amplification, curve.ramp_target, curve.ramp_start_time, curve.ramp_duration) == (100, 100, 50, 0)


def test_reserves_for_direction() -> None:
    s = _state()
    assert s.reserves_for(SwapDirection.A_TO_B) == (1_000, 2_000)
    assert s.reserves_for(SwapDirection.B_TO_A) == (2_000, 1_000)
    assert s.get_constant_product() == 2_000_000


def test_state_rejects_negative_balances_and_bad_order() -> None:
    with pytest.raises(ValueError):
        _state(reserve_a=-1)
    with pytest.raises(ValueError, match="canonical order"):
        _state(asset_a="ASSET_Z")
    with pytest.raises(TypeError):
        _state(total_shares=True)


def test_paused_flag_follows_status() -> None:
    assert not _state().paused
    assert _state(status=PoolStatus.PAUSED).paused
