# [TESTER] v1

from __future__ import annotations

import pytest

from poolcore.config import DEFAULT_CONFIG
from poolcore.core.amplification import (
    effective_amplification,
    is_ramping,
    start_ramp,
    stop_ramp,
    validate_amplification,
)
from poolcore.errors import InvalidAmplification
from poolcore.state.pool_state import CurveParams


DAY = 86_400


def test_upward_ramp_is_linear_and_clamped() -> None:
    curve = start_ramp(CurveParams.stable(100), target=200, duration=DAY, now=0, config=DEFAULT_CONFIG)
    assert effective_amplification(curve, 0) == 100
    assert effective_amplification(curve, DAY // 2) == 150
    assert effective_amplification(curve, DAY) == 200
    assert effective_amplification(curve, 10 * DAY) == 200
    assert is_ramping(curve, DAY // 2)
    assert not is_ramping(curve, DAY)


def test_downward_ramp() -> None:
    curve = start_ramp(CurveParams.stable(100), target=50, duration=DAY, now=1_000, config=DEFAULT_CONFIG)
    assert effective_amplification(curve, 500) == 100
    assert effective_amplification(curve, 1_000 + DAY // 2) == 75
    assert effective_amplification(curve, 1_000 + DAY) == 50


@pytest.mark.parametrize("target", [201, 49])
def test_ramp_step_is_bounded_to_two_x(target: int) -> None:
    with pytest.raises(InvalidAmplification):
        start_ramp(CurveParams.stable(100), target=target, duration=DAY, now=0, config=DEFAULT_CONFIG)


def test_ramp_requires_minimum_duration() -> None:
    with pytest.raises(InvalidAmplification, match="duration"):
        start_ramp(CurveParams.stable(100), target=150, duration=3_600, now=0, config=DEFAULT_CONFIG)


def test_ramp_cannot_restart_mid_flight() -> None:
    curve = start_ramp(CurveParams.stable(100), target=200, duration=DAY, now=0, config=DEFAULT_CONFIG)
    with pytest.raises(InvalidAmplification, match="in progress"):
        start_ramp(curve, target=150, duration=DAY, now=DAY // 2, config=DEFAULT_CONFIG)
    # Once finished, a new ramp starts from the reached value.
    again = start_ramp(curve, target=400, duration=DAY, now=DAY, config=DEFAULT_CONFIG)
    assert again.amplification == 200


def test_stop_ramp_freezes_current_value() -> None:
    curve = start_ramp(CurveParams.stable(100), target=200, duration=DAY, now=0, config=DEFAULT_CONFIG)
    stopped = stop_ramp(curve, now=DAY // 4)
    assert stopped.amplification == stopped.ramp_target == 125
    assert not is_ramping(stopped, DAY // 2)
    assert effective_amplification(stopped, 10 * DAY) == 125


def test_bounds() -> None:
    validate_amplification(1, DEFAULT_CONFIG)
    validate_amplification(10_000, DEFAULT_CONFIG)
    for bad in (0, 10_001):
        with pytest.raises(InvalidAmplification):
            validate_amplification(bad, DEFAULT_CONFIG)


def test_constant_product_has_no_amplification() -> None:
    with pytest.raises(InvalidAmplification):
        effective_amplification(CurveParams.constant_product(), 0)
