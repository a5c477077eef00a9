"""
Amplification ramp for stable pools.

The effective amplification moves linearly from `amplification` (value at
`ramp_start_time`) to `ramp_target` over `ramp_duration` seconds:

    A(t) = start + (target - start) * clamp(t - start_time, 0, duration) / duration

Integer division truncates toward the starting value in both directions.
"""

from __future__ import annotations

from dataclasses import replace

from ..config import EngineConfig
from ..errors import InvalidAmplification
from ..state.pool_state import CurveKind, CurveParams


def _require_stable(curve: CurveParams) -> None:
    if curve.kind is not CurveKind.STABLE:
        raise InvalidAmplification("amplification applies to stable pools only")


def effective_amplification(curve: CurveParams, now: int) -> int:
    _require_stable(curve)
    start = curve.amplification
    target = curve.ramp_target
    if curve.ramp_duration == 0 or start == target:
        return target
    elapsed = min(max(now - curve.ramp_start_time, 0), curve.ramp_duration)
    if target >= start:
        return start + (target - start) * elapsed // curve.ramp_duration
    return start - (start - target) * elapsed // curve.ramp_duration


def is_ramping(curve: CurveParams, now: int) -> bool:
    if curve.kind is not CurveKind.STABLE or curve.ramp_duration == 0:
        return False
    return now < curve.ramp_start_time + curve.ramp_duration and curve.amplification != curve.ramp_target


def validate_amplification(amplification: int, config: EngineConfig) -> None:
    if not isinstance(amplification, int) or isinstance(amplification, bool):
        raise InvalidAmplification("amplification must be an int")
    if not (config.min_amplification <= amplification <= config.max_amplification):
        raise InvalidAmplification(
            f"amplification must be in [{config.min_amplification}, {config.max_amplification}]: {amplification}"
        )


def start_ramp(curve: CurveParams, *, target: int, duration: int, now: int, config: EngineConfig) -> CurveParams:
    """
    Begin a ramp from the current effective value towards `target`.

    Rejected if a ramp is still running, if `duration` is below the configured
    minimum, or if `target` moves A by more than `max_a_change` in either
    direction.
    """
    _require_stable(curve)
    validate_amplification(target, config)
    if is_ramping(curve, now):
        raise InvalidAmplification("an amplification ramp is already in progress")
    if not isinstance(duration, int) or isinstance(duration, bool) or duration < config.min_ramp_duration:
        raise InvalidAmplification(f"ramp duration must be >= {config.min_ramp_duration}s: {duration}")

    current = effective_amplification(curve, now)
    if target > current * config.max_a_change:
        raise InvalidAmplification(f"ramp target {target} exceeds {config.max_a_change}x current A={current}")
    if target * config.max_a_change < current:
        raise InvalidAmplification(f"ramp target {target} below 1/{config.max_a_change} of current A={current}")

    return replace(
        curve,
        amplification=current,
        ramp_target=target,
        ramp_start_time=now,
        ramp_duration=duration,
    )


def stop_ramp(curve: CurveParams, *, now: int) -> CurveParams:
    """Freeze A at its current effective value."""
    current = effective_amplification(curve, now)
    return replace(curve, amplification=current, ramp_target=current, ramp_start_time=now, ramp_duration=0)
