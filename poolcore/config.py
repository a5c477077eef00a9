"""
Engine configuration.

All tunables live in one frozen dataclass. Values come from (in order of
precedence) explicit keyword arguments, ``POOLCORE_*`` environment variables
(see ``EngineConfig.with_env_overrides``), a YAML file (see ``load_config``), and the defaults below.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

import yaml


BPS_DENOM = 10_000

# Fixed-point scale of the per-share fee accumulators.
ACC_SCALE = 10**12

# Scale of caller-supplied price ceilings (amount_in / amount_out).
PRICE_SCALE = 10**9

# Scale of the entry reserve ratio snapshot stored on positions.
RATIO_SCALE = 10**12

# Amounts are bounded to the u64 domain.
U64_MAX = 2**64 - 1


@dataclass(frozen=True)
class EngineConfig:
    minimum_shares: int = 1000
    default_ratio_tolerance_bps: int = 50
    max_fee_bps: int = 1000
    # Slack on the stable invariant check (D_after + tolerance >= D_before).
    stable_invariant_tolerance: int = 1
    max_newton_iterations: int = 255
    min_amplification: int = 1
    max_amplification: int = 10_000
    max_a_change: int = 2
    min_ramp_duration: int = 86_400
    max_amount: int = U64_MAX
    # 0 disables the price impact guard on swaps.
    max_price_impact_bps: int = 0

    def __post_init__(self) -> None:
        for f in fields(self):
            v = getattr(self, f.name)
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{f.name} must be an int")
            if v < 0:
                raise ValueError(f"{f.name} must be non-negative: {v}")
        if self.minimum_shares <= 0:
            raise ValueError("minimum_shares must be positive")
        if self.max_newton_iterations <= 0:
            raise ValueError("max_newton_iterations must be positive")
        if not (1 <= self.min_amplification <= self.max_amplification):
            raise ValueError("amplification bounds must satisfy 1 <= min <= max")
        if self.max_a_change < 1:
            raise ValueError("max_a_change must be >= 1")
        for name in ("default_ratio_tolerance_bps", "max_fee_bps", "max_price_impact_bps"):
            if getattr(self, name) > BPS_DENOM:
                raise ValueError(f"{name} must be in [0, {BPS_DENOM}]")

    @classmethod
    def from_mapping(cls, obj: Mapping[str, Any]) -> "EngineConfig":
        """Build a config from a plain mapping. Unknown keys are rejected."""
        if not isinstance(obj, Mapping):
            raise TypeError("config must be a mapping")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(obj) - known)
        if unknown:
            raise ValueError(f"unknown config keys: {', '.join(unknown)}")
        return cls(**{k: obj[k] for k in obj})

    def with_env_overrides(self, environ: Mapping[str, str] | None = None) -> "EngineConfig":
        """Apply ``POOLCORE_<FIELD>`` overrides from the environment."""
        env = os.environ if environ is None else environ
        updates: dict[str, int] = {}
        for f in fields(self):
            default = getattr(self, f.name)
            v = _env_int(env, "POOLCORE_" + f.name.upper(), default)
            if v != default:
                updates[f.name] = v
        return replace(self, **updates) if updates else self


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return int(default)
    try:
        v = int(raw.strip())
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if v < 0:
        raise ValueError(f"{name} must be non-negative, got {v}")
    return v


def load_config(path: Path | str | None = None, *, environ: Mapping[str, str] | None = None) -> EngineConfig:
    """
    Load an ``EngineConfig`` from an optional YAML file plus environment overrides.

    The YAML document must be a mapping of field names to integers; an empty
    document yields the defaults.
    """
    base = EngineConfig()
    if path is not None:
        obj = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
        if obj is not None:
            base = EngineConfig.from_mapping(obj)
    return base.with_env_overrides(environ)


DEFAULT_CONFIG = EngineConfig()
