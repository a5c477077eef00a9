"""Invariant checkers for pool state.

Each function returns True when the invariant holds. `check_all()` returns the
list of violated invariant IDs for a post-state (empty = all pass) and
`check_transition()` the IDs violated by a (pre, post) pair.

The engine runs `check_transition()` and the incremental `check_commit()`
before every commit; a non-empty result aborts the operation with
`InvariantViolation`. `check_all()` audits a whole ledger at pool construction.
"""

from __future__ import annotations

from typing import Callable, Iterable, Sequence

from ..config import EngineConfig
from ..state.pool_state import CurveKind, PoolState
from ..state.positions import Position
from .fees import pending_fees


StateCheck = Callable[[PoolState, Sequence[Position], EngineConfig], bool]
TransitionCheck = Callable[[PoolState, PoolState], bool]


def inv_share_conservation(s: PoolState, positions: Sequence[Position], config: EngineConfig) -> bool:
    return sum(p.shares for p in positions) == s.total_shares


def inv_sink_locked(s: PoolState, positions: Sequence[Position], config: EngineConfig) -> bool:
    sinks = [p for p in positions if p.is_sink]
    return len(sinks) == 1 and sinks[0].shares == config.minimum_shares


def inv_minimum_shares_floor(s: PoolState, positions: Sequence[Position], config: EngineConfig) -> bool:
    return s.total_shares >= config.minimum_shares


def inv_reserves_positive(s: PoolState, positions: Sequence[Position], config: EngineConfig) -> bool:
    return s.reserve_a > 0 and s.reserve_b > 0


def inv_reserves_bounded(s: PoolState, positions: Sequence[Position], config: EngineConfig) -> bool:
    return s.reserve_a <= config.max_amount and s.reserve_b <= config.max_amount


def inv_positions_in_pool(s: PoolState, positions: Sequence[Position], config: EngineConfig) -> bool:
    return all(p.pool_id == s.pool_id and p.shares > 0 for p in positions)


def inv_fee_rate_bounded(s: PoolState, positions: Sequence[Position], config: EngineConfig) -> bool:
    return s.fee_config.fee_bps <= config.max_fee_bps


def inv_amplification_bounds(s: PoolState, positions: Sequence[Position], config: EngineConfig) -> bool:
    if s.curve.kind is not CurveKind.STABLE:
        return True
    lo, hi = config.min_amplification, config.max_amplification
    return lo <= s.curve.amplification <= hi and lo <= s.curve.ramp_target <= hi


def inv_fee_solvency(s: PoolState, positions: Sequence[Position], config: EngineConfig) -> bool:
    """Every pending claim plus carried dust is covered by the LP fee balance."""
    owed_a = 0
    owed_b = 0
    for p in positions:
        a, b = pending_fees(p, s.acc_fee_per_share_a, s.acc_fee_per_share_b)
        owed_a += a
        owed_b += b
    return owed_a + s.fee_dust_a <= s.fee_balance_a and owed_b + s.fee_dust_b <= s.fee_balance_b


def inv_acc_monotone(before: PoolState, after: PoolState) -> bool:
    return (
        after.acc_fee_per_share_a >= before.acc_fee_per_share_a
        and after.acc_fee_per_share_b >= before.acc_fee_per_share_b
    )


def inv_same_pool(before: PoolState, after: PoolState) -> bool:
    return (
        after.pool_id == before.pool_id
        and after.asset_a == before.asset_a
        and after.asset_b == before.asset_b
        and after.curve.kind is before.curve.kind
    )


INVARIANT_REGISTRY: dict[str, StateCheck] = {
    "inv_share_conservation": inv_share_conservation,
    "inv_sink_locked": inv_sink_locked,
    "inv_minimum_shares_floor": inv_minimum_shares_floor,
    "inv_reserves_positive": inv_reserves_positive,
    "inv_reserves_bounded": inv_reserves_bounded,
    "inv_positions_in_pool": inv_positions_in_pool,
    "inv_fee_rate_bounded": inv_fee_rate_bounded,
    "inv_amplification_bounds": inv_amplification_bounds,
    "inv_fee_solvency": inv_fee_solvency,
}

TRANSITION_REGISTRY: dict[str, TransitionCheck] = {
    "inv_acc_monotone": inv_acc_monotone,
    "inv_same_pool": inv_same_pool,
}


def check_all(state: PoolState, positions: Iterable[Position], config: EngineConfig) -> list[str]:
    """Return list of violated invariant IDs (empty = all pass)."""
    snapshot = tuple(positions)
    return [
        inv_id
        for inv_id, check_fn in INVARIANT_REGISTRY.items()
        if not check_fn(state, snapshot, config)
    ]


def check_transition(before: PoolState, after: PoolState) -> list[str]:
    return [
        inv_id
        for inv_id, check_fn in TRANSITION_REGISTRY.items()
        if not check_fn(before, after)
    ]


# Checks that need every position; `check_commit` replaces them with
# running totals and the touched positions.
_LEDGER_WIDE = ("inv_share_conservation", "inv_sink_locked", "inv_positions_in_pool", "inv_fee_solvency")


def check_commit(
    state: PoolState,
    *,
    upserts: Sequence[Position],
    removed: Sequence[Position],
    share_total: int,
    config: EngineConfig,
) -> list[str]:
    """
    Incremental form of `check_all` for a single commit.

    `upserts` are the surviving positions written by the commit, `removed` the
    stored positions it deletes, and `share_total` the ledger share sum after
    the commit. Untouched positions are not revisited; `check_all` over the
    whole ledger remains the full audit.
    """
    violations = [
        inv_id
        for inv_id, check_fn in INVARIANT_REGISTRY.items()
        if inv_id not in _LEDGER_WIDE and not check_fn(state, (), config)
    ]
    if share_total != state.total_shares:
        violations.append("inv_share_conservation")
    if any(p.is_sink for p in removed) or any(
        p.is_sink and p.shares != config.minimum_shares for p in upserts
    ):
        violations.append("inv_sink_locked")
    if not inv_positions_in_pool(state, upserts, config):
        violations.append("inv_positions_in_pool")
    if not inv_fee_solvency(state, upserts, config):
        violations.append("inv_fee_solvency")
    return violations
