# [TESTER] v1

from __future__ import annotations

from dataclasses import replace

from poolcore.config import DEFAULT_CONFIG
from poolcore.core.invariants import INVARIANT_REGISTRY, check_all, check_commit, check_transition
from poolcore.core.pool import create_pool
from poolcore.core.types import AdminCap
from poolcore.state.pool_state import CurveParams, FeeConfig


def _pool():
    pool, _ = create_pool(
        "ASSET_A",
        "ASSET_B",
        1_000_000,
        1_000_000,
        FeeConfig(fee_bps=30),
        CurveParams.constant_product(),
        creator="alice",
        admin_cap=AdminCap(cap_id="0xadmin"),
    )
    return pool


def test_fresh_pool_satisfies_every_invariant() -> None:
    pool = _pool()
    assert check_all(pool.state, pool.positions(), DEFAULT_CONFIG) == []
    assert len(INVARIANT_REGISTRY) >= 8


def test_share_conservation_detects_drift() -> None:
    pool = _pool()
    bad = replace(pool.state, total_shares=pool.state.total_shares + 1)
    assert "inv_share_conservation" in check_all(bad, pool.positions(), DEFAULT_CONFIG)


def test_sink_must_remain() -> None:
    pool = _pool()
    without_sink = [p for p in pool.positions() if not p.is_sink]
    violations = check_all(pool.state, without_sink, DEFAULT_CONFIG)
    assert "inv_sink_locked" in violations


def test_fee_solvency_detects_unbacked_accumulator() -> None:
    pool = _pool()
    bad = replace(pool.state, acc_fee_per_share_a=10**9)
    assert "inv_fee_solvency" in check_all(bad, pool.positions(), DEFAULT_CONFIG)


def test_accumulators_may_not_decrease() -> None:
    pool = _pool()
    before = replace(pool.state, acc_fee_per_share_b=10)
    after = replace(pool.state, acc_fee_per_share_b=9)
    assert check_transition(before, after) == ["inv_acc_monotone"]
    assert check_transition(after, before) == []


def test_commit_check_uses_running_share_total() -> None:
    pool = _pool()
    state = pool.state
    assert check_commit(state, upserts=(), removed=(), share_total=state.total_shares, config=DEFAULT_CONFIG) == []
    assert check_commit(
        state, upserts=(), removed=(), share_total=state.total_shares - 1, config=DEFAULT_CONFIG
    ) == ["inv_share_conservation"]


def test_commit_check_protects_the_sink() -> None:
    pool = _pool()
    sink = next(p for p in pool.positions() if p.is_sink)
    state = replace(pool.state, total_shares=pool.state.total_shares - sink.shares)
    violations = check_commit(
        state, upserts=(), removed=(sink,), share_total=state.total_shares, config=DEFAULT_CONFIG
    )
    assert violations == ["inv_sink_locked"]


def test_commit_check_inspects_touched_positions_only() -> None:
    pool = _pool()
    alice = next(p for p in pool.positions() if not p.is_sink)
    bad = replace(pool.state, acc_fee_per_share_a=10**9)
    common = dict(removed=(), share_total=bad.total_shares, config=DEFAULT_CONFIG)
    assert check_commit(bad, upserts=(), **common) == []
    assert check_commit(bad, upserts=(alice,), **common) == ["inv_fee_solvency"]
    foreign = replace(alice, pool_id="0xother")
    assert "inv_positions_in_pool" in check_commit(pool.state, upserts=(foreign,), **common)
