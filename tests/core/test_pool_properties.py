# [TESTER] v1
"""Property tests over randomized operation sequences against one pool."""

from __future__ import annotations

import importlib.util
import random

import pytest

if importlib.util.find_spec("hypothesis") is None:  # pragma: no cover
    pytest.skip("hypothesis not installed", allow_module_level=True)

import hypothesis.strategies as st
from hypothesis import given, settings

from poolcore.config import DEFAULT_CONFIG
from poolcore.core.invariants import check_all
from poolcore.core.pool import create_pool
from poolcore.core.types import AdminCap
from poolcore.errors import PoolInputError
from poolcore.state.pool_state import CurveParams, FeeConfig, SwapDirection


CAP = AdminCap.mint()
OWNERS = ("alice", "bob", "carol", "dave")


def _pool(curve: CurveParams | None = None, fee_bps: int = 30):
    return create_pool(
        "ASSET_A",
        "ASSET_B",
        1_000_000,
        1_000_000,
        FeeConfig(fee_bps=fee_bps, protocol_fee_share_bps=1_000),
        curve or CurveParams.constant_product(),
        creator="alice",
        admin_cap=CAP,
    )


swap_st = st.tuples(st.sampled_from(list(SwapDirection)), st.integers(min_value=1, max_value=200_000))


@settings(max_examples=100, deadline=None)
@given(swaps=st.lists(swap_st, min_size=1, max_size=20))
def test_constant_product_k_never_decreases(swaps) -> None:
    pool, _ = _pool()
    for direction, amount in swaps:
        k_before = pool.state.get_constant_product()
        try:
            pool.swap(direction, amount, now=0, deadline=0)
        except PoolInputError:
            assert pool.state.get_constant_product() == k_before
            continue
        assert pool.state.get_constant_product() >= k_before


@settings(max_examples=50, deadline=None)
@given(
    swaps=st.lists(
        st.tuples(st.sampled_from(list(SwapDirection)), st.integers(min_value=1, max_value=100_000)),
        min_size=1,
        max_size=5,
    )
)
def test_stable_swaps_keep_every_invariant(swaps) -> None:
    pool, _ = _pool(CurveParams.stable(100), fee_bps=4)
    for direction, amount in swaps:
        try:
            pool.swap(direction, amount, now=0, deadline=0)
        except PoolInputError:
            continue
        assert check_all(pool.state, pool.positions(), DEFAULT_CONFIG) == []


op_st = st.one_of(
    st.tuples(st.just("add"), st.sampled_from(OWNERS), st.integers(min_value=1, max_value=500_000)),
    st.tuples(st.just("remove"), st.sampled_from(OWNERS), st.integers(min_value=1, max_value=10_000)),
    st.tuples(st.just("swap"), st.sampled_from(list(SwapDirection)), st.integers(min_value=1, max_value=100_000)),
)


@settings(max_examples=100, deadline=None)
@given(ops=st.lists(op_st, min_size=1, max_size=25))
def test_shares_are_conserved(ops) -> None:
    pool, _ = _pool()
    for op in ops:
        try:
            if op[0] == "add":
                pool.add_liquidity(op[1], op[2], op[2] * 2, ratio_tolerance_bps=10_000)
            elif op[0] == "remove":
                position = pool.position_for(op[1])
                if position is not None:
                    pool.remove_liquidity(position, min(op[2] * 100, position.shares))
            else:
                pool.swap(op[1], op[2], now=0, deadline=0)
        except PoolInputError:
            pass
        assert sum(p.shares for p in pool.positions()) == pool.state.total_shares


@settings(max_examples=100, deadline=None)
@given(
    swaps=st.lists(swap_st, max_size=5),
    amount_a=st.integers(min_value=1_000, max_value=5_000_000),
    amount_b=st.integers(min_value=1_000, max_value=5_000_000),
)
def test_add_then_remove_returns_no_surplus(swaps, amount_a: int, amount_b: int) -> None:
    pool, _ = _pool()
    for direction, amount in swaps:
        try:
            pool.swap(direction, amount, now=0, deadline=0)
        except PoolInputError:
            pass
    try:
        added = pool.add_liquidity("bob", amount_a, amount_b, ratio_tolerance_bps=10_000)
    except PoolInputError:
        return
    removed = pool.remove_liquidity(added.position, added.shares_minted)
    assert removed.amount_a <= added.amount_a_used
    assert removed.amount_b <= added.amount_b_used
    assert removed.fees_a == removed.fees_b == 0


def test_claims_never_exceed_accrued_fees_under_any_ordering() -> None:
    rng = random.Random(7)
    for _ in range(1_000):
        pool, _ = _pool()
        for owner in OWNERS[1:]:
            amount = rng.randint(1_000, 300_000) * 10
            pool.add_liquidity(owner, amount, amount)

        lp_in = [0, 0]
        claimed = [0, 0]
        for _ in range(rng.randint(1, 6)):
            direction = rng.choice(list(SwapDirection))
            res = pool.swap(direction, rng.randint(1_000, 50_000), now=0, deadline=0)
            lp_in[0 if direction is SwapDirection.A_TO_B else 1] += res.lp_fee

            claimers = [p for p in pool.positions() if not p.is_sink]
            rng.shuffle(claimers)
            for p in claimers[: rng.randint(0, len(claimers))]:
                c = pool.claim_fees(p)
                claimed[0] += c.fees_a
                claimed[1] += c.fees_b

        for p in pool.positions():
            if not p.is_sink:
                c = pool.claim_fees(p)
                claimed[0] += c.fees_a
                claimed[1] += c.fees_b

        assert claimed[0] <= lp_in[0]
        assert claimed[1] <= lp_in[1]
        assert pool.state.fee_balance_a == lp_in[0] - claimed[0]
        assert pool.state.fee_balance_b == lp_in[1] - claimed[1]
