# [TESTER] v1

from __future__ import annotations

import pytest

from poolcore.errors import InsufficientLiquidity, InvalidAmount
from poolcore.kernels.lp_math import (
    burn_shares,
    initial_shares,
    mint_shares,
    optimal_deposit,
    ratio_deviation_bps,
    split_initial_shares,
)


def test_first_deposit_carves_out_minimum_shares() -> None:
    assert split_initial_shares(1_000_000, 1_000_000, 1_000) == (999_000, 1_000_000)


def test_first_deposit_at_or_below_minimum_is_rejected() -> None:
    with pytest.raises(InsufficientLiquidity, match="initial liquidity"):
        split_initial_shares(1_000, 1_000, 1_000)


def test_initial_shares_use_integer_isqrt() -> None:
    n = (1 << 70) + 12345
    assert initial_shares(n, n) == n


def test_ratio_deviation_is_floored_bps() -> None:
    # |1000*1e6 - 1004*1e6| * 10_000 / (1004 * 1e6) = 39.84
    assert ratio_deviation_bps(reserve_a=1_000_000, reserve_b=1_000_000, amount_a=1_000, amount_b=1_004) == 39
    assert ratio_deviation_bps(reserve_a=1_000_000, reserve_b=2_000_000, amount_a=500, amount_b=1_000) == 0


def test_optimal_deposit_refunds_excess_side() -> None:
    res = optimal_deposit(reserve_a=1_000_000, reserve_b=2_000_000, amount_a=100, amount_b=300)
    assert (res.amount_a_used, res.amount_b_used) == (100, 200)
    assert (res.refund_a, res.refund_b) == (0, 100)

    res = optimal_deposit(reserve_a=1_000_000, reserve_b=2_000_000, amount_a=500, amount_b=300)
    assert (res.amount_a_used, res.amount_b_used) == (150, 300)
    assert (res.refund_a, res.refund_b) == (350, 0)


def test_optimal_deposit_rejects_dust() -> None:
    with pytest.raises(InvalidAmount):
        optimal_deposit(reserve_a=1_000_000, reserve_b=1, amount_a=10, amount_b=1)


def test_mint_takes_minimum_of_both_sides() -> None:
    assert mint_shares(reserve_a=1_000_000, reserve_b=1_000_000, total_shares=1_000_000, amount_a=1_000, amount_b=1_000) == 1_000
    assert mint_shares(reserve_a=1_000_000, reserve_b=1_000_000, total_shares=1_000_000, amount_a=1_000, amount_b=500) == 500


def test_mint_into_empty_pool_is_rejected() -> None:
    with pytest.raises(InsufficientLiquidity):
        mint_shares(reserve_a=0, reserve_b=0, total_shares=0, amount_a=10, amount_b=10)


def test_burn_is_proportional_and_floored() -> None:
    res = burn_shares(shares=1_000, reserve_a=1_000_000, reserve_b=2_000_001, total_shares=1_000_000)
    assert (res.amount_a_out, res.amount_b_out) == (1_000, 2_000)


def test_burn_more_than_supply_is_rejected() -> None:
    with pytest.raises(InsufficientLiquidity):
        burn_shares(shares=11, reserve_a=100, reserve_b=100, total_shares=10)
    with pytest.raises(InvalidAmount):
        burn_shares(shares=0, reserve_a=100, reserve_b=100, total_shares=10)
