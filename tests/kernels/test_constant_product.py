# [TESTER] v1

from __future__ import annotations

import importlib.util

import pytest

from poolcore.errors import InsufficientLiquidity, InvalidAmount
from poolcore.kernels.constant_product import (
    compute_constant_product_output,
    net_input_after_fee,
    swap_constant_product,
)


def test_fee_is_deducted_before_pricing() -> None:
    assert net_input_after_fee(100_000, 30) == 99_700
    # floor(99_700 * 1_000_000 / (1_000_000 + 99_700))
    assert compute_constant_product_output(1_000_000, 1_000_000, 100_000, 30) == 90_661


def test_swap_moves_only_net_input_into_reserves() -> None:
    res = swap_constant_product(reserve_in=1_000_000, reserve_out=1_000_000, amount_in=100_000, fee_bps=30)
    assert res.amount_out == 90_661
    assert res.fee_total == 300
    assert res.net_in == 99_700
    assert res.gross_in == 100_000
    assert (res.new_reserve_in, res.new_reserve_out) == (1_099_700, 909_339)
    assert res.k_after >= res.k_before


def test_zero_fee_output_rounds_down() -> None:
    # 10 * 7 / (3 + 10) = 5.38...
    assert compute_constant_product_output(3, 7, 10, 0) == 5


@pytest.mark.parametrize(
    "reserve_in,reserve_out,amount_in",
    [
        (1_000, 1_000, 0),
        (0, 1_000, 10),
        (1_000, 0, 10),
        (1_000, 1_000, -5),
    ],
)
def test_invalid_inputs_raise_invalid_amount(reserve_in: int, reserve_out: int, amount_in: int) -> None:
    with pytest.raises(InvalidAmount):
        compute_constant_product_output(reserve_in, reserve_out, amount_in, 30)


def test_dust_trade_that_rounds_to_zero_is_rejected() -> None:
    # net_in = floor(1 * 9_970 / 10_000) = 0
    with pytest.raises(InvalidAmount, match="net input"):
        swap_constant_product(reserve_in=1_000_000, reserve_out=1_000_000, amount_in=1, fee_bps=30)


def test_trade_that_would_drain_reserve_is_rejected() -> None:
    with pytest.raises(InsufficientLiquidity):
        swap_constant_product(reserve_in=1, reserve_out=2, amount_in=10**6, fee_bps=0)


def test_bool_is_not_an_amount() -> None:
    with pytest.raises(TypeError):
        compute_constant_product_output(1_000, 1_000, True, 30)


if importlib.util.find_spec("hypothesis") is not None:
    import hypothesis.strategies as st
    from hypothesis import assume, given, settings

    @settings(max_examples=300, deadline=None)
    @given(
        reserve_in=st.integers(min_value=1, max_value=10**15),
        reserve_out=st.integers(min_value=2, max_value=10**15),
        amount_in=st.integers(min_value=1, max_value=10**15),
        fee_bps=st.integers(min_value=0, max_value=1_000),
    )
    def test_constant_product_never_decreases(reserve_in: int, reserve_out: int, amount_in: int, fee_bps: int) -> None:
        try:
            res = swap_constant_product(
                reserve_in=reserve_in,
                reserve_out=reserve_out,
                amount_in=amount_in,
                fee_bps=fee_bps,
            )
        except (InvalidAmount, InsufficientLiquidity):
            assume(False)
            return
        assert res.k_after >= res.k_before
        assert 0 < res.amount_out < reserve_out
        assert res.net_in + res.fee_total == amount_in
