"""
Constant-product swap kernel.

- Fee is deducted from the gross input before pricing:
  `net_in = floor(amount_in * (10_000 - fee_bps) / 10_000)`.
- Pricing: `amount_out = floor(net_in * reserve_out / (reserve_in + net_in))`.
  Truncation always favours the pool.
- Only `net_in` enters the reserves; the fee is held outside the curve and
  split by the caller (LP / protocol / creator).

Invariant: `(reserve_in + net_in) * (reserve_out - amount_out) >= reserve_in * reserve_out`.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import InsufficientLiquidity, InvalidAmount


BPS_DENOM = 10_000


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


@dataclass(frozen=True)
class ConstantProductSwapResult:
    amount_out: int
    fee_total: int
    net_in: int
    gross_in: int
    new_reserve_in: int
    new_reserve_out: int
    k_before: int
    k_after: int


def net_input_after_fee(amount_in: int, fee_bps: int) -> int:
    """Return `floor(amount_in * (10_000 - fee_bps) / 10_000)`."""
    _require_int("amount_in", amount_in)
    _require_int("fee_bps", fee_bps)
    if amount_in < 0:
        raise InvalidAmount(f"amount_in must be non-negative: {amount_in}")
    if not (0 <= fee_bps <= BPS_DENOM):
        raise InvalidAmount(f"fee_bps must be in [0, {BPS_DENOM}]: {fee_bps}")
    return amount_in * (BPS_DENOM - fee_bps) // BPS_DENOM


def compute_constant_product_output(reserve_in: int, reserve_out: int, amount_in: int, fee_bps: int) -> int:
    """
    Output amount for an exact-in constant-product swap.

    Raises InvalidAmount if `amount_in == 0` or either reserve is zero.
    """
    for name, v in (
        ("reserve_in", reserve_in),
        ("reserve_out", reserve_out),
        ("amount_in", amount_in),
        ("fee_bps", fee_bps),
    ):
        _require_int(name, v)

    if reserve_in < 0 or reserve_out < 0:
        raise InvalidAmount(f"reserves must be non-negative: ({reserve_in}, {reserve_out})")
    if reserve_in == 0 or reserve_out == 0:
        raise InvalidAmount("cannot swap against an empty reserve")
    if amount_in <= 0:
        raise InvalidAmount(f"amount_in must be positive: {amount_in}")

    net_in = net_input_after_fee(amount_in, fee_bps)
    return (net_in * reserve_out) // (reserve_in + net_in)


def swap_constant_product(
    *,
    reserve_in: int,
    reserve_out: int,
    amount_in: int,
    fee_bps: int,
) -> ConstantProductSwapResult:
    """
    Exact-in swap quote + post-state.

    Raises InvalidAmount on invalid inputs or if the swap would produce a zero
    output, InsufficientLiquidity if the output would drain the reserve.
    """
    amount_out = compute_constant_product_output(reserve_in, reserve_out, amount_in, fee_bps)
    net_in = net_input_after_fee(amount_in, fee_bps)
    fee_total = amount_in - net_in

    if net_in <= 0:
        raise InvalidAmount("net input is zero after fees (trade too small)")
    if amount_out <= 0:
        raise InvalidAmount("amount_out is zero (trade too small)")
    if amount_out >= reserve_out:
        raise InsufficientLiquidity("amount_out would drain reserve_out")

    new_reserve_in = reserve_in + net_in
    new_reserve_out = reserve_out - amount_out

    return ConstantProductSwapResult(
        amount_out=amount_out,
        fee_total=fee_total,
        net_in=net_in,
        gross_in=amount_in,
        new_reserve_in=new_reserve_in,
        new_reserve_out=new_reserve_out,
        k_before=reserve_in * reserve_out,
        k_after=new_reserve_in * new_reserve_out,
    )
