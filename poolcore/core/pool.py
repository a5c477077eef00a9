"""
Pool accounting engine.

`Pool` orchestrates share mint/burn, swaps, fee accrual and claims, and the
admin-gated parameter changes for one pool, over an immutable `PoolState`
snapshot and the pool's `PositionLedger`.

Every mutating operation follows the same shape:
- run guards against the current snapshot,
- plan the new `PoolState` and the new/removed `Position` records,
- check invariants on the planned post-state,
- commit everything at once.

A failure at any step raises before the commit, so the pool is left unchanged.
Mutations of one pool are serialized by a per-pool lock; different pools share
no state and may be driven in parallel.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Iterable, Optional

from ..config import BPS_DENOM, DEFAULT_CONFIG, EngineConfig
from ..errors import (
    InsufficientLiquidity,
    InvalidAmount,
    InvalidAmplification,
    InvalidFeeConfig,
    InvariantViolation,
    SlippageExceeded,
    Unauthorized,
)
from ..kernels.lp_math import (
    burn_shares,
    mint_shares,
    optimal_deposit,
    ratio_deviation_bps,
    split_initial_shares,
)
from ..state.pool_state import (
    CurveKind,
    CurveParams,
    FeeConfig,
    PoolState,
    PoolStatus,
    SwapDirection,
    compute_pool_id,
)
from ..state.positions import SINK_OWNER, Position, PositionLedger, compute_position_id
from . import amplification as amp
from .curves import invariant_tolerance, price_impact_bps, quote_exact_in
from .fees import accrue, resize_position, settle_claim, split_fee
from .guards import (
    guard_active,
    guard_amount,
    guard_curve_invariant,
    guard_deadline,
    guard_max_price,
    guard_min_out,
    guard_price_impact,
)
from .invariants import check_all, check_commit, check_transition
from .types import (
    AddLiquidityResult,
    AdminCap,
    ClaimFeesResult,
    CompoundResult,
    RemoveLiquidityResult,
    SwapQuote,
    SwapResult,
)
from .views import PoolView, PositionView, build_pool_view, build_position_view, reserve_ratio
from .views import impermanent_loss_bps as _impermanent_loss_bps


logger = logging.getLogger(__name__)


class Pool:
    """
    One two-asset pool: reserves, shares, fee accumulators and positions.

    Construct pools with `create_pool()`; the constructor only wires an
    already-consistent state and ledger together.
    """

    def __init__(
        self,
        state: PoolState,
        ledger: PositionLedger,
        *,
        admin_cap: AdminCap,
        config: EngineConfig = DEFAULT_CONFIG,
    ) -> None:
        if ledger.pool_id != state.pool_id:
            raise ValueError("ledger belongs to a different pool")
        self._state = state
        self._ledger = ledger
        self._admin_cap_id = admin_cap.cap_id
        self._config = config
        self._lock = threading.Lock()

        violations = check_all(state, ledger.positions(), config)
        if violations:
            raise InvariantViolation(violations)

    # -- Read access ------------------------------------------------------

    @property
    def pool_id(self) -> str:
        return self._state.pool_id

    @property
    def state(self) -> PoolState:
        return self._state

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def is_paused(self) -> bool:
        return self._state.paused

    def positions(self) -> tuple[Position, ...]:
        with self._lock:
            return tuple(self._ledger.positions())

    def position_for(self, owner: str) -> Optional[Position]:
        with self._lock:
            return self._ledger.for_owner(owner)

    def get_position(self, position_id: str) -> Optional[Position]:
        with self._lock:
            return self._ledger.get(position_id)

    def amplification(self, *, now: int) -> int:
        return amp.effective_amplification(self._state.curve, now)

    # -- Commit -----------------------------------------------------------

    def _commit(
        self,
        new_state: PoolState,
        upserts: Iterable[Position] = (),
        removals: Iterable[str] = (),
    ) -> None:
        """
        Check invariants on the planned post-state, then apply it. Caller holds the lock.

        Only the touched positions are inspected; the share total comes from
        the ledger's running sum, so the cost does not grow with the number
        of holders.
        """
        upserts = tuple(upserts)
        removed = [p for p in (self._ledger.get(pid) for pid in removals) if p is not None]
        share_total = self._ledger.total_shares() - sum(p.shares for p in removed)
        survivors = []
        for p in upserts:
            previous = self._ledger.get(p.position_id)
            if previous is not None:
                share_total -= previous.shares
            share_total += p.shares
            if p.shares == 0:
                if previous is not None:
                    removed.append(previous)
            else:
                survivors.append(p)

        violations = check_transition(self._state, new_state)
        violations += check_commit(
            new_state,
            upserts=survivors,
            removed=removed,
            share_total=share_total,
            config=self._config,
        )
        if violations:
            logger.warning("pool %s rejected commit: %s", new_state.pool_id[:16], ", ".join(violations))
            raise InvariantViolation(violations)

        for p in removed:
            self._ledger.remove(p.position_id)
        for p in upserts:
            self._ledger.put(p)
        self._state = new_state

    # -- Swap -------------------------------------------------------------

    def _quote(self, state: PoolState, direction: SwapDirection, amount_in: int, now: int) -> SwapQuote:
        guard_amount("amount_in", amount_in, self._config)
        reserve_in, reserve_out = state.reserves_for(direction)
        q = quote_exact_in(state, direction=direction, amount_in=amount_in, now=now, config=self._config)
        split = split_fee(q.fee_total, state.fee_config)
        return SwapQuote(
            direction=direction,
            amount_in=amount_in,
            amount_out=q.amount_out,
            fee_total=split.fee_total,
            lp_fee=split.lp_fee,
            protocol_fee=split.protocol_fee,
            creator_fee=split.creator_fee,
            net_in=q.net_in,
            new_reserve_in=q.new_reserve_in,
            new_reserve_out=q.new_reserve_out,
            invariant_before=q.invariant_before,
            invariant_after=q.invariant_after,
            price_impact_bps=price_impact_bps(
                reserve_in=reserve_in,
                reserve_out=reserve_out,
                amount_in=amount_in,
                amount_out=q.amount_out,
            ),
            amplification=q.amplification,
        )

    def preview_swap(self, direction: SwapDirection, amount_in: int, *, now: int) -> SwapQuote:
        """Pure quote against the current snapshot; nothing is mutated."""
        return self._quote(self._state, direction, amount_in, now)

    def swap(
        self,
        direction: SwapDirection,
        amount_in: int,
        min_amount_out: int = 0,
        *,
        now: int,
        deadline: int,
        max_price: Optional[int] = None,
    ) -> SwapResult:
        """
        Execute an exact-in swap.

        Steps:
        1. reject expired deadlines and invalid amounts,
        2. price via the curve kernel and split the fee (LP / protocol / creator),
        3. reject when `amount_in / amount_out` exceeds `max_price` (scaled 1e9),
        4. update reserves and re-check the curve invariant,
        5. accrue the LP fee into the per-share accumulator,
        6. reject when `amount_out < min_amount_out`.
        """
        with self._lock:
            guard_deadline(now, deadline)
            state = self._state
            guard_active(state)
            quote = self._quote(state, direction, amount_in, now)
            guard_max_price(amount_in, quote.amount_out, max_price)
            guard_price_impact(quote.price_impact_bps, self._config)

            if quote.new_reserve_in > self._config.max_amount:
                raise InvalidAmount("swap would overflow the input reserve")
            guard_curve_invariant(
                before=quote.invariant_before,
                after=quote.invariant_after,
                tolerance=invariant_tolerance(state, self._config),
            )
            new_state = self._apply_swap(state, quote)
            guard_min_out("amount_out", quote.amount_out, min_amount_out)

            self._commit(new_state)

        logger.debug(
            "swap pool=%s dir=%s in=%d out=%d fee=%d",
            state.pool_id[:16],
            direction.value,
            amount_in,
            quote.amount_out,
            quote.fee_total,
        )
        return SwapResult(
            direction=direction,
            amount_in=amount_in,
            amount_out=quote.amount_out,
            fee_total=quote.fee_total,
            lp_fee=quote.lp_fee,
            protocol_fee=quote.protocol_fee,
            creator_fee=quote.creator_fee,
            price_impact_bps=quote.price_impact_bps,
            reserve_a=new_state.reserve_a,
            reserve_b=new_state.reserve_b,
        )

    def _apply_swap(self, state: PoolState, quote: SwapQuote) -> PoolState:
        if quote.direction is SwapDirection.A_TO_B:
            accrual = accrue(quote.lp_fee, state.fee_dust_a, state.total_shares)
            return replace(
                state,
                reserve_a=quote.new_reserve_in,
                reserve_b=quote.new_reserve_out,
                acc_fee_per_share_a=state.acc_fee_per_share_a + accrual.acc_delta,
                fee_dust_a=accrual.dust,
                fee_balance_a=state.fee_balance_a + quote.lp_fee,
                protocol_fees_a=state.protocol_fees_a + quote.protocol_fee,
                creator_fees_a=state.creator_fees_a + quote.creator_fee,
            )
        accrual = accrue(quote.lp_fee, state.fee_dust_b, state.total_shares)
        return replace(
            state,
            reserve_a=quote.new_reserve_out,
            reserve_b=quote.new_reserve_in,
            acc_fee_per_share_b=state.acc_fee_per_share_b + accrual.acc_delta,
            fee_dust_b=accrual.dust,
            fee_balance_b=state.fee_balance_b + quote.lp_fee,
            protocol_fees_b=state.protocol_fees_b + quote.protocol_fee,
            creator_fees_b=state.creator_fees_b + quote.creator_fee,
        )

    # -- Liquidity --------------------------------------------------------

    def _plan_deposit(
        self,
        state: PoolState,
        position: Optional[Position],
        owner: str,
        amount_a_used: int,
        amount_b_used: int,
        *,
        now: int,
    ) -> tuple[PoolState, Position, int]:
        """Mint shares for already ratio-matched amounts into a settled `position` (or a new one)."""
        minted = mint_shares(
            reserve_a=state.reserve_a,
            reserve_b=state.reserve_b,
            total_shares=state.total_shares,
            amount_a=amount_a_used,
            amount_b=amount_b_used,
        )
        new_reserve_a = state.reserve_a + amount_a_used
        new_reserve_b = state.reserve_b + amount_b_used
        if new_reserve_a > self._config.max_amount or new_reserve_b > self._config.max_amount:
            raise InvalidAmount("deposit would overflow the pool reserves")

        seq = state.position_seq
        if position is None:
            position = Position(
                position_id=compute_position_id(state.pool_id, owner, seq),
                pool_id=state.pool_id,
                owner=owner,
                shares=0,
                created_at=now,
            )
            seq += 1

        grown = resize_position(
            position,
            position.shares + minted,
            state.acc_fee_per_share_a,
            state.acc_fee_per_share_b,
        )
        original_a = position.original_deposit_a + amount_a_used
        original_b = position.original_deposit_b + amount_b_used
        grown = replace(
            grown,
            original_deposit_a=original_a,
            original_deposit_b=original_b,
            entry_reserve_ratio=reserve_ratio(original_a, original_b),
        )
        new_state = replace(
            state,
            reserve_a=new_reserve_a,
            reserve_b=new_reserve_b,
            total_shares=state.total_shares + minted,
            position_seq=seq,
        )
        return new_state, grown, minted

    def add_liquidity(
        self,
        owner: str,
        amount_a: int,
        amount_b: int,
        min_shares_out: int = 0,
        ratio_tolerance_bps: Optional[int] = None,
        *,
        now: int = 0,
        deadline: Optional[int] = None,
    ) -> AddLiquidityResult:
        """
        Deposit both assets in the pool ratio.

        A deposit whose ratio deviates from the reserves by more than
        `ratio_tolerance_bps` (default from config, 50 bps) is rejected; within
        the band the excess side is refunded. The owner's position is created
        on first deposit and grown afterwards; pending fees on an existing
        position are paid out first and returned with the result.
        """
        with self._lock:
            guard_deadline(now, deadline)
            state = self._state
            guard_active(state)
            guard_amount("amount_a", amount_a, self._config)
            guard_amount("amount_b", amount_b, self._config)
            if owner == SINK_OWNER:
                raise Unauthorized("the null sink cannot deposit")

            tolerance = self._config.default_ratio_tolerance_bps if ratio_tolerance_bps is None else ratio_tolerance_bps
            if not isinstance(tolerance, int) or not (0 <= tolerance <= BPS_DENOM):
                raise InvalidAmount(f"ratio_tolerance_bps must be in [0, {BPS_DENOM}]: {tolerance}")
            deviation = ratio_deviation_bps(
                reserve_a=state.reserve_a,
                reserve_b=state.reserve_b,
                amount_a=amount_a,
                amount_b=amount_b,
            )
            if deviation > tolerance:
                raise SlippageExceeded(f"deposit ratio deviates {deviation} bps from the pool (tolerance {tolerance})")

            opt = optimal_deposit(
                reserve_a=state.reserve_a,
                reserve_b=state.reserve_b,
                amount_a=amount_a,
                amount_b=amount_b,
            )
            existing = self._ledger.for_owner(owner)
            fees_a = fees_b = 0
            planned = state
            if existing is not None:
                claim = settle_claim(existing, state.acc_fee_per_share_a, state.acc_fee_per_share_b)
                fees_a, fees_b = claim.fees_a, claim.fees_b
                existing = claim.position
                planned = replace(
                    state,
                    fee_balance_a=state.fee_balance_a - fees_a,
                    fee_balance_b=state.fee_balance_b - fees_b,
                )
            new_state, position, minted = self._plan_deposit(
                planned,
                existing,
                owner,
                opt.amount_a_used,
                opt.amount_b_used,
                now=now,
            )
            if minted <= 0:
                raise InvalidAmount("deposit too small to mint any shares")
            guard_min_out("shares_minted", minted, min_shares_out)

            self._commit(new_state, upserts=(position,))

        logger.debug("add_liquidity pool=%s owner=%s shares=%d", state.pool_id[:16], owner, minted)
        return AddLiquidityResult(
            position=position,
            shares_minted=minted,
            amount_a_used=opt.amount_a_used,
            amount_b_used=opt.amount_b_used,
            refund_a=opt.refund_a,
            refund_b=opt.refund_b,
            fees_a=fees_a,
            fees_b=fees_b,
        )

    def remove_liquidity(
        self,
        position: Position | str,
        shares_to_remove: int,
        min_amount_a: int = 0,
        min_amount_b: int = 0,
        *,
        now: int = 0,
        deadline: Optional[int] = None,
    ) -> RemoveLiquidityResult:
        """
        Burn shares for underlying reserves.

        Pending fees are claimed first. Removing every share destroys the
        position; a partial removal resets the fee debt on the retained shares
        with ceiling division.
        """
        with self._lock:
            guard_deadline(now, deadline)
            state = self._state
            guard_active(state)
            stored = self._require_user_position(position)
            guard_amount("shares_to_remove", shares_to_remove, self._config)
            if shares_to_remove > stored.shares:
                raise InsufficientLiquidity(f"cannot remove {shares_to_remove} shares, position holds {stored.shares}")

            claim = settle_claim(stored, state.acc_fee_per_share_a, state.acc_fee_per_share_b)
            burn = burn_shares(
                shares=shares_to_remove,
                reserve_a=state.reserve_a,
                reserve_b=state.reserve_b,
                total_shares=state.total_shares,
            )
            guard_min_out("amount_a", burn.amount_a_out, min_amount_a)
            guard_min_out("amount_b", burn.amount_b_out, min_amount_b)

            retained = stored.shares - shares_to_remove
            new_state = replace(
                state,
                reserve_a=state.reserve_a - burn.amount_a_out,
                reserve_b=state.reserve_b - burn.amount_b_out,
                total_shares=state.total_shares - shares_to_remove,
                fee_balance_a=state.fee_balance_a - claim.fees_a,
                fee_balance_b=state.fee_balance_b - claim.fees_b,
            )
            if retained == 0:
                remaining = None
                self._commit(new_state, removals=(stored.position_id,))
            else:
                remaining = resize_position(
                    claim.position,
                    retained,
                    state.acc_fee_per_share_a,
                    state.acc_fee_per_share_b,
                )
                remaining = replace(
                    remaining,
                    original_deposit_a=stored.original_deposit_a * retained // stored.shares,
                    original_deposit_b=stored.original_deposit_b * retained // stored.shares,
                )
                self._commit(new_state, upserts=(remaining,))

        logger.debug(
            "remove_liquidity pool=%s position=%s shares=%d out=(%d, %d) fees=(%d, %d)",
            state.pool_id[:16],
            stored.position_id[:16],
            shares_to_remove,
            burn.amount_a_out,
            burn.amount_b_out,
            claim.fees_a,
            claim.fees_b,
        )
        return RemoveLiquidityResult(
            amount_a=burn.amount_a_out,
            amount_b=burn.amount_b_out,
            fees_a=claim.fees_a,
            fees_b=claim.fees_b,
            position=remaining,
        )

    # -- Fees -------------------------------------------------------------

    def claim_fees(self, position: Position | str, *, now: int = 0, deadline: Optional[int] = None) -> ClaimFeesResult:
        """
        Pay out the position's pending fees.

        Permitted while the pool is paused. A second claim with no swap in
        between returns zero.
        """
        with self._lock:
            guard_deadline(now, deadline)
            state = self._state
            stored = self._require_user_position(position)
            claim = settle_claim(stored, state.acc_fee_per_share_a, state.acc_fee_per_share_b)
            new_state = replace(
                state,
                fee_balance_a=state.fee_balance_a - claim.fees_a,
                fee_balance_b=state.fee_balance_b - claim.fees_b,
            )
            self._commit(new_state, upserts=(claim.position,))

        logger.debug(
            "claim_fees pool=%s position=%s fees=(%d, %d)",
            state.pool_id[:16],
            stored.position_id[:16],
            claim.fees_a,
            claim.fees_b,
        )
        return ClaimFeesResult(fees_a=claim.fees_a, fees_b=claim.fees_b, position=claim.position)

    def compound_fees(
        self,
        position: Position | str,
        min_shares_out: int = 0,
        *,
        now: int = 0,
        deadline: Optional[int] = None,
    ) -> CompoundResult:
        """
        Claim pending fees and re-deposit them into the same position.

        Fees are deposited in the pool ratio; whatever cannot be paired (for
        example when only one side earned fees) is returned as a refund.
        """
        with self._lock:
            guard_deadline(now, deadline)
            state = self._state
            guard_active(state)
            stored = self._require_user_position(position)

            claim = settle_claim(stored, state.acc_fee_per_share_a, state.acc_fee_per_share_b)
            claimed_state = replace(
                state,
                fee_balance_a=state.fee_balance_a - claim.fees_a,
                fee_balance_b=state.fee_balance_b - claim.fees_b,
            )

            used_a = used_b = minted = 0
            new_state, updated = claimed_state, claim.position
            if claim.fees_a > 0 and claim.fees_b > 0:
                b_from_a = claim.fees_a * state.reserve_b // state.reserve_a
                if b_from_a <= claim.fees_b:
                    used_a, used_b = claim.fees_a, b_from_a
                else:
                    used_a, used_b = claim.fees_b * state.reserve_a // state.reserve_b, claim.fees_b
                if used_a > 0 and used_b > 0:
                    planned_state, planned_position, planned_minted = self._plan_deposit(
                        claimed_state,
                        claim.position,
                        stored.owner,
                        used_a,
                        used_b,
                        now=now,
                    )
                    if planned_minted > 0:
                        new_state, updated, minted = planned_state, planned_position, planned_minted
                    else:
                        used_a = used_b = 0
                else:
                    used_a = used_b = 0

            guard_min_out("shares_minted", minted, min_shares_out)
            self._commit(new_state, upserts=(updated,))

        logger.debug(
            "compound_fees pool=%s position=%s fees=(%d, %d) shares=%d",
            state.pool_id[:16],
            stored.position_id[:16],
            claim.fees_a,
            claim.fees_b,
            minted,
        )
        return CompoundResult(
            fees_a=claim.fees_a,
            fees_b=claim.fees_b,
            shares_minted=minted,
            amount_a_used=used_a,
            amount_b_used=used_b,
            refund_a=claim.fees_a - used_a,
            refund_b=claim.fees_b - used_b,
            position=updated,
        )

    # -- Ownership --------------------------------------------------------

    def transfer_position(self, position: Position | str, new_owner: str) -> Position:
        """Atomically hand a position to `new_owner`."""
        if not isinstance(new_owner, str) or not new_owner:
            raise ValueError("new_owner must be a non-empty string")
        if new_owner == SINK_OWNER:
            raise Unauthorized("positions cannot be transferred to the null sink")
        with self._lock:
            stored = self._require_user_position(position)
            moved = self._ledger.transfer(stored.position_id, new_owner)
        logger.debug("transfer_position pool=%s position=%s to=%s", self.pool_id[:16], stored.position_id[:16], new_owner)
        return moved

    def _require_user_position(self, position: Position | str) -> Position:
        stored = self._ledger.require(position)
        if stored.is_sink:
            raise Unauthorized("the minimum-share sink position is permanently locked")
        return stored

    # -- Admin ------------------------------------------------------------

    def _require_admin(self, cap: AdminCap) -> None:
        if not isinstance(cap, AdminCap) or cap.cap_id != self._admin_cap_id:
            raise Unauthorized("admin capability does not match this pool")

    def _admin_commit(self, new_state: PoolState, action: str) -> None:
        self._commit(new_state)
        logger.info("pool %s admin action: %s", new_state.pool_id[:16], action)

    def pause(self, cap: AdminCap) -> None:
        with self._lock:
            self._require_admin(cap)
            self._admin_commit(replace(self._state, status=PoolStatus.PAUSED), "pause")

    def unpause(self, cap: AdminCap) -> None:
        with self._lock:
            self._require_admin(cap)
            self._admin_commit(replace(self._state, status=PoolStatus.ACTIVE), "unpause")

    def set_fee_config(self, cap: AdminCap, fee_config: FeeConfig) -> None:
        """
        Replace the fee rate and split.

        The pool id keeps the fee tier the pool was created with; it is an
        identity, not a description of the current fee.
        """
        with self._lock:
            self._require_admin(cap)
            _validate_fee_config(fee_config, self._config)
            self._admin_commit(
                replace(self._state, fee_config=fee_config),
                f"set_fee_config fee_bps={fee_config.fee_bps} "
                f"protocol={fee_config.protocol_fee_share_bps} creator={fee_config.creator_fee_share_bps}",
            )

    def start_ramp_amplification(self, cap: AdminCap, target: int, duration: int, *, now: int) -> None:
        with self._lock:
            self._require_admin(cap)
            curve = amp.start_ramp(self._state.curve, target=target, duration=duration, now=now, config=self._config)
            self._admin_commit(
                replace(self._state, curve=curve),
                f"start_ramp {curve.amplification}->{target} over {duration}s",
            )

    def stop_ramp_amplification(self, cap: AdminCap, *, now: int) -> None:
        with self._lock:
            self._require_admin(cap)
            curve = amp.stop_ramp(self._state.curve, now=now)
            self._admin_commit(replace(self._state, curve=curve), f"stop_ramp at A={curve.amplification}")

    def collect_protocol_fees(self, cap: AdminCap) -> tuple[int, int]:
        with self._lock:
            self._require_admin(cap)
            state = self._state
            collected = (state.protocol_fees_a, state.protocol_fees_b)
            self._admin_commit(
                replace(state, protocol_fees_a=0, protocol_fees_b=0),
                f"collect_protocol_fees ({collected[0]}, {collected[1]})",
            )
        return collected

    def collect_creator_fees(self, caller: str) -> tuple[int, int]:
        with self._lock:
            state = self._state
            if caller != state.creator:
                raise Unauthorized("only the pool creator may collect creator fees")
            collected = (state.creator_fees_a, state.creator_fees_b)
            self._commit(replace(state, creator_fees_a=0, creator_fees_b=0))
        logger.info("pool %s creator fees collected: (%d, %d)", state.pool_id[:16], collected[0], collected[1])
        return collected

    # -- Views ------------------------------------------------------------

    def get_pool_view(self, *, now: int) -> PoolView:
        return build_pool_view(self._state, now=now)

    def get_position_view(self, position: Position | str) -> PositionView:
        with self._lock:
            stored = self._ledger.require(position)
            state = self._state
        return build_position_view(stored, state)

    def impermanent_loss_bps(self, position: Position | str) -> int:
        with self._lock:
            stored = self._ledger.require(position)
            state = self._state
        return _impermanent_loss_bps(stored, state)

    def __repr__(self) -> str:
        return f"Pool({self._state!r}, {self._ledger!r})"


def _validate_fee_config(fee_config: FeeConfig, config: EngineConfig) -> None:
    if not isinstance(fee_config, FeeConfig):
        raise InvalidFeeConfig("fee_config must be a FeeConfig")
    if fee_config.fee_bps > config.max_fee_bps:
        raise InvalidFeeConfig(f"fee_bps must be <= {config.max_fee_bps}: {fee_config.fee_bps}")


def create_pool(
    asset_a: str,
    asset_b: str,
    amount_a: int,
    amount_b: int,
    fee_config: FeeConfig,
    curve: CurveParams,
    *,
    creator: str,
    admin_cap: AdminCap,
    now: int = 0,
    config: Optional[EngineConfig] = None,
) -> tuple[Pool, Position]:
    """
    Create a pool atomically with its first deposit.

    Initial shares = floor(sqrt(amount_a * amount_b)). MINIMUM_SHARES of them
    go to a permanently locked sink position; the creator receives the rest.

    Returns:
        Tuple of (Pool, creator Position)

    Raises:
        InvalidAmount: a deposit is zero, negative or overflowing
        InsufficientLiquidity: sqrt(amount_a * amount_b) <= MINIMUM_SHARES
        InvalidFeeConfig: fee rate above the configured maximum
        InvalidAmplification: stable amplification out of bounds, or a ramp in progress
    """
    config = DEFAULT_CONFIG if config is None else config
    guard_amount("amount_a", amount_a, config)
    guard_amount("amount_b", amount_b, config)
    _validate_fee_config(fee_config, config)
    if not isinstance(creator, str) or not creator:
        raise ValueError("creator must be a non-empty string")
    if creator == SINK_OWNER:
        raise Unauthorized("the null sink cannot create pools")
    if not isinstance(admin_cap, AdminCap):
        raise Unauthorized("an AdminCap is required to create a pool")

    if curve.kind is CurveKind.STABLE:
        amp.validate_amplification(curve.amplification, config)
        if curve.ramp_target != curve.amplification or curve.ramp_duration != 0:
            raise InvalidAmplification("pools must be created without an amplification ramp in progress")

    pool_id = compute_pool_id(asset_a, asset_b, fee_config.fee_bps, curve.kind)
    creator_shares, total_shares = split_initial_shares(amount_a, amount_b, config.minimum_shares)

    state = PoolState(
        pool_id=pool_id,
        asset_a=asset_a,
        asset_b=asset_b,
        reserve_a=amount_a,
        reserve_b=amount_b,
        total_shares=total_shares,
        fee_config=fee_config,
        curve=curve,
        creator=creator,
        created_at=now,
        position_seq=2,
    )
    sink = Position(
        position_id=compute_position_id(pool_id, SINK_OWNER, 0),
        pool_id=pool_id,
        owner=SINK_OWNER,
        shares=config.minimum_shares,
        created_at=now,
    )
    # The sink's carve-out is not part of the creator's hold basis.
    creator_position = Position(
        position_id=compute_position_id(pool_id, creator, 1),
        pool_id=pool_id,
        owner=creator,
        shares=creator_shares,
        entry_reserve_ratio=reserve_ratio(amount_a, amount_b),
        original_deposit_a=amount_a * creator_shares // total_shares,
        original_deposit_b=amount_b * creator_shares // total_shares,
        created_at=now,
    )
    ledger = PositionLedger(pool_id)
    ledger.put(sink)
    ledger.put(creator_position)

    pool = Pool(state, ledger, admin_cap=admin_cap, config=config)
    logger.info(
        "pool %s created: %s/%s fee=%d curve=%s shares=%d",
        pool_id[:16],
        asset_a,
        asset_b,
        fee_config.fee_bps,
        curve.kind.value,
        total_shares,
    )
    return pool, creator_position
