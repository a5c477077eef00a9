"""
Share positions and the per-pool position ledger.

A `Position` is an independently addressable, immutable record. It refers to
its pool only through `pool_id` (a lookup key, never an object reference).
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, replace
from typing import Dict, Iterable, Iterator, Optional

from ..errors import InsufficientLiquidity, PositionExists, WrongPool


# Null sink that permanently holds MINIMUM_SHARES of every pool.
SINK_OWNER = "0x0"


def compute_position_id(pool_id: str, owner: str, seq: int) -> str:
    data = b"PoolcorePosition" + pool_id.encode("utf-8") + owner.encode("utf-8") + str(int(seq)).encode("utf-8")
    return "0x" + hashlib.sha256(data).hexdigest()


@dataclass(frozen=True)
class Position:
    """
    One owner's claim on a pool.

    `fee_debt_a` / `fee_debt_b` are in token units: the part of
    `shares * acc_fee_per_share / 1e12` already paid out (or never owed).

    `entry_reserve_ratio`, `original_deposit_a` and `original_deposit_b` feed the
    impermanent-loss view only; they are never used for accounting.
    """

    position_id: str
    pool_id: str
    owner: str
    shares: int
    fee_debt_a: int = 0
    fee_debt_b: int = 0
    entry_reserve_ratio: int = 0
    original_deposit_a: int = 0
    original_deposit_b: int = 0
    created_at: int = 0

    def __post_init__(self) -> None:
        for name in (
            "shares",
            "fee_debt_a",
            "fee_debt_b",
            "entry_reserve_ratio",
            "original_deposit_a",
            "original_deposit_b",
        ):
            v = getattr(self, name)
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{name} must be an int")
            if v < 0:
                raise ValueError(f"{name} must be non-negative: {v}")

    @property
    def is_sink(self) -> bool:
        return self.owner == SINK_OWNER


class PositionLedger:
    """
    Deterministic position table for one pool: position_id -> Position.

    Notes:
    - Positions with zero shares are removed (full removal destroys a position).
    - `owner -> position_id` is kept alongside so an owner's first deposit
      creates a position and later deposits grow it.
    - The ledger is mutated only by the owning pool, under its lock.
    """

    def __init__(self, pool_id: str) -> None:
        self.pool_id = pool_id
        self._positions: Dict[str, Position] = {}
        self._by_owner: Dict[str, str] = {}
        self._total_shares = 0

    def get(self, position_id: str) -> Optional[Position]:
        return self._positions.get(position_id)

    def require(self, position: Position | str) -> Position:
        """
        Resolve a position (or id) to the authoritative stored record.

        Raises WrongPool if a `Position` record belongs to another pool and
        InsufficientLiquidity if it no longer exists. A bare id string carries
        no pool, so it resolves only within this ledger: an id from another
        pool is simply not found and raises InsufficientLiquidity, not WrongPool.
        """
        if isinstance(position, Position):
            if position.pool_id != self.pool_id:
                raise WrongPool(f"position {position.position_id[:16]}... belongs to pool {position.pool_id[:16]}...")
            position_id = position.position_id
        else:
            position_id = position
        stored = self._positions.get(position_id)
        if stored is None:
            raise InsufficientLiquidity(f"position {position_id[:16]}... has no shares in this pool")
        return stored

    def for_owner(self, owner: str) -> Optional[Position]:
        position_id = self._by_owner.get(owner)
        if position_id is None:
            return None
        return self._positions.get(position_id)

    def put(self, position: Position) -> None:
        """Insert or replace a position. Zero-share positions are dropped."""
        if position.pool_id != self.pool_id:
            raise WrongPool("position pool_id does not match ledger")
        existing_id = self._by_owner.get(position.owner)
        if existing_id is not None and existing_id != position.position_id:
            raise PositionExists(f"owner {position.owner} already holds a position in this pool")

        previous = self._positions.get(position.position_id)
        if previous is not None and previous.owner != position.owner:
            self._by_owner.pop(previous.owner, None)

        if position.shares == 0:
            self.remove(position.position_id)
            return
        self._positions[position.position_id] = position
        self._total_shares += position.shares - (previous.shares if previous is not None else 0)
        self._by_owner[position.owner] = position.position_id

    def remove(self, position_id: str) -> None:
        previous = self._positions.pop(position_id, None)
        if previous is not None:
            self._by_owner.pop(previous.owner, None)
            self._total_shares -= previous.shares

    def transfer(self, position_id: str, new_owner: str) -> Position:
        """Atomically move a position to `new_owner`."""
        current = self.require(position_id)
        if new_owner == current.owner:
            return current
        if new_owner in self._by_owner:
            raise PositionExists(f"owner {new_owner} already holds a position in this pool")
        moved = replace(current, owner=new_owner)
        self.put(moved)
        return moved

    def total_shares(self) -> int:
        """Sum of shares over all positions, kept up to date by `put` and `remove`."""
        return self._total_shares

    def positions(self) -> Iterable[Position]:
        return tuple(self._positions.values())

    def __iter__(self) -> Iterator[Position]:
        return iter(self.positions())

    def __len__(self) -> int:
        return len(self._positions)

    def __repr__(self) -> str:
        return f"PositionLedger({len(self._positions)} positions)"
