"""Per-pair pool state: reserves, total shares and share balances."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field

from eth_abi import encode  # type: ignore[attr-defined]

from cpamm.errors import IdenticalTokens
from cpamm.models.types import normalize_address


@dataclass(frozen=True, order=True)
class PairKey:
    """Canonical key for an unordered token pair.

    token0 is always the smaller address, so ``PairKey.of(a, b)`` and
    ``PairKey.of(b, a)`` are equal and hash the same.
    """

    token0: str
    token1: str

    def __post_init__(self) -> None:
        if self.token0 == self.token1:
            raise IdenticalTokens(f"Pair tokens must differ: {self.token0}")
        if self.token0 > self.token1:
            raise ValueError(f"Tokens not in canonical order: {self.token0} > {self.token1}")

    @classmethod
    def of(cls, token_a: str, token_b: str) -> PairKey:
        """Build the key for a pair given in any order.

        Raises:
            IdenticalTokens: If both tokens normalize to the same address
            ValueError: If either token is not a valid address
        """
        a = normalize_address(token_a, validate=True)
        b = normalize_address(token_b, validate=True)
        if a == b:
            raise IdenticalTokens(f"Pair tokens must differ: {a}")
        # Lowercase hex of equal length orders the same as the address bytes
        return cls(a, b) if a < b else cls(b, a)

    @property
    def pair_id(self) -> str:
        """Deterministic hex id derived from the ABI encoding of both tokens."""
        encoded = encode(
            ["address", "address"],
            [bytes.fromhex(self.token0[2:]), bytes.fromhex(self.token1[2:])],
        )
        return "0x" + hashlib.sha256(encoded).hexdigest()

    def is_token0(self, token: str) -> bool:
        """True if token is the pair's token0.

        Raises:
            ValueError: If token is not part of the pair
        """
        token_norm = normalize_address(token)
        if token_norm == self.token0:
            return True
        if token_norm == self.token1:
            return False
        raise ValueError(f"Token {token} not in pair")

    def other(self, token: str) -> str:
        """Return the counterpart of token within the pair."""
        return self.token1 if self.is_token0(token) else self.token0


@dataclass(frozen=True)
class PoolSnapshot:
    """Immutable copy of a pool's mutable state, used for rollback."""

    reserve0: int
    reserve1: int
    total_shares: int
    shares_of: tuple[tuple[str, int], ...]


@dataclass
class Pool:
    """Reserves and liquidity shares for one pair.

    Invariants (checked by check_invariants after every mutation):
    - reserve0 > 0 and reserve1 > 0 whenever total_shares > 0
    - sum(shares_of.values()) == total_shares
    """

    key: PairKey
    reserve0: int = 0
    reserve1: int = 0
    total_shares: int = 0
    # Accounts with a zero balance are removed
    shares_of: dict[str, int] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return self.reserve0 == 0 or self.reserve1 == 0

    def get_reserves(self, token_in: str) -> tuple[int, int]:
        """Get reserves ordered as (reserve_in, reserve_out)."""
        if self.key.is_token0(token_in):
            return self.reserve0, self.reserve1
        return self.reserve1, self.reserve0

    def set_reserves(self, token_in: str, reserve_in: int, reserve_out: int) -> None:
        """Store reserves given in (token_in, other) orientation."""
        if self.key.is_token0(token_in):
            self.reserve0, self.reserve1 = reserve_in, reserve_out
        else:
            self.reserve0, self.reserve1 = reserve_out, reserve_in

    def balance_of(self, account: str) -> int:
        return self.shares_of.get(normalize_address(account), 0)

    def credit_shares(self, account: str, amount: int) -> None:
        account_norm = normalize_address(account)
        self.shares_of[account_norm] = self.shares_of.get(account_norm, 0) + amount

    def debit_shares(self, account: str, amount: int) -> None:
        account_norm = normalize_address(account)
        remaining = self.shares_of.get(account_norm, 0) - amount
        if remaining < 0:
            raise ValueError(f"Share balance of {account_norm} would go negative")
        if remaining == 0:
            self.shares_of.pop(account_norm, None)
        else:
            self.shares_of[account_norm] = remaining

    def snapshot(self) -> PoolSnapshot:
        return PoolSnapshot(
            reserve0=self.reserve0,
            reserve1=self.reserve1,
            total_shares=self.total_shares,
            shares_of=tuple(self.shares_of.items()),
        )

    def restore(self, snapshot: PoolSnapshot) -> None:
        self.reserve0 = snapshot.reserve0
        self.reserve1 = snapshot.reserve1
        self.total_shares = snapshot.total_shares
        self.shares_of = dict(snapshot.shares_of)

    def check_invariants(self) -> None:
        """Verify reserve/share consistency.

        Raises:
            AssertionError: If an invariant does not hold
        """
        if self.total_shares > 0 and self.is_empty:
            raise AssertionError(
                f"Pool {self.key.token0[-8:]}/{self.key.token1[-8:]} has "
                f"{self.total_shares} shares but reserves ({self.reserve0}, {self.reserve1})"
            )
        share_sum = sum(self.shares_of.values())
        if share_sum != self.total_shares:
            raise AssertionError(f"Share balances sum to {share_sum}, total_shares is {self.total_shares}")
