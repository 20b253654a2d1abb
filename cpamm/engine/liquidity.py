"""Liquidity operations: deposit paired assets for shares, burn shares for assets.

Share accounting is additive: a deposit of (a, b) mints a + b shares,
regardless of the pool's current reserve ratio, and deposits are taken at the
amounts given with no re-balancing against existing reserves. A deposit at a
ratio different from the reserves therefore moves the pool's implied price,
and the depositor is over- or under-credited relative to pool value.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from cpamm.engine.atomic import TransferJournal, atomic
from cpamm.engine.guards import (
    Clock,
    check_deadline,
    require_accounts,
    require_minimum,
    require_uint256,
    system_clock,
)
from cpamm.errors import InsufficientLiquidity
from cpamm.ledger import Ledger
from cpamm.models.types import normalize_address
from cpamm.pools.pool import PairKey, Pool
from cpamm.pools.registry import PairRegistry
from cpamm.safe_int import S

logger = structlog.get_logger()


@dataclass(frozen=True)
class AddLiquidityResult:
    """Amounts deposited (in the caller's token order) and shares minted."""

    amount_a: int
    amount_b: int
    shares: int


@dataclass(frozen=True)
class RemoveLiquidityResult:
    """Amounts paid out, in the caller's token order."""

    amount_a: int
    amount_b: int


class LiquidityManager:
    """Adds and removes liquidity against pools in a PairRegistry."""

    def __init__(
        self,
        registry: PairRegistry,
        ledger: Ledger,
        custody: str,
        clock: Clock = system_clock,
    ) -> None:
        self._registry = registry
        self._ledger = ledger
        self._custody = normalize_address(custody, validate=True)
        self._clock = clock

    def add_liquidity(
        self,
        caller: str,
        token_a: str,
        token_b: str,
        amount_a_desired: int,
        amount_b_desired: int,
        amount_a_min: int,
        amount_b_min: int,
        recipient: str,
        deadline: int,
    ) -> AddLiquidityResult:
        """Deposit both assets of a pair and mint shares to recipient.

        The pool is created when the first deposit for a pair succeeds. Both
        amounts are pulled from caller, who must have approved the custody
        account.

        Returns:
            AddLiquidityResult with the deposited amounts and shares minted

        Raises:
            Expired: If the deadline has passed
            IdenticalTokens: If token_a == token_b
            SlippageExceeded: If a deposited amount is below its minimum
            InsufficientLiquidity: If either amount is zero
            TransferFailed: If the ledger does not deliver either deposit
        """
        check_deadline(deadline, self._clock())
        key = PairKey.of(token_a, token_b)
        require_accounts(caller, recipient)
        require_uint256(amount_a_desired, amount_b_desired, amount_a_min, amount_b_min)

        amount_a, amount_b = amount_a_desired, amount_b_desired
        require_minimum(amount_a, amount_a_min, "amount_a")
        require_minimum(amount_b, amount_b_min, "amount_b")
        if amount_a == 0 or amount_b == 0:
            raise InsufficientLiquidity(f"Both deposit amounts must be positive: ({amount_a}, {amount_b})")

        with self._registry.lock(key):
            # A new pool is only stored once its first deposit commits
            existing = self._registry.find(key.token0, key.token1)
            pool = existing if existing is not None else Pool(key=key)
            journal = TransferJournal(self._ledger, self._custody)
            with atomic(pool, journal):
                journal.pull(token_a, caller, amount_a)
                journal.pull(token_b, caller, amount_b)

                shares = S(amount_a) + S(amount_b)
                reserve_a, reserve_b = pool.get_reserves(token_a)
                new_reserve_a = S(reserve_a) + amount_a
                new_reserve_b = S(reserve_b) + amount_b
                new_total = S(pool.total_shares) + shares

                pool.set_reserves(token_a, new_reserve_a.value, new_reserve_b.value)
                pool.total_shares = new_total.value
                pool.credit_shares(recipient, shares.value)

            if existing is None:
                self._registry.register(pool)

        logger.info(
            "liquidity_added",
            token0=key.token0[-8:],
            token1=key.token1[-8:],
            amount_a=amount_a,
            amount_b=amount_b,
            shares=shares.value,
            recipient=recipient[-8:],
        )
        return AddLiquidityResult(amount_a=amount_a, amount_b=amount_b, shares=shares.value)

    def remove_liquidity(
        self,
        caller: str,
        token_a: str,
        token_b: str,
        share_amount: int,
        amount_a_min: int,
        amount_b_min: int,
        recipient: str,
        deadline: int,
    ) -> RemoveLiquidityResult:
        """Burn caller's shares and pay the proportional reserves to recipient.

        Each payout is floor(reserve * share_amount / total_shares); the
        rounding remainder stays in the pool. Pool state is committed before
        the ledger transfers, and rolled back if either transfer fails.

        Returns:
            RemoveLiquidityResult with amounts in (token_a, token_b) order

        Raises:
            Expired: If the deadline has passed
            IdenticalTokens: If token_a == token_b
            InsufficientLiquidity: If caller holds fewer than share_amount
                shares, or share_amount is zero
            SlippageExceeded: If a payout is below its minimum
            TransferFailed: If the ledger does not deliver a payout
        """
        check_deadline(deadline, self._clock())
        key = PairKey.of(token_a, token_b)
        require_accounts(caller, recipient)
        require_uint256(share_amount, amount_a_min, amount_b_min)

        with self._registry.lock(key):
            pool = self._registry.find(key.token0, key.token1)
            held = pool.balance_of(caller) if pool is not None else 0
            if pool is None or share_amount == 0 or held < share_amount:
                raise InsufficientLiquidity(f"Cannot burn {share_amount} shares, caller holds {held}")

            reserve_a, reserve_b = pool.get_reserves(token_a)
            amount_a = (S(reserve_a) * share_amount // pool.total_shares).value
            amount_b = (S(reserve_b) * share_amount // pool.total_shares).value
            require_minimum(amount_a, amount_a_min, "amount_a")
            require_minimum(amount_b, amount_b_min, "amount_b")

            journal = TransferJournal(self._ledger, self._custody)
            with atomic(pool, journal):
                pool.set_reserves(
                    token_a,
                    (S(reserve_a) - amount_a).value,
                    (S(reserve_b) - amount_b).value,
                )
                pool.total_shares = (S(pool.total_shares) - share_amount).value
                pool.debit_shares(caller, share_amount)

                journal.push(token_a, recipient, amount_a)
                journal.push(token_b, recipient, amount_b)

        logger.info(
            "liquidity_removed",
            token0=key.token0[-8:],
            token1=key.token1[-8:],
            shares=share_amount,
            amount_a=amount_a,
            amount_b=amount_b,
            recipient=recipient[-8:],
        )
        return RemoveLiquidityResult(amount_a=amount_a, amount_b=amount_b)
