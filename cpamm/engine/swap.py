"""Exact-input swaps through a single pool."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from cpamm.amm.base import AMM, SwapResult
from cpamm.amm.constant_product import ConstantProduct
from cpamm.engine.atomic import TransferJournal, atomic
from cpamm.engine.guards import (
    Clock,
    check_deadline,
    require_accounts,
    require_minimum,
    require_uint256,
    system_clock,
)
from cpamm.errors import InsufficientOutput, InvalidReserves, UnsupportedPath
from cpamm.ledger import Ledger
from cpamm.models.types import normalize_address
from cpamm.pools.pool import PairKey
from cpamm.pools.registry import PairRegistry
from cpamm.safe_int import S

logger = structlog.get_logger()


class SwapEngine:
    """Prices and executes swaps against pools in a PairRegistry.

    Args:
        registry: Pool store shared with the LiquidityManager
        ledger: Token custody collaborator
        custody: Exchange account holding pooled assets on the ledger
        amm: Pricing curve (ConstantProduct with the default fee if None)
        clock: Source of the current time for deadline checks
    """

    def __init__(
        self,
        registry: PairRegistry,
        ledger: Ledger,
        custody: str,
        amm: AMM | None = None,
        clock: Clock = system_clock,
    ) -> None:
        self._registry = registry
        self._ledger = ledger
        self._custody = normalize_address(custody, validate=True)
        self.amm = amm if amm is not None else ConstantProduct()
        self._clock = clock

    def swap_exact_tokens_for_tokens(
        self,
        caller: str,
        amount_in: int,
        amount_out_min: int,
        path: Sequence[str],
        recipient: str,
        deadline: int,
    ) -> SwapResult:
        """Swap an exact amount of path[0] for as much path[1] as the pool gives.

        The output is priced on the reserves as they stand when the pool lock
        is taken, before the input is added.

        Raises:
            Expired: If the deadline has passed
            UnsupportedPath: If path is not exactly [token_in, token_out]
            IdenticalTokens: If token_in == token_out
            InvalidReserves: If amount_in is zero or the pool has no reserves
            InsufficientOutput: If the swap would pay out zero
            SlippageExceeded: If the output is below amount_out_min
            TransferFailed: If the ledger does not deliver either leg
        """
        check_deadline(deadline, self._clock())
        if len(path) != 2:
            raise UnsupportedPath(f"Path must contain exactly 2 tokens, got {len(path)}")
        token_in, token_out = path
        key = PairKey.of(token_in, token_out)
        require_accounts(caller, recipient)
        require_uint256(amount_in, amount_out_min)

        with self._registry.lock(key):
            pool = self._registry.find(key.token0, key.token1)
            if pool is None:
                raise InvalidReserves(f"No pool for {key.token0[-8:]}/{key.token1[-8:]}")

            reserve_in, reserve_out = pool.get_reserves(token_in)
            amount_out = self.amm.get_amount_out(amount_in, reserve_in, reserve_out)
            if amount_out == 0:
                raise InsufficientOutput(f"Swap of {amount_in} yields zero output")
            require_minimum(amount_out, amount_out_min, "amount_out")

            journal = TransferJournal(self._ledger, self._custody)
            with atomic(pool, journal):
                journal.pull(token_in, caller, amount_in)
                pool.set_reserves(
                    token_in,
                    (S(reserve_in) + amount_in).value,
                    (S(reserve_out) - amount_out).value,
                )
                journal.push(token_out, recipient, amount_out)

        logger.info(
            "swap_executed",
            token_in=token_in[-8:],
            token_out=token_out[-8:],
            amount_in=amount_in,
            amount_out=amount_out,
            recipient=recipient[-8:],
        )
        return SwapResult(
            amount_in=amount_in,
            amount_out=amount_out,
            token_in=normalize_address(token_in),
            token_out=normalize_address(token_out),
            pair_id=key.pair_id,
            recipient=normalize_address(recipient),
        )
