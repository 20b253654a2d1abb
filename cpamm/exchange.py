"""Exchange facade: the public operation surface of the pool engine.

The Exchange owns one PairRegistry and wires it into the liquidity, swap and
oracle components together with the ledger, custody account, fee and clock.
"""

from __future__ import annotations

import threading
from collections.abc import Sequence

import structlog

from cpamm.amm.base import SwapResult
from cpamm.amm.constant_product import ConstantProduct
from cpamm.config import DEFAULT_FEE_CONFIG, FeeConfig, Settings
from cpamm.engine.guards import Clock, system_clock
from cpamm.engine.liquidity import AddLiquidityResult, LiquidityManager, RemoveLiquidityResult
from cpamm.engine.oracle import PriceOracle
from cpamm.engine.swap import SwapEngine
from cpamm.ledger import InMemoryLedger, Ledger
from cpamm.models.types import normalize_address
from cpamm.pools.pool import PairKey
from cpamm.pools.registry import PairRegistry

logger = structlog.get_logger()


class Exchange:
    """Constant product exchange over a ledger.

    Args:
        ledger: Token custody collaborator
        custody: Exchange account on the ledger; callers approve it before
            depositing or swapping
        fee: Swap fee configuration (0.3% by default, FEELESS to disable)
        clock: Current time source for deadline checks
        registry: Pool store (a fresh one if None)
    """

    def __init__(
        self,
        ledger: Ledger,
        custody: str,
        fee: FeeConfig = DEFAULT_FEE_CONFIG,
        clock: Clock = system_clock,
        registry: PairRegistry | None = None,
    ) -> None:
        self.ledger = ledger
        self.custody = normalize_address(custody, validate=True)
        self.fee = fee
        self.registry = registry if registry is not None else PairRegistry()
        self.amm = ConstantProduct(fee)
        self.liquidity = LiquidityManager(self.registry, ledger, self.custody, clock=clock)
        self.swaps = SwapEngine(self.registry, ledger, self.custody, amm=self.amm, clock=clock)
        self.oracle = PriceOracle(self.registry)

    # --- Mutating operations ---

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
        return self.liquidity.add_liquidity(
            caller,
            token_a,
            token_b,
            amount_a_desired,
            amount_b_desired,
            amount_a_min,
            amount_b_min,
            recipient,
            deadline,
        )

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
        return self.liquidity.remove_liquidity(
            caller, token_a, token_b, share_amount, amount_a_min, amount_b_min, recipient, deadline
        )

    def swap_exact_tokens_for_tokens(
        self,
        caller: str,
        amount_in: int,
        amount_out_min: int,
        path: Sequence[str],
        recipient: str,
        deadline: int,
    ) -> SwapResult:
        return self.swaps.swap_exact_tokens_for_tokens(
            caller, amount_in, amount_out_min, path, recipient, deadline
        )

    # --- Queries ---

    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Output for an exact input at this exchange's fee (pure)."""
        return self.amm.get_amount_out(amount_in, reserve_in, reserve_out)

    def get_amount_in(self, amount_out: int, reserve_in: int, reserve_out: int) -> int:
        """Input needed for an exact output at this exchange's fee (pure)."""
        return self.amm.get_amount_in(amount_out, reserve_in, reserve_out)

    def get_price(self, token_a: str, token_b: str) -> int:
        return self.oracle.get_price(token_a, token_b)

    def get_reserves(self, token_a: str, token_b: str) -> tuple[int, int]:
        return self.oracle.get_reserves(token_a, token_b)

    def total_shares(self, token_a: str, token_b: str) -> int:
        return self.oracle.total_shares(token_a, token_b)

    def liquidity_balance_of(self, token_a: str, token_b: str, account: str) -> int:
        return self.oracle.liquidity_balance_of(token_a, token_b, account)

    def pairs(self) -> list[PairKey]:
        return self.registry.pairs()


def create_exchange(settings: Settings) -> Exchange:
    """Build an exchange over an in-memory ledger from service settings."""
    if settings.genesis_path:
        ledger = InMemoryLedger.from_json_file(settings.genesis_path)
    else:
        ledger = InMemoryLedger()
    logger.info(
        "exchange_created",
        custody=settings.custody,
        fee_bps=settings.fee.fee_bps,
        genesis=settings.genesis_path,
    )
    return Exchange(ledger=ledger, custody=settings.custody, fee=settings.fee)


_default_exchange: Exchange | None = None
_default_lock = threading.Lock()


def get_default_exchange() -> Exchange:
    """Return the process-wide exchange, creating it from the environment."""
    global _default_exchange
    with _default_lock:
        if _default_exchange is None:
            _default_exchange = create_exchange(Settings.from_env())
        return _default_exchange
