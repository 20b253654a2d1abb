"""Read-only views of pool state: spot price, reserves and share balances."""

from __future__ import annotations

from cpamm.constants import PRICE_SCALE
from cpamm.errors import EmptyReserves
from cpamm.pools.pool import PairKey
from cpamm.pools.registry import PairRegistry
from cpamm.safe_int import S


class PriceOracle:
    """Spot prices derived from current reserves.

    The spot price moves with every trade and can be pushed around by a
    single large swap; it is not a time-weighted price.
    """

    def __init__(self, registry: PairRegistry) -> None:
        self._registry = registry

    def get_reserves(self, token_a: str, token_b: str) -> tuple[int, int]:
        """Reserves as (reserve_a, reserve_b); (0, 0) if the pair has no pool."""
        key = PairKey.of(token_a, token_b)
        with self._registry.lock(key):
            pool = self._registry.find(key.token0, key.token1)
            if pool is None:
                return 0, 0
            return pool.get_reserves(token_a)

    def get_price(self, token_a: str, token_b: str) -> int:
        """Amount of token_b per unit of token_a, scaled by PRICE_SCALE.

        Raises:
            IdenticalTokens: If token_a == token_b
            EmptyReserves: If either reserve is zero
        """
        reserve_a, reserve_b = self.get_reserves(token_a, token_b)
        if reserve_a == 0 or reserve_b == 0:
            raise EmptyReserves(f"Pool reserves are empty: ({reserve_a}, {reserve_b})")
        return (S(reserve_b) * PRICE_SCALE // reserve_a).value

    def total_shares(self, token_a: str, token_b: str) -> int:
        pool = self._registry.find(token_a, token_b)
        return pool.total_shares if pool is not None else 0

    def liquidity_balance_of(self, token_a: str, token_b: str, account: str) -> int:
        pool = self._registry.find(token_a, token_b)
        return pool.balance_of(account) if pool is not None else 0
