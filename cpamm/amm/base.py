"""Pricing curve interface and swap results."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class SwapResult:
    """An executed swap. Addresses are normalized to lowercase."""

    amount_in: int
    amount_out: int
    token_in: str
    token_out: str
    pair_id: str
    recipient: str


class AMM(ABC):
    """A pricing curve over a pair's reserves.

    Implementations are pure functions of their arguments and their own fee
    configuration; they never read or write pool state.
    """

    @abstractmethod
    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Output paid for exactly amount_in, rounded down.

        Raises:
            InvalidReserves: If the inputs cannot be priced
        """

    @abstractmethod
    def get_amount_in(self, amount_out: int, reserve_in: int, reserve_out: int) -> int:
        """Input that buys at least amount_out, rounded up.

        Raises:
            InvalidReserves: If the inputs cannot be priced
        """
