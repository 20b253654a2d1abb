"""Test helpers module for shared test utilities.

- constants: Token and account addresses
- factories: Ledger and exchange factory functions
"""

from tests.helpers.constants import ALICE, BOB, CAROL, CUSTODY, DAI, FAR_FUTURE, USDC, WETH
from tests.helpers.factories import FakeClock, FlakyLedger, ReentrantLedger, fund_and_approve, make_exchange

__all__ = [
    # Constants
    "WETH",
    "USDC",
    "DAI",
    "ALICE",
    "BOB",
    "CAROL",
    "CUSTODY",
    "FAR_FUTURE",
    # Factories
    "FakeClock",
    "FlakyLedger",
    "ReentrantLedger",
    "fund_and_approve",
    "make_exchange",
]
