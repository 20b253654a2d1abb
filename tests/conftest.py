"""Pytest configuration and fixtures."""

import pytest

from cpamm.exchange import Exchange
from cpamm.ledger import InMemoryLedger
from cpamm.pools import PairRegistry
from tests.helpers import ALICE, FAR_FUTURE, USDC, WETH, FakeClock, FlakyLedger, fund_and_approve, make_exchange


@pytest.fixture
def clock() -> FakeClock:
    """A fixed clock at a known timestamp."""
    return FakeClock()


@pytest.fixture
def ledger() -> InMemoryLedger:
    """A ledger where ALICE, BOB and CAROL hold and have approved every test token."""
    return fund_and_approve()


@pytest.fixture
def flaky_ledger(ledger: InMemoryLedger) -> FlakyLedger:
    """The funded ledger wrapped so individual tokens can be made to fail."""
    return FlakyLedger(ledger)


@pytest.fixture
def registry() -> PairRegistry:
    return PairRegistry()


@pytest.fixture
def exchange(ledger: InMemoryLedger, clock: FakeClock) -> Exchange:
    """An exchange with the default 0.3% fee and no pools."""
    return make_exchange(ledger=ledger, clock=clock)


@pytest.fixture
def seeded_exchange(exchange: Exchange) -> Exchange:
    """An exchange with a USDC/WETH pool of (1000, 2000) owned by ALICE."""
    exchange.add_liquidity(ALICE, USDC, WETH, 1000, 2000, 0, 0, ALICE, FAR_FUTURE)
    return exchange
