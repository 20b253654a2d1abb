"""Tests for the Exchange facade and its construction."""

import json
import threading

import pytest

import cpamm.exchange as exchange_module
from cpamm import Exchange
from cpamm.config import FEELESS, FeeConfig, Settings
from cpamm.exchange import create_exchange, get_default_exchange
from cpamm.pools import PairKey
from tests.helpers import ALICE, BOB, CAROL, CUSTODY, DAI, FAR_FUTURE, USDC, WETH, make_exchange
from tests.helpers.factories import DEFAULT_BALANCE


class TestExchangeSurface:
    """Tests for the public operations."""

    def test_custody_is_normalized(self, ledger):
        exchange = Exchange(ledger=ledger, custody=CUSTODY.upper().replace("0X", "0x"))
        assert exchange.custody == CUSTODY

    def test_invalid_custody(self, ledger):
        with pytest.raises(ValueError):
            Exchange(ledger=ledger, custody="custody")

    def test_pure_quotes_follow_fee(self, ledger):
        assert make_exchange(ledger=ledger).get_amount_out(1000, 1000, 2000) == 998
        assert make_exchange(ledger=ledger, fee=FEELESS).get_amount_out(1000, 1000, 2000) == 1000
        assert make_exchange(ledger=ledger).get_amount_in(181, 1000, 2000) == 100

    def test_pairs(self, exchange):
        exchange.add_liquidity(ALICE, WETH, USDC, 10, 10, 0, 0, ALICE, FAR_FUTURE)
        exchange.add_liquidity(ALICE, DAI, USDC, 10, 10, 0, 0, ALICE, FAR_FUTURE)
        assert exchange.pairs() == [PairKey.of(DAI, USDC), PairKey.of(USDC, WETH)]

    def test_pools_are_independent(self, exchange):
        exchange.add_liquidity(ALICE, USDC, WETH, 1000, 2000, 0, 0, ALICE, FAR_FUTURE)
        exchange.add_liquidity(ALICE, USDC, DAI, 500, 500, 0, 0, ALICE, FAR_FUTURE)
        exchange.swap_exact_tokens_for_tokens(BOB, 100, 0, [USDC, WETH], BOB, FAR_FUTURE)

        assert exchange.get_reserves(USDC, DAI) == (500, 500)
        assert exchange.total_shares(USDC, DAI) == 1000

    def test_full_lifecycle(self, exchange, ledger):
        """Deposit, trade both ways, then withdraw everything."""
        exchange.add_liquidity(ALICE, USDC, WETH, 10**6, 2 * 10**6, 0, 0, ALICE, FAR_FUTURE)
        exchange.add_liquidity(CAROL, USDC, WETH, 10**6, 2 * 10**6, 0, 0, CAROL, FAR_FUTURE)
        exchange.swap_exact_tokens_for_tokens(BOB, 10**5, 0, [USDC, WETH], BOB, FAR_FUTURE)
        exchange.swap_exact_tokens_for_tokens(BOB, 10**5, 0, [WETH, USDC], BOB, FAR_FUTURE)

        for provider in (ALICE, CAROL):
            shares = exchange.liquidity_balance_of(USDC, WETH, provider)
            exchange.remove_liquidity(provider, USDC, WETH, shares, 0, 0, provider, FAR_FUTURE)

        assert exchange.total_shares(USDC, WETH) == 0
        reserve_usdc, reserve_weth = exchange.get_reserves(USDC, WETH)
        assert ledger.balance_of(USDC, CUSTODY) == reserve_usdc
        assert ledger.balance_of(WETH, CUSTODY) == reserve_weth
        for token in (USDC, WETH):
            total = sum(ledger.balance_of(token, account) for account in (ALICE, BOB, CAROL, CUSTODY))
            assert total == 3 * DEFAULT_BALANCE


class TestConcurrency:
    """Tests for concurrent operations on one pool."""

    def test_concurrent_swaps_serialize(self, seeded_exchange, ledger):
        errors = []

        def trader(path):
            try:
                for _ in range(20):
                    seeded_exchange.swap_exact_tokens_for_tokens(BOB, 10, 0, path, BOB, FAR_FUTURE)
            except Exception as exc:  # noqa: BLE001
                errors.append(exc)

        threads = [threading.Thread(target=trader, args=([USDC, WETH],)) for _ in range(4)]
        threads += [threading.Thread(target=trader, args=([WETH, USDC],)) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        reserve_usdc, reserve_weth = seeded_exchange.get_reserves(USDC, WETH)
        assert ledger.balance_of(USDC, CUSTODY) == reserve_usdc
        assert ledger.balance_of(WETH, CUSTODY) == reserve_weth
        assert reserve_usdc * reserve_weth >= 1000 * 2000

    def test_concurrent_deposits_account_every_share(self, exchange):
        def provider(account):
            for _ in range(25):
                exchange.add_liquidity(account, USDC, WETH, 3, 7, 0, 0, account, FAR_FUTURE)

        threads = [threading.Thread(target=provider, args=(account,)) for account in (ALICE, BOB, CAROL)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert exchange.get_reserves(USDC, WETH) == (225, 525)
        assert exchange.total_shares(USDC, WETH) == 750
        assert exchange.liquidity_balance_of(USDC, WETH, BOB) == 250


class TestCreateExchange:
    """Tests for building an exchange from settings."""

    def test_default_settings(self):
        exchange = create_exchange(Settings())
        assert exchange.fee.fee_bps == 30
        assert exchange.custody == CUSTODY
        assert exchange.ledger.balance_of(USDC, ALICE) == 0

    def test_with_genesis_and_fee(self, tmp_path):
        path = tmp_path / "genesis.json"
        path.write_text(json.dumps({USDC: {ALICE: "500"}}))

        exchange = create_exchange(Settings(fee=FeeConfig(fee_bps=5), genesis_path=str(path)))
        assert exchange.fee.fee_bps == 5
        assert exchange.ledger.balance_of(USDC, ALICE) == 500

    def test_default_exchange_is_shared(self, monkeypatch):
        monkeypatch.setattr(exchange_module, "_default_exchange", None)
        monkeypatch.setenv("CPAMM_FEE_BPS", "0")

        first = get_default_exchange()
        assert first is get_default_exchange()
        assert first.fee.is_feeless
