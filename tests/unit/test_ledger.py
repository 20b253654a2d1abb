"""Tests for the in-memory reference ledger."""

import json

import pytest
from pydantic import ValidationError

from cpamm.ledger import InMemoryLedger, Ledger
from tests.helpers import ALICE, BOB, CUSTODY, USDC, WETH

WETH_CHECKSUM = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"


@pytest.fixture
def small_ledger():
    return InMemoryLedger({USDC: {ALICE: 1000, BOB: 50}})


class TestGenesis:
    """Tests for ledger construction."""

    def test_balances(self, small_ledger):
        assert small_ledger.balance_of(USDC, ALICE) == 1000
        assert small_ledger.balance_of(USDC, BOB) == 50
        assert small_ledger.balance_of(WETH, ALICE) == 0
        assert small_ledger.total_supply(USDC) == 1050

    def test_empty(self):
        assert InMemoryLedger().balance_of(USDC, ALICE) == 0

    def test_addresses_are_case_insensitive(self):
        ledger = InMemoryLedger({WETH_CHECKSUM: {ALICE: 5}})
        assert ledger.balance_of(WETH, ALICE) == 5

    def test_invalid_balance(self):
        with pytest.raises(ValueError):
            InMemoryLedger({USDC: {ALICE: -1}})
        with pytest.raises(ValueError):
            InMemoryLedger({USDC: {ALICE: "10"}})

    def test_invalid_address(self):
        with pytest.raises(ValueError):
            InMemoryLedger({"0x12": {ALICE: 1}})

    def test_from_json_file(self, tmp_path):
        path = tmp_path / "genesis.json"
        path.write_text(json.dumps({WETH_CHECKSUM: {ALICE: "1000000000000000000", BOB: 7}}))

        ledger = InMemoryLedger.from_json_file(path)
        assert ledger.balance_of(WETH, ALICE) == 10**18
        assert ledger.balance_of(WETH, BOB) == 7

    def test_from_json_file_rejects_bad_shape(self, tmp_path):
        path = tmp_path / "genesis.json"
        path.write_text(json.dumps({WETH: {ALICE: "-5"}}))
        with pytest.raises(ValidationError):
            InMemoryLedger.from_json_file(path)

    def test_satisfies_protocol(self, small_ledger):
        assert isinstance(small_ledger, Ledger)


class TestTransfer:
    """Tests for direct transfers."""

    def test_transfer(self, small_ledger):
        assert small_ledger.transfer(USDC, ALICE, BOB, 100)
        assert small_ledger.balance_of(USDC, ALICE) == 900
        assert small_ledger.balance_of(USDC, BOB) == 150
        assert small_ledger.total_supply(USDC) == 1050

    def test_insufficient_balance(self, small_ledger):
        assert not small_ledger.transfer(USDC, BOB, ALICE, 51)
        assert small_ledger.balance_of(USDC, BOB) == 50

    def test_invalid_amount(self, small_ledger):
        assert not small_ledger.transfer(USDC, ALICE, BOB, -1)
        assert small_ledger.balance_of(USDC, ALICE) == 1000


class TestAllowances:
    """Tests for approve and transfer_from."""

    def test_approve(self, small_ledger):
        assert small_ledger.approve(USDC, ALICE, CUSTODY, 300)
        assert small_ledger.allowance(USDC, ALICE, CUSTODY) == 300
        assert small_ledger.allowance(USDC, BOB, CUSTODY) == 0

    def test_approve_invalid_amount(self, small_ledger):
        assert not small_ledger.approve(USDC, ALICE, CUSTODY, -1)
        assert small_ledger.allowance(USDC, ALICE, CUSTODY) == 0

    def test_transfer_from_spends_allowance(self, small_ledger):
        small_ledger.approve(USDC, ALICE, CUSTODY, 300)
        assert small_ledger.transfer_from(USDC, CUSTODY, ALICE, CUSTODY, 200)

        assert small_ledger.balance_of(USDC, CUSTODY) == 200
        assert small_ledger.allowance(USDC, ALICE, CUSTODY) == 100

    def test_transfer_from_over_allowance(self, small_ledger):
        small_ledger.approve(USDC, ALICE, CUSTODY, 100)
        assert not small_ledger.transfer_from(USDC, CUSTODY, ALICE, CUSTODY, 101)
        assert small_ledger.allowance(USDC, ALICE, CUSTODY) == 100
        assert small_ledger.balance_of(USDC, ALICE) == 1000

    def test_transfer_from_over_balance_keeps_allowance(self, small_ledger):
        small_ledger.approve(USDC, BOB, CUSTODY, 1000)
        assert not small_ledger.transfer_from(USDC, CUSTODY, BOB, CUSTODY, 51)
        assert small_ledger.allowance(USDC, BOB, CUSTODY) == 1000

    def test_allowance_is_per_token(self, small_ledger):
        small_ledger.approve(USDC, ALICE, CUSTODY, 100)
        assert small_ledger.allowance(WETH, ALICE, CUSTODY) == 0
