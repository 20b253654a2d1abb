"""Asset ledger interface and an in-memory reference ledger.

The exchange never holds balances itself. It asks a Ledger to move tokens
between accounts and its own custody account. Ledgers are treated as
untrusted: callers verify balance deltas instead of relying on the boolean
return value alone (see cpamm.engine.atomic).
"""

from __future__ import annotations

import json
from collections import defaultdict
from pathlib import Path
from typing import Protocol, runtime_checkable

import structlog
from pydantic import TypeAdapter

from cpamm.models.types import Address, Uint256, normalize_address
from cpamm.safe_int import is_uint256

logger = structlog.get_logger()


@runtime_checkable
class Ledger(Protocol):
    """Token custody capabilities the exchange depends on.

    All calls are token-scoped so that one collaborator can serve every asset
    the exchange trades. Mutating calls return False on rejection.
    """

    def balance_of(self, token: str, account: str) -> int: ...

    def transfer(self, token: str, sender: str, to: str, amount: int) -> bool: ...

    def transfer_from(self, token: str, spender: str, owner: str, to: str, amount: int) -> bool: ...

    def allowance(self, token: str, owner: str, spender: str) -> int: ...

    def approve(self, token: str, owner: str, spender: str, amount: int) -> bool: ...


# {token: {account: balance}} with decimal-string or int balances
Genesis = dict[Address, dict[Address, Uint256]]

_genesis_adapter: TypeAdapter[Genesis] = TypeAdapter(Genesis)


class InMemoryLedger:
    """Fixed-supply, non-rebasing ledger kept in process memory.

    Supply only enters through the genesis mapping; transfers conserve it.
    Rejections (insufficient balance or allowance, invalid amount) return
    False and never partially apply.
    """

    def __init__(self, genesis: dict[str, dict[str, int]] | None = None) -> None:
        self._balances: dict[str, dict[str, int]] = defaultdict(dict)
        self._allowances: dict[tuple[str, str, str], int] = {}

        for token, holders in (genesis or {}).items():
            token_norm = normalize_address(token, validate=True)
            for account, balance in holders.items():
                if not is_uint256(balance):
                    raise ValueError(f"Invalid genesis balance for {account}: {balance!r}")
                account_norm = normalize_address(account, validate=True)
                self._balances[token_norm][account_norm] = balance

    @classmethod
    def from_json_file(cls, path: str | Path) -> InMemoryLedger:
        """Load a genesis mapping from a JSON file.

        Raises:
            pydantic.ValidationError: If the file does not match the genesis shape
        """
        raw = json.loads(Path(path).read_text())
        validated = _genesis_adapter.validate_python(raw)
        genesis = {
            token: {account: int(balance) for account, balance in holders.items()}
            for token, holders in validated.items()
        }
        logger.info("ledger_genesis_loaded", path=str(path), tokens=len(genesis))
        return cls(genesis)

    def total_supply(self, token: str) -> int:
        return sum(self._balances[normalize_address(token)].values())

    def balance_of(self, token: str, account: str) -> int:
        return self._balances[normalize_address(token)].get(normalize_address(account), 0)

    def allowance(self, token: str, owner: str, spender: str) -> int:
        key = (normalize_address(token), normalize_address(owner), normalize_address(spender))
        return self._allowances.get(key, 0)

    def approve(self, token: str, owner: str, spender: str, amount: int) -> bool:
        if not is_uint256(amount):
            return False
        key = (normalize_address(token), normalize_address(owner), normalize_address(spender))
        self._allowances[key] = amount
        logger.debug(
            "ledger_approve",
            token=key[0][-8:],
            owner=key[1][-8:],
            spender=key[2][-8:],
            amount=amount,
        )
        return True

    def transfer(self, token: str, sender: str, to: str, amount: int) -> bool:
        return self._move(normalize_address(token), normalize_address(sender), normalize_address(to), amount)

    def transfer_from(self, token: str, spender: str, owner: str, to: str, amount: int) -> bool:
        key = (normalize_address(token), normalize_address(owner), normalize_address(spender))
        allowed = self._allowances.get(key, 0)
        if not is_uint256(amount) or allowed < amount:
            logger.debug(
                "ledger_allowance_rejected",
                token=key[0][-8:],
                owner=key[1][-8:],
                spender=key[2][-8:],
                allowed=allowed,
                amount=amount,
            )
            return False
        if not self._move(key[0], key[1], normalize_address(to), amount):
            return False
        self._allowances[key] = allowed - amount
        return True

    def _move(self, token: str, sender: str, to: str, amount: int) -> bool:
        if not is_uint256(amount):
            return False
        balances = self._balances[token]
        available = balances.get(sender, 0)
        if available < amount:
            logger.debug(
                "ledger_balance_rejected",
                token=token[-8:],
                sender=sender[-8:],
                available=available,
                amount=amount,
            )
            return False
        balances[sender] = available - amount
        balances[to] = balances.get(to, 0) + amount
        logger.debug("ledger_transfer", token=token[-8:], sender=sender[-8:], to=to[-8:], amount=amount)
        return True


__all__ = ["Ledger", "InMemoryLedger", "Genesis"]
