"""All-or-nothing execution of pool operations.

An operation mutates one pool and moves tokens through the ledger. Pool
state is snapshotted on entry; on any exception the snapshot is restored and
ledger moves already made are reversed, newest first, before the exception
propagates.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum

import structlog

from cpamm.errors import TransferFailed
from cpamm.ledger import Ledger
from cpamm.models.types import normalize_address
from cpamm.pools.pool import Pool

logger = structlog.get_logger()


class MoveKind(Enum):
    """Direction of a ledger move relative to custody."""

    PULL = "pull"
    PUSH = "push"


@dataclass(frozen=True)
class LedgerMove:
    """A ledger move that changed balances."""

    kind: MoveKind
    token: str
    counterparty: str
    amount: int


class TransferJournal:
    """Verified ledger moves between custody and counterparties.

    Every move checks the receiving balance before and after the call. A move
    counts as successful only if the ledger returned True and the receiver's
    balance grew by exactly the requested amount. Whatever did arrive is
    journaled so that unwind() can send it back.
    """

    def __init__(self, ledger: Ledger, custody: str) -> None:
        self._ledger = ledger
        self._custody = normalize_address(custody)
        self.moves: list[LedgerMove] = []

    def pull(self, token: str, owner: str, amount: int) -> None:
        """Move amount of token from owner into custody.

        Raises:
            TransferFailed: If the ledger rejects or misreports the move
        """
        if amount == 0:
            return
        before = self._ledger.balance_of(token, self._custody)
        ok = self._ledger.transfer_from(token, self._custody, owner, self._custody, amount)
        received = self._ledger.balance_of(token, self._custody) - before
        if received > 0:
            self.moves.append(LedgerMove(MoveKind.PULL, token, owner, received))
        if not ok or received != amount:
            logger.warning(
                "transfer_in_failed",
                token=token[-8:],
                owner=owner[-8:],
                amount=amount,
                reported_ok=ok,
                received=received,
            )
            raise TransferFailed(f"Pull of {amount} {token} from {owner} failed (received {received})")

    def push(self, token: str, to: str, amount: int) -> None:
        """Move amount of token from custody to a recipient.

        Raises:
            TransferFailed: If the ledger rejects or misreports the move
        """
        if amount == 0:
            return
        before = self._ledger.balance_of(token, to)
        ok = self._ledger.transfer(token, self._custody, to, amount)
        delivered = self._ledger.balance_of(token, to) - before
        if delivered > 0:
            self.moves.append(LedgerMove(MoveKind.PUSH, token, to, delivered))
        if not ok or delivered != amount:
            logger.warning(
                "transfer_out_failed",
                token=token[-8:],
                recipient=to[-8:],
                amount=amount,
                reported_ok=ok,
                delivered=delivered,
            )
            raise TransferFailed(f"Push of {amount} {token} to {to} failed (delivered {delivered})")

    def unwind(self) -> None:
        """Reverse journaled moves, newest first.

        Pulled funds are returned from custody. Pushed funds can only be
        reclaimed if the recipient has granted custody an allowance; moves that
        cannot be reversed are logged at error level.
        """
        while self.moves:
            move = self.moves.pop()
            if move.kind is MoveKind.PULL:
                ok = self._ledger.transfer(move.token, self._custody, move.counterparty, move.amount)
            else:
                ok = self._ledger.transfer_from(
                    move.token, self._custody, move.counterparty, self._custody, move.amount
                )
            if ok:
                logger.info(
                    "transfer_reversed",
                    kind=move.kind.value,
                    token=move.token[-8:],
                    counterparty=move.counterparty[-8:],
                    amount=move.amount,
                )
            else:
                logger.error(
                    "transfer_reversal_failed",
                    kind=move.kind.value,
                    token=move.token,
                    counterparty=move.counterparty,
                    amount=move.amount,
                )


@contextmanager
def atomic(pool: Pool, journal: TransferJournal) -> Iterator[None]:
    """Run a block against pool as one unit.

    The caller must hold the pool's lock. Invariants are checked before the
    block commits, so a violation rolls back too.
    """
    snapshot = pool.snapshot()
    try:
        yield
        pool.check_invariants()
    except Exception as exc:
        pool.restore(snapshot)
        journal.unwind()
        logger.warning(
            "operation_rolled_back",
            token0=pool.key.token0[-8:],
            token1=pool.key.token1[-8:],
            error=type(exc).__name__,
        )
        raise
