"""Precondition checks shared by the mutating operations."""

from __future__ import annotations

import time
from collections.abc import Callable

from cpamm.errors import Expired, SlippageExceeded
from cpamm.models.types import normalize_address
from cpamm.safe_int import S

# Returns the current time as integer unix seconds
Clock = Callable[[], int]


def system_clock() -> int:
    return int(time.time())


def check_deadline(deadline: int, now: int) -> None:
    """Reject operations whose deadline has passed.

    A deadline equal to the current time is still valid.

    Raises:
        Expired: If now > deadline
    """
    if now > deadline:
        raise Expired(f"Deadline {deadline} passed (now {now})")


def require_uint256(*amounts: int) -> None:
    """Validate amounts before any state is touched.

    Raises:
        TypeError: If an amount is not an int
        Uint256Overflow: If an amount is negative or exceeds uint256
    """
    for amount in amounts:
        S(amount)


def require_accounts(*accounts: str) -> None:
    """Raises ValueError if any account is not a valid address."""
    for account in accounts:
        normalize_address(account, validate=True)


def require_minimum(amount: int, minimum: int, name: str) -> None:
    """Raises SlippageExceeded if amount < minimum."""
    if amount < minimum:
        raise SlippageExceeded(f"{name} {amount} below minimum {minimum}")
