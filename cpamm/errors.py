"""Exchange error classes.

Every rejected operation raises exactly one of these. The ``code`` attribute
is stable and is what the HTTP service reports to clients.
"""


class ExchangeError(Exception):
    """Base error for exchange operations."""

    code: str = "EXCHANGE_ERROR"


class Expired(ExchangeError):
    """The caller-supplied deadline is earlier than the current time."""

    code = "EXPIRED"


class IdenticalTokens(ExchangeError):
    """Both sides of a pair are the same token."""

    code = "IDENTICAL_TOKENS"


class SlippageExceeded(ExchangeError):
    """An amount fell below the caller's minimum."""

    code = "SLIPPAGE_EXCEEDED"


class InsufficientLiquidity(ExchangeError):
    """Not enough shares to burn, or a deposit that would mint nothing."""

    code = "INSUFFICIENT_LIQUIDITY"


class InsufficientOutput(ExchangeError):
    """A swap would pay out zero."""

    code = "INSUFFICIENT_OUTPUT"


class InvalidReserves(ExchangeError):
    """Pricing inputs are zero or outside the uint256 range."""

    code = "INVALID_RESERVES"


class EmptyReserves(ExchangeError):
    """A price was requested from a pool with a zero reserve."""

    code = "EMPTY_RESERVES"


class UnsupportedPath(ExchangeError):
    """Swap path is not exactly two tokens long."""

    code = "UNSUPPORTED_PATH"


class TransferFailed(ExchangeError):
    """The ledger rejected a transfer or its balances did not move as reported."""

    code = "TRANSFER_FAILED"


class ReentrantCall(ExchangeError):
    """An operation on a pool was started while another one on it was running."""

    code = "REENTRANT_CALL"


__all__ = [
    "ExchangeError",
    "Expired",
    "IdenticalTokens",
    "SlippageExceeded",
    "InsufficientLiquidity",
    "InsufficientOutput",
    "InvalidReserves",
    "EmptyReserves",
    "UnsupportedPath",
    "TransferFailed",
    "ReentrantCall",
]
