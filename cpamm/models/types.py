"""Wire types shared by the exchange models.

Tokens and accounts are both identified by a 0x-prefixed 20-byte hex string.
The exchange compares them case-insensitively, so every address is folded to
lowercase before it is used as a key. Amounts are uint256 values carried as
decimal strings so that JSON clients never round them through a float.
"""

import re
from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from cpamm.safe_int import UINT256_MAX, is_uint256

ADDRESS_PATTERN = r"^0x[a-fA-F0-9]{40}$"

_ADDRESS_RE = re.compile(ADDRESS_PATTERN)


def validate_uint256(value: Any) -> str:
    """Coerce an int or decimal string to a canonical uint256 string.

    Raises:
        ValueError: For booleans, non-decimal strings, other types, and values
            outside [0, 2**256 - 1]
    """
    if isinstance(value, str):
        text = value.strip()
        if not text.lstrip("-").isdigit():
            raise ValueError(f"Uint256 must be a decimal integer string: '{value}'")
        value = int(text)
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"Uint256 must be string or int, got {type(value).__name__}")
    if not is_uint256(value):
        raise ValueError(f"Uint256 out of range [0, {UINT256_MAX}]: {value}")
    return str(value)


# Token or account address, any case
Address = Annotated[str, Field(pattern=ADDRESS_PATTERN)]

# Reserve, share or token amount as a decimal string
Uint256 = Annotated[
    str,
    BeforeValidator(validate_uint256),
    Field(description="256-bit unsigned integer as decimal string"),
]


def is_valid_address(address: object) -> bool:
    return isinstance(address, str) and _ADDRESS_RE.fullmatch(address) is not None


def normalize_address(address: str, *, validate: bool = False) -> str:
    """Fold an address to the lowercase 0x form used for pool and ledger keys.

    A missing 0x prefix is added. With ``validate=True`` anything that is not
    40 hex digits afterwards raises ValueError.
    """
    folded = address.lower()
    if not folded.startswith("0x"):
        folded = f"0x{folded}"
    if validate and not is_valid_address(folded):
        raise ValueError(f"Invalid address: {address}")
    return folded
