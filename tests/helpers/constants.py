"""Shared address constants for tests.

All addresses are lowercase for consistency with normalize_address().
Canonical pair order of the tokens is DAI < USDC < WETH.
"""

from cpamm.constants import DEFAULT_CUSTODY

# =============================================================================
# Tokens
# =============================================================================

WETH = "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2"
USDC = "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"
DAI = "0x6b175474e89094c44da98b954eedeac495271d0f"

# =============================================================================
# Accounts
# =============================================================================

ALICE = "0x1111111111111111111111111111111111111111"
BOB = "0x2222222222222222222222222222222222222222"
CAROL = "0x3333333333333333333333333333333333333333"

CUSTODY = DEFAULT_CUSTODY

# Far-future deadline for tests that are not about expiry
FAR_FUTURE = 2**32 - 1
