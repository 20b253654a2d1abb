"""Protocol constants for the exchange.

Centralizes pricing scales and fee parameters.
"""

# Fixed-point scale for spot prices (1e18)
# get_price returns reserve_b * PRICE_SCALE // reserve_a
PRICE_SCALE = 10**18

# Fee denominator: fees are expressed in basis points of the input amount
FEE_DENOMINATOR = 10_000

# Standard 0.3% swap fee. With FEE_DENOMINATOR this is the 997/1000 formula.
DEFAULT_FEE_BPS = 30

# Default custody account of the exchange on the ledger
DEFAULT_CUSTODY = "0x00000000000000000000000000000000000c0de1"
