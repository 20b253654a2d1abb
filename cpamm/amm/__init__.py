"""Pricing curves."""

from cpamm.amm.base import AMM, SwapResult
from cpamm.amm.constant_product import ConstantProduct, constant_product, quote_in, quote_out

__all__ = [
    # Base classes
    "AMM",
    "SwapResult",
    # Constant product
    "ConstantProduct",
    "constant_product",
    "quote_out",
    "quote_in",
]
