"""Constant product AMM pool engine."""

from cpamm.exchange import Exchange, get_default_exchange

__version__ = "0.1.0"
__all__ = ["Exchange", "get_default_exchange", "__version__"]
