"""Operations that read and mutate pools."""

from cpamm.engine.liquidity import AddLiquidityResult, LiquidityManager, RemoveLiquidityResult
from cpamm.engine.oracle import PriceOracle
from cpamm.engine.swap import SwapEngine

__all__ = [
    "LiquidityManager",
    "AddLiquidityResult",
    "RemoveLiquidityResult",
    "SwapEngine",
    "PriceOracle",
]
