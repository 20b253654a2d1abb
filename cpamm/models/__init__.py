"""Pydantic models for the exchange API."""

from cpamm.models.api import (
    AddLiquidityRequest,
    AddLiquidityResponse,
    ApproveRequest,
    BalanceResponse,
    ErrorResponse,
    PriceResponse,
    QuoteResponse,
    RemoveLiquidityRequest,
    RemoveLiquidityResponse,
    ReservesResponse,
    SharesResponse,
    SwapRequest,
    SwapResponse,
)
from cpamm.models.types import Address, Uint256, is_valid_address, normalize_address

__all__ = [
    "AddLiquidityRequest",
    "AddLiquidityResponse",
    "RemoveLiquidityRequest",
    "RemoveLiquidityResponse",
    "SwapRequest",
    "SwapResponse",
    "PriceResponse",
    "ReservesResponse",
    "SharesResponse",
    "QuoteResponse",
    "ApproveRequest",
    "BalanceResponse",
    "ErrorResponse",
    "Address",
    "Uint256",
    "is_valid_address",
    "normalize_address",
]
