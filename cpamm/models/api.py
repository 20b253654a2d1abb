"""Pydantic models for the exchange HTTP API.

Amounts are uint256 decimal strings; field names use camelCase aliases on
the wire and snake_case in Python.
"""

from pydantic import BaseModel, Field

from cpamm.models.types import Address, Uint256


class AddLiquidityRequest(BaseModel):
    """Deposit both tokens of a pair and mint shares."""

    caller: Address
    token_a: Address = Field(alias="tokenA")
    token_b: Address = Field(alias="tokenB")
    amount_a_desired: Uint256 = Field(alias="amountADesired")
    amount_b_desired: Uint256 = Field(alias="amountBDesired")
    amount_a_min: Uint256 = Field(default="0", alias="amountAMin")
    amount_b_min: Uint256 = Field(default="0", alias="amountBMin")
    recipient: Address
    deadline: int = Field(ge=0, description="Unix timestamp (seconds)")

    model_config = {"populate_by_name": True}


class AddLiquidityResponse(BaseModel):
    amount_a: Uint256 = Field(alias="amountA")
    amount_b: Uint256 = Field(alias="amountB")
    shares: Uint256

    model_config = {"populate_by_name": True}


class RemoveLiquidityRequest(BaseModel):
    """Burn shares for the proportional reserves."""

    caller: Address
    token_a: Address = Field(alias="tokenA")
    token_b: Address = Field(alias="tokenB")
    shares: Uint256
    amount_a_min: Uint256 = Field(default="0", alias="amountAMin")
    amount_b_min: Uint256 = Field(default="0", alias="amountBMin")
    recipient: Address
    deadline: int = Field(ge=0)

    model_config = {"populate_by_name": True}


class RemoveLiquidityResponse(BaseModel):
    amount_a: Uint256 = Field(alias="amountA")
    amount_b: Uint256 = Field(alias="amountB")

    model_config = {"populate_by_name": True}


class SwapRequest(BaseModel):
    """swapExactTokensForTokens: path is [tokenIn, tokenOut]."""

    caller: Address
    amount_in: Uint256 = Field(alias="amountIn")
    amount_out_min: Uint256 = Field(default="0", alias="amountOutMin")
    path: list[Address]
    recipient: Address
    deadline: int = Field(ge=0)

    model_config = {"populate_by_name": True}


class SwapResponse(BaseModel):
    amount_in: Uint256 = Field(alias="amountIn")
    amount_out: Uint256 = Field(alias="amountOut")
    token_in: Address = Field(alias="tokenIn")
    token_out: Address = Field(alias="tokenOut")
    pair_id: str = Field(alias="pairId")

    model_config = {"populate_by_name": True}


class PriceResponse(BaseModel):
    """Spot price of tokenA in tokenB, scaled by 1e18."""

    token_a: Address = Field(alias="tokenA")
    token_b: Address = Field(alias="tokenB")
    price: Uint256
    scale: Uint256

    model_config = {"populate_by_name": True}


class ReservesResponse(BaseModel):
    token_a: Address = Field(alias="tokenA")
    token_b: Address = Field(alias="tokenB")
    reserve_a: Uint256 = Field(alias="reserveA")
    reserve_b: Uint256 = Field(alias="reserveB")
    total_shares: Uint256 = Field(alias="totalShares")

    model_config = {"populate_by_name": True}


class SharesResponse(BaseModel):
    account: Address
    shares: Uint256


class QuoteResponse(BaseModel):
    amount: Uint256
    fee_bps: int = Field(alias="feeBps")

    model_config = {"populate_by_name": True}


class ApproveRequest(BaseModel):
    """Grant spender an allowance on the in-memory ledger."""

    token: Address
    owner: Address
    spender: Address
    amount: Uint256


class BalanceResponse(BaseModel):
    token: Address
    account: Address
    balance: Uint256
    allowance: Uint256 = Field(description="Allowance granted to the exchange custody account")


class ErrorResponse(BaseModel):
    error: str
    detail: str
