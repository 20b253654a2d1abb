"""API endpoints for the exchange.

Handlers are plain functions, so FastAPI runs them in its thread pool; the
per-pool locks inside the engine serialize concurrent requests on a pair.
"""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Path, Query

from cpamm.constants import PRICE_SCALE
from cpamm.exchange import Exchange, get_default_exchange
from cpamm.models.api import (
    AddLiquidityRequest,
    AddLiquidityResponse,
    ApproveRequest,
    BalanceResponse,
    PriceResponse,
    QuoteResponse,
    RemoveLiquidityRequest,
    RemoveLiquidityResponse,
    ReservesResponse,
    SharesResponse,
    SwapRequest,
    SwapResponse,
)
from cpamm.models.types import normalize_address

logger = structlog.get_logger()

router = APIRouter()

AddressPath = Annotated[str, Path(pattern=r"^0x[a-fA-F0-9]{40}$")]


def get_exchange() -> Exchange:
    """Dependency provider for the exchange instance.

    Override this in tests to inject an exchange:
        app.dependency_overrides[get_exchange] = lambda: exchange
    """
    return get_default_exchange()


@router.post("/liquidity/add", response_model=AddLiquidityResponse, response_model_by_alias=True)
def add_liquidity(
    request: AddLiquidityRequest,
    exchange: Exchange = Depends(get_exchange),
) -> AddLiquidityResponse:
    result = exchange.add_liquidity(
        caller=request.caller,
        token_a=request.token_a,
        token_b=request.token_b,
        amount_a_desired=int(request.amount_a_desired),
        amount_b_desired=int(request.amount_b_desired),
        amount_a_min=int(request.amount_a_min),
        amount_b_min=int(request.amount_b_min),
        recipient=request.recipient,
        deadline=request.deadline,
    )
    return AddLiquidityResponse(amount_a=result.amount_a, amount_b=result.amount_b, shares=result.shares)


@router.post("/liquidity/remove", response_model=RemoveLiquidityResponse, response_model_by_alias=True)
def remove_liquidity(
    request: RemoveLiquidityRequest,
    exchange: Exchange = Depends(get_exchange),
) -> RemoveLiquidityResponse:
    result = exchange.remove_liquidity(
        caller=request.caller,
        token_a=request.token_a,
        token_b=request.token_b,
        share_amount=int(request.shares),
        amount_a_min=int(request.amount_a_min),
        amount_b_min=int(request.amount_b_min),
        recipient=request.recipient,
        deadline=request.deadline,
    )
    return RemoveLiquidityResponse(amount_a=result.amount_a, amount_b=result.amount_b)


@router.post("/swap/exact-in", response_model=SwapResponse, response_model_by_alias=True)
def swap_exact_tokens_for_tokens(
    request: SwapRequest,
    exchange: Exchange = Depends(get_exchange),
) -> SwapResponse:
    result = exchange.swap_exact_tokens_for_tokens(
        caller=request.caller,
        amount_in=int(request.amount_in),
        amount_out_min=int(request.amount_out_min),
        path=request.path,
        recipient=request.recipient,
        deadline=request.deadline,
    )
    return SwapResponse(
        amount_in=result.amount_in,
        amount_out=result.amount_out,
        token_in=result.token_in,
        token_out=result.token_out,
        pair_id=result.pair_id,
    )


@router.get("/price/{token_a}/{token_b}", response_model=PriceResponse, response_model_by_alias=True)
def get_price(
    token_a: AddressPath,
    token_b: AddressPath,
    exchange: Exchange = Depends(get_exchange),
) -> PriceResponse:
    price = exchange.get_price(token_a, token_b)
    return PriceResponse(
        token_a=normalize_address(token_a),
        token_b=normalize_address(token_b),
        price=price,
        scale=PRICE_SCALE,
    )


@router.get("/reserves/{token_a}/{token_b}", response_model=ReservesResponse, response_model_by_alias=True)
def get_reserves(
    token_a: AddressPath,
    token_b: AddressPath,
    exchange: Exchange = Depends(get_exchange),
) -> ReservesResponse:
    reserve_a, reserve_b = exchange.get_reserves(token_a, token_b)
    return ReservesResponse(
        token_a=normalize_address(token_a),
        token_b=normalize_address(token_b),
        reserve_a=reserve_a,
        reserve_b=reserve_b,
        total_shares=exchange.total_shares(token_a, token_b),
    )


@router.get("/liquidity/{token_a}/{token_b}/{account}", response_model=SharesResponse)
def liquidity_balance_of(
    token_a: AddressPath,
    token_b: AddressPath,
    account: AddressPath,
    exchange: Exchange = Depends(get_exchange),
) -> SharesResponse:
    shares = exchange.liquidity_balance_of(token_a, token_b, account)
    return SharesResponse(account=normalize_address(account), shares=shares)


@router.get("/quote/amount-out", response_model=QuoteResponse, response_model_by_alias=True)
def get_amount_out(
    amount_in: Annotated[int, Query(alias="amountIn", ge=0)],
    reserve_in: Annotated[int, Query(alias="reserveIn", ge=0)],
    reserve_out: Annotated[int, Query(alias="reserveOut", ge=0)],
    exchange: Exchange = Depends(get_exchange),
) -> QuoteResponse:
    amount = exchange.get_amount_out(amount_in, reserve_in, reserve_out)
    return QuoteResponse(amount=amount, fee_bps=exchange.fee.fee_bps)


@router.get("/quote/amount-in", response_model=QuoteResponse, response_model_by_alias=True)
def get_amount_in(
    amount_out: Annotated[int, Query(alias="amountOut", ge=0)],
    reserve_in: Annotated[int, Query(alias="reserveIn", ge=0)],
    reserve_out: Annotated[int, Query(alias="reserveOut", ge=0)],
    exchange: Exchange = Depends(get_exchange),
) -> QuoteResponse:
    amount = exchange.get_amount_in(amount_out, reserve_in, reserve_out)
    return QuoteResponse(amount=amount, fee_bps=exchange.fee.fee_bps)


@router.post("/ledger/approve", response_model=BalanceResponse)
def approve(
    request: ApproveRequest,
    exchange: Exchange = Depends(get_exchange),
) -> BalanceResponse:
    """Set an allowance on the exchange's ledger (reference ledger only)."""
    approved = exchange.ledger.approve(request.token, request.owner, request.spender, int(request.amount))
    logger.info(
        "ledger_approve_requested",
        token=request.token[-8:],
        owner=request.owner[-8:],
        spender=request.spender[-8:],
        approved=approved,
    )
    return _balance(exchange, request.token, request.owner)


@router.get("/ledger/{token}/{account}", response_model=BalanceResponse)
def get_balance(
    token: AddressPath,
    account: AddressPath,
    exchange: Exchange = Depends(get_exchange),
) -> BalanceResponse:
    return _balance(exchange, token, account)


def _balance(exchange: Exchange, token: str, account: str) -> BalanceResponse:
    return BalanceResponse(
        token=normalize_address(token),
        account=normalize_address(account),
        balance=exchange.ledger.balance_of(token, account),
        allowance=exchange.ledger.allowance(token, account, exchange.custody),
    )
