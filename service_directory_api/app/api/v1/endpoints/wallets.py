"""
Wallet endpoints for API v1.

Fixed paths (``/balance``, ``/transactions``, ``/add-money``, ...) are
declared before ``/{user_id}``.
"""

from typing import Literal, Optional

from fastapi import APIRouter, HTTPException, Path, Query, status

from service_directory_api.app.schemas.wallet import (
    AddMoney,
    AddMoneyResult,
    TopupIntentCreate,
    TopupIntentRead,
    TransactionHistory,
    WalletBalance,
    WalletDetails,
    Withdraw,
    WithdrawResult,
)
from service_directory_api.app.services.stripe_gateway import PaymentGatewayError
from service_directory_api.app.services.wallet_service import WalletService

from ..errors import http_error


router = APIRouter()


@router.get("/balance/{user_id}", response_model=WalletBalance)
async def get_balance(user_id: int = Path(...)) -> WalletBalance:
    try:
        return await WalletService.get_balance(user_id)
    except ValueError as e:
        raise http_error(e)


@router.get("/transactions/{user_id}", response_model=TransactionHistory)
async def list_transactions(
    user_id: int = Path(...),
    tx_type: Optional[Literal["credit", "debit", "refund"]] = Query(None, alias="type"),
    limit: int = Query(50, ge=1, le=500),
) -> TransactionHistory:
    try:
        return await WalletService.list_transactions(user_id, tx_type=tx_type, limit=limit)
    except ValueError as e:
        raise http_error(e)


@router.post("/add-money", response_model=AddMoneyResult)
async def add_money(data: AddMoney) -> AddMoneyResult:
    """Credit the wallet once the funding PaymentIntent has succeeded."""
    try:
        return await WalletService.add_money(data)
    except ValueError as e:
        raise http_error(e)
    except PaymentGatewayError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Payment provider error: {e}")


@router.post("/topup-intent", response_model=TopupIntentRead)
async def create_topup_intent(data: TopupIntentCreate) -> TopupIntentRead:
    try:
        return await WalletService.create_topup_intent(data)
    except ValueError as e:
        raise http_error(e)
    except PaymentGatewayError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Payment provider error: {e}")


@router.post("/withdraw", response_model=WithdrawResult)
async def withdraw(data: Withdraw) -> WithdrawResult:
    try:
        return await WalletService.withdraw(data)
    except ValueError as e:
        raise http_error(e)


@router.get("/{user_id}", response_model=WalletDetails)
async def get_wallet(
    user_id: int = Path(...),
    limit: int = Query(20, ge=1, le=100),
    skip: int = Query(0, ge=0),
) -> WalletDetails:
    """Wallet totals with a page of transactions, newest first."""
    try:
        return await WalletService.get_wallet(user_id, limit=limit, skip=skip)
    except ValueError as e:
        raise http_error(e)
