"""
Payment endpoints for API v1.

Card payments are a two step flow: ``/create-intent`` returns the
Stripe client secret used by the front end, ``/confirm`` settles the
payment once Stripe reports success.  ``/pay-with-wallet`` settles a
booking from the customer's wallet in one call.  Stripe failures are
reported as 502.
"""

from typing import List

from fastapi import APIRouter, HTTPException, Path, status

from service_directory_api.app.schemas.payment import (
    PaymentConfirm,
    PaymentIntentCreate,
    PaymentIntentRead,
    PaymentRead,
    PaymentResult,
    WalletPayment,
)
from service_directory_api.app.services.payment_service import PaymentService
from service_directory_api.app.services.stripe_gateway import PaymentGatewayError

from ..errors import http_error


router = APIRouter()


def _gateway_error(exc: PaymentGatewayError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Payment provider error: {exc}")


@router.post("/create-intent", response_model=PaymentIntentRead)
async def create_payment_intent(data: PaymentIntentCreate) -> PaymentIntentRead:
    try:
        return await PaymentService.create_intent(data)
    except ValueError as e:
        raise http_error(e)
    except PaymentGatewayError as e:
        raise _gateway_error(e)


@router.post("/confirm", response_model=PaymentResult)
async def confirm_payment(data: PaymentConfirm) -> PaymentResult:
    """Confirm a card payment after the client completed the PaymentIntent."""
    try:
        return await PaymentService.confirm_payment(data)
    except ValueError as e:
        raise http_error(e)
    except PaymentGatewayError as e:
        raise _gateway_error(e)


@router.post("/pay-with-wallet", response_model=PaymentResult)
async def pay_with_wallet(data: WalletPayment) -> PaymentResult:
    try:
        return await PaymentService.pay_with_wallet(data)
    except ValueError as e:
        raise http_error(e)


@router.get("/history/{user_id}", response_model=List[PaymentRead])
async def payment_history(user_id: int = Path(...)) -> List[PaymentRead]:
    """Payments the user made as a customer or received as a provider."""
    return await PaymentService.history(user_id)


@router.get("/{payment_id}", response_model=PaymentRead)
async def get_payment(payment_id: int = Path(...)) -> PaymentRead:
    try:
        return await PaymentService.get_payment(payment_id)
    except ValueError as e:
        raise http_error(e)


@router.post("/{payment_id}/refund", response_model=PaymentResult)
async def refund_payment(payment_id: int = Path(...)) -> PaymentResult:
    try:
        return await PaymentService.refund(payment_id)
    except ValueError as e:
        raise http_error(e)
    except PaymentGatewayError as e:
        raise _gateway_error(e)
