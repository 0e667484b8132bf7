"""
Pydantic models for payment data.

A payment settles one booking.  Card payments go through a Stripe
PaymentIntent and stay ``pending`` until confirmed; wallet payments
succeed immediately.  Every payment splits its ``amount`` into the
``platform_fee`` and the ``provider_amount`` credited to the provider.
"""

from datetime import datetime
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field

from .service import ServiceRead
from .user import UserSummary


PaymentStatus = Literal["pending", "succeeded", "failed", "cancelled", "refunded"]
PaymentMethod = Literal["card", "wallet", "upi"]


class PaymentIntentCreate(BaseModel):
    booking_id: int
    amount: float = Field(..., gt=0)
    payment_method: Literal["card", "upi"] = "card"


class PaymentIntentRead(BaseModel):
    client_secret: Optional[str]
    payment_id: int
    amount: float
    currency: str


class PaymentConfirm(BaseModel):
    payment_intent_id: str
    payment_id: int


class WalletPayment(BaseModel):
    booking_id: int
    customer_id: int


class PaymentRead(BaseModel):
    id: int
    booking_id: int
    customer_id: int
    provider_id: int
    service_id: Optional[int] = None
    amount: float
    currency: str
    stripe_payment_intent_id: Optional[str] = None
    status: PaymentStatus
    payment_method: PaymentMethod
    description: Optional[str] = None
    invoice_id: Optional[int] = None
    platform_fee: float
    provider_amount: float
    metadata: Optional[Dict[str, Any]] = None
    created_at: datetime
    completed_at: Optional[datetime] = None
    service: Optional[ServiceRead] = None
    customer: Optional[UserSummary] = None
    provider: Optional[UserSummary] = None


class PaymentResult(BaseModel):
    success: bool = True
    message: str
    payment: PaymentRead
