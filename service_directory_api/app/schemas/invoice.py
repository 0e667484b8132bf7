"""
Pydantic models for invoices.

An invoice is issued for a payment.  It snapshots the service, customer
and provider details at issue time so later edits to the listing or the
accounts do not change an issued document.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel


InvoiceStatus = Literal["draft", "sent", "viewed", "paid", "cancelled"]
InvoicePaymentStatus = Literal["pending", "paid", "overdue", "refunded"]


class InvoiceCreate(BaseModel):
    payment_id: int


class ServiceDetails(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    date: Optional[datetime] = None
    location: Optional[str] = None


class PartyDetails(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: str = "N/A"
    business_name: Optional[str] = None


class InvoiceRead(BaseModel):
    id: int
    invoice_number: str
    payment_id: int
    booking_id: int
    customer_id: int
    provider_id: int
    service_id: Optional[int] = None
    service_details: ServiceDetails
    customer_details: PartyDetails
    provider_details: PartyDetails
    subtotal: float
    platform_fee: float
    tax: float
    total_amount: float
    status: InvoiceStatus
    payment_status: InvoicePaymentStatus
    pdf_url: Optional[str] = None
    notes: Optional[str] = None
    due_date: Optional[datetime] = None
    issued_date: datetime
    paid_date: Optional[datetime] = None
    created_at: datetime


class InvoiceResult(BaseModel):
    success: bool = True
    message: str
    invoice: InvoiceRead


class InvoicePage(BaseModel):
    invoices: List[InvoiceRead]
    total: int
    page: int
    pages: int
