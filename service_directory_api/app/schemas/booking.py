"""
Pydantic models for bookings.

A booking ties a customer to a service listing (and thereby its
provider) on a given date.  Its ``status`` moves from ``pending`` to
``confirmed`` once paid, and may later be ``completed`` or
``cancelled``.
"""

from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from .service import ServiceRead
from .user import UserSummary


BookingStatus = Literal["pending", "confirmed", "completed", "cancelled"]


class BookingCreate(BaseModel):
    """Schema for creating a booking.

    ``provider_id`` is normally taken from the booked service; when
    supplied it must match the service's provider.
    """

    customer_id: int
    service_id: int
    date: datetime = Field(..., description="Requested appointment date")
    provider_id: Optional[int] = None

    @field_validator("date")
    @classmethod
    def to_naive_utc(cls, v: datetime) -> datetime:
        # Stored as naive UTC text so dates sort correctly as strings.
        if v.tzinfo is not None:
            v = v.astimezone(timezone.utc).replace(tzinfo=None)
        return v


class BookingStatusUpdate(BaseModel):
    status: BookingStatus


class BookingRead(BaseModel):
    id: int
    customer_id: int
    provider_id: int
    service_id: Optional[int] = None
    date: datetime
    status: BookingStatus
    created_at: datetime
    # Populated references; ``service`` is ``None`` once the listing
    # has been deleted.
    service: Optional[ServiceRead] = None
    customer: Optional[UserSummary] = None
    provider: Optional[UserSummary] = None
