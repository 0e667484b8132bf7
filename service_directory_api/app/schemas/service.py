"""
Pydantic models for service listings.

A listing is published by a business user (``provider_id``) and carries
an aggregated ``rating``/``review_count`` maintained by the review
service.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


DEFAULT_SERVICE_IMAGE = "https://images.unsplash.com/photo-1581578731548-c64695cc6952?w=400&h=300&fit=crop"


class ServiceBase(BaseModel):
    name: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    price: float = Field(..., gt=0, description="Price per booking")
    location: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    image: Optional[str] = None


class ServiceCreate(ServiceBase):
    """Schema for creating a listing."""

    provider_id: int = Field(..., description="ID of the business user offering the service")


class ServiceUpdate(BaseModel):
    """Schema for updating a listing.

    Every field is optional; only supplied fields are changed.  The
    provider and the review aggregates cannot be altered here.
    """

    name: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    price: Optional[float] = Field(None, gt=0)
    location: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = Field(None, min_length=1)
    image: Optional[str] = None

    @field_validator("name", "category", "description", "price", "location", "phone")
    @classmethod
    def reject_null(cls, v):
        # Omit a field to keep it; only ``image`` may be cleared.
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class ServiceRead(ServiceBase):
    id: int
    image: str = DEFAULT_SERVICE_IMAGE
    provider_id: int
    rating: float = 0
    review_count: int = 0
    created_at: datetime

    model_config = {
        "from_attributes": True,
    }
