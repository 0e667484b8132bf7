"""
Booking endpoints for API v1.
"""

from typing import List, Literal

from fastapi import APIRouter, Path, Query, status

from service_directory_api.app.schemas.booking import BookingCreate, BookingRead, BookingStatusUpdate
from service_directory_api.app.services.booking_service import BookingService

from ..errors import http_error


router = APIRouter()


@router.post("", response_model=BookingRead, status_code=status.HTTP_201_CREATED)
async def create_booking(data: BookingCreate) -> BookingRead:
    """Book a listing for a customer; the booking starts ``pending``."""
    try:
        return await BookingService.create_booking(data)
    except ValueError as e:
        raise http_error(e)


@router.get("/user/{user_id}", response_model=List[BookingRead])
async def list_user_bookings(
    user_id: int = Path(...),
    role: Literal["customer", "business"] = Query("customer", description="customer: bookings made, business: bookings received"),
) -> List[BookingRead]:
    return await BookingService.list_for_user(user_id, role)


@router.get("/{booking_id}", response_model=BookingRead)
async def get_booking(booking_id: int = Path(...)) -> BookingRead:
    try:
        return await BookingService.get_booking(booking_id)
    except ValueError as e:
        raise http_error(e)


@router.patch("/{booking_id}", response_model=BookingRead)
async def update_booking_status(data: BookingStatusUpdate, booking_id: int = Path(...)) -> BookingRead:
    try:
        return await BookingService.update_status(booking_id, data.status)
    except ValueError as e:
        raise http_error(e)
