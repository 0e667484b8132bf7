"""
Contact form endpoints for API v1.

Submitting a message is public.  Reading, updating and deleting
messages is reserved for administrators.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status

from service_directory_api.app.core.security import require_roles
from service_directory_api.app.schemas.common import MessageResponse
from service_directory_api.app.schemas.contact import (
    ContactCreate,
    ContactPage,
    ContactRead,
    ContactResult,
    ContactStatus,
    ContactStatusUpdate,
)
from service_directory_api.app.services.contact_service import ContactService

from ..errors import http_error


router = APIRouter()


@router.post("", response_model=ContactResult, status_code=status.HTTP_201_CREATED)
async def submit_contact(data: ContactCreate) -> ContactResult:
    contact = await ContactService.create_contact(data)
    return ContactResult(message="Thank you for contacting us! We will get back to you soon.", contact=contact)


@router.get("", response_model=ContactPage)
async def list_contacts(
    status_param: Optional[ContactStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: dict = Depends(require_roles("admin")),
) -> ContactPage:
    return await ContactService.list_contacts(status=status_param, page=page, limit=limit)


@router.get("/{contact_id}", response_model=ContactRead)
async def get_contact(
    contact_id: int = Path(...),
    current_user: dict = Depends(require_roles("admin")),
) -> ContactRead:
    """Return a message and mark it read."""
    try:
        return await ContactService.get_contact(contact_id)
    except ValueError as e:
        raise http_error(e)


@router.patch("/{contact_id}", response_model=ContactResult)
async def update_contact(
    data: ContactStatusUpdate,
    contact_id: int = Path(...),
    current_user: dict = Depends(require_roles("admin")),
) -> ContactResult:
    try:
        contact = await ContactService.update_status(contact_id, data.status, current_user.get("user_id"))
    except ValueError as e:
        raise http_error(e)
    return ContactResult(message="Contact status updated", contact=contact)


@router.delete("/{contact_id}", response_model=MessageResponse)
async def delete_contact(
    contact_id: int = Path(...),
    current_user: dict = Depends(require_roles("admin")),
) -> MessageResponse:
    try:
        await ContactService.delete_contact(contact_id, current_user.get("user_id"))
    except ValueError as e:
        raise http_error(e)
    return MessageResponse(message="Contact deleted successfully")
