"""
Service listing endpoints for API v1.

Listings are public to browse.  ``/categories/all`` is declared before
``/{service_id}`` so it is not captured by the ID route.
"""

from typing import List, Optional

from fastapi import APIRouter, Path, Query, status

from service_directory_api.app.schemas.common import MessageResponse
from service_directory_api.app.schemas.service import ServiceCreate, ServiceRead, ServiceUpdate
from service_directory_api.app.services.listing_service import ListingService

from ..errors import http_error


router = APIRouter()


@router.post("", response_model=ServiceRead, status_code=status.HTTP_201_CREATED)
async def create_service(data: ServiceCreate) -> ServiceRead:
    try:
        return await ListingService.create_service(data)
    except ValueError as e:
        raise http_error(e)


@router.get("", response_model=List[ServiceRead])
async def list_services(
    provider_id: Optional[int] = Query(None, description="Only listings of this provider"),
    category: Optional[str] = Query(None),
    q: Optional[str] = Query(None, description="Search in name and description"),
    location: Optional[str] = Query(None),
) -> List[ServiceRead]:
    """List listings newest first with optional filters."""
    return await ListingService.list_services(provider_id=provider_id, category=category, q=q, location=location)


@router.get("/categories/all", response_model=List[str])
async def list_categories() -> List[str]:
    return await ListingService.list_categories()


@router.get("/{service_id}", response_model=ServiceRead)
async def get_service(service_id: int = Path(..., description="Listing ID")) -> ServiceRead:
    try:
        return await ListingService.get_service(service_id)
    except ValueError as e:
        raise http_error(e)


@router.put("/{service_id}", response_model=ServiceRead)
async def update_service(data: ServiceUpdate, service_id: int = Path(...)) -> ServiceRead:
    """Update the supplied fields of a listing."""
    try:
        return await ListingService.update_service(service_id, data)
    except ValueError as e:
        raise http_error(e)


@router.delete("/{service_id}", response_model=MessageResponse)
async def delete_service(service_id: int = Path(...)) -> MessageResponse:
    try:
        await ListingService.delete_service(service_id)
    except ValueError as e:
        raise http_error(e)
    return MessageResponse(message="Service deleted successfully")
