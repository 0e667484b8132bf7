"""
API endpoints for listing reviews.

Anyone can read the reviews of a listing; posting a review refreshes
the listing's average rating.
"""

from typing import List

from fastapi import APIRouter, Path, status

from service_directory_api.app.schemas.review import ReviewCreate, ReviewRead
from service_directory_api.app.services.review_service import ReviewService

from ..errors import http_error


router = APIRouter()


@router.get("/{service_id}", response_model=List[ReviewRead])
async def list_reviews(service_id: int = Path(..., description="Listing ID")) -> List[ReviewRead]:
    return await ReviewService.list_for_service(service_id)


@router.post("", response_model=ReviewRead, status_code=status.HTTP_201_CREATED, summary="Submit a review")
async def create_review(data: ReviewCreate) -> ReviewRead:
    try:
        return await ReviewService.create_review(data)
    except ValueError as e:
        raise http_error(e)
