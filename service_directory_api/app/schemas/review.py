"""
Pydantic schemas for service reviews.

Customers rate a listing from 1 to 5 and leave a comment.  Each new
review updates the listing's average rating and review count.
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class ReviewCreate(BaseModel):
    """Schema for creating a new review."""

    service_id: int = Field(..., description="Identifier of the service being reviewed")
    user_id: int
    user_name: str = Field(..., min_length=1, description="Name shown next to the review")
    rating: int = Field(..., ge=1, le=5, description="Rating from 1 to 5")
    comment: str

    @field_validator("comment")
    @classmethod
    def sanitize_comment(cls, v: str) -> str:
        """Trim whitespace from the comment and enforce a maximum length."""
        v = v.strip()
        if not v:
            raise ValueError("Comment must not be empty")
        if len(v) > 1000:
            raise ValueError("Comment must be 1000 characters or fewer")
        return v


class ReviewRead(BaseModel):
    id: int
    service_id: int
    user_id: int
    user_name: str
    rating: int
    comment: str
    created_at: datetime
