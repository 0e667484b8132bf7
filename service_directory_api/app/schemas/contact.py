"""
Pydantic models for contact form messages.

Visitors submit messages through the public contact form; the admin
dashboard lists them, tracks whether they were read and marks them as
replied.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from .common import NormalizedEmail


ContactStatus = Literal["new", "read", "replied"]


class ContactCreate(BaseModel):
    first_name: str
    last_name: str
    email: NormalizedEmail
    message: str

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_names(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Field must not be empty")
        return v

    @field_validator("message")
    @classmethod
    def check_message(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 10:
            raise ValueError("Message must be at least 10 characters long")
        return v


class ContactStatusUpdate(BaseModel):
    status: ContactStatus


class ContactRead(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    message: str
    status: ContactStatus
    is_read: bool
    read_at: Optional[datetime] = None
    replied_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class ContactResult(BaseModel):
    success: bool = True
    message: str
    contact: ContactRead


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class ContactPage(BaseModel):
    contacts: List[ContactRead]
    pagination: Pagination = Field(..., description="Page metadata for the admin table")
