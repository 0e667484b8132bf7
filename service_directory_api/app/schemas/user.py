"""
Pydantic models for user data and authentication.

Defines schemas for registering users, logging in and reading user
information.  Password hashes are never part of a response model.
Login history records and the aggregated login statistics shown on the
admin dashboard live here as well.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from .common import NormalizedEmail


Role = Literal["customer", "business", "admin"]


class UserRegister(BaseModel):
    """Schema for registering a user.

    Customers need only a name, e‑mail and password.  Business owners
    may also supply ``business_name`` and ``business_category``.
    Administrator accounts cannot be self‑registered; they are created
    with the ``reset_password.py`` operator script
    (``--role admin``).
    """

    name: str = Field(..., min_length=1, description="Display name")
    email: NormalizedEmail = Field(..., description="Login e‑mail, stored lower‑cased")
    password: str = Field(..., min_length=6)
    role: Literal["customer", "business"] = "customer"
    business_name: Optional[str] = None
    business_category: Optional[str] = None
    phone: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name must not be empty")
        return v


class UserLogin(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.strip().lower()


class UserSummary(BaseModel):
    """Short user representation embedded in bookings and payments."""

    id: int
    name: str
    email: str


class AuthUser(UserSummary):
    role: Role


class AuthResponse(BaseModel):
    token: str
    user: AuthUser


class UserRead(BaseModel):
    """Schema for reading a user from the API."""

    id: int
    name: str
    email: str
    role: Role
    business_name: Optional[str] = None
    business_category: Optional[str] = None
    phone: Optional[str] = None
    disabled: bool = False
    created_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True,
    }


class UsersByRole(BaseModel):
    total: int
    customers: List[UserRead]
    business_owners: List[UserRead]
    admins: List[UserRead]


class LoginHistoryRead(BaseModel):
    id: int
    user_id: int
    email: str
    role: Role
    login_time: datetime
    status: Literal["success", "failed"]
    reason: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    browser: Optional[str] = None
    os: Optional[str] = None
    device: Optional[str] = None
    is_admin: bool = False


class LoginHistoryPage(BaseModel):
    history: List[LoginHistoryRead]
    total: int


class LoginWindowStats(BaseModel):
    total: int = 0
    success: int = 0
    failed: int = 0


class LoginStats(BaseModel):
    last_24_hours: LoginWindowStats
    last_7_days: LoginWindowStats
    last_30_days: LoginWindowStats
    # Successful logins per role over the last 30 days.
    by_role: dict[str, int]
