"""
Authentication endpoints for API v1.

Registration and login return a bearer token together with a short
user summary.  The admin dashboard endpoints (all users, login history,
login statistics) require the ``admin`` role.
"""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from service_directory_api.app.core.security import get_current_user, require_roles
from service_directory_api.app.schemas.user import (
    AuthResponse,
    LoginHistoryPage,
    LoginStats,
    UserLogin,
    UserRead,
    UserRegister,
    UsersByRole,
)
from service_directory_api.app.services.user_service import UserService

from ..errors import http_error


router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(data: UserRegister) -> AuthResponse:
    """Register a customer or business owner and log them in."""
    try:
        return await UserService.register(data)
    except ValueError as e:
        raise http_error(e)


@router.post("/login", response_model=AuthResponse)
async def login(data: UserLogin, request: Request) -> AuthResponse:
    """Authenticate with e‑mail and password.

    The attempt is recorded in the login history together with the
    client address and user agent.
    """
    ip_address = request.client.host if request.client else None
    try:
        return await UserService.authenticate(
            data.email,
            data.password,
            ip_address=ip_address,
            user_agent=request.headers.get("user-agent"),
        )
    except ValueError as e:
        if str(e) == "Account disabled":
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/me", response_model=UserRead)
async def read_me(current_user: dict = Depends(get_current_user)) -> UserRead:
    try:
        return await UserService.get_user(current_user["user_id"])
    except ValueError as e:
        raise http_error(e)


@router.get("/users/all", response_model=UsersByRole)
async def list_all_users(current_user: dict = Depends(require_roles("admin"))) -> UsersByRole:
    """List every account grouped by role (admin only)."""
    return await UserService.list_users_by_role()


@router.get("/login-history", response_model=LoginHistoryPage)
async def login_history(
    user_id: Optional[int] = Query(None, description="Filter by user ID"),
    role: Optional[Literal["customer", "business", "admin"]] = Query(None),
    status_param: Optional[Literal["success", "failed"]] = Query(None, alias="status"),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    current_user: dict = Depends(require_roles("admin")),
) -> LoginHistoryPage:
    """Return login attempts newest first (admin only)."""
    return await UserService.list_login_history(
        user_id=user_id,
        role=role,
        status=status_param,
        limit=limit,
        offset=offset,
    )


@router.get("/login-stats", response_model=LoginStats)
async def login_stats(current_user: dict = Depends(require_roles("admin"))) -> LoginStats:
    return await UserService.login_stats()
