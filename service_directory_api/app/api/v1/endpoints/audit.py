"""
Audit trail endpoint for API v1 (administrators only).
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from service_directory_api.app.core.security import require_roles
from service_directory_api.app.schemas.audit import AuditLogRead
from service_directory_api.app.services.audit_service import AuditService


router = APIRouter(dependencies=[Depends(require_roles("admin"))])


@router.get("/logs", response_model=List[AuditLogRead])
async def list_audit_logs(
    user_id: Optional[int] = Query(None, description="Acting user"),
    object_type: Optional[str] = Query(None, description="service, booking, payment, wallet, invoice, ..."),
    action: Optional[str] = Query(None, description="create, update, delete, refund, topup, ..."),
    start_date: Optional[date] = Query(None, description="First day included (YYYY-MM-DD)"),
    end_date: Optional[date] = Query(None, description="Last day included (YYYY-MM-DD)"),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
) -> List[AuditLogRead]:
    return await AuditService.list_logs(
        user_id=user_id,
        object_type=object_type,
        action=action,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
        offset=offset,
    )
