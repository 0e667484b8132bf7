"""
Pydantic models for audit trail entries.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel


class AuditLogRead(BaseModel):
    id: int
    user_id: Optional[int] = None
    action: str
    object_type: str
    object_id: Optional[int] = None
    timestamp: datetime
    # JSON decoded; a value that is not valid JSON is returned as stored.
    details: Optional[Any] = None
