"""
Audit trail of state-changing actions.

Services call :meth:`AuditService.log` after their own transaction has
committed, on a separate connection, so an audit write never holds a
lock that the audited operation needs.  Writing is best effort: a
database error is logged and the caller carries on.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import date
from typing import Any, List, Optional, Tuple

from service_directory_api.app.core.db import get_connection
from service_directory_api.app.schemas.audit import AuditLogRead


logger = logging.getLogger(__name__)


def _decode_details(raw: Optional[str]) -> Any:
    if not raw:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


class AuditService:
    """Records and queries ``audit_logs`` rows."""

    @classmethod
    async def log(
        cls,
        user_id: Optional[int],
        action: str,
        object_type: str,
        object_id: Optional[int] = None,
        details: Optional[dict] = None,
    ) -> None:
        """Append one entry.

        ``user_id`` is the acting account, ``None`` for anonymous or
        system actions such as a public registration.  ``details`` is
        stored as JSON; values JSON cannot encode are stringified.
        """
        payload = json.dumps(details, default=str) if details else None
        conn = get_connection()
        try:
            conn.execute(
                "INSERT INTO audit_logs (user_id, action, object_type, object_id, details) VALUES (?, ?, ?, ?, ?)",
                (user_id, action, object_type, object_id, payload),
            )
            conn.commit()
        except sqlite3.Error:
            logger.exception("Could not record audit entry %s/%s #%s", object_type, action, object_id)
        finally:
            conn.close()

    @staticmethod
    def _filters(
        user_id: Optional[int],
        object_type: Optional[str],
        action: Optional[str],
        start_date: Optional[date],
        end_date: Optional[date],
    ) -> Tuple[str, List[Any]]:
        clauses: List[str] = []
        params: List[Any] = []
        for column, value in (("user_id", user_id), ("object_type", object_type), ("action", action)):
            if value is not None:
                clauses.append(f"{column} = ?")
                params.append(value)
        # Both bounds are inclusive whole days.
        if start_date:
            clauses.append("date(timestamp) >= date(?)")
            params.append(start_date.isoformat())
        if end_date:
            clauses.append("date(timestamp) <= date(?)")
            params.append(end_date.isoformat())
        return (" WHERE " + " AND ".join(clauses)) if clauses else "", params

    @classmethod
    async def list_logs(
        cls,
        user_id: Optional[int] = None,
        object_type: Optional[str] = None,
        action: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[AuditLogRead]:
        """Return matching entries, newest first."""
        where, params = cls._filters(user_id, object_type, action, start_date, end_date)
        conn = get_connection()
        try:
            rows = conn.execute(
                "SELECT id, user_id, action, object_type, object_id, timestamp, details FROM audit_logs"
                f"{where} ORDER BY timestamp DESC, id DESC LIMIT ? OFFSET ?",
                (*params, limit, offset),
            ).fetchall()
        finally:
            conn.close()
        return [AuditLogRead(**{**dict(row), "details": _decode_details(row["details"])}) for row in rows]
