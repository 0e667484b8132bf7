"""
Business logic for contact form messages.

Messages arrive with status ``new``.  Opening one in the admin
dashboard marks it read; answering it marks it ``replied``.
"""

import logging
import math
from typing import Optional

from ..schemas.contact import ContactCreate, ContactPage, ContactRead, Pagination


class ContactService:
    """Service for the contact inbox."""

    @staticmethod
    def _to_read(row) -> ContactRead:
        data = dict(row)
        data["is_read"] = bool(data["is_read"])
        return ContactRead(**data)

    @classmethod
    async def create_contact(cls, data: ContactCreate) -> ContactRead:
        logger = logging.getLogger(__name__)
        from service_directory_api.app.core.db import get_connection
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "INSERT INTO contacts (first_name, last_name, email, message) VALUES (?, ?, ?, ?)",
                (data.first_name, data.last_name, data.email, data.message),
            )
            contact_id = cursor.lastrowid
            conn.commit()
            row = cursor.execute("SELECT * FROM contacts WHERE id = ?", (contact_id,)).fetchone()
        finally:
            conn.close()
        logger.info("Contact message %s received from %s", contact_id, data.email)
        from service_directory_api.app.services.audit_service import AuditService
        await AuditService.log(
            user_id=None,
            action="create",
            object_type="contact",
            object_id=contact_id,
            details={"email": data.email},
        )
        return cls._to_read(row)

    @classmethod
    async def list_contacts(cls, status: Optional[str] = None, page: int = 1, limit: int = 20) -> ContactPage:
        """Return one page of messages, newest first."""
        from service_directory_api.app.core.db import get_connection
        conn = get_connection()
        try:
            where = " WHERE status = ?" if status else ""
            params = (status,) if status else ()
            total = conn.execute(f"SELECT COUNT(*) AS count FROM contacts{where}", params).fetchone()["count"]
            rows = conn.execute(
                f"SELECT * FROM contacts{where} ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?",
                (*params, limit, (page - 1) * limit),
            ).fetchall()
        finally:
            conn.close()
        return ContactPage(
            contacts=[cls._to_read(r) for r in rows],
            pagination=Pagination(page=page, limit=limit, total=total, pages=math.ceil(total / limit)),
        )

    @classmethod
    async def get_contact(cls, contact_id: int) -> ContactRead:
        """Return a message, marking it read the first time it is opened."""
        from service_directory_api.app.core.db import get_connection
        conn = get_connection()
        try:
            cursor = conn.cursor()
            row = cursor.execute("SELECT * FROM contacts WHERE id = ?", (contact_id,)).fetchone()
            if not row:
                raise ValueError("Contact not found")
            if not row["is_read"]:
                cursor.execute(
                    """
                    UPDATE contacts
                    SET is_read = 1, read_at = CURRENT_TIMESTAMP, updated_at = CURRENT_TIMESTAMP,
                        status = CASE WHEN status = 'new' THEN 'read' ELSE status END
                    WHERE id = ?
                    """,
                    (contact_id,),
                )
                conn.commit()
                row = cursor.execute("SELECT * FROM contacts WHERE id = ?", (contact_id,)).fetchone()
            return cls._to_read(row)
        finally:
            conn.close()

    @classmethod
    async def update_status(cls, contact_id: int, status: str, actor_id: Optional[int] = None) -> ContactRead:
        from service_directory_api.app.core.db import get_connection
        conn = get_connection()
        try:
            cursor = conn.cursor()
            replied = ", replied_at = CURRENT_TIMESTAMP" if status == "replied" else ""
            cursor.execute(
                f"UPDATE contacts SET status = ?, updated_at = CURRENT_TIMESTAMP{replied} WHERE id = ?",
                (status, contact_id),
            )
            if cursor.rowcount == 0:
                raise ValueError("Contact not found")
            conn.commit()
            row = cursor.execute("SELECT * FROM contacts WHERE id = ?", (contact_id,)).fetchone()
        finally:
            conn.close()
        from service_directory_api.app.services.audit_service import AuditService
        await AuditService.log(
            user_id=actor_id,
            action="update",
            object_type="contact",
            object_id=contact_id,
            details={"status": status},
        )
        return cls._to_read(row)

    @classmethod
    async def delete_contact(cls, contact_id: int, actor_id: Optional[int] = None) -> None:
        from service_directory_api.app.core.db import get_connection
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM contacts WHERE id = ?", (contact_id,))
            if cursor.rowcount == 0:
                raise ValueError("Contact not found")
            conn.commit()
        finally:
            conn.close()
        from service_directory_api.app.services.audit_service import AuditService
        await AuditService.log(
            user_id=actor_id,
            action="delete",
            object_type="contact",
            object_id=contact_id,
        )
