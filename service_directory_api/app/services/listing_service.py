"""
Business logic for service listings.

Business users publish listings (plumbing, cleaning, tutoring, ...)
that customers browse, book and review.  The ``rating`` and
``review_count`` columns are owned by ``ReviewService`` and cannot be
changed through this service.
"""

import logging
from typing import Any, List, Optional

from ..schemas.service import DEFAULT_SERVICE_IMAGE, ServiceCreate, ServiceRead, ServiceUpdate


SERVICE_COLUMNS = (
    "id, name, category, description, price, location, phone, image, provider_id, "
    "rating, review_count, created_at"
)


def row_to_service(row) -> ServiceRead:
    data = dict(row)
    data["image"] = data.get("image") or DEFAULT_SERVICE_IMAGE
    return ServiceRead(**data)


class ListingService:
    """Service for creating, searching and maintaining listings."""

    @classmethod
    async def create_service(cls, data: ServiceCreate, actor_id: Optional[int] = None) -> ServiceRead:
        """Publish a listing for an existing provider."""
        logger = logging.getLogger(__name__)
        from service_directory_api.app.core.db import get_connection
        conn = get_connection()
        try:
            cursor = conn.cursor()
            provider = cursor.execute("SELECT id FROM users WHERE id = ?", (data.provider_id,)).fetchone()
            if not provider:
                raise ValueError(f"Provider {data.provider_id} not found")
            cursor.execute(
                """
                INSERT INTO services (name, category, description, price, location, phone, image, provider_id)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    data.name,
                    data.category,
                    data.description,
                    data.price,
                    data.location,
                    data.phone,
                    data.image or DEFAULT_SERVICE_IMAGE,
                    data.provider_id,
                ),
            )
            service_id = cursor.lastrowid
            conn.commit()
            row = cursor.execute(f"SELECT {SERVICE_COLUMNS} FROM services WHERE id = ?", (service_id,)).fetchone()
        finally:
            conn.close()
        logger.info("Created service %s for provider %s", service_id, data.provider_id)
        from service_directory_api.app.services.audit_service import AuditService
        await AuditService.log(
            user_id=actor_id or data.provider_id,
            action="create",
            object_type="service",
            object_id=service_id,
            details={"name": data.name, "category": data.category},
        )
        return row_to_service(row)

    @classmethod
    async def list_services(
        cls,
        provider_id: Optional[int] = None,
        category: Optional[str] = None,
        q: Optional[str] = None,
        location: Optional[str] = None,
    ) -> List[ServiceRead]:
        """Return listings newest first.

        ``category`` matches exactly, ``q`` searches name and
        description and ``location`` is a substring match; all matches
        are case‑insensitive.
        """
        from service_directory_api.app.core.db import get_connection
        conn = get_connection()
        try:
            where_clauses: List[str] = []
            params: List[Any] = []
            if provider_id is not None:
                where_clauses.append("provider_id = ?")
                params.append(provider_id)
            if category:
                where_clauses.append("LOWER(category) = LOWER(?)")
                params.append(category)
            if q:
                where_clauses.append("(LOWER(name) LIKE ? OR LOWER(description) LIKE ?)")
                pattern = f"%{q.lower()}%"
                params.extend([pattern, pattern])
            if location:
                where_clauses.append("LOWER(location) LIKE ?")
                params.append(f"%{location.lower()}%")
            query = f"SELECT {SERVICE_COLUMNS} FROM services"
            if where_clauses:
                query += " WHERE " + " AND ".join(where_clauses)
            query += " ORDER BY created_at DESC, id DESC"
            rows = conn.execute(query, tuple(params)).fetchall()
            return [row_to_service(r) for r in rows]
        finally:
            conn.close()

    @classmethod
    async def list_categories(cls) -> List[str]:
        from service_directory_api.app.core.db import get_connection
        conn = get_connection()
        try:
            rows = conn.execute("SELECT DISTINCT category FROM services ORDER BY category").fetchall()
            return [r["category"] for r in rows]
        finally:
            conn.close()

    @classmethod
    async def get_service(cls, service_id: int) -> ServiceRead:
        from service_directory_api.app.core.db import get_connection
        conn = get_connection()
        try:
            row = conn.execute(f"SELECT {SERVICE_COLUMNS} FROM services WHERE id = ?", (service_id,)).fetchone()
            if not row:
                raise ValueError("Service not found")
            return row_to_service(row)
        finally:
            conn.close()

    @classmethod
    async def update_service(
        cls, service_id: int, data: ServiceUpdate, actor_id: Optional[int] = None
    ) -> ServiceRead:
        """Apply the supplied fields to a listing and return it."""
        updates = data.model_dump(exclude_unset=True)
        from service_directory_api.app.core.db import get_connection
        conn = get_connection()
        try:
            cursor = conn.cursor()
            if not cursor.execute("SELECT id FROM services WHERE id = ?", (service_id,)).fetchone():
                raise ValueError("Service not found")
            if updates:
                fields = ", ".join(f"{key} = ?" for key in updates)
                cursor.execute(
                    f"UPDATE services SET {fields}, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                    (*updates.values(), service_id),
                )
                conn.commit()
            row = cursor.execute(f"SELECT {SERVICE_COLUMNS} FROM services WHERE id = ?", (service_id,)).fetchone()
        finally:
            conn.close()
        if updates:
            from service_directory_api.app.services.audit_service import AuditService
            await AuditService.log(
                user_id=actor_id,
                action="update",
                object_type="service",
                object_id=service_id,
                details=updates,
            )
        return row_to_service(row)

    @classmethod
    async def delete_service(cls, service_id: int, actor_id: Optional[int] = None) -> None:
        """Delete a listing.

        Its reviews go with it; bookings and payments keep their rows
        with ``service_id`` cleared.
        """
        logger = logging.getLogger(__name__)
        from service_directory_api.app.core.db import get_connection
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM services WHERE id = ?", (service_id,))
            if cursor.rowcount == 0:
                raise ValueError("Service not found")
            conn.commit()
        finally:
            conn.close()
        logger.info("Deleted service %s", service_id)
        from service_directory_api.app.services.audit_service import AuditService
        await AuditService.log(
            user_id=actor_id,
            action="delete",
            object_type="service",
            object_id=service_id,
        )
