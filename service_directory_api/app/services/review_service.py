"""
Business logic for reviews.

Reviews are stored in the ``reviews`` table.  Adding a review
recalculates the listing's average ``rating`` (one decimal) and its
``review_count`` in the same transaction.
"""

import logging
from typing import List

from ..schemas.review import ReviewCreate, ReviewRead


class ReviewService:
    """Service for listing and submitting reviews of a listing."""

    @classmethod
    async def list_for_service(cls, service_id: int) -> List[ReviewRead]:
        from service_directory_api.app.core.db import get_connection
        conn = get_connection()
        try:
            rows = conn.execute(
                "SELECT * FROM reviews WHERE service_id = ? ORDER BY created_at DESC, id DESC",
                (service_id,),
            ).fetchall()
            return [ReviewRead(**dict(r)) for r in rows]
        finally:
            conn.close()

    @classmethod
    async def create_review(cls, data: ReviewCreate) -> ReviewRead:
        """Store a review and refresh the listing's rating aggregates."""
        logger = logging.getLogger(__name__)
        from service_directory_api.app.core.db import get_connection
        conn = get_connection()
        try:
            cursor = conn.cursor()
            if not cursor.execute("SELECT id FROM services WHERE id = ?", (data.service_id,)).fetchone():
                raise ValueError("Service not found")
            if not cursor.execute("SELECT id FROM users WHERE id = ?", (data.user_id,)).fetchone():
                raise ValueError(f"User {data.user_id} not found")
            cursor.execute(
                """
                INSERT INTO reviews (service_id, user_id, user_name, rating, comment)
                VALUES (?, ?, ?, ?, ?)
                """,
                (data.service_id, data.user_id, data.user_name, data.rating, data.comment),
            )
            review_id = cursor.lastrowid
            stats = cursor.execute(
                "SELECT AVG(rating) AS average, COUNT(*) AS count FROM reviews WHERE service_id = ?",
                (data.service_id,),
            ).fetchone()
            cursor.execute(
                "UPDATE services SET rating = ?, review_count = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                (round(stats["average"], 1), stats["count"], data.service_id),
            )
            conn.commit()
            row = cursor.execute("SELECT * FROM reviews WHERE id = ?", (review_id,)).fetchone()
        finally:
            conn.close()
        logger.info("Review %s added to service %s (rating %s)", review_id, data.service_id, data.rating)
        from service_directory_api.app.services.audit_service import AuditService
        await AuditService.log(
            user_id=data.user_id,
            action="create",
            object_type="review",
            object_id=review_id,
            details={"service_id": data.service_id, "rating": data.rating},
        )
        return ReviewRead(**dict(row))
