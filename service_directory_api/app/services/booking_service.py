"""
Business logic for bookings.

A booking reserves a listing for a customer on a given date.  The
provider is always the listing's provider.  Bookings start ``pending``
and are confirmed by ``PaymentService`` once paid.
"""

import logging
import sqlite3
from typing import List, Optional

from ..schemas.booking import BookingCreate, BookingRead
from ..schemas.user import UserSummary
from .listing_service import SERVICE_COLUMNS, row_to_service


def user_summary(cursor: sqlite3.Cursor, user_id: Optional[int]) -> Optional[UserSummary]:
    if user_id is None:
        return None
    row = cursor.execute("SELECT id, name, email FROM users WHERE id = ?", (user_id,)).fetchone()
    return UserSummary(**dict(row)) if row else None


def populate_service(cursor: sqlite3.Cursor, service_id: Optional[int]):
    if service_id is None:
        return None
    row = cursor.execute(f"SELECT {SERVICE_COLUMNS} FROM services WHERE id = ?", (service_id,)).fetchone()
    return row_to_service(row) if row else None


class BookingService:
    """Service for creating and tracking bookings."""

    @staticmethod
    def _to_read(cursor: sqlite3.Cursor, row: sqlite3.Row) -> BookingRead:
        return BookingRead(
            id=row["id"],
            customer_id=row["customer_id"],
            provider_id=row["provider_id"],
            service_id=row["service_id"],
            date=row["date"],
            status=row["status"],
            created_at=row["created_at"],
            service=populate_service(cursor, row["service_id"]),
            customer=user_summary(cursor, row["customer_id"]),
            provider=user_summary(cursor, row["provider_id"]),
        )

    @classmethod
    async def create_booking(cls, data: BookingCreate) -> BookingRead:
        """Create a pending booking.

        Raises ``ValueError`` when the customer or service does not
        exist, or when an explicit ``provider_id`` does not match the
        service's provider.
        """
        logger = logging.getLogger(__name__)
        from service_directory_api.app.core.db import get_connection
        conn = get_connection()
        try:
            cursor = conn.cursor()
            customer = cursor.execute("SELECT id FROM users WHERE id = ?", (data.customer_id,)).fetchone()
            if not customer:
                raise ValueError(f"Customer {data.customer_id} not found")
            service = cursor.execute(
                "SELECT id, provider_id FROM services WHERE id = ?", (data.service_id,)
            ).fetchone()
            if not service:
                raise ValueError("Service not found")
            if data.provider_id is not None and data.provider_id != service["provider_id"]:
                raise ValueError("Provider does not offer this service")
            cursor.execute(
                "INSERT INTO bookings (customer_id, provider_id, service_id, date) VALUES (?, ?, ?, ?)",
                (data.customer_id, service["provider_id"], data.service_id, data.date.isoformat()),
            )
            booking_id = cursor.lastrowid
            conn.commit()
            row = cursor.execute("SELECT * FROM bookings WHERE id = ?", (booking_id,)).fetchone()
            booking = cls._to_read(cursor, row)
        finally:
            conn.close()
        logger.info("Customer %s booked service %s", data.customer_id, data.service_id)
        from service_directory_api.app.services.audit_service import AuditService
        await AuditService.log(
            user_id=data.customer_id,
            action="create",
            object_type="booking",
            object_id=booking_id,
            details={"service_id": data.service_id, "date": data.date.isoformat()},
        )
        return booking

    @classmethod
    async def list_for_user(cls, user_id: int, role: str = "customer") -> List[BookingRead]:
        """Return the user's bookings ordered by appointment date.

        With ``role == "business"`` the bookings received as a provider
        are returned, otherwise the ones made as a customer.
        """
        column = "provider_id" if role == "business" else "customer_id"
        from service_directory_api.app.core.db import get_connection
        conn = get_connection()
        try:
            cursor = conn.cursor()
            rows = cursor.execute(
                f"SELECT * FROM bookings WHERE {column} = ? ORDER BY date ASC, id ASC",
                (user_id,),
            ).fetchall()
            return [cls._to_read(cursor, r) for r in rows]
        finally:
            conn.close()

    @classmethod
    async def get_booking(cls, booking_id: int) -> BookingRead:
        from service_directory_api.app.core.db import get_connection
        conn = get_connection()
        try:
            cursor = conn.cursor()
            row = cursor.execute("SELECT * FROM bookings WHERE id = ?", (booking_id,)).fetchone()
            if not row:
                raise ValueError("Booking not found")
            return cls._to_read(cursor, row)
        finally:
            conn.close()

    @classmethod
    async def update_status(cls, booking_id: int, status: str, actor_id: Optional[int] = None) -> BookingRead:
        from service_directory_api.app.core.db import get_connection
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE bookings SET status = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                (status, booking_id),
            )
            if cursor.rowcount == 0:
                raise ValueError("Booking not found")
            conn.commit()
            row = cursor.execute("SELECT * FROM bookings WHERE id = ?", (booking_id,)).fetchone()
            booking = cls._to_read(cursor, row)
        finally:
            conn.close()
        logging.getLogger(__name__).info("Booking %s is now %s", booking_id, status)
        from service_directory_api.app.services.audit_service import AuditService
        await AuditService.log(
            user_id=actor_id,
            action="update",
            object_type="booking",
            object_id=booking_id,
            details={"status": status},
        )
        return booking
