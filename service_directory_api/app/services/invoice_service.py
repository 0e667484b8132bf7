"""
Business logic for invoices.

An invoice is issued for a payment and snapshots the listing, customer
and provider details of that moment.  Its PDF is rendered into the
invoices directory; a rendering failure is logged and leaves the
invoice in ``draft`` status instead of failing the request.
"""

import json
import logging
import math
import secrets
import string
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from ..schemas.invoice import InvoicePage, InvoiceRead
from .invoice_pdf import invoice_pdf_path, render_invoice_pdf


_ALPHABET = string.ascii_uppercase + string.digits


def generate_invoice_number(now: Optional[datetime] = None) -> str:
    """Return ``INV-YYYYMMDD-XXXXXXXXX`` with nine random upper‑case alphanumerics."""
    now = now or datetime.now(timezone.utc)
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(9))
    return f"INV-{now:%Y%m%d}-{suffix}"


class InvoiceService:
    """Service for issuing, listing and maintaining invoices."""

    @staticmethod
    def _to_read(row) -> InvoiceRead:
        data = dict(row)
        for key in ("service_details", "customer_details", "provider_details"):
            data[key] = json.loads(data[key]) if data.get(key) else {}
        return InvoiceRead(**data)

    @classmethod
    async def create_invoice(cls, payment_id: int) -> InvoiceRead:
        """Issue an invoice for a payment and render its PDF."""
        logger = logging.getLogger(__name__)
        from service_directory_api.app.core.db import get_connection
        conn = get_connection()
        try:
            cursor = conn.cursor()
            payment = cursor.execute("SELECT * FROM payments WHERE id = ?", (payment_id,)).fetchone()
            if not payment:
                raise ValueError("Payment not found")
            if payment["invoice_id"] is not None:
                raise ValueError(f"Payment {payment_id} already has invoice {payment['invoice_id']}")
            service = cursor.execute(
                "SELECT name, description, price, location FROM services WHERE id = ?",
                (payment["service_id"],),
            ).fetchone()
            booking = cursor.execute("SELECT date FROM bookings WHERE id = ?", (payment["booking_id"],)).fetchone()
            customer = cursor.execute(
                "SELECT name, email, phone FROM users WHERE id = ?", (payment["customer_id"],)
            ).fetchone()
            provider = cursor.execute(
                "SELECT name, email, phone, business_name FROM users WHERE id = ?", (payment["provider_id"],)
            ).fetchone()

            service_details = dict(service) if service else {}
            service_details["date"] = booking["date"] if booking else None
            customer_details = {
                "name": customer["name"],
                "email": customer["email"],
                "phone": customer["phone"] or "N/A",
            }
            provider_details = {
                "name": provider["name"],
                "email": provider["email"],
                "phone": provider["phone"] or "N/A",
                "business_name": provider["business_name"] or provider["name"],
            }
            paid = payment["status"] == "succeeded"
            cursor.execute(
                f"""
                INSERT INTO invoices
                    (invoice_number, payment_id, booking_id, customer_id, provider_id, service_id,
                     service_details, customer_details, provider_details,
                     subtotal, platform_fee, tax, total_amount, status, payment_status, paid_date)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, 0, ?, 'draft', ?, {'CURRENT_TIMESTAMP' if paid else 'NULL'})
                """,
                (
                    generate_invoice_number(),
                    payment_id,
                    payment["booking_id"],
                    payment["customer_id"],
                    payment["provider_id"],
                    payment["service_id"],
                    json.dumps(service_details),
                    json.dumps(customer_details),
                    json.dumps(provider_details),
                    round(payment["amount"] - payment["platform_fee"], 2),
                    payment["platform_fee"],
                    payment["amount"],
                    "paid" if paid else "pending",
                ),
            )
            invoice_id = cursor.lastrowid
            cursor.execute("UPDATE payments SET invoice_id = ? WHERE id = ?", (invoice_id, payment_id))
            conn.commit()
            invoice = cls._to_read(cursor.execute("SELECT * FROM invoices WHERE id = ?", (invoice_id,)).fetchone())

            try:
                render_invoice_pdf(invoice)
            except Exception:
                logger.exception("Failed to render PDF for invoice %s", invoice.invoice_number)
            else:
                cursor.execute(
                    "UPDATE invoices SET pdf_url = ?, status = 'sent' WHERE id = ?",
                    (f"/invoices/{invoice.invoice_number}.pdf", invoice_id),
                )
                conn.commit()
                invoice = cls._to_read(cursor.execute("SELECT * FROM invoices WHERE id = ?", (invoice_id,)).fetchone())
        finally:
            conn.close()
        logger.info("Issued invoice %s for payment %s", invoice.invoice_number, payment_id)
        from service_directory_api.app.services.audit_service import AuditService
        await AuditService.log(
            user_id=invoice.customer_id,
            action="create",
            object_type="invoice",
            object_id=invoice_id,
            details={"invoice_number": invoice.invoice_number, "payment_id": payment_id},
        )
        return invoice

    @classmethod
    async def get_invoice(cls, invoice_id: int) -> InvoiceRead:
        from service_directory_api.app.core.db import get_connection
        conn = get_connection()
        try:
            row = conn.execute("SELECT * FROM invoices WHERE id = ?", (invoice_id,)).fetchone()
            if not row:
                raise ValueError("Invoice not found")
            return cls._to_read(row)
        finally:
            conn.close()

    @classmethod
    async def list_for_user(cls, user_id: int, role: str = "customer", limit: int = 20, skip: int = 0) -> InvoicePage:
        """Return a page of the user's invoices, newest first.

        ``role`` is ``customer`` for invoices the user paid and
        ``provider`` for invoices issued for the user's listings.
        """
        column = "provider_id" if role == "provider" else "customer_id"
        from service_directory_api.app.core.db import get_connection
        conn = get_connection()
        try:
            total = conn.execute(
                f"SELECT COUNT(*) AS count FROM invoices WHERE {column} = ?", (user_id,)
            ).fetchone()["count"]
            rows = conn.execute(
                f"SELECT * FROM invoices WHERE {column} = ? ORDER BY issued_date DESC, id DESC LIMIT ? OFFSET ?",
                (user_id, limit, skip),
            ).fetchall()
        finally:
            conn.close()
        return InvoicePage(
            invoices=[cls._to_read(r) for r in rows],
            total=total,
            page=skip // limit + 1,
            pages=math.ceil(total / limit),
        )

    @classmethod
    async def get_pdf_path(cls, invoice_id: int) -> Path:
        invoice = await cls.get_invoice(invoice_id)
        path = invoice_pdf_path(invoice.invoice_number)
        if not path.is_file():
            raise ValueError("PDF file not found")
        return path

    @classmethod
    async def mark_paid(cls, invoice_id: int, actor_id: Optional[int] = None) -> InvoiceRead:
        return await cls._set_status(
            invoice_id,
            "status = 'paid', payment_status = 'paid', paid_date = CURRENT_TIMESTAMP",
            actor_id,
            {"status": "paid"},
        )

    @classmethod
    async def send_email(cls, invoice_id: int, actor_id: Optional[int] = None) -> InvoiceRead:
        """Mark the invoice as sent to the customer.

        No mail transport is configured; only the status changes.
        """
        return await cls._set_status(invoice_id, "status = 'sent'", actor_id, {"status": "sent"})

    @classmethod
    async def _set_status(cls, invoice_id: int, assignments: str, actor_id: Optional[int], details: dict) -> InvoiceRead:
        from service_directory_api.app.core.db import get_connection
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(f"UPDATE invoices SET {assignments} WHERE id = ?", (invoice_id,))
            if cursor.rowcount == 0:
                raise ValueError("Invoice not found")
            conn.commit()
            row = cursor.execute("SELECT * FROM invoices WHERE id = ?", (invoice_id,)).fetchone()
        finally:
            conn.close()
        from service_directory_api.app.services.audit_service import AuditService
        await AuditService.log(
            user_id=actor_id,
            action="update",
            object_type="invoice",
            object_id=invoice_id,
            details=details,
        )
        return cls._to_read(row)

    @classmethod
    async def delete_invoice(cls, invoice_id: int, actor_id: Optional[int] = None) -> None:
        """Delete an invoice, unlink it from its payment and remove its PDF."""
        logger = logging.getLogger(__name__)
        from service_directory_api.app.core.db import get_connection
        conn = get_connection()
        try:
            cursor = conn.cursor()
            row = cursor.execute(
                "SELECT invoice_number FROM invoices WHERE id = ?", (invoice_id,)
            ).fetchone()
            if not row:
                raise ValueError("Invoice not found")
            cursor.execute("UPDATE payments SET invoice_id = NULL WHERE invoice_id = ?", (invoice_id,))
            cursor.execute("DELETE FROM invoices WHERE id = ?", (invoice_id,))
            conn.commit()
        finally:
            conn.close()
        path = invoice_pdf_path(row["invoice_number"])
        if path.exists():
            path.unlink()
        logger.info("Deleted invoice %s", row["invoice_number"])
        from service_directory_api.app.services.audit_service import AuditService
        await AuditService.log(
            user_id=actor_id,
            action="delete",
            object_type="invoice",
            object_id=invoice_id,
            details={"invoice_number": row["invoice_number"]},
        )
