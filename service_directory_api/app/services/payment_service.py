"""
Business logic for payments.

Two ways to pay for a booking are supported:

* ``card``/``upi`` – a Stripe PaymentIntent is created and a pending
  payment stored.  After the client completes the intent,
  ``confirm_payment`` checks it with Stripe, marks the payment
  succeeded, confirms the booking and credits the provider's wallet.
* ``wallet`` – the listing price is debited from the customer's wallet
  and credited (minus the platform fee) to the provider's wallet at
  once.

The payment row, booking status and wallet movements of one request are
written on a single connection and committed together; any failure
rolls all of them back.
"""

import json
import logging
import sqlite3
from typing import List, Optional, Tuple

from ..schemas.payment import (
    PaymentConfirm,
    PaymentIntentCreate,
    PaymentIntentRead,
    PaymentRead,
    PaymentResult,
    WalletPayment,
)
from .booking_service import populate_service, user_summary
from .stripe_gateway import StripeGateway
from .wallet_service import WalletService


def split_amount(amount: float) -> Tuple[float, float]:
    """Return ``(platform_fee, provider_amount)`` for a payment amount, in cents precision."""
    from service_directory_api.app.core.config import settings
    fee = round(amount * settings.platform_fee_rate, 2)
    return fee, round(amount - fee, 2)


class PaymentService:
    """Service for card and wallet payments, refunds and payment history."""

    @staticmethod
    def _to_read(cursor: sqlite3.Cursor, row: sqlite3.Row) -> PaymentRead:
        data = dict(row)
        data["metadata"] = json.loads(data["metadata"]) if data.get("metadata") else None
        return PaymentRead(
            **data,
            service=populate_service(cursor, row["service_id"]),
            customer=user_summary(cursor, row["customer_id"]),
            provider=user_summary(cursor, row["provider_id"]),
        )

    @staticmethod
    def _load_booking(cursor: sqlite3.Cursor, booking_id: int) -> sqlite3.Row:
        booking = cursor.execute(
            """
            SELECT b.id, b.customer_id, b.provider_id, b.service_id, b.status,
                   s.name AS service_name, s.price AS service_price
            FROM bookings b LEFT JOIN services s ON s.id = b.service_id
            WHERE b.id = ?
            """,
            (booking_id,),
        ).fetchone()
        if not booking:
            raise ValueError("Booking not found")
        if booking["status"] == "cancelled":
            raise ValueError("Booking is cancelled")
        paid = cursor.execute(
            "SELECT id FROM payments WHERE booking_id = ? AND status = 'succeeded'",
            (booking_id,),
        ).fetchone()
        if paid:
            raise ValueError("Booking already paid")
        return booking

    @classmethod
    async def create_intent(cls, data: PaymentIntentCreate) -> PaymentIntentRead:
        """Start a card payment for a booking.

        Creates the Stripe PaymentIntent first and then the pending
        payment that references it.
        """
        logger = logging.getLogger(__name__)
        from service_directory_api.app.core.config import settings
        from service_directory_api.app.core.db import get_connection
        conn = get_connection()
        try:
            cursor = conn.cursor()
            booking = cls._load_booking(cursor, data.booking_id)
            intent = StripeGateway.create_payment_intent(
                data.amount,
                metadata={"booking_id": str(data.booking_id), "payment_method": data.payment_method},
            )
            fee, provider_amount = split_amount(data.amount)
            cursor.execute(
                """
                INSERT INTO payments
                    (booking_id, customer_id, provider_id, service_id, amount, currency,
                     stripe_payment_intent_id, status, payment_method, description,
                     platform_fee, provider_amount, metadata)
                VALUES (?, ?, ?, ?, ?, ?, ?, 'pending', ?, ?, ?, ?, ?)
                """,
                (
                    booking["id"],
                    booking["customer_id"],
                    booking["provider_id"],
                    booking["service_id"],
                    data.amount,
                    settings.currency,
                    intent["id"],
                    data.payment_method,
                    f"Payment for {booking['service_name'] or 'service'}",
                    fee,
                    provider_amount,
                    json.dumps({"booking_id": booking["id"]}),
                ),
            )
            payment_id = cursor.lastrowid
            conn.commit()
        finally:
            conn.close()
        logger.info("Created pending payment %s (intent %s) for booking %s", payment_id, intent["id"], data.booking_id)
        from service_directory_api.app.services.audit_service import AuditService
        await AuditService.log(
            user_id=booking["customer_id"],
            action="create",
            object_type="payment",
            object_id=payment_id,
            details={"method": data.payment_method, "amount": data.amount, "booking_id": data.booking_id},
        )
        return PaymentIntentRead(
            client_secret=intent["client_secret"],
            payment_id=payment_id,
            amount=data.amount,
            currency=settings.currency,
        )

    @classmethod
    async def confirm_payment(cls, data: PaymentConfirm) -> PaymentResult:
        """Settle a card payment once Stripe reports its intent succeeded.

        Confirming an already succeeded payment changes nothing and
        returns it again, so clients may safely retry.
        """
        logger = logging.getLogger(__name__)
        from service_directory_api.app.core.db import get_connection
        conn = get_connection()
        try:
            cursor = conn.cursor()
            payment = cursor.execute("SELECT * FROM payments WHERE id = ?", (data.payment_id,)).fetchone()
            if not payment:
                raise ValueError("Payment not found")
            if payment["stripe_payment_intent_id"] != data.payment_intent_id:
                raise ValueError("Payment intent does not match this payment")
            if payment["status"] == "succeeded":
                return PaymentResult(message="Payment already confirmed", payment=cls._to_read(cursor, payment))
            if payment["status"] != "pending":
                raise ValueError(f"Cannot confirm a {payment['status']} payment")

            intent = StripeGateway.retrieve_payment_intent(data.payment_intent_id)
            if intent["status"] != "succeeded":
                raise ValueError("Payment not successful")

            try:
                # Guarded on status so a concurrent confirm credits the provider once.
                cursor.execute(
                    "UPDATE payments SET status = 'succeeded', completed_at = CURRENT_TIMESTAMP "
                    "WHERE id = ? AND status = 'pending'",
                    (payment["id"],),
                )
                if cursor.rowcount == 1:
                    cursor.execute(
                        "UPDATE bookings SET status = 'confirmed', updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                        (payment["booking_id"],),
                    )
                    WalletService._credit(
                        cursor,
                        payment["provider_id"],
                        payment["provider_amount"],
                        f"Payment received for booking #{payment['booking_id']}",
                        payment_id=payment["id"],
                    )
                conn.commit()
            except Exception:
                conn.rollback()
                raise
            row = cursor.execute("SELECT * FROM payments WHERE id = ?", (payment["id"],)).fetchone()
            result = PaymentResult(message="Payment confirmed successfully", payment=cls._to_read(cursor, row))
        finally:
            conn.close()
        logger.info("Payment %s confirmed", data.payment_id)
        from service_directory_api.app.services.audit_service import AuditService
        await AuditService.log(
            user_id=result.payment.customer_id,
            action="confirm",
            object_type="payment",
            object_id=data.payment_id,
            details={"amount": result.payment.amount},
        )
        return result

    @classmethod
    async def pay_with_wallet(cls, data: WalletPayment) -> PaymentResult:
        """Pay a booking from the customer's wallet balance."""
        logger = logging.getLogger(__name__)
        from service_directory_api.app.core.config import settings
        from service_directory_api.app.core.db import get_connection
        conn = get_connection()
        try:
            cursor = conn.cursor()
            booking = cls._load_booking(cursor, data.booking_id)
            if booking["customer_id"] != data.customer_id:
                raise ValueError("Booking does not belong to this customer")
            if booking["service_price"] is None:
                raise ValueError("Service not found")
            amount = booking["service_price"]
            fee, provider_amount = split_amount(amount)
            try:
                cursor.execute(
                    """
                    INSERT INTO payments
                        (booking_id, customer_id, provider_id, service_id, amount, currency,
                         status, payment_method, description, platform_fee, provider_amount, completed_at)
                    VALUES (?, ?, ?, ?, ?, ?, 'succeeded', 'wallet', ?, ?, ?, CURRENT_TIMESTAMP)
                    """,
                    (
                        booking["id"],
                        data.customer_id,
                        booking["provider_id"],
                        booking["service_id"],
                        amount,
                        settings.currency,
                        f"Payment for {booking['service_name']}",
                        fee,
                        provider_amount,
                    ),
                )
                payment_id = cursor.lastrowid
                WalletService._debit(
                    cursor,
                    data.customer_id,
                    amount,
                    f"Payment for booking #{booking['id']}",
                    payment_id=payment_id,
                )
                WalletService._credit(
                    cursor,
                    booking["provider_id"],
                    provider_amount,
                    f"Payment received for booking #{booking['id']}",
                    payment_id=payment_id,
                )
                cursor.execute(
                    "UPDATE bookings SET status = 'confirmed', updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                    (booking["id"],),
                )
                conn.commit()
            except Exception:
                conn.rollback()
                raise
            row = cursor.execute("SELECT * FROM payments WHERE id = ?", (payment_id,)).fetchone()
            result = PaymentResult(message="Payment successful using wallet", payment=cls._to_read(cursor, row))
        finally:
            conn.close()
        logger.info("Booking %s paid from wallet of user %s (%.2f)", data.booking_id, data.customer_id, amount)
        from service_directory_api.app.services.audit_service import AuditService
        await AuditService.log(
            user_id=data.customer_id,
            action="create",
            object_type="payment",
            object_id=payment_id,
            details={"method": "wallet", "amount": amount, "booking_id": data.booking_id},
        )
        return result

    @classmethod
    async def history(cls, user_id: int) -> List[PaymentRead]:
        """Return payments made or received by the user, newest first."""
        from service_directory_api.app.core.db import get_connection
        conn = get_connection()
        try:
            cursor = conn.cursor()
            rows = cursor.execute(
                "SELECT * FROM payments WHERE customer_id = ? OR provider_id = ? ORDER BY created_at DESC, id DESC",
                (user_id, user_id),
            ).fetchall()
            return [cls._to_read(cursor, r) for r in rows]
        finally:
            conn.close()

    @classmethod
    async def get_payment(cls, payment_id: int) -> PaymentRead:
        from service_directory_api.app.core.db import get_connection
        conn = get_connection()
        try:
            cursor = conn.cursor()
            row = cursor.execute("SELECT * FROM payments WHERE id = ?", (payment_id,)).fetchone()
            if not row:
                raise ValueError("Payment not found")
            return cls._to_read(cursor, row)
        finally:
            conn.close()

    @classmethod
    async def refund(cls, payment_id: int, actor_id: Optional[int] = None) -> PaymentResult:
        """Refund a succeeded payment.

        The payment is claimed with a status-guarded update before
        anything else happens, so of two concurrent refunds only one
        reaches Stripe and credits the wallet.  Card payments are then
        refunded through Stripe; a Stripe failure rolls the claim back.
        The payment becomes ``refunded``, its booking ``cancelled``, any
        invoice for it is flagged refunded and the full amount is
        credited to the customer's wallet as a ``refund`` transaction.
        """
        logger = logging.getLogger(__name__)
        from service_directory_api.app.core.db import get_connection
        conn = get_connection()
        try:
            cursor = conn.cursor()
            payment = cursor.execute("SELECT * FROM payments WHERE id = ?", (payment_id,)).fetchone()
            if not payment:
                raise ValueError("Payment not found")

            try:
                cursor.execute(
                    "UPDATE payments SET status = 'refunded' WHERE id = ? AND status = 'succeeded'",
                    (payment_id,),
                )
                if cursor.rowcount != 1:
                    raise ValueError("Only succeeded payments can be refunded")
                if payment["payment_method"] == "card" and payment["stripe_payment_intent_id"]:
                    StripeGateway.refund(payment["stripe_payment_intent_id"])
                cursor.execute(
                    "UPDATE bookings SET status = 'cancelled', updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                    (payment["booking_id"],),
                )
                cursor.execute(
                    "UPDATE invoices SET payment_status = 'refunded' WHERE payment_id = ?",
                    (payment_id,),
                )
                WalletService._credit(
                    cursor,
                    payment["customer_id"],
                    payment["amount"],
                    "Refund for cancelled booking",
                    payment_id=payment_id,
                    tx_type="refund",
                )
                conn.commit()
            except Exception:
                conn.rollback()
                raise
            row = cursor.execute("SELECT * FROM payments WHERE id = ?", (payment_id,)).fetchone()
            result = PaymentResult(message="Payment refunded successfully", payment=cls._to_read(cursor, row))
        finally:
            conn.close()
        logger.info("Payment %s refunded (%.2f)", payment_id, payment["amount"])
        from service_directory_api.app.services.audit_service import AuditService
        await AuditService.log(
            user_id=actor_id,
            action="refund",
            object_type="payment",
            object_id=payment_id,
            details={"amount": payment["amount"], "method": payment["payment_method"]},
        )
        return result
