"""
Business logic for user wallets.

Every user owns at most one wallet, created lazily the first time it is
read or credited.  Each balance change is recorded as a row in
``wallet_transactions`` carrying the balance after the change.

The ``_credit``/``_debit`` helpers operate on a cursor supplied by the
caller and never commit, so the payment service can settle a payment
and move money between wallets inside a single transaction.
"""

import logging
import sqlite3
from typing import List, Optional

from ..schemas.wallet import (
    AddMoney,
    AddMoneyResult,
    TopupIntentCreate,
    TopupIntentRead,
    TransactionHistory,
    WalletBalance,
    WalletDetails,
    WalletTransactionRead,
    Withdraw,
    WithdrawResult,
)
from .stripe_gateway import PaymentGatewayError, StripeGateway, to_minor_units


_TRANSACTION_COLUMNS = "id, type, amount, description, related_payment_id, balance_after, created_at"


class WalletService:
    """Service for wallet balances, top‑ups and withdrawals."""

    # ------------------------------------------------------------------
    # Cursor level helpers shared with PaymentService
    # ------------------------------------------------------------------

    @staticmethod
    def _get_or_create_wallet(cursor: sqlite3.Cursor, user_id: int) -> sqlite3.Row:
        row = cursor.execute("SELECT * FROM wallets WHERE user_id = ?", (user_id,)).fetchone()
        if row:
            return row
        user = cursor.execute("SELECT id FROM users WHERE id = ?", (user_id,)).fetchone()
        if not user:
            raise ValueError("User not found")
        cursor.execute("INSERT INTO wallets (user_id) VALUES (?)", (user_id,))
        logging.getLogger(__name__).info("Created wallet for user %s", user_id)
        return cursor.execute("SELECT * FROM wallets WHERE user_id = ?", (user_id,)).fetchone()

    @classmethod
    def _credit(
        cls,
        cursor: sqlite3.Cursor,
        user_id: int,
        amount: float,
        description: str,
        payment_id: Optional[int] = None,
        tx_type: str = "credit",
        reference: Optional[str] = None,
    ) -> float:
        """Add ``amount`` to the user's wallet and return the new balance.

        ``tx_type`` is ``credit`` for top‑ups and provider earnings and
        ``refund`` for money returned to a customer; it decides which
        running total is increased.
        """
        wallet = cls._get_or_create_wallet(cursor, user_id)
        total_column = "total_refunded" if tx_type == "refund" else "total_added"
        cursor.execute(
            f"UPDATE wallets SET balance = ROUND(balance + ?, 2), {total_column} = ROUND({total_column} + ?, 2), "
            "updated_at = CURRENT_TIMESTAMP WHERE id = ?",
            (amount, amount, wallet["id"]),
        )
        return cls._record(cursor, wallet["id"], tx_type, amount, description, payment_id, reference)

    @classmethod
    def _debit(
        cls,
        cursor: sqlite3.Cursor,
        user_id: int,
        amount: float,
        description: str,
        payment_id: Optional[int] = None,
        reference: Optional[str] = None,
    ) -> float:
        """Take ``amount`` from the user's wallet and return the new balance.

        The balance check and the update are a single statement, so two
        concurrent debits can never overdraw a wallet.
        """
        wallet = cls._get_or_create_wallet(cursor, user_id)
        cursor.execute(
            "UPDATE wallets SET balance = ROUND(balance - ?, 2), total_spent = ROUND(total_spent + ?, 2), "
            "updated_at = CURRENT_TIMESTAMP WHERE id = ? AND balance >= ?",
            (amount, amount, wallet["id"], amount),
        )
        if cursor.rowcount == 0:
            raise ValueError("Insufficient wallet balance")
        return cls._record(cursor, wallet["id"], "debit", amount, description, payment_id, reference)

    @staticmethod
    def _record(
        cursor: sqlite3.Cursor,
        wallet_id: int,
        tx_type: str,
        amount: float,
        description: str,
        payment_id: Optional[int],
        reference: Optional[str],
    ) -> float:
        balance = cursor.execute("SELECT balance FROM wallets WHERE id = ?", (wallet_id,)).fetchone()["balance"]
        cursor.execute(
            """
            INSERT INTO wallet_transactions
                (wallet_id, type, amount, description, related_payment_id, reference, balance_after)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (wallet_id, tx_type, amount, description, payment_id, reference, balance),
        )
        return balance

    @staticmethod
    def _to_balance(row: sqlite3.Row) -> WalletBalance:
        return WalletBalance(
            user_id=row["user_id"],
            balance=row["balance"],
            total_added=row["total_added"],
            total_spent=row["total_spent"],
            total_refunded=row["total_refunded"],
        )

    @staticmethod
    def _to_transaction(row: sqlite3.Row) -> WalletTransactionRead:
        return WalletTransactionRead(**dict(row))

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    @classmethod
    async def get_balance(cls, user_id: int) -> WalletBalance:
        from service_directory_api.app.core.db import get_connection
        conn = get_connection()
        try:
            wallet = cls._get_or_create_wallet(conn.cursor(), user_id)
            conn.commit()
            return cls._to_balance(wallet)
        finally:
            conn.close()

    @classmethod
    async def get_wallet(cls, user_id: int, limit: int = 20, skip: int = 0) -> WalletDetails:
        """Return the wallet totals with one page of transactions, newest first."""
        from service_directory_api.app.core.db import get_connection
        conn = get_connection()
        try:
            cursor = conn.cursor()
            wallet = cls._get_or_create_wallet(cursor, user_id)
            conn.commit()
            count = cursor.execute(
                "SELECT COUNT(*) AS count FROM wallet_transactions WHERE wallet_id = ?",
                (wallet["id"],),
            ).fetchone()["count"]
            rows = cursor.execute(
                f"SELECT {_TRANSACTION_COLUMNS} FROM wallet_transactions WHERE wallet_id = ? "
                "ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?",
                (wallet["id"], limit, skip),
            ).fetchall()
            return WalletDetails(
                **cls._to_balance(wallet).model_dump(),
                transaction_count=count,
                transactions=[cls._to_transaction(r) for r in rows],
                created_at=wallet["created_at"],
            )
        finally:
            conn.close()

    @classmethod
    async def list_transactions(
        cls, user_id: int, tx_type: Optional[str] = None, limit: int = 50
    ) -> TransactionHistory:
        from service_directory_api.app.core.db import get_connection
        conn = get_connection()
        try:
            cursor = conn.cursor()
            wallet = cls._get_or_create_wallet(cursor, user_id)
            conn.commit()
            query = f"SELECT {_TRANSACTION_COLUMNS} FROM wallet_transactions WHERE wallet_id = ?"
            params: List = [wallet["id"]]
            if tx_type:
                query += " AND type = ?"
                params.append(tx_type)
            query += " ORDER BY created_at DESC, id DESC LIMIT ?"
            params.append(limit)
            rows = cursor.execute(query, tuple(params)).fetchall()
            # The whole wallet history, whatever the filter and limit.
            total = cursor.execute(
                "SELECT COUNT(*) AS count FROM wallet_transactions WHERE wallet_id = ?",
                (wallet["id"],),
            ).fetchone()["count"]
            return TransactionHistory(
                user_id=user_id,
                transactions=[cls._to_transaction(r) for r in rows],
                total_transactions=total,
            )
        finally:
            conn.close()

    @classmethod
    async def create_topup_intent(cls, data: TopupIntentCreate) -> TopupIntentRead:
        """Create a Stripe PaymentIntent the client confirms before calling ``add_money``."""
        from service_directory_api.app.core.config import settings
        from service_directory_api.app.core.db import get_connection
        conn = get_connection()
        try:
            user = conn.execute("SELECT id FROM users WHERE id = ?", (data.user_id,)).fetchone()
        finally:
            conn.close()
        if not user:
            raise ValueError("User not found")
        intent = StripeGateway.create_payment_intent(
            data.amount,
            metadata={"user_id": str(data.user_id), "type": "wallet_topup"},
        )
        return TopupIntentRead(
            client_secret=intent["client_secret"],
            payment_intent_id=intent["id"],
            amount=data.amount,
            currency=settings.currency,
        )

    @classmethod
    async def add_money(cls, data: AddMoney) -> AddMoneyResult:
        """Credit a wallet after its funding PaymentIntent has succeeded.

        Each PaymentIntent can fund at most one top‑up, and only a
        top‑up intent created for this user and this amount is accepted.
        """
        logger = logging.getLogger(__name__)
        intent = StripeGateway.retrieve_payment_intent(data.payment_intent_id)
        metadata = intent["metadata"]
        if metadata.get("type") != "wallet_topup" or metadata.get("user_id") != str(data.user_id):
            raise ValueError("Payment intent is not a top-up for this wallet")
        if intent["amount"] != to_minor_units(data.amount):
            raise ValueError("Amount does not match the payment intent")
        if intent["status"] != "succeeded":
            raise ValueError("Payment not completed")
        from service_directory_api.app.core.db import get_connection
        conn = get_connection()
        try:
            cursor = conn.cursor()
            already = cursor.execute(
                "SELECT id FROM wallet_transactions WHERE reference = ?",
                (data.payment_intent_id,),
            ).fetchone()
            if already:
                raise ValueError("Payment intent already credited")
            new_balance = cls._credit(
                cursor,
                data.user_id,
                data.amount,
                "Wallet top-up via Stripe",
                reference=data.payment_intent_id,
            )
            conn.commit()
            wallet = cls._get_or_create_wallet(cursor, data.user_id)
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()
        logger.info("Added %.2f to wallet of user %s", data.amount, data.user_id)
        from service_directory_api.app.services.audit_service import AuditService
        await AuditService.log(
            user_id=data.user_id,
            action="topup",
            object_type="wallet",
            object_id=wallet["id"],
            details={"amount": data.amount, "payment_intent_id": data.payment_intent_id},
        )
        return AddMoneyResult(
            message="Money added successfully",
            new_balance=new_balance,
            wallet=cls._to_balance(wallet),
        )

    @classmethod
    async def withdraw(cls, data: Withdraw) -> WithdrawResult:
        """Pay out wallet money to a bank account through Stripe.

        The balance is checked before contacting Stripe and debited
        again with a guarded update afterwards.
        """
        logger = logging.getLogger(__name__)
        from service_directory_api.app.core.db import get_connection
        conn = get_connection()
        try:
            cursor = conn.cursor()
            wallet = cls._get_or_create_wallet(cursor, data.user_id)
            conn.commit()
            if wallet["balance"] < data.amount:
                raise ValueError("Insufficient wallet balance")
            try:
                payout_id = StripeGateway.create_payout(data.amount, data.bank_account_token)
            except PaymentGatewayError as exc:
                raise ValueError(f"Bank transfer failed: {exc}") from exc
            new_balance = cls._debit(
                cursor,
                data.user_id,
                data.amount,
                "Withdrawal to bank account",
                reference=payout_id,
            )
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()
        logger.info("User %s withdrew %.2f (payout %s)", data.user_id, data.amount, payout_id)
        from service_directory_api.app.services.audit_service import AuditService
        await AuditService.log(
            user_id=data.user_id,
            action="withdraw",
            object_type="wallet",
            object_id=wallet["id"],
            details={"amount": data.amount, "payout_id": payout_id},
        )
        return WithdrawResult(
            message="Withdrawal initiated successfully",
            payout_id=payout_id,
            new_balance=new_balance,
        )
