"""
Pydantic models for wallets and wallet transactions.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


TransactionType = Literal["credit", "debit", "refund"]


class WalletBalance(BaseModel):
    user_id: int
    balance: float
    total_added: float
    total_spent: float
    total_refunded: float


class WalletTransactionRead(BaseModel):
    id: int
    type: TransactionType
    amount: float
    description: Optional[str] = None
    related_payment_id: Optional[int] = None
    balance_after: float
    created_at: datetime


class WalletDetails(WalletBalance):
    transaction_count: int
    transactions: List[WalletTransactionRead]
    created_at: datetime


class TransactionHistory(BaseModel):
    user_id: int
    transactions: List[WalletTransactionRead]
    total_transactions: int


class AddMoney(BaseModel):
    user_id: int
    amount: float = Field(..., gt=0)
    payment_intent_id: str = Field(..., description="Succeeded Stripe PaymentIntent funding the top‑up")


class AddMoneyResult(BaseModel):
    success: bool = True
    message: str
    new_balance: float
    wallet: WalletBalance


class TopupIntentCreate(BaseModel):
    user_id: int
    amount: float = Field(..., gt=0)


class TopupIntentRead(BaseModel):
    client_secret: Optional[str]
    payment_intent_id: str
    amount: float
    currency: str


class Withdraw(BaseModel):
    user_id: int
    amount: float = Field(..., gt=0)
    bank_account_token: str


class WithdrawResult(BaseModel):
    success: bool = True
    message: str
    payout_id: str
    new_balance: float
