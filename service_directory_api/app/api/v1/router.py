"""
Top‑level router for version 1 of the API.

This router aggregates domain‑specific routers (auth, services,
bookings, payments, etc.) under a unified prefix.  When a new domain is
introduced, include its router here.
"""

from fastapi import APIRouter

from .endpoints import (
    audit,
    auth,
    bookings,
    contacts,
    invoices,
    payments,
    reviews,
    services,
    wallets,
)

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(services.router, prefix="/services", tags=["services"])
router.include_router(bookings.router, prefix="/bookings", tags=["bookings"])
router.include_router(reviews.router, prefix="/reviews", tags=["reviews"])
router.include_router(contacts.router, prefix="/contacts", tags=["contacts"])
router.include_router(payments.router, prefix="/payments", tags=["payments"])
router.include_router(wallets.router, prefix="/wallets", tags=["wallets"])
router.include_router(invoices.router, prefix="/invoices", tags=["invoices"])
router.include_router(audit.router, prefix="/audit", tags=["audit"])
