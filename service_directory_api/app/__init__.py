"""
Application package initializer.

This package contains the main entrypoint for the marketplace API and
all of its submodules.  Each domain (services, bookings, payments,
wallets, invoices, etc.) has its own schema module, service class and
router defined in ``api/v1/endpoints``.  Versioning is handled by
grouping routers under the ``api/<version>/`` hierarchy.
"""

from .main import app  # noqa: F401
