"""
Service layer abstraction.

Each service encapsulates the business logic of one domain (users,
listings, bookings, payments, wallets, invoices, ...) on top of the
SQLite tables defined in ``core.db``.  API handlers call these services
and translate the ``ValueError`` they raise into HTTP errors.
"""
