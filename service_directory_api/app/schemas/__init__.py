"""
Pydantic schema definitions for API payloads.

Each domain (users, services, bookings, payments, etc.) defines its own
Pydantic models for request and response bodies.  Schemas are separated
from the SQLite tables to decouple API representation from persistence.
"""
