"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
API starts with a local SQLite database and no payment provider.  In a
production deployment override these via environment variables.
"""

import os
from dataclasses import dataclass


def _as_bool(value: str) -> bool:
    return value.lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Service Directory API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = _as_bool(os.getenv("DEBUG", "false"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")
    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    # Tokens issued at login/registration stay valid for one day.
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))
    algorithm: str = os.getenv("ALGORITHM", "HS256")

    # Path or connection string for the SQLite database.  A relative
    # path is resolved relative to the project root by ``core.db``.
    database_url: str = os.getenv("DATABASE_URL", "service_directory.db")

    # Stripe secret key.  When empty, card payments, top‑ups and
    # withdrawals fail with a gateway error; wallet payments still work.
    stripe_secret_key: str = os.getenv("STRIPE_SECRET_KEY", "")
    currency: str = os.getenv("CURRENCY", "usd")
    platform_fee_rate: float = float(os.getenv("PLATFORM_FEE_RATE", "0.1"))

    # Directory where rendered invoice PDFs are written.  Relative paths
    # are resolved against the project root.
    invoices_dir: str = os.getenv("INVOICES_DIR", "invoices")

    # Comma‑separated list of allowed CORS origins; ``*`` allows all.
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")

    # Insert the sample provider and listings on startup when the
    # services table is empty.
    seed_database: bool = _as_bool(os.getenv("SEED_DATABASE", "true"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.
settings = Settings()
