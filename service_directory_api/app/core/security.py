"""
Authentication primitives: password hashing, bearer tokens and role guards.

Tokens are compact HS256 JWTs signed with ``settings.secret_key``.  The
subject claim (``sub``) is the account e‑mail; the account row is looked
up on every request so a disabled or demoted account loses access
immediately, whatever its token says.

Password hashes are stored as ``pbkdf2_sha256$<iterations>$<salt>$<hash>``
so the work factor can be raised without invalidating existing hashes.
"""

import base64
import hashlib
import hmac
import json
import os
import time
from typing import Any, Callable, Dict, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import settings


HASH_SCHEME = "pbkdf2_sha256"
PBKDF2_ITERATIONS = 120_000

bearer_scheme = HTTPBearer(auto_error=False)


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------

def _encode_segment(obj: Dict[str, Any]) -> str:
    raw = json.dumps(obj, separators=(",", ":"), sort_keys=True).encode("utf-8")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _decode_segment(segment: str) -> bytes:
    return base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))


def _signature(signing_input: str) -> str:
    digest = hmac.new(settings.secret_key.encode("utf-8"), signing_input.encode("ascii"), hashlib.sha256).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


def create_access_token(data: Dict[str, Any], expires_delta: Optional[int] = None) -> str:
    """Return a signed token carrying ``data`` plus ``iat`` and ``exp`` claims.

    ``expires_delta`` is a lifetime in seconds; by default tokens live
    for ``ACCESS_TOKEN_EXPIRE_MINUTES``.
    """
    issued_at = int(time.time())
    lifetime = expires_delta or settings.access_token_expire_minutes * 60
    claims = {**data, "iat": issued_at, "exp": issued_at + lifetime}
    signing_input = _encode_segment({"alg": settings.algorithm, "typ": "JWT"}) + "." + _encode_segment(claims)
    return f"{signing_input}.{_signature(signing_input)}"


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Return the claims of a valid, unexpired token, or ``None``."""
    try:
        header_b64, claims_b64, signature = token.split(".")
    except ValueError:
        return None
    if not hmac.compare_digest(_signature(f"{header_b64}.{claims_b64}"), signature):
        return None
    try:
        claims = json.loads(_decode_segment(claims_b64))
    except ValueError:
        return None
    if not isinstance(claims, dict) or not isinstance(claims.get("exp"), int):
        return None
    if claims["exp"] < time.time():
        return None
    return claims


# ---------------------------------------------------------------------------
# Request dependencies
# ---------------------------------------------------------------------------

def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> Dict[str, Any]:
    """Resolve the bearer token to the token claims plus ``user_id`` and ``role``."""
    if credentials is None:
        raise _unauthorized("Not authenticated")
    claims = decode_access_token(credentials.credentials)
    if claims is None:
        raise _unauthorized("Invalid or expired token")

    from service_directory_api.app.core.db import get_connection
    conn = get_connection()
    try:
        account = conn.execute(
            "SELECT id, role, disabled FROM users WHERE email = ?",
            (claims.get("sub"),),
        ).fetchone()
    finally:
        conn.close()
    if account is None:
        raise _unauthorized("User no longer exists")
    if account["disabled"]:
        raise _unauthorized("User account disabled")
    return {**claims, "user_id": account["id"], "role": account["role"]}


def require_roles(*roles: str) -> Callable[..., Dict[str, Any]]:
    """Build a dependency admitting only users whose role is in ``roles``.

    Usage: ``current_user: dict = Depends(require_roles("admin"))``.
    """

    def guard(current_user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
        if current_user["role"] not in roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return current_user

    return guard


# ---------------------------------------------------------------------------
# Passwords
# ---------------------------------------------------------------------------

def hash_password(password: str, iterations: int = PBKDF2_ITERATIONS) -> str:
    salt = os.urandom(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return f"{HASH_SCHEME}${iterations}${salt.hex()}${digest.hex()}"


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Check ``plain_password`` against a hash made by :func:`hash_password`."""
    parts = (hashed_password or "").split("$")
    if len(parts) != 4 or parts[0] != HASH_SCHEME:
        return False
    _, iterations, salt_hex, digest_hex = parts
    try:
        salt = bytes.fromhex(salt_hex)
        expected = bytes.fromhex(digest_hex)
        rounds = int(iterations)
    except ValueError:
        return False
    digest = hashlib.pbkdf2_hmac("sha256", plain_password.encode("utf-8"), salt, rounds)
    return hmac.compare_digest(digest, expected)
