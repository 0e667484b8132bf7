"""
Business logic for users and authentication.

``UserService`` registers customers and business owners, verifies
credentials at login and keeps a history of every login attempt made
against a known account.  The admin dashboard reads the grouped user
lists, the login history and the aggregated login statistics from here.
"""

import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from ..schemas.user import (
    AuthResponse,
    AuthUser,
    LoginHistoryPage,
    LoginHistoryRead,
    LoginStats,
    LoginWindowStats,
    UserRead,
    UserRegister,
    UsersByRole,
)


_USER_COLUMNS = "id, name, email, role, business_name, business_category, phone, disabled, created_at"


def parse_user_agent(user_agent: Optional[str]) -> Tuple[str, str, str]:
    """Derive a coarse ``(browser, os, device)`` triple from a User‑Agent header."""
    if not user_agent:
        return "Unknown", "Unknown", "Unknown"
    ua = user_agent.lower()

    # Order matters: Edge and Opera embed "chrome", Chrome embeds "safari".
    if "edg/" in ua or "edge/" in ua:
        browser = "Edge"
    elif "opr/" in ua or "opera" in ua:
        browser = "Opera"
    elif "firefox/" in ua:
        browser = "Firefox"
    elif "chrome/" in ua or "crios/" in ua:
        browser = "Chrome"
    elif "safari/" in ua:
        browser = "Safari"
    else:
        browser = "Unknown"

    if "android" in ua:
        os_name = "Android"
    elif re.search(r"iphone|ipad|ipod", ua):
        os_name = "iOS"
    elif "windows" in ua:
        os_name = "Windows"
    elif "mac os" in ua or "macintosh" in ua:
        os_name = "macOS"
    elif "linux" in ua:
        os_name = "Linux"
    else:
        os_name = "Unknown"

    if "ipad" in ua or "tablet" in ua:
        device = "Tablet"
    elif "mobi" in ua or "iphone" in ua or "android" in ua:
        device = "Mobile"
    else:
        device = "Desktop"
    return browser, os_name, device


class UserService:
    """Service for user accounts, authentication and login history."""

    @staticmethod
    def _to_user(row) -> UserRead:
        data = dict(row)
        data["disabled"] = bool(data.get("disabled"))
        return UserRead(**data)

    @classmethod
    async def register(cls, data: UserRegister) -> AuthResponse:
        """Create an account and issue an access token for it.

        Raises ``ValueError`` when the e‑mail is already registered.
        """
        logger = logging.getLogger(__name__)
        logger.info("Registering %s user %s", data.role, data.email)
        from service_directory_api.app.core.db import get_connection
        from service_directory_api.app.core.security import create_access_token, hash_password
        conn = get_connection()
        try:
            cursor = conn.cursor()
            existing = cursor.execute("SELECT id FROM users WHERE email = ?", (data.email,)).fetchone()
            if existing:
                raise ValueError("User already exists")
            cursor.execute(
                """
                INSERT INTO users (name, email, password, role, business_name, business_category, phone)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    data.name,
                    data.email,
                    hash_password(data.password),
                    data.role,
                    data.business_name,
                    data.business_category,
                    data.phone,
                ),
            )
            user_id = cursor.lastrowid
            conn.commit()
        finally:
            conn.close()
        from service_directory_api.app.services.audit_service import AuditService
        await AuditService.log(
            user_id=user_id,
            action="create",
            object_type="user",
            object_id=user_id,
            details={"email": data.email, "role": data.role},
        )
        token = create_access_token({"sub": data.email})
        return AuthResponse(
            token=token,
            user=AuthUser(id=user_id, name=data.name, email=data.email, role=data.role),
        )

    @classmethod
    async def authenticate(
        cls,
        email: str,
        password: str,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> AuthResponse:
        """Verify credentials and record the attempt in the login history.

        Unknown e‑mails and wrong passwords both raise
        ``ValueError("Invalid credentials")`` so callers cannot discover
        which accounts exist.  Attempts against an existing account are
        stored with status ``success`` or ``failed`` and a reason.
        """
        logger = logging.getLogger(__name__)
        from service_directory_api.app.core.db import get_connection
        from service_directory_api.app.core.security import create_access_token, verify_password
        conn = get_connection()
        try:
            cursor = conn.cursor()
            row = cursor.execute(
                "SELECT id, name, email, password, role, disabled FROM users WHERE email = ?",
                (email,),
            ).fetchone()
            if not row:
                logger.warning("Login attempt for unknown email %s", email)
                raise ValueError("Invalid credentials")

            reason = None
            if not verify_password(password, row["password"]):
                reason = "Invalid password"
            elif row["disabled"]:
                reason = "Account disabled"

            browser, os_name, device = parse_user_agent(user_agent)
            cursor.execute(
                """
                INSERT INTO login_history
                    (user_id, email, role, status, reason, ip_address, user_agent, browser, os, device, is_admin)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    row["id"],
                    row["email"],
                    row["role"],
                    "failed" if reason else "success",
                    reason,
                    ip_address,
                    user_agent,
                    browser,
                    os_name,
                    device,
                    1 if row["role"] == "admin" else 0,
                ),
            )
            conn.commit()
        finally:
            conn.close()

        if reason == "Account disabled":
            logger.warning("Login refused for disabled account %s", email)
            raise ValueError("Account disabled")
        if reason:
            logger.warning("Failed login for %s: %s", email, reason)
            raise ValueError("Invalid credentials")
        logger.info("User %s logged in", email)
        token = create_access_token({"sub": row["email"]})
        return AuthResponse(
            token=token,
            user=AuthUser(id=row["id"], name=row["name"], email=row["email"], role=row["role"]),
        )

    @classmethod
    async def get_user(cls, user_id: int) -> UserRead:
        from service_directory_api.app.core.db import get_connection
        conn = get_connection()
        try:
            row = conn.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE id = ?", (user_id,)).fetchone()
            if not row:
                raise ValueError(f"User {user_id} not found")
            return cls._to_user(row)
        finally:
            conn.close()

    @classmethod
    async def list_users_by_role(cls) -> UsersByRole:
        """Return every user grouped into customers, business owners and admins."""
        from service_directory_api.app.core.db import get_connection
        conn = get_connection()
        try:
            rows = conn.execute(
                f"SELECT {_USER_COLUMNS} FROM users ORDER BY created_at DESC, id DESC"
            ).fetchall()
        finally:
            conn.close()
        groups: Dict[str, List[UserRead]] = {"customer": [], "business": [], "admin": []}
        for row in rows:
            groups[row["role"]].append(cls._to_user(row))
        return UsersByRole(
            total=len(rows),
            customers=groups["customer"],
            business_owners=groups["business"],
            admins=groups["admin"],
        )

    @classmethod
    async def list_login_history(
        cls,
        user_id: Optional[int] = None,
        role: Optional[str] = None,
        status: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> LoginHistoryPage:
        from service_directory_api.app.core.db import get_connection
        conn = get_connection()
        try:
            where_clauses: List[str] = []
            params: List[Any] = []
            if user_id is not None:
                where_clauses.append("user_id = ?")
                params.append(user_id)
            if role:
                where_clauses.append("role = ?")
                params.append(role)
            if status:
                where_clauses.append("status = ?")
                params.append(status)
            where = (" WHERE " + " AND ".join(where_clauses)) if where_clauses else ""
            total = conn.execute(
                f"SELECT COUNT(*) AS count FROM login_history{where}", tuple(params)
            ).fetchone()["count"]
            rows = conn.execute(
                f"SELECT * FROM login_history{where} ORDER BY login_time DESC, id DESC LIMIT ? OFFSET ?",
                tuple(params + [limit, offset]),
            ).fetchall()
        finally:
            conn.close()
        history = []
        for row in rows:
            data = dict(row)
            data["is_admin"] = bool(data["is_admin"])
            history.append(LoginHistoryRead(**data))
        return LoginHistoryPage(history=history, total=total)

    @classmethod
    async def login_stats(cls) -> LoginStats:
        """Aggregate login attempts over the last day, week and month."""
        from service_directory_api.app.core.db import get_connection
        conn = get_connection()
        try:
            windows = {}
            for key, modifier in (
                ("last_24_hours", "-1 day"),
                ("last_7_days", "-7 days"),
                ("last_30_days", "-30 days"),
            ):
                row = conn.execute(
                    """
                    SELECT COUNT(*) AS total,
                           COALESCE(SUM(CASE WHEN status = 'success' THEN 1 ELSE 0 END), 0) AS success,
                           COALESCE(SUM(CASE WHEN status = 'failed' THEN 1 ELSE 0 END), 0) AS failed
                    FROM login_history
                    WHERE login_time >= datetime('now', ?)
                    """,
                    (modifier,),
                ).fetchone()
                windows[key] = LoginWindowStats(**dict(row))
            by_role_rows = conn.execute(
                """
                SELECT role, COUNT(*) AS count FROM login_history
                WHERE status = 'success' AND login_time >= datetime('now', '-30 days')
                GROUP BY role
                """
            ).fetchall()
        finally:
            conn.close()
        return LoginStats(by_role={r["role"]: r["count"] for r in by_role_rows}, **windows)
