#!/usr/bin/env python3
"""
Reset a user's password or role in the Service Directory SQLite database.

This script DOES NOT read or reveal any existing passwords.  It stores a
new password hash in the format written by the API
(``pbkdf2_sha256$<iterations>$<salt>$<hash>``) for the specified user
email.  With ``--role`` it changes the user's role, which is the only
way to create an administrator since the public registration endpoint
refuses the ``admin`` role.

Usage:
    python reset_password.py --db ./service_directory.db --email admin@ex.com --password "NewStrongPass!234"
    python reset_password.py --db ./service_directory.db --email owner@ex.com --role admin

Without ``--password`` and ``--role`` you are prompted for the new
password.  With only ``--role`` the password is left unchanged.
"""

import argparse
import getpass
import os
import sqlite3
import sys
from typing import Optional

from service_directory_api.app.core.security import hash_password


ROLES = ("customer", "business", "admin")


def update_user(db_path: str, email: str, password: Optional[str] = None, role: Optional[str] = None) -> None:
    """Apply the new password and/or role; raises ``LookupError`` for an unknown email."""
    conn = sqlite3.connect(db_path)
    try:
        cur = conn.cursor()
        cur.execute("SELECT id FROM users WHERE email = ?", (email,))
        if not cur.fetchone():
            raise LookupError(email)
        if password is not None:
            cur.execute(
                "UPDATE users SET password = ?, updated_at = CURRENT_TIMESTAMP WHERE email = ?",
                (hash_password(password), email),
            )
        if role is not None:
            cur.execute(
                "UPDATE users SET role = ?, updated_at = CURRENT_TIMESTAMP WHERE email = ?",
                (role, email),
            )
        conn.commit()
    finally:
        conn.close()


def main() -> None:
    ap = argparse.ArgumentParser(description="Reset a Service Directory user's password or role (SQLite).")
    ap.add_argument("--db", required=True, help="Path to SQLite DB file (e.g., ./service_directory.db)")
    ap.add_argument("--email", required=True, help="User email to update")
    ap.add_argument("--password", help="New password. Prompted for unless --role is given.")
    ap.add_argument("--role", choices=ROLES, help="Change the user's role")
    args = ap.parse_args()

    if not os.path.exists(args.db):
        print(f"[!] DB not found: {args.db}", file=sys.stderr)
        sys.exit(1)

    email = args.email.strip().lower()
    new_password = args.password
    if new_password is None and args.role is None:
        new_password = getpass.getpass("Enter NEW password: ")
    if new_password is not None and len(new_password) < 6:
        print("[!] Password must be at least 6 characters.", file=sys.stderr)
        sys.exit(1)

    try:
        update_user(args.db, email, password=new_password, role=args.role)
    except LookupError:
        print(f"[!] No user found with email: {email}", file=sys.stderr)
        sys.exit(2)
    if new_password is not None:
        print(f"[+] Password updated for user: {email}")
    if args.role:
        print(f"[+] Role set to {args.role}")


if __name__ == "__main__":
    main()
