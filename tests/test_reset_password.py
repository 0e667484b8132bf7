from __future__ import annotations

import pytest

from reset_password import update_user
from service_directory_api.app.core.config import settings
from service_directory_api.app.core.db import get_connection, get_database_path


API = "/api/v1"


def _login(client, password):
    return client.post(f"{API}/auth/login", json={"email": "carol@example.com", "password": password})


def test_role_change_keeps_the_password(client, customer):
    update_user(get_database_path(), "carol@example.com", role="admin")

    r = _login(client, "secret123")
    assert r.status_code == 200
    assert r.json()["user"]["role"] == "admin"


def test_password_reset_writes_a_usable_hash(client, customer):
    update_user(get_database_path(), "carol@example.com", password="brand-new-pass")

    assert _login(client, "secret123").status_code == 400
    assert _login(client, "brand-new-pass").status_code == 200
    conn = get_connection()
    try:
        stored = conn.execute("SELECT password FROM users WHERE email = ?", ("carol@example.com",)).fetchone()
    finally:
        conn.close()
    assert stored["password"].startswith("pbkdf2_sha256$")


def test_unknown_email(client):
    with pytest.raises(LookupError):
        update_user(settings.database_url, "nobody@example.com", role="admin")
