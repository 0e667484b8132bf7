from __future__ import annotations

import time

from service_directory_api.app.core.db import get_connection
from service_directory_api.app.services.user_service import parse_user_agent


API = "/api/v1"
CHROME_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


def test_register_returns_token_and_user(client):
    r = client.post(
        f"{API}/auth/register",
        json={"name": "Bob", "email": "Bob@Example.com", "password": "secret123"},
    )
    assert r.status_code == 201
    body = r.json()
    assert body["token"].count(".") == 2
    assert body["user"]["email"] == "bob@example.com"
    assert body["user"]["role"] == "customer"
    assert "password" not in body["user"]


def test_register_rejects_duplicate_email(client, customer):
    r = client.post(
        f"{API}/auth/register",
        json={"name": "Again", "email": "carol@example.com", "password": "secret123"},
    )
    assert r.status_code == 400
    assert r.json()["detail"] == "User already exists"


def test_register_validation(client):
    bad_email = client.post(f"{API}/auth/register", json={"name": "X", "email": "not-an-email", "password": "secret123"})
    short_password = client.post(f"{API}/auth/register", json={"name": "X", "email": "x@example.com", "password": "123"})
    admin_role = client.post(
        f"{API}/auth/register",
        json={"name": "X", "email": "x@example.com", "password": "secret123", "role": "admin"},
    )
    assert bad_email.status_code == 422
    assert short_password.status_code == 422
    assert admin_role.status_code == 422


def test_login_success_and_failures_are_recorded(client, customer, admin_headers):
    ok = client.post(
        f"{API}/auth/login",
        json={"email": "CAROL@example.com", "password": "secret123"},
        headers={"User-Agent": CHROME_UA},
    )
    assert ok.status_code == 200
    assert ok.json()["user"]["id"] == customer["user"]["id"]

    wrong = client.post(f"{API}/auth/login", json={"email": "carol@example.com", "password": "nope"})
    unknown = client.post(f"{API}/auth/login", json={"email": "ghost@example.com", "password": "secret123"})
    assert wrong.status_code == 400
    assert unknown.status_code == 400
    assert wrong.json()["detail"] == unknown.json()["detail"] == "Invalid credentials"

    r = client.get(f"{API}/auth/login-history", params={"user_id": customer["user"]["id"]}, headers=admin_headers)
    assert r.status_code == 200
    body = r.json()
    # Unknown e-mails are not recorded.
    assert body["total"] == 2
    failed, success = body["history"]
    assert failed["status"] == "failed"
    assert failed["reason"] == "Invalid password"
    assert success["status"] == "success"
    assert success["browser"] == "Chrome"
    assert success["os"] == "Windows"
    assert success["device"] == "Desktop"

    only_failed = client.get(f"{API}/auth/login-history", params={"status": "failed"}, headers=admin_headers)
    assert [h["status"] for h in only_failed.json()["history"]] == ["failed"]


def test_disabled_account_cannot_log_in(client, customer):
    conn = get_connection()
    try:
        conn.execute("UPDATE users SET disabled = 1 WHERE id = ?", (customer["user"]["id"],))
        conn.commit()
    finally:
        conn.close()
    r = client.post(f"{API}/auth/login", json={"email": "carol@example.com", "password": "secret123"})
    assert r.status_code == 403
    assert r.json()["detail"] == "Account disabled"

    me = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {customer['token']}"})
    assert me.status_code == 401


def test_me_requires_token(client, provider):
    assert client.get(f"{API}/auth/me").status_code == 401
    assert client.get(f"{API}/auth/me", headers={"Authorization": "Bearer garbage"}).status_code == 401

    r = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {provider['token']}"})
    assert r.status_code == 200
    assert r.json()["business_name"] == "Paul's Plumbing"
    assert r.json()["role"] == "business"


def test_users_all_is_admin_only_and_grouped(client, customer, provider, admin_headers):
    forbidden = client.get(f"{API}/auth/users/all", headers={"Authorization": f"Bearer {customer['token']}"})
    assert forbidden.status_code == 403

    r = client.get(f"{API}/auth/users/all", headers=admin_headers)
    assert r.status_code == 200
    body = r.json()
    assert body["total"] == 3
    assert [u["email"] for u in body["customers"]] == ["carol@example.com"]
    assert [u["email"] for u in body["business_owners"]] == ["paul@example.com"]
    assert [u["email"] for u in body["admins"]] == ["ada@example.com"]


def test_login_stats(client, customer, provider, admin_headers):
    client.post(f"{API}/auth/login", json={"email": "carol@example.com", "password": "secret123"})
    client.post(f"{API}/auth/login", json={"email": "paul@example.com", "password": "secret123"})
    client.post(f"{API}/auth/login", json={"email": "paul@example.com", "password": "wrong-one"})

    r = client.get(f"{API}/auth/login-stats", headers=admin_headers)
    assert r.status_code == 200
    stats = r.json()
    assert stats["last_24_hours"] == {"total": 3, "success": 2, "failed": 1}
    assert stats["last_30_days"]["total"] == 3
    assert stats["by_role"] == {"customer": 1, "business": 1}


def test_parse_user_agent():
    assert parse_user_agent(None) == ("Unknown", "Unknown", "Unknown")
    iphone = (
        "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 "
        "(KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1"
    )
    assert parse_user_agent(iphone) == ("Safari", "iOS", "Mobile")
    edge = CHROME_UA + " Edg/120.0.0.0"
    assert parse_user_agent(edge)[0] == "Edge"


def test_register_rejects_long_malformed_email_quickly(client):
    started = time.perf_counter()
    r = client.post(
        f"{API}/auth/register",
        json={"name": "X", "email": "a" * 60 + "!", "password": "secret123"},
    )
    assert r.status_code == 422
    assert time.perf_counter() - started < 2


def test_register_lowercases_email(client):
    r = client.post(
        f"{API}/auth/register",
        json={"name": "Mixed", "email": "  Mixed.Case@Example.COM ", "password": "secret123"},
    )
    assert r.status_code == 201
    assert r.json()["user"]["email"] == "mixed.case@example.com"
