from __future__ import annotations

from types import SimpleNamespace

import pytest
import stripe
from fastapi.testclient import TestClient

from service_directory_api.app.core.config import settings
from service_directory_api.app.core.db import get_connection, init_db
from service_directory_api.app.main import create_app


API = "/api/v1"


@pytest.fixture
def client(tmp_path, monkeypatch):
    """A client bound to a fresh SQLite file; startup hooks (seeding) do not run."""
    monkeypatch.setattr(settings, "database_url", str(tmp_path / "test.db"))
    monkeypatch.setattr(settings, "invoices_dir", str(tmp_path / "invoices"))
    monkeypatch.setattr(settings, "seed_database", False)
    monkeypatch.setattr(settings, "stripe_secret_key", "sk_test_dummy")
    init_db()
    return TestClient(create_app())


class FakeStripe:
    """In-memory stand-in for the Stripe endpoints the gateway calls."""

    def __init__(self):
        self.intents: dict[str, SimpleNamespace] = {}
        self.refunds: list[str] = []
        self.payouts: list[dict] = []
        self.payout_error: str | None = None

    def create_intent(self, **kwargs):
        intent_id = f"pi_test_{len(self.intents) + 1}"
        intent = SimpleNamespace(
            id=intent_id,
            client_secret=f"{intent_id}_secret",
            status="requires_payment_method",
            amount=kwargs["amount"],
            metadata=kwargs.get("metadata", {}),
        )
        self.intents[intent_id] = intent
        return intent

    def retrieve_intent(self, intent_id, **kwargs):
        if intent_id not in self.intents:
            raise stripe.StripeError(f"No such payment_intent: '{intent_id}'")
        return self.intents[intent_id]

    def succeed(self, intent_id):
        self.intents[intent_id].status = "succeeded"

    def create_refund(self, **kwargs):
        self.refunds.append(kwargs["payment_intent"])
        return SimpleNamespace(id=f"re_test_{len(self.refunds)}")

    def create_payout(self, **kwargs):
        if self.payout_error:
            raise stripe.StripeError(self.payout_error)
        self.payouts.append(kwargs)
        return SimpleNamespace(id=f"po_test_{len(self.payouts)}")


@pytest.fixture
def fake_stripe(monkeypatch):
    fake = FakeStripe()
    monkeypatch.setattr(stripe.PaymentIntent, "create", fake.create_intent)
    monkeypatch.setattr(stripe.PaymentIntent, "retrieve", fake.retrieve_intent)
    monkeypatch.setattr(stripe.Refund, "create", fake.create_refund)
    monkeypatch.setattr(stripe.Payout, "create", fake.create_payout)
    return fake


@pytest.fixture
def register(client):
    def _register(name, email, password="secret123", role="customer", **extra):
        payload = {"name": name, "email": email, "password": password, "role": role, **extra}
        r = client.post(f"{API}/auth/register", json=payload)
        assert r.status_code == 201, r.text
        return r.json()

    return _register


@pytest.fixture
def customer(register):
    return register("Carol Customer", "carol@example.com", phone="555-0100")


@pytest.fixture
def provider(register):
    return register(
        "Paul Provider",
        "paul@example.com",
        role="business",
        business_name="Paul's Plumbing",
        business_category="Plumbing",
    )


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(register):
    data = register("Ada Admin", "ada@example.com")
    conn = get_connection()
    try:
        conn.execute("UPDATE users SET role = 'admin' WHERE id = ?", (data["user"]["id"],))
        conn.commit()
    finally:
        conn.close()
    return auth_headers(data["token"])


@pytest.fixture
def service(client, provider):
    r = client.post(
        f"{API}/services",
        json={
            "name": "Emergency Plumbing",
            "category": "Plumbing",
            "description": "Leak repairs and pipe installation",
            "price": 100,
            "location": "New York, NY",
            "phone": "555-0101",
            "provider_id": provider["user"]["id"],
        },
    )
    assert r.status_code == 201, r.text
    return r.json()


@pytest.fixture
def booking(client, customer, service):
    r = client.post(
        f"{API}/bookings",
        json={
            "customer_id": customer["user"]["id"],
            "service_id": service["id"],
            "date": "2030-05-01T10:00:00",
        },
    )
    assert r.status_code == 201, r.text
    return r.json()


@pytest.fixture
def fund_wallet(client, fake_stripe):
    """Top up a wallet through the Stripe intent flow and return the new balance."""

    def _fund(user_id: int, amount: float) -> float:
        r = client.post(f"{API}/wallets/topup-intent", json={"user_id": user_id, "amount": amount})
        assert r.status_code == 200, r.text
        intent_id = r.json()["payment_intent_id"]
        fake_stripe.succeed(intent_id)
        r = client.post(
            f"{API}/wallets/add-money",
            json={"user_id": user_id, "amount": amount, "payment_intent_id": intent_id},
        )
        assert r.status_code == 200, r.text
        return r.json()["new_balance"]

    return _fund
