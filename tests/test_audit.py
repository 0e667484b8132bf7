from __future__ import annotations


API = "/api/v1"


def test_audit_logs_are_admin_only(client, customer):
    assert client.get(f"{API}/audit/logs").status_code == 401
    r = client.get(f"{API}/audit/logs", headers={"Authorization": f"Bearer {customer['token']}"})
    assert r.status_code == 403


def test_actions_are_audited(client, admin_headers, service):
    client.put(f"{API}/services/{service['id']}", json={"price": 150})
    client.delete(f"{API}/services/{service['id']}")

    r = client.get(f"{API}/audit/logs", params={"object_type": "service"}, headers=admin_headers)
    assert r.status_code == 200
    logs = r.json()
    assert [log["action"] for log in logs] == ["delete", "update", "create"]
    assert logs[1]["details"] == {"price": 150.0}
    assert all(log["object_id"] == service["id"] for log in logs)

    users = client.get(f"{API}/audit/logs", params={"object_type": "user", "action": "create"}, headers=admin_headers)
    assert len(users.json()) == 2


def test_contact_and_payment_intent_creates_are_audited(client, fake_stripe, admin_headers, booking, customer):
    client.post(
        f"{API}/contacts",
        json={"first_name": "Dana", "last_name": "Lee", "email": "dana@example.com", "message": "Please call me back."},
    )
    intent = client.post(f"{API}/payments/create-intent", json={"booking_id": booking["id"], "amount": 100}).json()

    contacts = client.get(f"{API}/audit/logs", params={"object_type": "contact"}, headers=admin_headers).json()
    assert [(log["action"], log["details"]) for log in contacts] == [("create", {"email": "dana@example.com"})]

    payments = client.get(f"{API}/audit/logs", params={"object_type": "payment"}, headers=admin_headers).json()
    assert len(payments) == 1
    assert payments[0]["action"] == "create"
    assert payments[0]["object_id"] == intent["payment_id"]
    assert payments[0]["user_id"] == customer["user"]["id"]
    assert payments[0]["details"]["method"] == "card"
