from __future__ import annotations


API = "/api/v1"


def test_create_booking_is_pending_and_populated(booking, customer, provider, service):
    assert booking["status"] == "pending"
    assert booking["provider_id"] == provider["user"]["id"]
    assert booking["service"]["name"] == service["name"]
    assert booking["customer"] == {
        "id": customer["user"]["id"],
        "name": "Carol Customer",
        "email": "carol@example.com",
    }
    assert booking["provider"]["email"] == "paul@example.com"


def test_create_booking_unknown_references(client, customer, service):
    unknown_service = client.post(
        f"{API}/bookings",
        json={"customer_id": customer["user"]["id"], "service_id": 9999, "date": "2030-05-01T10:00:00"},
    )
    unknown_customer = client.post(
        f"{API}/bookings",
        json={"customer_id": 9999, "service_id": service["id"], "date": "2030-05-01T10:00:00"},
    )
    wrong_provider = client.post(
        f"{API}/bookings",
        json={
            "customer_id": customer["user"]["id"],
            "service_id": service["id"],
            "provider_id": customer["user"]["id"],
            "date": "2030-05-01T10:00:00",
        },
    )
    missing_date = client.post(
        f"{API}/bookings",
        json={"customer_id": customer["user"]["id"], "service_id": service["id"]},
    )
    assert unknown_service.status_code == 404
    assert unknown_customer.status_code == 404
    assert wrong_provider.status_code == 400
    assert missing_date.status_code == 422


def test_list_bookings_by_role(client, customer, provider, service):
    for date in ("2030-06-01T09:00:00", "2030-05-01T09:00:00"):
        client.post(
            f"{API}/bookings",
            json={"customer_id": customer["user"]["id"], "service_id": service["id"], "date": date},
        )

    as_customer = client.get(f"{API}/bookings/user/{customer['user']['id']}", params={"role": "customer"}).json()
    assert [b["date"][:10] for b in as_customer] == ["2030-05-01", "2030-06-01"]

    as_provider = client.get(f"{API}/bookings/user/{provider['user']['id']}", params={"role": "business"}).json()
    assert len(as_provider) == 2
    assert client.get(f"{API}/bookings/user/{provider['user']['id']}").json() == []


def test_update_booking_status(client, booking):
    r = client.patch(f"{API}/bookings/{booking['id']}", json={"status": "completed"})
    assert r.status_code == 200
    assert r.json()["status"] == "completed"
    assert client.get(f"{API}/bookings/{booking['id']}").json()["status"] == "completed"

    assert client.patch(f"{API}/bookings/{booking['id']}", json={"status": "teleported"}).status_code == 422
    assert client.patch(f"{API}/bookings/9999", json={"status": "cancelled"}).status_code == 404
    assert client.get(f"{API}/bookings/9999").status_code == 404


def test_booking_survives_service_deletion(client, booking, service):
    client.delete(f"{API}/services/{service['id']}")
    r = client.get(f"{API}/bookings/{booking['id']}")
    assert r.status_code == 200
    assert r.json()["service_id"] is None
    assert r.json()["service"] is None


def test_booking_dates_are_stored_in_utc(client, customer, service):
    # 12:00+05:00 is 07:00 UTC, an hour before the 08:00Z booking.
    for date in ("2030-05-01T08:00:00Z", "2030-05-01T12:00:00+05:00"):
        r = client.post(
            f"{API}/bookings",
            json={"customer_id": customer["user"]["id"], "service_id": service["id"], "date": date},
        )
        assert r.status_code == 201, r.text

    bookings = client.get(f"{API}/bookings/user/{customer['user']['id']}").json()
    assert [b["date"] for b in bookings] == ["2030-05-01T07:00:00", "2030-05-01T08:00:00"]
