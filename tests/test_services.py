from __future__ import annotations

from service_directory_api.app.schemas.service import DEFAULT_SERVICE_IMAGE
from service_directory_api.app.services.seed_service import SAMPLE_SERVICES, seed_database


API = "/api/v1"


def _create(client, provider_id, **overrides):
    payload = {
        "name": "House Cleaning",
        "category": "Cleaning",
        "description": "Deep cleaning with eco-friendly products",
        "price": 65,
        "location": "Chicago, IL",
        "phone": "555-0103",
        "provider_id": provider_id,
    }
    payload.update(overrides)
    return client.post(f"{API}/services", json=payload)


def test_create_service_defaults(client, service, provider):
    assert service["provider_id"] == provider["user"]["id"]
    assert service["rating"] == 0
    assert service["review_count"] == 0
    assert service["image"] == DEFAULT_SERVICE_IMAGE


def test_create_service_validation(client, provider):
    assert _create(client, 9999).status_code == 404
    assert _create(client, provider["user"]["id"], price=0).status_code == 422
    assert _create(client, provider["user"]["id"], name="").status_code == 422


def test_list_and_filter_services(client, provider, register, service):
    other = register("Olga", "olga@example.com", role="business")
    _create(client, other["user"]["id"], name="Window Washing", location="Boston, MA")

    all_services = client.get(f"{API}/services").json()
    assert [s["name"] for s in all_services] == ["Window Washing", "Emergency Plumbing"]

    by_provider = client.get(f"{API}/services", params={"provider_id": provider["user"]["id"]}).json()
    assert [s["id"] for s in by_provider] == [service["id"]]

    assert len(client.get(f"{API}/services", params={"category": "cleaning"}).json()) == 1
    assert len(client.get(f"{API}/services", params={"q": "pipe"}).json()) == 1
    assert len(client.get(f"{API}/services", params={"location": "boston"}).json()) == 1


def test_categories(client, provider, service):
    _create(client, provider["user"]["id"])
    _create(client, provider["user"]["id"], name="Office Cleaning")
    r = client.get(f"{API}/services/categories/all")
    assert r.status_code == 200
    assert r.json() == ["Cleaning", "Plumbing"]


def test_get_update_delete(client, service):
    missing = client.get(f"{API}/services/9999")
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Service not found"

    r = client.put(f"{API}/services/{service['id']}", json={"price": 120.5, "location": "Queens, NY"})
    assert r.status_code == 200
    updated = r.json()
    assert updated["price"] == 120.5
    assert updated["location"] == "Queens, NY"
    assert updated["name"] == service["name"]

    assert client.put(f"{API}/services/9999", json={"price": 10}).status_code == 404

    r = client.delete(f"{API}/services/{service['id']}")
    assert r.status_code == 200
    assert r.json()["message"] == "Service deleted successfully"
    assert client.get(f"{API}/services/{service['id']}").status_code == 404
    assert client.delete(f"{API}/services/{service['id']}").status_code == 404


def test_seed_only_fills_an_empty_directory(client):
    assert seed_database() == len(SAMPLE_SERVICES) == 16
    assert seed_database() == 0
    services = client.get(f"{API}/services").json()
    assert len(services) == 16
    assert len({s["provider_id"] for s in services}) == 1
    assert "Locksmith" in client.get(f"{API}/services/categories/all").json()


def test_health(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.json() == {"message": "ServiceDir Backend is Running!"}


def test_update_rejects_null_for_required_fields(client, service):
    for field in ("name", "category", "price", "phone"):
        r = client.put(f"{API}/services/{service['id']}", json={field: None})
        assert r.status_code == 422, field
    assert client.get(f"{API}/services/{service['id']}").json()["name"] == service["name"]

    cleared = client.put(f"{API}/services/{service['id']}", json={"image": None})
    assert cleared.status_code == 200
    assert cleared.json()["image"] == DEFAULT_SERVICE_IMAGE
