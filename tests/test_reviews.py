from __future__ import annotations


API = "/api/v1"


def _review(client, service_id, user_id, rating, comment="Great job, very professional"):
    return client.post(
        f"{API}/reviews",
        json={
            "service_id": service_id,
            "user_id": user_id,
            "user_name": "Carol",
            "rating": rating,
            "comment": comment,
        },
    )


def test_review_updates_rating_and_count(client, service, customer):
    uid = customer["user"]["id"]
    for rating in (5, 4, 4):
        assert _review(client, service["id"], uid, rating).status_code == 201

    listing = client.get(f"{API}/services/{service['id']}").json()
    assert listing["review_count"] == 3
    # 13 / 3 = 4.333... rounded to one decimal
    assert listing["rating"] == 4.3


def test_list_reviews_newest_first(client, service, customer):
    _review(client, service["id"], customer["user"]["id"], 3, comment="First visit")
    _review(client, service["id"], customer["user"]["id"], 5, comment="Second visit")
    r = client.get(f"{API}/reviews/{service['id']}")
    assert r.status_code == 200
    assert [rv["comment"] for rv in r.json()] == ["Second visit", "First visit"]
    assert client.get(f"{API}/reviews/9999").json() == []


def test_review_validation(client, service, customer):
    uid = customer["user"]["id"]
    assert _review(client, service["id"], uid, 6).status_code == 422
    assert _review(client, service["id"], uid, 0).status_code == 422
    assert _review(client, service["id"], uid, 4, comment="   ").status_code == 422
    r = _review(client, 9999, uid, 4)
    assert r.status_code == 404
    assert r.json()["detail"] == "Service not found"
