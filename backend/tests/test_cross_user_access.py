# backend/tests/test_cross_user_access.py
from __future__ import annotations

from conftest import mk_person, mk_property, mk_unit


def test_other_users_data_is_invisible(client, other_client):
    prop = mk_property(client)
    unit = mk_unit(client, prop["id"])
    rental = client.post(
        "/api/rentals", json={"unitId": unit["id"], "month": 1, "year": 2025, "amount": 500}
    ).json()["rental"]
    person = mk_person(client)

    assert other_client.get(f"/api/properties/{prop['id']}").status_code == 404
    assert other_client.get(f"/api/units/{unit['id']}").status_code == 404
    assert other_client.get(f"/api/units/{unit['id']}/yearly-overview").status_code == 404
    assert other_client.get(f"/api/rentals/{rental['id']}").status_code == 404
    assert other_client.get(f"/api/people/{person['id']}").status_code == 404
    assert other_client.get(f"/api/properties/{prop['id']}/evaluation").status_code == 404
    assert other_client.get(f"/api/properties/{prop['id']}/rentals-overview").status_code == 404

    r = other_client.post(f"/api/units/{unit['id']}/yearly-overview", json={"month": 2, "year": 2025})
    assert r.status_code == 404
    r = other_client.put(
        f"/api/units/{unit['id']}/standard-rent",
        json={"monthlyRent": 1, "effectiveFromMonth": 1, "effectiveFromYear": 2025},
    )
    assert r.status_code == 404
    assert other_client.delete(f"/api/properties/{prop['id']}").status_code == 404

    assert other_client.get("/api/properties").json() == []
    assert other_client.get("/api/people").json()["pagination"]["total"] == 0

    # missing and foreign look the same
    assert other_client.get("/api/properties/987654").json().keys() == {"error"}


def test_unauthenticated_requests_are_rejected(anon_client):
    for path in ("/api/properties", "/api/units", "/api/rentals", "/api/people", "/api/auth/me"):
        r = anon_client.get(path)
        assert r.status_code == 401, path
        assert r.json()["error"]
