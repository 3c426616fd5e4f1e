# backend/tests/test_property_crud_api.py
from __future__ import annotations

from rentbook.db import SessionLocal
from rentbook.models import Rental, Unit

from conftest import mk_property, mk_unit


def test_simple_mode_creates_default_unit(client):
    prop = mk_property(client, isSimpleMode=True, monthlyRent=950)
    assert len(prop["units"]) == 1
    u = prop["units"][0]
    assert u["name"] == "Hauptobjekt"
    assert u["type"] == "apartment"
    assert u["monthlyRent"] == 950.0

    r = client.post("/api/properties", json={"name": "X", "address": "Y", "isSimpleMode": True})
    assert r.status_code == 400


def test_property_update_and_list(client):
    prop = mk_property(client, name="Alt")
    r = client.put(f"/api/properties/{prop['id']}", json={"name": "Neu", "address": "Weg 2", "isActive": False})
    assert r.status_code == 200
    assert r.json()["property"]["name"] == "Neu"
    assert r.json()["property"]["isActive"] is False

    ids = [p["id"] for p in client.get("/api/properties").json()]
    assert prop["id"] in ids


def test_unit_validation_and_rent_per_area(client):
    prop = mk_property(client)
    r = client.post("/api/units", json={"propertyId": prop["id"], "name": "W", "monthlyRent": 0})
    assert r.status_code == 400
    r = client.post("/api/units", json={"propertyId": prop["id"], "name": "W", "monthlyRent": 10, "type": "castle"})
    assert r.status_code == 400

    u = mk_unit(client, prop["id"], rent=700.0, utilities=100.0, size="80m²")
    assert u["rentPerArea"] == 10.0
    assert client.get(f"/api/units/{u['id']}").json()["rentPerArea"] == 10.0

    listed = client.get("/api/units", params={"propertyId": prop["id"]}).json()
    assert [x["id"] for x in listed] == [u["id"]]


def test_delete_property_cascades(client):
    prop = mk_property(client)
    unit = mk_unit(client, prop["id"])
    client.post(f"/api/units/{unit['id']}/yearly-overview", json={"month": 1, "year": 2025})

    r = client.delete(f"/api/properties/{prop['id']}")
    assert r.status_code == 200
    assert client.get(f"/api/properties/{prop['id']}").status_code == 404

    db = SessionLocal()
    try:
        assert db.get(Unit, unit["id"]) is None
        assert db.query(Rental).filter(Rental.unit_id == unit["id"]).count() == 0
    finally:
        db.close()
