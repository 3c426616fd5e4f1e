# backend/tests/test_standard_rent_propagation.py
from __future__ import annotations

from rentbook.db import SessionLocal
from rentbook.models import Rental, Unit

from conftest import mk_property, mk_unit


def _row(unit_id: int, month: int, year: int) -> Rental:
    db = SessionLocal()
    try:
        return db.query(Rental).filter_by(unit_id=unit_id, month=month, year=year).one()
    finally:
        db.close()


def _unit(unit_id: int) -> Unit:
    db = SessionLocal()
    try:
        return db.get(Unit, unit_id)
    finally:
        db.close()


def _setup(client):
    prop = mk_property(client)
    unit = mk_unit(client, prop["id"], rent=1000.0, utilities=100.0)
    url = f"/api/units/{unit['id']}/yearly-overview"
    client.post(url, json={"month": 2, "year": 2025})  # matches standard
    client.post(url, json={"month": 6, "year": 2025, "rentAmount": 1200})  # customized
    client.post(url, json={"month": 1, "year": 2025, "rentAmount": 900})  # customized, before effective date
    return unit


def _change(client, unit_id: int, **extra):
    body = {"monthlyRent": 1100, "monthlyUtilities": 150, "effectiveFromMonth": 2, "effectiveFromYear": 2025, **extra}
    return client.put(f"/api/units/{unit_id}/standard-rent", json=body)


def test_customized_month_blocks_change(client):
    unit = _setup(client)

    r = _change(client, unit["id"])
    assert r.status_code == 409
    body = r.json()
    assert body["warning"] is True
    assert body["message"]
    assert body["affectedRentals"] == [{"month": 6, "year": 2025, "currentAmount": 1300.0, "newAmount": 1250.0}]

    # nothing written
    assert _row(unit["id"], 6, 2025).amount == 1300.0
    assert _row(unit["id"], 2, 2025).amount == 1100.0
    assert _unit(unit["id"]).monthly_rent == 1000.0


def test_force_overwrites_customized_months(client):
    unit = _setup(client)

    r = _change(client, unit["id"], forceUpdate=True)
    assert r.status_code == 200
    body = r.json()
    assert body["unit"]["monthlyRent"] == 1100.0
    assert body["unit"]["monthlyUtilities"] == 150.0
    assert body["updatedRentals"] == 1

    june = _row(unit["id"], 6, 2025)
    assert (june.rent_amount, june.utilities_amount, june.amount) == (1100.0, 150.0, 1250.0)
    # a stored month that matched the old standard keeps its amounts
    feb = _row(unit["id"], 2, 2025)
    assert (feb.rent_amount, feb.utilities_amount, feb.amount) == (1000.0, 100.0, 1100.0)
    # before the effective date: untouched
    assert _row(unit["id"], 1, 2025).amount == 1000.0


def test_change_leaves_stored_standard_months_alone(client):
    prop = mk_property(client)
    unit = mk_unit(client, prop["id"], rent=1000.0, utilities=100.0)
    url = f"/api/units/{unit['id']}/yearly-overview"
    client.post(url, json={"month": 3, "year": 2025, "isPaid": True})

    r = client.put(
        f"/api/units/{unit['id']}/standard-rent",
        json={"monthlyRent": 1200, "monthlyUtilities": 100, "effectiveFromMonth": 1, "effectiveFromYear": 2025},
    )
    assert r.status_code == 200
    assert r.json()["updatedRentals"] == 0

    march = _row(unit["id"], 3, 2025)
    assert (march.amount, march.is_paid) == (1100.0, True)

    months = client.get(url, params={"year": 2025}).json()["yearlyOverview"]
    assert months[2]["totalAmount"] == 1100.0
    assert months[3]["totalAmount"] == 1300.0


def test_omitted_utilities_are_stored_as_unset(client):
    prop = mk_property(client)
    unit = mk_unit(client, prop["id"], rent=1000.0, utilities=100.0)

    r = client.put(
        f"/api/units/{unit['id']}/standard-rent",
        json={"monthlyRent": 1100, "effectiveFromMonth": 1, "effectiveFromYear": 2025},
    )
    assert r.status_code == 200
    assert r.json()["unit"]["monthlyUtilities"] is None
    assert _unit(unit["id"]).monthly_utilities is None


def test_change_without_custom_months_applies_directly(client):
    prop = mk_property(client)
    unit = mk_unit(client, prop["id"], rent=1000.0, utilities=100.0)

    r = _change(client, unit["id"])
    assert r.status_code == 200
    assert r.json()["updatedRentals"] == 0

    months = client.get(f"/api/units/{unit['id']}/yearly-overview", params={"year": 2025}).json()["yearlyOverview"]
    assert all(m["totalAmount"] == 1250.0 for m in months)


def test_customized_months_in_later_years_are_detected(client):
    prop = mk_property(client)
    unit = mk_unit(client, prop["id"], rent=1000.0, utilities=100.0)
    client.post(f"/api/units/{unit['id']}/yearly-overview", json={"month": 1, "year": 2026, "utilitiesAmount": 50})

    r = _change(client, unit["id"], effectiveFromMonth=12, effectiveFromYear=2025)
    assert r.status_code == 409
    assert [(a["month"], a["year"]) for a in r.json()["affectedRentals"]] == [(1, 2026)]


def test_standard_rent_validation(client):
    prop = mk_property(client)
    unit = mk_unit(client, prop["id"])

    assert _change(client, unit["id"], monthlyRent=0).status_code == 400
    assert _change(client, unit["id"], monthlyUtilities=-1).status_code == 400
    assert _change(client, unit["id"], effectiveFromMonth=None).status_code == 400
    assert _change(client, unit["id"], effectiveFromMonth=13).status_code == 400
