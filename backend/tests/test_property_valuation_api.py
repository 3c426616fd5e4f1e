# backend/tests/test_property_valuation_api.py
from __future__ import annotations

from conftest import mk_property, mk_unit


def test_settings_default_then_partial_upsert(client):
    prop = mk_property(client)
    url = f"/api/properties/{prop['id']}/settings"

    r = client.get(url)
    assert r.status_code == 200
    assert r.json() == {
        "grossRentMultiplier": 12.0,
        "operatingExpenseRatio": 25.0,
        "valueAdjustment": 0.0,
        "propertyAppreciation": 2.0,
        "etfReturn": 7.0,
        "years": 10,
    }

    r = client.post(url, json={"grossRentMultiplier": 15})
    assert r.status_code == 200
    assert r.json()["settings"]["grossRentMultiplier"] == 15.0
    assert r.json()["settings"]["operatingExpenseRatio"] == 25.0

    r = client.post(url, json={"years": 20})
    s = client.get(url).json()
    assert s["grossRentMultiplier"] == 15.0
    assert s["years"] == 20

    assert client.post(url, json={"years": 0}).status_code == 400


def test_evaluation_uses_saved_settings_and_overrides(client):
    prop = mk_property(client)
    mk_unit(client, prop["id"], rent=1000.0, utilities=0.0)
    url = f"/api/properties/{prop['id']}/evaluation"

    ev = client.get(url).json()
    assert ev["evaluationPossible"] is True
    assert ev["totalYearlyRent"] == 12000.0
    assert ev["estimatedValue"] == 144000.0
    assert ev["netOperatingIncome"] == 9000.0
    assert ev["capRate"] == 6.25
    assert ev["valueRange"] == [129600.0, 158400.0]

    client.post(f"/api/properties/{prop['id']}/settings", json={"valueAdjustment": 10})
    assert client.get(url).json()["adjustedValue"] == 158400.0

    ev = client.get(url, params={"grossRentMultiplier": 10, "valueAdjustment": 0}).json()
    assert ev["estimatedValue"] == 120000.0
    assert ev["grossRentMultiplier"] == 10.0


def test_evaluation_without_units(client):
    prop = mk_property(client)
    ev = client.get(f"/api/properties/{prop['id']}/evaluation").json()
    assert ev["evaluationPossible"] is False
    assert ev["capRate"] is None
    assert ev["valueRange"] is None


def test_investment_comparison_defaults_from_valuation(client):
    prop = mk_property(client)
    mk_unit(client, prop["id"], rent=1000.0, utilities=0.0)

    r = client.get(f"/api/properties/{prop['id']}/investment-comparison", params={"years": 1})
    assert r.status_code == 200
    c = r.json()
    assert c["propertyValue"] == 144000.0
    assert c["annualRent"] == 12000.0
    assert c["annualExpenses"] == 3000.0
    assert c["annualNetIncome"] == 9000.0
    assert c["propertyAppreciation"] == 2.0
    assert c["etfReturn"] == 7.0
    assert c["propertyScenario"]["totalValue"] == 146880.0
    assert c["propertyScenario"]["totalIncome"] == 9000.0
    assert c["etfScenario"]["totalValue"] == 154080.0
    assert c["better"] == "property"


def test_investment_comparison_needs_a_value(client):
    prop = mk_property(client)
    r = client.get(f"/api/properties/{prop['id']}/investment-comparison")
    assert r.status_code == 400
    assert "error" in r.json()


def test_rentals_overview_totals(client):
    prop = mk_property(client)
    a = mk_unit(client, prop["id"], rent=500.0, utilities=50.0)
    b = mk_unit(client, prop["id"], rent=300.0, utilities=None, name="Garage", type="garage")

    client.post(f"/api/units/{a['id']}/yearly-overview", json={"month": 1, "year": 2025, "isPaid": True})
    client.post(f"/api/units/{b['id']}/yearly-overview", json={"month": 1, "year": 2025, "rentAmount": 350, "isPaid": True})
    client.post(f"/api/units/{b['id']}/yearly-overview", json={"month": 1, "year": 2024, "rentAmount": 999})

    r = client.get(f"/api/properties/{prop['id']}/rentals-overview", params={"year": 2025})
    assert r.status_code == 200
    body = r.json()
    assert body["propertyId"] == prop["id"]
    assert body["year"] == 2025
    assert len(body["unitsOverview"]) == 2

    ua, ub = body["unitsOverview"]
    assert len(ua["monthlyOverview"]) == 12
    assert ua["totals"]["totalExpected"] == 550.0 * 12
    assert ua["totals"]["totalPaid"] == 550.0
    assert ub["totals"]["totalRent"] == 300.0 * 11 + 350.0
    assert ub["totals"]["totalUtilities"] == 0.0

    t = body["propertyTotals"]
    assert t["totalExpected"] == 550.0 * 12 + 300.0 * 11 + 350.0
    assert t["totalPaid"] == 900.0
    assert t["totalUnpaid"] == t["totalExpected"] - 900.0
