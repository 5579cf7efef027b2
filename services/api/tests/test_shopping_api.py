from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient


@pytest.fixture()
def client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> TestClient:
    db_path = tmp_path / "dawa_shopping_api.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+pysqlite:///{db_path}")
    monkeypatch.setenv("DAWA_DB_AUTO_CREATE", "true")

    from services.api.app.main import app

    with TestClient(app) as c:
        yield c


def _as(principal_id: str) -> dict:
    return {"X-Principal-Id": principal_id}


def _open_vendor(client: TestClient, name: str, *, rating: float, pincode: str = "560001") -> str:
    vendor_id = client.post(
        "/v1/admin/vendor",
        json={
            "name": name,
            "owner_name": "Owner",
            "product_types": ["medicine"],
            "pincode": pincode,
            "phone": "9000000001",
            "email": f"{name.lower().replace(' ', '.')}@example.com",
            "password": "secret123",
            "rating": rating,
        },
    ).json()["vendor"]
    client.patch("/v1/vendor/service", headers=_as(vendor_id))
    return vendor_id


def _product(client: TestClient, vendor_id: str, name: str, *, minutes: int) -> str:
    return client.post(
        "/v1/vendor/products",
        json={
            "name": name,
            "category": "otc",
            "product_type": "medicine",
            "delivery_time": minutes,
            "price": 100,
        },
        headers=_as(vendor_id),
    ).json()["id"]


def test_empty_area_is_404(client: TestClient) -> None:
    for path in (
        "/v1/shopping/999999",
        "/v1/shopping/top-pharmacies/999999",
        "/v1/shopping/products-in-30-min/999999",
        "/v1/shopping/search/999999",
        "/v1/shopping/offers/999999",
        "/v1/shopping/pharmacy/missing",
    ):
        response = client.get(path)
        assert response.status_code == 404, path
        assert response.json()["detail"] == "Data Not Found"


def test_vendors_in_area_sorted_by_rating(client: TestClient) -> None:
    low = _open_vendor(client, "Low Pharmacy", rating=2)
    high = _open_vendor(client, "High Pharmacy", rating=5)
    _open_vendor(client, "Far Pharmacy", rating=5, pincode="110001")
    _product(client, high, "Paracetamol", minutes=20)

    # Service switched off: not listed.
    client.post(
        "/v1/admin/vendor",
        json={
            "name": "Closed",
            "owner_name": "Owner",
            "pincode": "560001",
            "phone": "9000000001",
            "email": "closed@example.com",
            "password": "secret123",
        },
    )

    vendors = client.get("/v1/shopping/560001").json()
    assert [v["id"] for v in vendors] == [high, low]
    assert [p["name"] for p in vendors[0]["products"]] == ["Paracetamol"]
    assert vendors[1]["products"] == []

    top = client.get("/v1/shopping/top-pharmacies/560001").json()
    assert [v["id"] for v in top] == [high, low]


def test_quick_delivery_and_search(client: TestClient) -> None:
    vendor_id = _open_vendor(client, "Quick Pharmacy", rating=4)
    _product(client, vendor_id, "Paracetamol", minutes=20)
    _product(client, vendor_id, "Rice", minutes=45)

    quick = client.get("/v1/shopping/products-in-30-min/560001").json()
    assert [[p["name"] for p in group] for group in quick] == [["Paracetamol"]]

    found = client.get("/v1/shopping/search/560001").json()
    assert sorted(p["name"] for p in found) == ["Paracetamol", "Rice"]


def test_pharmacy_by_id(client: TestClient) -> None:
    vendor_id = _open_vendor(client, "Corner Pharmacy", rating=4)
    _product(client, vendor_id, "Paracetamol", minutes=20)

    response = client.get(f"/v1/shopping/pharmacy/{vendor_id}")
    assert response.status_code == 200
    assert response.json()["name"] == "Corner Pharmacy"
    assert len(response.json()["products"]) == 1


def test_offers_in_area_lists_active_only(client: TestClient) -> None:
    vendor_id = _open_vendor(client, "Corner Pharmacy", rating=4)
    for code, active in (("ON", True), ("OFF", False)):
        client.post(
            "/v1/vendor/offers",
            json={
                "offer_type": "VENDOR",
                "title": code,
                "min_value": 0,
                "offer_amount": 10,
                "promo_code": code,
                "promo_type": "ALL",
                "pincode": "560001",
                "is_active": active,
            },
            headers=_as(vendor_id),
        )

    offers = client.get("/v1/shopping/offers/560001").json()
    assert [o["promo_code"] for o in offers] == ["ON"]


def test_search_area_without_products_is_empty(client: TestClient) -> None:
    _open_vendor(client, "Empty Pharmacy", rating=3)

    response = client.get("/v1/shopping/search/560001")
    assert response.status_code == 200
    assert response.json() == []
