from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient


@pytest.fixture()
def client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> TestClient:
    db_path = tmp_path / "dawa_vendor_api.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+pysqlite:///{db_path}")
    monkeypatch.setenv("DAWA_DB_AUTO_CREATE", "true")

    from services.api.app.main import app

    with TestClient(app) as c:
        yield c


def _as(principal_id: str) -> dict:
    return {"X-Principal-Id": principal_id}


def _vendor(client: TestClient, email: str = "vendor@example.com") -> str:
    response = client.post(
        "/v1/admin/vendor",
        json={
            "name": "Corner Pharmacy",
            "owner_name": "Owner",
            "product_types": ["medicine"],
            "pincode": "560001",
            "phone": "9000000001",
            "email": email,
            "password": "secret123",
        },
    )
    assert response.status_code == 201
    return response.json()["vendor"]


def _offer_payload(**overrides) -> dict:
    payload = {
        "offer_type": "VENDOR",
        "title": "Flat 50",
        "description": "Flat 50 off",
        "min_value": 200,
        "offer_amount": 50,
        "start_validity": "2026-01-01T00:00:00+00:00",
        "end_validity": "2026-12-31T00:00:00+00:00",
        "promo_code": "FLAT50",
        "promo_type": "ALL",
        "pincode": "560001",
        "is_active": True,
    }
    payload.update(overrides)
    return payload


def test_vendor_profile_and_service_toggle(client: TestClient) -> None:
    vendor_id = _vendor(client)

    profile = client.get("/v1/vendor/profile", headers=_as(vendor_id))
    assert profile.status_code == 200
    assert profile.json()["service_available"] is False
    assert "password_hash" not in profile.json()

    edited = client.patch(
        "/v1/vendor/profile",
        json={"name": "Corner Chemists", "product_types": ["medicine", "grocery"], "phone": "9000000005"},
        headers=_as(vendor_id),
    )
    assert edited.status_code == 200
    assert edited.json()["name"] == "Corner Chemists"
    assert edited.json()["product_types"] == ["medicine", "grocery"]

    toggled = client.patch("/v1/vendor/service", headers=_as(vendor_id))
    assert toggled.json()["service_available"] is True


def test_vendor_products(client: TestClient) -> None:
    vendor_id = _vendor(client)

    created = client.post(
        "/v1/vendor/products",
        json={"name": "Paracetamol", "category": "pain", "product_type": "medicine", "price": 30},
        headers=_as(vendor_id),
    )
    assert created.status_code == 201
    assert created.json()["vendor_id"] == vendor_id

    listed = client.get("/v1/vendor/products", headers=_as(vendor_id))
    assert [p["name"] for p in listed.json()] == ["Paracetamol"]


def test_vendor_routes_reject_unknown_principal(client: TestClient) -> None:
    assert client.get("/v1/vendor/profile", headers=_as("nobody")).status_code == 401
    assert client.get("/v1/vendor/profile").status_code == 401


def test_vendor_offers(client: TestClient) -> None:
    vendor_id = _vendor(client)
    other_id = _vendor(client, email="other@example.com")

    created = client.post("/v1/vendor/offers", json=_offer_payload(), headers=_as(vendor_id))
    assert created.status_code == 201
    offer = created.json()
    assert offer["vendor_ids"] == [vendor_id]

    client.post(
        "/v1/vendor/offers",
        json=_offer_payload(offer_type="GENERIC", promo_code="ALL10"),
        headers=_as(other_id),
    )
    client.post(
        "/v1/vendor/offers",
        json=_offer_payload(promo_code="OTHER"),
        headers=_as(other_id),
    )

    visible = client.get("/v1/vendor/offers", headers=_as(vendor_id)).json()
    assert sorted(o["promo_code"] for o in visible) == ["ALL10", "FLAT50"]

    edited = client.put(
        f"/v1/vendor/offer/{offer['id']}",
        json={"offer_amount": 75, "is_active": False},
        headers=_as(vendor_id),
    )
    assert edited.status_code == 200
    assert edited.json()["offer_amount"] == 75
    assert edited.json()["is_active"] is False
    assert edited.json()["promo_code"] == "FLAT50"


def test_edit_unknown_offer_is_404(client: TestClient) -> None:
    vendor_id = _vendor(client)
    response = client.put("/v1/vendor/offer/missing", json={"title": "x"}, headers=_as(vendor_id))
    assert response.status_code == 404


def test_offer_verify(client: TestClient) -> None:
    vendor_id = _vendor(client)
    customer_id = client.post(
        "/v1/customer/signup",
        json={"email": "buyer@example.com", "phone": "9000000002", "password": "secret123"},
    ).json()["id"]

    active = client.post("/v1/vendor/offers", json=_offer_payload(), headers=_as(vendor_id)).json()
    # Inside its validity window but switched off.
    inactive = client.post(
        "/v1/vendor/offers",
        json=_offer_payload(promo_code="OFF", is_active=False),
        headers=_as(vendor_id),
    ).json()

    ok = client.get(f"/v1/customer/offer/verify/{active['id']}", headers=_as(customer_id))
    assert ok.status_code == 200
    assert ok.json()["message"] == "Offer is Valid"
    assert ok.json()["offer"]["id"] == active["id"]

    off = client.get(f"/v1/customer/offer/verify/{inactive['id']}", headers=_as(customer_id))
    assert off.status_code == 404

    missing = client.get("/v1/customer/offer/verify/missing", headers=_as(customer_id))
    assert missing.status_code == 404


def test_payment_with_offer(client: TestClient) -> None:
    vendor_id = _vendor(client)
    customer_id = client.post(
        "/v1/customer/signup",
        json={"email": "buyer@example.com", "phone": "9000000002", "password": "secret123"},
    ).json()["id"]
    offer = client.post("/v1/vendor/offers", json=_offer_payload(), headers=_as(vendor_id)).json()

    response = client.post(
        "/v1/customer/create-payment",
        json={"amount": 500, "payment_mode": "COD", "offer_id": offer["id"]},
        headers=_as(customer_id),
    )
    assert response.status_code == 201
    assert response.json()["amount"] == 450
    assert response.json()["offer_used"] == offer["id"]

    missing = client.post(
        "/v1/customer/create-payment",
        json={"amount": 500, "payment_mode": "COD", "offer_id": "missing"},
        headers=_as(customer_id),
    )
    assert missing.status_code == 404


@pytest.mark.parametrize(
    ("start", "end"),
    [
        ("2020-01-01T00:00:00+00:00", "2020-12-31T00:00:00+00:00"),
        ("2099-01-01T00:00:00+00:00", "2099-12-31T00:00:00+00:00"),
    ],
)
def test_active_offer_is_valid_outside_its_window(client: TestClient, start: str, end: str) -> None:
    vendor_id = _vendor(client)
    customer_id = client.post(
        "/v1/customer/signup",
        json={"email": "buyer@example.com", "phone": "9000000002", "password": "secret123"},
    ).json()["id"]
    offer = client.post(
        "/v1/vendor/offers",
        json=_offer_payload(start_validity=start, end_validity=end),
        headers=_as(vendor_id),
    ).json()

    verified = client.get(f"/v1/customer/offer/verify/{offer['id']}", headers=_as(customer_id))
    assert verified.status_code == 200

    paid = client.post(
        "/v1/customer/create-payment",
        json={"amount": 500, "payment_mode": "COD", "offer_id": offer["id"]},
        headers=_as(customer_id),
    )
    assert paid.json()["amount"] == 450
