from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest
from packages.shared.schemas.commerce import CheckoutStageV1, TransactionStatusV1
from services.api.app.services.errors import ConflictError, NotFound, Unauthorized
from services.api.app.services.identity import Principal
from services.api.app.services.ledger import apply_discount


@pytest.fixture()
def db(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("DATABASE_URL", f"sqlite+pysqlite:///{tmp_path / 'dawa_ledger.db'}")
    monkeypatch.setenv("DAWA_DB_AUTO_CREATE", "true")
    monkeypatch.delenv("DAWA_OFFER_DISCOUNT_FLOOR", raising=False)

    from services.api.app.db.database import db_session
    from services.api.app.db.init_db import init_db

    init_db()
    session = db_session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def customer(db) -> Principal:
    from services.api.app.services import identity

    c = identity.signup_customer(db, email="buyer@example.com", phone="9000000002", password="secret123")
    return Principal(id=c.id)


def _offer(db, *, offer_amount: int, is_active: bool):
    from services.api.app.services import catalog, offers

    vendor = catalog.create_vendor(
        db,
        name="Corner Pharmacy",
        owner_name="Owner",
        product_types=["medicine"],
        pincode="560001",
        address=None,
        phone="9000000001",
        email=f"vendor-{offer_amount}-{is_active}@example.com",
        password="secret123",
    )
    return offers.create_offer(
        db,
        Principal(id=vendor.id),
        offer_type="VENDOR",
        title="Flat off",
        description="",
        min_value=0,
        offer_amount=offer_amount,
        start_validity=None,
        end_validity=None,
        promo_code="FLAT",
        promo_type="ALL",
        banks=[],
        bins=[],
        pincode="560001",
        is_active=is_active,
    )


def test_apply_discount_floor() -> None:
    assert apply_discount(100, 150, floor="none") == -50
    assert apply_discount(100, 150, floor="zero") == 0
    assert apply_discount(500, 150, floor="zero") == 350


def test_open_without_offer(db, customer) -> None:
    from services.api.app.services import ledger

    t = ledger.open_transaction(db, customer, amount=500, payment_mode="COD")

    assert t.amount == 500
    assert t.offer_used == "NA"
    assert t.status == TransactionStatusV1.OPEN.value
    assert t.checkout_stage == CheckoutStageV1.OPEN.value
    assert t.vendor_id == ""
    assert t.order_id == ""
    assert t.payment_response == "Payment is cash on Delivery"


def test_open_applies_active_offer(db, customer) -> None:
    from services.api.app.services import ledger

    offer = _offer(db, offer_amount=150, is_active=True)
    t = ledger.open_transaction(db, customer, amount=500, payment_mode="COD", offer_id=offer.id)

    assert t.amount == 350
    assert t.offer_used == offer.id


def test_open_inactive_offer_charges_full_amount(db, customer) -> None:
    from services.api.app.services import ledger

    offer = _offer(db, offer_amount=150, is_active=False)
    t = ledger.open_transaction(db, customer, amount=500, payment_mode="COD", offer_id=offer.id)

    assert t.amount == 500
    assert t.offer_used == offer.id


def test_open_missing_offer_is_not_found(db, customer) -> None:
    from services.api.app.services import ledger

    with pytest.raises(NotFound):
        ledger.open_transaction(db, customer, amount=500, payment_mode="COD", offer_id="missing")


def test_open_discount_can_go_negative_by_default(db, customer) -> None:
    from services.api.app.services import ledger

    offer = _offer(db, offer_amount=150, is_active=True)
    t = ledger.open_transaction(db, customer, amount=100, payment_mode="COD", offer_id=offer.id)

    assert t.amount == -50


def test_open_discount_clamped_when_floor_is_zero(
    db, customer, monkeypatch: pytest.MonkeyPatch
) -> None:
    from services.api.app.services import ledger

    monkeypatch.setenv("DAWA_OFFER_DISCOUNT_FLOOR", "zero")
    offer = _offer(db, offer_amount=150, is_active=True)
    t = ledger.open_transaction(db, customer, amount=100, payment_mode="COD", offer_id=offer.id)

    assert t.amount == 0


def test_open_requires_customer(db) -> None:
    from services.api.app.services import ledger

    with pytest.raises(Unauthorized):
        ledger.open_transaction(db, Principal(id="nobody"), amount=100, payment_mode="COD")


def test_validate(db, customer) -> None:
    from services.api.app.services import ledger

    t = ledger.open_transaction(db, customer, amount=500, payment_mode="COD")

    assert ledger.validate(db, "missing") == (False, None)
    assert ledger.validate(db, t.id) == (True, t)

    ledger.mark_failed(db, t.id)
    assert ledger.validate(db, t.id) == (False, t)


def test_mark_failed_is_idempotent_and_rejects_confirmed(db, customer) -> None:
    from services.api.app.services import ledger

    failed = ledger.open_transaction(db, customer, amount=500, payment_mode="COD")
    ledger.mark_failed(db, failed.id)
    assert ledger.mark_failed(db, failed.id).status == TransactionStatusV1.FAILED.value

    confirmed = ledger.open_transaction(db, customer, amount=500, payment_mode="COD")
    ledger.confirm(db, confirmed, vendor_id="v-1", order_id="o-1")
    with pytest.raises(ConflictError):
        ledger.mark_failed(db, confirmed.id)


def test_stale_transaction_write_is_rejected(db, customer) -> None:
    from services.api.app.db.database import db_session
    from services.api.app.db.models import Transaction
    from services.api.app.services import ledger
    from services.api.app.services.documents import commit

    t = ledger.open_transaction(db, customer, amount=500, payment_mode="COD")

    other = db_session()
    try:
        stale = other.get(Transaction, t.id)

        ledger.advance_stage(db, t, CheckoutStageV1.ORDER_CREATED, order_id="o-1")

        stale.order_id = "o-2"
        with pytest.raises(ConflictError):
            commit(other)
    finally:
        other.close()


@pytest.mark.parametrize("stage", [CheckoutStageV1.ORDER_CREATED, CheckoutStageV1.CART_CLEARED])
def test_mark_failed_rejects_checkout_in_progress(db, customer, stage: CheckoutStageV1) -> None:
    from services.api.app.services import ledger

    t = ledger.open_transaction(db, customer, amount=500, payment_mode="COD")
    ledger.advance_stage(db, t, stage, order_id="o-1")

    with pytest.raises(ConflictError):
        ledger.mark_failed(db, t.id)
    assert t.status == TransactionStatusV1.OPEN.value


@pytest.mark.parametrize(
    ("start", "end"),
    [
        (datetime(2020, 1, 1, tzinfo=timezone.utc), datetime(2020, 12, 31, tzinfo=timezone.utc)),
        (datetime(2099, 1, 1, tzinfo=timezone.utc), datetime(2099, 12, 31, tzinfo=timezone.utc)),
    ],
)
def test_active_offer_discounts_outside_validity_window(
    db, customer, start: datetime, end: datetime
) -> None:
    from services.api.app.services import ledger, offers

    offer = _offer(db, offer_amount=150, is_active=True)
    offer.start_validity = start
    offer.end_validity = end
    db.commit()

    assert offers.verify(db, offer.id) is offer

    t = ledger.open_transaction(db, customer, amount=500, payment_mode="COD", offer_id=offer.id)
    assert t.amount == 350
