"""Transaction ledger.

Payment intents are recorded before an order exists. Every payment is currently cash on
delivery, so a transaction is created OPEN and only moves to CONFIRMED when an order is
placed against it. FAILED is terminal.
"""

from __future__ import annotations

import structlog
from packages.shared.schemas.commerce import CheckoutStageV1, TransactionStatusV1
from packages.shared.schemas.events import EntityTypeV1, EventTypeV1
from services.api.app.config import offer_discount_floor
from services.api.app.db.models import Transaction
from services.api.app.services import offers
from services.api.app.services.audit import log_event
from services.api.app.services.documents import commit, new_id
from services.api.app.services.errors import (
    ConflictError,
    NotFound,
    OfferInactive,
    PaymentNotConfirmed,
)
from services.api.app.services.identity import Principal, resolve_customer
from sqlalchemy.orm import Session

logger = structlog.get_logger(__name__)

CASH_ON_DELIVERY_RESPONSE = "Payment is cash on Delivery"
NO_OFFER = "NA"


def apply_discount(amount: int, offer_amount: int, *, floor: str) -> int:
    payable = amount - offer_amount
    if floor == "zero":
        return max(0, payable)
    return payable


def open_transaction(
    db: Session,
    principal: Principal,
    *,
    amount: int,
    payment_mode: str,
    offer_id: str | None = None,
) -> Transaction:
    customer = resolve_customer(db, principal)

    payable = amount
    if offer_id:
        try:
            offer = offers.verify(db, offer_id)
        except OfferInactive:
            logger.info("Offer inactive, charging full amount", offer_id=offer_id)
        else:
            payable = apply_discount(amount, offer.offer_amount, floor=offer_discount_floor())

    transaction = Transaction(
        id=new_id(),
        customer_id=customer.id,
        vendor_id="",
        order_id="",
        amount=payable,
        offer_used=offer_id or NO_OFFER,
        status=TransactionStatusV1.OPEN.value,
        checkout_stage=CheckoutStageV1.OPEN.value,
        payment_mode=payment_mode,
        payment_response=CASH_ON_DELIVERY_RESPONSE,
    )
    db.add(transaction)
    log_event(
        db,
        actor_id=customer.id,
        entity_type=EntityTypeV1.TRANSACTION,
        entity_id=transaction.id,
        event_type=EventTypeV1.TRANSACTION_OPENED,
        event_payload={
            "amount": payable,
            "requested_amount": amount,
            "offer_used": transaction.offer_used,
        },
    )
    commit(db)

    if payable < 0:
        logger.warning(
            "Discount exceeds payment amount", transaction_id=transaction.id, amount=payable
        )
    logger.info(
        "Transaction opened",
        transaction_id=transaction.id,
        customer_id=customer.id,
        amount=payable,
    )
    return transaction


def validate(db: Session, transaction_id: str) -> tuple[bool, Transaction | None]:
    """Only FAILED (or missing) transactions block an order; OPEN and CONFIRMED proceed."""
    transaction = db.get(Transaction, transaction_id)
    if transaction is None:
        return False, None
    if transaction.status.upper() == TransactionStatusV1.FAILED.value:
        return False, transaction
    return True, transaction


def mark_failed(db: Session, transaction_id: str) -> Transaction:
    transaction = get_transaction(db, transaction_id)
    status = transaction.status.upper()
    if status == TransactionStatusV1.FAILED.value:
        return transaction
    if status == TransactionStatusV1.CONFIRMED.value:
        raise ConflictError(f"Transaction {transaction.id} is already confirmed")
    # An order already exists once checkout has moved past OPEN.
    if transaction.checkout_stage != CheckoutStageV1.OPEN.value:
        raise ConflictError(
            f"Transaction {transaction.id} has an order in progress ({transaction.checkout_stage})"
        )

    transaction.status = TransactionStatusV1.FAILED.value
    log_event(
        db,
        actor_id=None,
        entity_type=EntityTypeV1.TRANSACTION,
        entity_id=transaction.id,
        event_type=EventTypeV1.TRANSACTION_FAILED,
        event_payload={},
    )
    commit(db)
    logger.info("Transaction failed", transaction_id=transaction.id)
    return transaction


def confirm(db: Session, transaction: Transaction, *, vendor_id: str | None, order_id: str) -> None:
    if transaction.status.upper() == TransactionStatusV1.FAILED.value:
        raise PaymentNotConfirmed(transaction.id)

    transaction.vendor_id = vendor_id or ""
    transaction.order_id = order_id
    transaction.status = TransactionStatusV1.CONFIRMED.value
    transaction.checkout_stage = CheckoutStageV1.CONFIRMED.value
    log_event(
        db,
        actor_id=transaction.customer_id,
        entity_type=EntityTypeV1.TRANSACTION,
        entity_id=transaction.id,
        event_type=EventTypeV1.TRANSACTION_CONFIRMED,
        event_payload={"order_id": order_id, "vendor_id": vendor_id},
    )
    commit(db)
    logger.info("Transaction confirmed", transaction_id=transaction.id, order_id=order_id)


def advance_stage(
    db: Session, transaction: Transaction, stage: CheckoutStageV1, **fields: str
) -> None:
    for name, value in fields.items():
        setattr(transaction, name, value)
    transaction.checkout_stage = stage.value
    commit(db)


def get_transaction(db: Session, transaction_id: str) -> Transaction:
    transaction = db.get(Transaction, transaction_id)
    if transaction is None:
        raise NotFound("Transaction", transaction_id)
    return transaction


def list_transactions(db: Session, *, limit: int = 200) -> list[Transaction]:
    return db.query(Transaction).order_by(Transaction.created_at.desc()).limit(limit).all()
