"""Order engine.

Checkout turns a payment transaction plus the requested items into an order. The steps
touch three documents (order, customer, transaction) and each write is committed on its
own, so the transaction's `checkout_stage` records how far a checkout got:

    OPEN -> ORDER_CREATED -> CART_CLEARED -> CONFIRMED

The transaction id is the idempotency key. Retrying a checkout that stopped at
ORDER_CREATED or CART_CLEARED resumes with the order that already exists instead of
placing a second one. A crash between the order write and the ORDER_CREATED write still
leaves an order the transaction does not know about.
"""

from __future__ import annotations

import random
from collections.abc import Iterable
from dataclasses import dataclass

import structlog
from packages.shared.schemas.commerce import (
    CheckoutStageV1,
    OrderStatusV1,
    TransactionStatusV1,
)
from packages.shared.schemas.events import EntityTypeV1, EventTypeV1
from services.api.app.config import allow_confirmed_transaction_reuse
from services.api.app.db.models import Customer, Order, Product, Transaction
from services.api.app.services import ledger
from services.api.app.services.audit import log_event
from services.api.app.services.catalog import (
    find_products_by_ids,
    product_snapshot,
    resolve_vendor,
)
from services.api.app.services.delivery_base import AssignmentResult, DeliveryAssignmentPolicy
from services.api.app.services.delivery_factory import get_delivery_policy
from services.api.app.services.documents import commit, new_id, save
from services.api.app.services.errors import ConflictError, NotFound, PaymentNotConfirmed
from services.api.app.services.identity import Principal, resolve_customer
from sqlalchemy.orm import Session

logger = structlog.get_logger(__name__)

DEFAULT_DELIVERY_TIME_MINUTES = 33
ORDER_CODE_MIN = 1000
ORDER_CODE_MAX = 90998

_RESUMABLE_STAGES = {CheckoutStageV1.ORDER_CREATED.value, CheckoutStageV1.CART_CLEARED.value}


@dataclass(frozen=True, slots=True)
class RequestedItem:
    product_id: str
    unit: int


@dataclass(frozen=True, slots=True)
class PricedItems:
    items: list[dict]
    total_amount: int
    vendor_id: str | None


def price_items(products: Iterable[Product], requested: list[RequestedItem]) -> PricedItems:
    """Snapshot and total every requested line that resolved to a product.

    Orders are assumed to be single-vendor; when lines span vendors the last matching
    product's vendor wins.
    """

    items: list[dict] = []
    total = 0
    vendor_id: str | None = None

    for product in products:
        for req in requested:
            if req.product_id != product.id:
                continue
            vendor_id = product.vendor_id
            total += product.price * req.unit
            items.append({"product": product_snapshot(product), "unit": req.unit})

    return PricedItems(items=items, total_amount=total, vendor_id=vendor_id)


def generate_order_code() -> str:
    # Not unique: two orders can share a code.
    return str(random.randint(ORDER_CODE_MIN, ORDER_CODE_MAX))


def create_order(
    db: Session,
    principal: Principal,
    *,
    transaction_id: str,
    amount: int,
    items: list[RequestedItem],
    policy: DeliveryAssignmentPolicy | None = None,
) -> Customer:
    customer = resolve_customer(db, principal)

    ok, transaction = ledger.validate(db, transaction_id)
    if not ok or transaction is None:
        logger.info("Order rejected pending payment", transaction_id=transaction_id)
        raise PaymentNotConfirmed(transaction_id)

    order = _resume_or_place(db, customer, transaction, amount=amount, items=items)

    if transaction.checkout_stage != CheckoutStageV1.CART_CLEARED.value:
        _close_cart(db, customer, transaction, order)

    ledger.confirm(db, transaction, vendor_id=order.vendor_id, order_id=order.id)

    if order.delivery_agent_id is None:
        assign_delivery(db, order, policy or get_delivery_policy())

    return customer


def _resume_or_place(
    db: Session,
    customer: Customer,
    transaction: Transaction,
    *,
    amount: int,
    items: list[RequestedItem],
) -> Order:
    if transaction.checkout_stage in _RESUMABLE_STAGES and transaction.order_id:
        existing = db.get(Order, transaction.order_id)
        if existing is not None:
            log_event(
                db,
                actor_id=customer.id,
                entity_type=EntityTypeV1.TRANSACTION,
                entity_id=transaction.id,
                event_type=EventTypeV1.CHECKOUT_RESUMED,
                event_payload={"stage": transaction.checkout_stage, "order_id": existing.id},
            )
            commit(db)
            logger.info(
                "Resuming checkout",
                transaction_id=transaction.id,
                stage=transaction.checkout_stage,
                order_id=existing.id,
            )
            return existing

    if transaction.status == TransactionStatusV1.CONFIRMED.value:
        if not allow_confirmed_transaction_reuse():
            raise ConflictError(f"Transaction {transaction.id} already has an order")

        logger.warning(
            "Placing another order against a confirmed transaction",
            transaction_id=transaction.id,
            previous_order_id=transaction.order_id,
        )
        log_event(
            db,
            actor_id=customer.id,
            entity_type=EntityTypeV1.TRANSACTION,
            entity_id=transaction.id,
            event_type=EventTypeV1.TRANSACTION_REUSED,
            event_payload={"previous_order_id": transaction.order_id},
        )

    order = _place_order(db, customer, transaction, amount=amount, items=items)
    ledger.advance_stage(
        db,
        transaction,
        CheckoutStageV1.ORDER_CREATED,
        order_id=order.id,
        vendor_id=order.vendor_id or "",
    )
    return order


def _place_order(
    db: Session,
    customer: Customer,
    transaction: Transaction,
    *,
    amount: int,
    items: list[RequestedItem],
) -> Order:
    products = find_products_by_ids(db, [item.product_id for item in items])
    priced = price_items(products, items)

    if not priced.items:
        logger.warning(
            "Placing order with no resolvable items",
            transaction_id=transaction.id,
            requested=len(items),
        )

    order = Order(
        id=new_id(),
        order_code=generate_order_code(),
        customer_id=customer.id,
        vendor_id=priced.vendor_id,
        items=priced.items,
        total_amount=priced.total_amount,
        paid_amount=amount,
        payment_mode=transaction.payment_mode,
        status=OrderStatusV1.WAITING.value,
        remarks="",
        delivery_agent_id=None,
        delivery_time=DEFAULT_DELIVERY_TIME_MINUTES,
    )
    db.add(order)
    log_event(
        db,
        actor_id=customer.id,
        entity_type=EntityTypeV1.ORDER,
        entity_id=order.id,
        event_type=EventTypeV1.ORDER_CREATED,
        event_payload={
            "transaction_id": transaction.id,
            "order_code": order.order_code,
            "total_amount": order.total_amount,
            "vendor_id": order.vendor_id,
        },
    )
    commit(db)

    logger.info(
        "Order created",
        order_id=order.id,
        order_code=order.order_code,
        total_amount=order.total_amount,
        vendor_id=order.vendor_id,
    )
    return order


def _close_cart(db: Session, customer: Customer, transaction: Transaction, order: Order) -> None:
    # Emptying the cart and recording the order is one customer write.
    customer.cart = []
    orders = list(customer.orders or [])
    if order.id not in orders:
        orders.append(order.id)
    customer.orders = orders
    log_event(
        db,
        actor_id=customer.id,
        entity_type=EntityTypeV1.CUSTOMER,
        entity_id=customer.id,
        event_type=EventTypeV1.CART_CLEARED,
        event_payload={"order_id": order.id},
    )
    commit(db)

    ledger.advance_stage(db, transaction, CheckoutStageV1.CART_CLEARED)


def assign_delivery(
    db: Session, order: Order, policy: DeliveryAssignmentPolicy
) -> AssignmentResult:
    """Best-effort: a failed assignment never undoes the order."""
    try:
        result = policy.assign(db, order.id, order.vendor_id)
    except Exception as e:
        db.rollback()
        logger.exception("Delivery assignment failed", order_id=order.id, policy=policy.name)
        log_event(
            db,
            actor_id=None,
            entity_type=EntityTypeV1.ORDER,
            entity_id=order.id,
            event_type=EventTypeV1.DELIVERY_ASSIGNMENT_FAILED,
            event_payload={"policy": policy.name, "error": str(e)},
        )
        commit(db)
        return AssignmentResult(order_id=order.id, assigned=False, reason=str(e))

    if not result.assigned:
        logger.info("Delivery not assigned", order_id=order.id, reason=result.reason)
    return result


def get_order(db: Session, order_id: str) -> Order:
    order = db.get(Order, order_id)
    if order is None:
        raise NotFound("Order", order_id)
    return order


def list_orders(db: Session, principal: Principal) -> list[Order]:
    customer = resolve_customer(db, principal)
    return orders_for(db, customer)


def orders_for(db: Session, customer: Customer) -> list[Order]:
    ids = list(customer.orders or [])
    if not ids:
        return []
    by_id = {o.id: o for o in db.query(Order).filter(Order.id.in_(ids)).all()}
    return [by_id[i] for i in ids if i in by_id]


def vendor_orders(db: Session, principal: Principal) -> list[Order]:
    vendor = resolve_vendor(db, principal)
    return (
        db.query(Order)
        .filter(Order.vendor_id == vendor.id)
        .order_by(Order.created_at.desc())
        .all()
    )


def vendor_order_detail(db: Session, principal: Principal, order_id: str) -> Order:
    vendor = resolve_vendor(db, principal)
    order = db.get(Order, order_id)
    if order is None or order.vendor_id != vendor.id:
        raise NotFound("Order", order_id)
    return order


def update_status(
    db: Session,
    principal: Principal,
    order_id: str,
    *,
    status: str,
    remarks: str,
    delivery_time: int | None = None,
) -> Order:
    """Vendor-side processing. Status is free text; any value may follow any other."""
    order = vendor_order_detail(db, principal, order_id)

    previous = order.status
    order.status = status
    order.remarks = remarks
    if delivery_time:
        order.delivery_time = delivery_time

    log_event(
        db,
        actor_id=principal.id,
        entity_type=EntityTypeV1.ORDER,
        entity_id=order.id,
        event_type=EventTypeV1.ORDER_PROCESSED,
        event_payload={"from": previous, "to": status, "delivery_time": order.delivery_time},
    )
    save(db, order)

    logger.info("Order processed", order_id=order.id, status=status)
    return order
