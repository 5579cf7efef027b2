"""Cart engine.

A cart is the list of `{"product_id", "unit"}` lines stored on the customer document.
Merges are last-write-wins per product: the requested unit count replaces the stored
one, and a unit count of zero removes the line.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog
from packages.shared.schemas.events import EntityTypeV1, EventTypeV1
from services.api.app.db.models import Customer, Product
from services.api.app.services.audit import log_event
from services.api.app.services.catalog import find_product, find_products_by_ids
from services.api.app.services.documents import commit
from services.api.app.services.errors import NotFound, ValidationError
from services.api.app.services.identity import Principal, resolve_customer
from sqlalchemy.orm import Session

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class CartLineView:
    product: Product
    unit: int


def merged_lines(lines: list[dict], product_id: str, unit: int) -> list[dict]:
    """Return a new cart with `unit` applied to `product_id`."""
    if unit < 0:
        raise ValidationError("unit must not be negative", fields={"unit": unit})

    out: list[dict] = []
    found = False
    for line in lines:
        if line.get("product_id") != product_id:
            out.append(dict(line))
            continue
        found = True
        if unit > 0:
            out.append({"product_id": product_id, "unit": unit})

    if not found and unit > 0:
        out.append({"product_id": product_id, "unit": unit})
    return out


def merge_item(db: Session, principal: Principal, product_id: str, unit: int) -> list[CartLineView]:
    customer = resolve_customer(db, principal)

    product = find_product(db, product_id)
    if product is None:
        raise NotFound("Product", product_id)

    # The whole collection is written back, never an individual line.
    customer.cart = merged_lines(list(customer.cart or []), product_id, unit)
    log_event(
        db,
        actor_id=principal.id,
        entity_type=EntityTypeV1.CUSTOMER,
        entity_id=customer.id,
        event_type=EventTypeV1.CART_MERGED,
        event_payload={"product_id": product_id, "unit": unit},
    )
    commit(db)

    logger.info("Cart merged", customer_id=customer.id, product_id=product_id, unit=unit)
    return cart_view(db, customer)


def clear(db: Session, principal: Principal) -> Customer:
    customer = resolve_customer(db, principal)
    empty_cart(db, customer)
    return customer


def empty_cart(db: Session, customer: Customer) -> None:
    customer.cart = []
    log_event(
        db,
        actor_id=customer.id,
        entity_type=EntityTypeV1.CUSTOMER,
        entity_id=customer.id,
        event_type=EventTypeV1.CART_CLEARED,
        event_payload={},
    )
    commit(db)
    logger.info("Cart cleared", customer_id=customer.id)


def read(db: Session, principal: Principal) -> list[CartLineView]:
    customer = resolve_customer(db, principal)
    return cart_view(db, customer)


def cart_view(db: Session, customer: Customer) -> list[CartLineView]:
    lines = list(customer.cart or [])
    products = {p.id: p for p in find_products_by_ids(db, [line["product_id"] for line in lines])}

    out: list[CartLineView] = []
    for line in lines:
        product = products.get(line["product_id"])
        if product is None:
            # Product was removed from the catalog after it was carted.
            continue
        out.append(CartLineView(product=product, unit=int(line["unit"])))
    return out
