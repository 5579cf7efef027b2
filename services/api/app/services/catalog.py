from __future__ import annotations

from collections.abc import Iterable

import structlog
from packages.shared.schemas.events import EntityTypeV1, EventTypeV1
from services.api.app.db.models import Product, Vendor
from services.api.app.services.audit import log_event
from services.api.app.services.documents import commit, new_id
from services.api.app.services.errors import DuplicateAccountError, Unauthorized
from services.api.app.services.identity import Principal, hash_password
from sqlalchemy.orm import Session

logger = structlog.get_logger(__name__)

TOP_PHARMACIES_LIMIT = 20
QUICK_DELIVERY_MINUTES = 30


def find_product(db: Session, product_id: str) -> Product | None:
    return db.get(Product, product_id)


def find_vendor(db: Session, vendor_id: str) -> Vendor | None:
    return db.get(Vendor, vendor_id)


def find_products_by_ids(db: Session, ids: Iterable[str]) -> list[Product]:
    wanted = {i for i in ids if i}
    if not wanted:
        return []
    return db.query(Product).filter(Product.id.in_(wanted)).all()


def product_snapshot(product: Product) -> dict:
    """Copy of a product as it looked when it was put on an order."""
    return {
        "id": product.id,
        "vendor_id": product.vendor_id,
        "name": product.name,
        "description": product.description,
        "category": product.category,
        "product_type": product.product_type,
        "delivery_time": product.delivery_time,
        "price": product.price,
        "rating": product.rating,
    }


def resolve_vendor(db: Session, principal: Principal) -> Vendor:
    vendor = find_vendor(db, principal.id)
    if vendor is None:
        raise Unauthorized("Vendor Not Authorised")
    return vendor


def create_vendor(
    db: Session,
    *,
    name: str,
    owner_name: str,
    product_types: list[str],
    pincode: str,
    address: str | None,
    phone: str,
    email: str,
    password: str,
    rating: float = 0,
) -> Vendor:
    if db.query(Vendor).filter(Vendor.email == email).first() is not None:
        raise DuplicateAccountError("Vendor", email)

    vendor = Vendor(
        id=new_id(),
        name=name,
        owner_name=owner_name,
        product_types=list(product_types),
        pincode=pincode,
        address=address,
        phone=phone,
        email=email,
        password_hash=hash_password(password),
        service_available=False,
        rating=rating,
    )
    db.add(vendor)
    log_event(
        db,
        actor_id=None,
        entity_type=EntityTypeV1.VENDOR,
        entity_id=vendor.id,
        event_type=EventTypeV1.VENDOR_CREATED,
        event_payload={"name": name, "pincode": pincode},
    )
    commit(db)

    logger.info("Vendor created", vendor_id=vendor.id, pincode=pincode)
    return vendor


def list_vendors(db: Session) -> list[Vendor]:
    return db.query(Vendor).order_by(Vendor.created_at.asc()).all()


def update_vendor_profile(
    db: Session,
    principal: Principal,
    *,
    name: str,
    product_types: list[str],
    address: str | None,
    phone: str,
) -> Vendor:
    vendor = resolve_vendor(db, principal)
    vendor.name = name
    vendor.product_types = list(product_types)
    vendor.address = address
    vendor.phone = phone
    commit(db)
    return vendor


def toggle_vendor_service(db: Session, principal: Principal) -> Vendor:
    vendor = resolve_vendor(db, principal)
    vendor.service_available = not vendor.service_available
    commit(db)
    logger.info(
        "Vendor service availability toggled",
        vendor_id=vendor.id,
        service_available=vendor.service_available,
    )
    return vendor


def add_product(
    db: Session,
    principal: Principal,
    *,
    name: str,
    description: str,
    category: str,
    product_type: str,
    delivery_time: int,
    price: int,
) -> Product:
    vendor = resolve_vendor(db, principal)

    product = Product(
        id=new_id(),
        vendor_id=vendor.id,
        name=name,
        description=description,
        category=category,
        product_type=product_type,
        delivery_time=delivery_time,
        price=price,
        rating=1,
    )
    db.add(product)
    log_event(
        db,
        actor_id=vendor.id,
        entity_type=EntityTypeV1.PRODUCT,
        entity_id=product.id,
        event_type=EventTypeV1.PRODUCT_ADDED,
        event_payload={"name": name, "price": price},
    )
    commit(db)
    return product


def vendor_products(db: Session, vendor_id: str) -> list[Product]:
    return (
        db.query(Product)
        .filter(Product.vendor_id == vendor_id)
        .order_by(Product.created_at.asc())
        .all()
    )


def products_by_vendor(db: Session, vendor_ids: list[str]) -> dict[str, list[Product]]:
    grouped: dict[str, list[Product]] = {vid: [] for vid in vendor_ids}
    if not vendor_ids:
        return grouped

    rows = (
        db.query(Product)
        .filter(Product.vendor_id.in_(vendor_ids))
        .order_by(Product.created_at.asc())
        .all()
    )
    for product in rows:
        grouped[product.vendor_id].append(product)
    return grouped


def vendors_in_area(db: Session, pincode: str, *, limit: int | None = None) -> list[Vendor]:
    query = (
        db.query(Vendor)
        .filter(Vendor.pincode == pincode, Vendor.service_available.is_(True))
        .order_by(Vendor.rating.desc())
    )
    if limit is not None:
        query = query.limit(limit)
    return query.all()


def quick_delivery_products(db: Session, pincode: str) -> list[list[Product]]:
    """Per vendor in the area, the products deliverable within 30 minutes."""
    vendors = vendors_in_area(db, pincode)
    grouped = products_by_vendor(db, [v.id for v in vendors])
    return [
        [p for p in grouped[v.id] if p.delivery_time <= QUICK_DELIVERY_MINUTES] for v in vendors
    ]
