"""Offer and promotion checks.

An offer applies when its `is_active` flag is set. The validity window is stored and
returned to clients but is not consulted here.
"""

from __future__ import annotations

from datetime import datetime

import structlog
from packages.shared.schemas.commerce import OfferTypeV1
from packages.shared.schemas.events import EntityTypeV1, EventTypeV1
from services.api.app.db.models import Offer
from services.api.app.services.audit import log_event
from services.api.app.services.catalog import resolve_vendor
from services.api.app.services.documents import commit, new_id
from services.api.app.services.errors import NotFound, OfferInactive
from services.api.app.services.identity import Principal
from sqlalchemy.orm import Session

logger = structlog.get_logger(__name__)

_EDITABLE_FIELDS = (
    "offer_type",
    "title",
    "description",
    "min_value",
    "offer_amount",
    "start_validity",
    "end_validity",
    "promo_code",
    "promo_type",
    "banks",
    "bins",
    "pincode",
    "is_active",
)


def verify(db: Session, offer_id: str) -> Offer:
    offer = db.get(Offer, offer_id)
    if offer is None:
        raise NotFound("Offer", offer_id)
    if not offer.is_active:
        raise OfferInactive(offer_id)
    return offer


def create_offer(
    db: Session,
    principal: Principal,
    *,
    offer_type: str,
    title: str,
    description: str,
    min_value: int,
    offer_amount: int,
    start_validity: datetime | None,
    end_validity: datetime | None,
    promo_code: str,
    promo_type: str,
    banks: list[str],
    bins: list[int],
    pincode: str,
    is_active: bool,
) -> Offer:
    vendor = resolve_vendor(db, principal)

    offer = Offer(
        id=new_id(),
        offer_type=offer_type,
        vendor_ids=[vendor.id],
        title=title,
        description=description,
        min_value=min_value,
        offer_amount=offer_amount,
        start_validity=start_validity,
        end_validity=end_validity,
        promo_code=promo_code,
        promo_type=promo_type,
        banks=list(banks),
        bins=list(bins),
        pincode=pincode,
        is_active=is_active,
    )
    db.add(offer)
    log_event(
        db,
        actor_id=vendor.id,
        entity_type=EntityTypeV1.OFFER,
        entity_id=offer.id,
        event_type=EventTypeV1.OFFER_CREATED,
        event_payload={"promo_code": promo_code, "offer_amount": offer_amount},
    )
    commit(db)

    logger.info("Offer created", offer_id=offer.id, vendor_id=vendor.id, is_active=is_active)
    return offer


def vendor_offers(db: Session, principal: Principal) -> list[Offer]:
    """Offers attached to the vendor plus every generic offer."""
    vendor = resolve_vendor(db, principal)

    out: list[Offer] = []
    for offer in db.query(Offer).order_by(Offer.created_at.asc()).all():
        if vendor.id in (offer.vendor_ids or []) or offer.offer_type == OfferTypeV1.GENERIC.value:
            out.append(offer)
    return out


def edit_offer(db: Session, principal: Principal, offer_id: str, changes: dict) -> Offer:
    vendor = resolve_vendor(db, principal)

    offer = db.get(Offer, offer_id)
    if offer is None:
        raise NotFound("Offer", offer_id)

    for field in _EDITABLE_FIELDS:
        if field in changes:
            value = changes[field]
            setattr(offer, field, list(value) if isinstance(value, list) else value)

    log_event(
        db,
        actor_id=vendor.id,
        entity_type=EntityTypeV1.OFFER,
        entity_id=offer.id,
        event_type=EventTypeV1.OFFER_EDITED,
        event_payload={"fields": sorted(k for k in changes if k in _EDITABLE_FIELDS)},
    )
    commit(db)
    return offer


def offers_in_area(db: Session, pincode: str) -> list[Offer]:
    return (
        db.query(Offer)
        .filter(Offer.pincode == pincode, Offer.is_active.is_(True))
        .order_by(Offer.created_at.asc())
        .all()
    )
