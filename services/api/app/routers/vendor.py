from __future__ import annotations

from fastapi import APIRouter, Depends
from services.api.app.models.catalog import (
    ProductCreateRequest,
    ProductOut,
    VendorEditRequest,
    VendorOut,
)
from services.api.app.models.offer import OfferCreateRequest, OfferEditRequest, OfferOut
from services.api.app.models.order import OrderOut, OrderProcessRequest
from services.api.app.routers.deps import get_db, get_principal
from services.api.app.routers.errors import raise_http_error
from services.api.app.services import catalog, offers, orders
from services.api.app.services.identity import Principal
from sqlalchemy.orm import Session

router = APIRouter()


@router.get("/v1/vendor/profile", response_model=VendorOut)
def get_vendor_profile(
    principal: Principal = Depends(get_principal), db: Session = Depends(get_db)
) -> VendorOut:
    try:
        vendor = catalog.resolve_vendor(db, principal)
    except Exception as e:
        raise_http_error(e)

    return VendorOut.model_validate(vendor)


@router.patch("/v1/vendor/profile", response_model=VendorOut)
def update_vendor_profile(
    payload: VendorEditRequest,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
) -> VendorOut:
    try:
        vendor = catalog.update_vendor_profile(
            db,
            principal,
            name=payload.name,
            product_types=payload.product_types,
            address=payload.address,
            phone=payload.phone,
        )
    except Exception as e:
        raise_http_error(e)

    return VendorOut.model_validate(vendor)


@router.patch("/v1/vendor/service", response_model=VendorOut)
def update_vendor_service(
    principal: Principal = Depends(get_principal), db: Session = Depends(get_db)
) -> VendorOut:
    try:
        vendor = catalog.toggle_vendor_service(db, principal)
    except Exception as e:
        raise_http_error(e)

    return VendorOut.model_validate(vendor)


@router.post("/v1/vendor/products", response_model=ProductOut, status_code=201)
def add_product(
    payload: ProductCreateRequest,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
) -> ProductOut:
    try:
        product = catalog.add_product(db, principal, **payload.model_dump())
    except Exception as e:
        raise_http_error(e)

    return ProductOut.model_validate(product)


@router.get("/v1/vendor/products", response_model=list[ProductOut])
def get_products(
    principal: Principal = Depends(get_principal), db: Session = Depends(get_db)
) -> list[ProductOut]:
    try:
        vendor = catalog.resolve_vendor(db, principal)
        rows = catalog.vendor_products(db, vendor.id)
    except Exception as e:
        raise_http_error(e)

    return [ProductOut.model_validate(p) for p in rows]


@router.get("/v1/vendor/orders", response_model=list[OrderOut])
def get_current_orders(
    principal: Principal = Depends(get_principal), db: Session = Depends(get_db)
) -> list[OrderOut]:
    try:
        rows = orders.vendor_orders(db, principal)
    except Exception as e:
        raise_http_error(e)

    return [OrderOut.model_validate(o) for o in rows]


@router.get("/v1/vendor/order/{order_id}", response_model=OrderOut)
def get_order_details(
    order_id: str,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
) -> OrderOut:
    try:
        order = orders.vendor_order_detail(db, principal, order_id)
    except Exception as e:
        raise_http_error(e)

    return OrderOut.model_validate(order)


@router.put("/v1/vendor/order/{order_id}/process", response_model=OrderOut)
def process_order(
    order_id: str,
    payload: OrderProcessRequest,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
) -> OrderOut:
    try:
        order = orders.update_status(
            db,
            principal,
            order_id,
            status=payload.order_status,
            remarks=payload.remarks,
            delivery_time=payload.delivery_time,
        )
    except Exception as e:
        raise_http_error(e)

    return OrderOut.model_validate(order)


@router.post("/v1/vendor/offers", response_model=OfferOut, status_code=201)
def create_offer(
    payload: OfferCreateRequest,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
) -> OfferOut:
    try:
        offer = offers.create_offer(db, principal, **payload.model_dump())
    except Exception as e:
        raise_http_error(e)

    return OfferOut.model_validate(offer)


@router.get("/v1/vendor/offers", response_model=list[OfferOut])
def get_offers(
    principal: Principal = Depends(get_principal), db: Session = Depends(get_db)
) -> list[OfferOut]:
    try:
        rows = offers.vendor_offers(db, principal)
    except Exception as e:
        raise_http_error(e)

    return [OfferOut.model_validate(o) for o in rows]


@router.put("/v1/vendor/offer/{offer_id}", response_model=OfferOut)
def edit_offer(
    offer_id: str,
    payload: OfferEditRequest,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
) -> OfferOut:
    try:
        offer = offers.edit_offer(
            db, principal, offer_id, payload.model_dump(exclude_unset=True)
        )
    except Exception as e:
        raise_http_error(e)

    return OfferOut.model_validate(offer)
