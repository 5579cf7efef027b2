from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from services.api.app.models.catalog import ProductOut, VendorWithProductsOut
from services.api.app.models.offer import OfferOut
from services.api.app.routers.deps import get_db
from services.api.app.services import catalog, offers
from services.api.app.services.catalog import TOP_PHARMACIES_LIMIT
from sqlalchemy.orm import Session

router = APIRouter()


def _not_found() -> HTTPException:
    return HTTPException(status_code=404, detail="Data Not Found")


def _with_products(db: Session, vendors: list) -> list[VendorWithProductsOut]:
    grouped = catalog.products_by_vendor(db, [v.id for v in vendors])
    return [
        VendorWithProductsOut.model_validate(v).model_copy(
            update={"products": [ProductOut.model_validate(p) for p in grouped[v.id]]}
        )
        for v in vendors
    ]


@router.get("/v1/shopping/top-pharmacies/{pincode}", response_model=list[VendorWithProductsOut])
def get_top_pharmacies(pincode: str, db: Session = Depends(get_db)) -> list[VendorWithProductsOut]:
    vendors = catalog.vendors_in_area(db, pincode, limit=TOP_PHARMACIES_LIMIT)
    if not vendors:
        raise _not_found()
    return _with_products(db, vendors)


@router.get("/v1/shopping/products-in-30-min/{pincode}", response_model=list[list[ProductOut]])
def get_products_in_30_min(pincode: str, db: Session = Depends(get_db)) -> list[list[ProductOut]]:
    groups = catalog.quick_delivery_products(db, pincode)
    if not groups:
        raise _not_found()
    return [[ProductOut.model_validate(p) for p in group] for group in groups]


@router.get("/v1/shopping/search/{pincode}", response_model=list[ProductOut])
def search_products(pincode: str, db: Session = Depends(get_db)) -> list[ProductOut]:
    vendors = catalog.vendors_in_area(db, pincode)
    if not vendors:
        raise _not_found()
    grouped = catalog.products_by_vendor(db, [v.id for v in vendors])
    return [ProductOut.model_validate(p) for v in vendors for p in grouped[v.id]]


@router.get("/v1/shopping/pharmacy/{vendor_id}", response_model=VendorWithProductsOut)
def get_pharmacy(vendor_id: str, db: Session = Depends(get_db)) -> VendorWithProductsOut:
    vendor = catalog.find_vendor(db, vendor_id)
    if vendor is None:
        raise _not_found()
    return _with_products(db, [vendor])[0]


@router.get("/v1/shopping/offers/{pincode}", response_model=list[OfferOut])
def get_offers(pincode: str, db: Session = Depends(get_db)) -> list[OfferOut]:
    rows = offers.offers_in_area(db, pincode)
    if not rows:
        raise _not_found()
    return [OfferOut.model_validate(o) for o in rows]


@router.get("/v1/shopping/{pincode}", response_model=list[VendorWithProductsOut])
def get_grocery_availability(pincode: str, db: Session = Depends(get_db)) -> list[VendorWithProductsOut]:
    vendors = catalog.vendors_in_area(db, pincode)
    if not vendors:
        raise _not_found()
    return _with_products(db, vendors)
