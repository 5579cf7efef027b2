from __future__ import annotations

from fastapi import APIRouter, Depends
from services.api.app.models.cart import CartItemInput, CartLineOut
from services.api.app.models.customer import (
    CustomerBase,
    CustomerOut,
    CustomerWithOrdersOut,
    ProfileEditRequest,
    SignupRequest,
    SignupResponse,
)
from services.api.app.models.offer import OfferOut, OfferVerifyResponse
from services.api.app.models.order import OrderCreateRequest, OrderOut
from services.api.app.models.payment import PaymentRequest, TransactionOut
from services.api.app.routers.deps import get_db, get_principal
from services.api.app.routers.errors import raise_http_error
from services.api.app.services import cart, identity, ledger, offers, orders
from services.api.app.services.delivery_factory import get_delivery_policy
from services.api.app.services.identity import Principal
from services.api.app.services.orders import RequestedItem
from sqlalchemy.orm import Session

router = APIRouter()


@router.post("/v1/customer/signup", response_model=SignupResponse, status_code=201)
def signup(payload: SignupRequest, db: Session = Depends(get_db)) -> SignupResponse:
    try:
        customer = identity.signup_customer(
            db, email=payload.email, phone=payload.phone, password=payload.password
        )
    except Exception as e:
        raise_http_error(e)

    return SignupResponse(id=customer.id, email=customer.email, verified=customer.verified)


@router.get("/v1/customer/profile", response_model=CustomerOut)
def get_profile(
    principal: Principal = Depends(get_principal), db: Session = Depends(get_db)
) -> CustomerOut:
    try:
        customer = identity.resolve_customer(db, principal)
    except Exception as e:
        raise_http_error(e)

    return CustomerOut.model_validate(customer)


@router.patch("/v1/customer/profile", response_model=CustomerOut, status_code=201)
def edit_profile(
    payload: ProfileEditRequest,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
) -> CustomerOut:
    try:
        customer = identity.edit_customer_profile(
            db,
            principal,
            first_name=payload.first_name,
            last_name=payload.last_name,
            address=payload.address,
        )
    except Exception as e:
        raise_http_error(e)

    return CustomerOut.model_validate(customer)


@router.post("/v1/customer/cart", response_model=list[CartLineOut], status_code=201)
def add_to_cart(
    payload: CartItemInput,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
) -> list[CartLineOut]:
    try:
        lines = cart.merge_item(db, principal, payload.product_id, payload.unit)
    except Exception as e:
        raise_http_error(e)

    return [CartLineOut.from_view(line) for line in lines]


@router.get("/v1/customer/cart", response_model=list[CartLineOut])
def get_cart(
    principal: Principal = Depends(get_principal), db: Session = Depends(get_db)
) -> list[CartLineOut]:
    try:
        lines = cart.read(db, principal)
    except Exception as e:
        raise_http_error(e)

    return [CartLineOut.from_view(line) for line in lines]


@router.delete("/v1/customer/cart", response_model=CustomerOut)
def delete_cart(
    principal: Principal = Depends(get_principal), db: Session = Depends(get_db)
) -> CustomerOut:
    try:
        customer = cart.clear(db, principal)
    except Exception as e:
        raise_http_error(e)

    return CustomerOut.model_validate(customer)


@router.post("/v1/customer/create-payment", response_model=TransactionOut, status_code=201)
def create_payment(
    payload: PaymentRequest,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
) -> TransactionOut:
    try:
        transaction = ledger.open_transaction(
            db,
            principal,
            amount=payload.amount,
            payment_mode=payload.payment_mode,
            offer_id=payload.offer_id,
        )
    except Exception as e:
        raise_http_error(e)

    return TransactionOut.model_validate(transaction)


@router.post("/v1/customer/create-order", response_model=CustomerWithOrdersOut)
def create_order(
    payload: OrderCreateRequest,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
) -> CustomerWithOrdersOut:
    try:
        policy = get_delivery_policy()
        customer = orders.create_order(
            db,
            principal,
            transaction_id=payload.transaction_id,
            amount=payload.amount,
            items=[RequestedItem(product_id=i.product_id, unit=i.unit) for i in payload.items],
            policy=policy,
        )
        placed = orders.orders_for(db, customer)
    except Exception as e:
        raise_http_error(e)

    return _with_orders(customer, placed)


@router.get("/v1/customer/orders", response_model=list[OrderOut])
def get_orders(
    principal: Principal = Depends(get_principal), db: Session = Depends(get_db)
) -> list[OrderOut]:
    try:
        rows = orders.list_orders(db, principal)
    except Exception as e:
        raise_http_error(e)

    return [OrderOut.model_validate(o) for o in rows]


@router.get("/v1/customer/order/{order_id}", response_model=OrderOut)
def get_order(
    order_id: str,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
) -> OrderOut:
    del principal

    try:
        order = orders.get_order(db, order_id)
    except Exception as e:
        raise_http_error(e)

    return OrderOut.model_validate(order)


@router.get("/v1/customer/offer/verify/{offer_id}", response_model=OfferVerifyResponse)
def verify_offer(
    offer_id: str,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
) -> OfferVerifyResponse:
    del principal

    try:
        offer = offers.verify(db, offer_id)
    except Exception as e:
        raise_http_error(e)

    return OfferVerifyResponse(message="Offer is Valid", offer=OfferOut.model_validate(offer))


def _with_orders(customer: object, placed: list) -> CustomerWithOrdersOut:
    base = CustomerBase.model_validate(customer).model_dump()
    return CustomerWithOrdersOut(**base, orders=[OrderOut.model_validate(o) for o in placed])
