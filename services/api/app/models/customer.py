from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from services.api.app.models.order import OrderOut


class SignupRequest(BaseModel):
    email: EmailStr
    phone: str = Field(..., min_length=7, max_length=13)
    password: str = Field(..., min_length=6, max_length=24)


class SignupResponse(BaseModel):
    id: str
    email: str
    verified: bool


class ProfileEditRequest(BaseModel):
    first_name: str = Field(..., min_length=2, max_length=20)
    last_name: str = Field(..., min_length=2, max_length=20)
    address: str = Field(..., min_length=3, max_length=57)


class CartLineRef(BaseModel):
    product_id: str
    unit: int


class CustomerBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    phone: str
    first_name: str
    last_name: str
    address: str
    verified: bool
    lat: float
    lng: float
    cart: list[CartLineRef]


class CustomerOut(CustomerBase):
    orders: list[str]


class CustomerWithOrdersOut(CustomerBase):
    # Orders resolved from the customer's order ids.
    orders: list[OrderOut]
