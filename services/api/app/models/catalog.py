from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class ProductCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = ""
    category: str = Field(..., min_length=1)
    product_type: str = Field(..., min_length=1)
    delivery_time: int = Field(0, ge=0)
    price: int = Field(..., ge=0)


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    vendor_id: str
    name: str
    description: str
    category: str
    product_type: str
    delivery_time: int
    price: int
    rating: float


class VendorCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    owner_name: str = Field(..., min_length=1)
    product_types: list[str] = Field(default_factory=list)
    pincode: str = Field(..., min_length=1)
    address: str | None = None
    phone: str = Field(..., min_length=7, max_length=13)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=24)
    rating: float = Field(0, ge=0, le=5)


class VendorCreateResponse(BaseModel):
    vendor: str


class VendorEditRequest(BaseModel):
    name: str = Field(..., min_length=1)
    product_types: list[str] = Field(default_factory=list)
    address: str | None = None
    phone: str = Field(..., min_length=7, max_length=13)


class VendorOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    owner_name: str
    product_types: list[str]
    pincode: str
    address: str | None = None
    phone: str
    email: str
    service_available: bool
    rating: float
    lat: float
    lng: float
    created_at: datetime


class VendorWithProductsOut(VendorOut):
    products: list[ProductOut] = Field(default_factory=list)
