from __future__ import annotations

from datetime import datetime

from packages.shared.schemas.commerce import OfferTypeV1, PromoTypeV1
from pydantic import BaseModel, ConfigDict, Field


class OfferCreateRequest(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    offer_type: OfferTypeV1
    title: str = Field(..., min_length=1)
    description: str = ""
    min_value: int = Field(..., ge=0)
    offer_amount: int = Field(..., ge=0)
    start_validity: datetime | None = None
    end_validity: datetime | None = None
    promo_code: str = Field(..., min_length=1)
    promo_type: PromoTypeV1
    banks: list[str] = Field(default_factory=list)
    bins: list[int] = Field(default_factory=list)
    pincode: str = Field(..., min_length=1)
    is_active: bool = False


class OfferEditRequest(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    offer_type: OfferTypeV1 | None = None
    title: str | None = Field(None, min_length=1)
    description: str | None = None
    min_value: int | None = Field(None, ge=0)
    offer_amount: int | None = Field(None, ge=0)
    start_validity: datetime | None = None
    end_validity: datetime | None = None
    promo_code: str | None = Field(None, min_length=1)
    promo_type: PromoTypeV1 | None = None
    banks: list[str] | None = None
    bins: list[int] | None = None
    pincode: str | None = Field(None, min_length=1)
    is_active: bool | None = None


class OfferOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    offer_type: str
    vendor_ids: list[str]
    title: str
    description: str
    min_value: int
    offer_amount: int
    start_validity: datetime | None = None
    end_validity: datetime | None = None
    promo_code: str
    promo_type: str
    banks: list[str]
    bins: list[int]
    pincode: str
    is_active: bool


class OfferVerifyResponse(BaseModel):
    message: str
    offer: OfferOut
