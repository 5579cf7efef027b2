from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class OrderItemInput(BaseModel):
    product_id: str = Field(..., min_length=1)
    unit: int = Field(..., ge=1)


class OrderCreateRequest(BaseModel):
    transaction_id: str = Field(..., min_length=1)
    amount: int
    items: list[OrderItemInput] = Field(default_factory=list)


class OrderLineOut(BaseModel):
    # Product as it was when the order was placed.
    product: dict[str, Any]
    unit: int


class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    order_code: str
    customer_id: str
    vendor_id: str | None = None
    items: list[OrderLineOut]
    total_amount: int
    paid_amount: int
    payment_mode: str
    status: str
    remarks: str
    delivery_agent_id: str | None = None
    delivery_time: int
    created_at: datetime


class OrderProcessRequest(BaseModel):
    order_status: str = Field(..., min_length=1)
    remarks: str = ""
    delivery_time: int | None = Field(None, ge=0)
