from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PaymentRequest(BaseModel):
    amount: int
    payment_mode: str = Field(..., min_length=1)
    offer_id: str | None = None


class TransactionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    customer_id: str
    vendor_id: str
    order_id: str
    amount: int
    offer_used: str
    status: str
    checkout_stage: str
    payment_mode: str
    payment_response: str
    created_at: datetime
