"""Shared audit event schema (v1).

The backend stores an append-only event log. Admin clients read these events to
reconstruct how an order moved from cart to delivery.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class EntityTypeV1(str, Enum):
    CUSTOMER = "Customer"
    VENDOR = "Vendor"
    PRODUCT = "Product"
    TRANSACTION = "Transaction"
    ORDER = "Order"
    OFFER = "Offer"
    DELIVERY_AGENT = "DeliveryAgent"


class EventTypeV1(str, Enum):
    CUSTOMER_SIGNED_UP = "CUSTOMER_SIGNED_UP"
    CART_MERGED = "CART_MERGED"
    CART_CLEARED = "CART_CLEARED"
    TRANSACTION_OPENED = "TRANSACTION_OPENED"
    TRANSACTION_FAILED = "TRANSACTION_FAILED"
    TRANSACTION_CONFIRMED = "TRANSACTION_CONFIRMED"
    TRANSACTION_REUSED = "TRANSACTION_REUSED"
    ORDER_CREATED = "ORDER_CREATED"
    ORDER_PROCESSED = "ORDER_PROCESSED"
    CHECKOUT_RESUMED = "CHECKOUT_RESUMED"
    DELIVERY_ASSIGNED = "DELIVERY_ASSIGNED"
    DELIVERY_ASSIGNMENT_FAILED = "DELIVERY_ASSIGNMENT_FAILED"
    VENDOR_CREATED = "VENDOR_CREATED"
    PRODUCT_ADDED = "PRODUCT_ADDED"
    OFFER_CREATED = "OFFER_CREATED"
    OFFER_EDITED = "OFFER_EDITED"
    AGENT_SIGNED_UP = "AGENT_SIGNED_UP"
    AGENT_VERIFIED = "AGENT_VERIFIED"
    AGENT_STATUS_CHANGED = "AGENT_STATUS_CHANGED"


class EventV1(BaseModel):
    id: str
    actor_id: str | None = None

    entity_type: EntityTypeV1
    entity_id: str

    event_type: EventTypeV1
    payload: dict[str, Any] = Field(default_factory=dict)
    created_at: str
