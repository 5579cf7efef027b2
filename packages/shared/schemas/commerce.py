"""Shared commerce vocabulary (v1).

Status and type values shared by the backend and the customer, vendor and delivery
apps. They should remain stable once shipped.
"""

from __future__ import annotations

from enum import Enum


class TransactionStatusV1(str, Enum):
    OPEN = "OPEN"
    FAILED = "FAILED"
    CONFIRMED = "CONFIRMED"


class CheckoutStageV1(str, Enum):
    """Progress of one checkout, keyed by its transaction id.

    Each stage is committed on its own, so a crashed checkout can be resumed from the
    last recorded stage.
    """

    OPEN = "OPEN"
    ORDER_CREATED = "ORDER_CREATED"
    CART_CLEARED = "CART_CLEARED"
    CONFIRMED = "CONFIRMED"


class OrderStatusV1(str, Enum):
    # Vendors may send any free text; these are the values the apps know how to render.
    WAITING = "WAITING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    UNDER_PROCESS = "UNDER_PROCESS"
    READY = "READY"


class OfferTypeV1(str, Enum):
    VENDOR = "VENDOR"
    GENERIC = "GENERIC"


class PromoTypeV1(str, Enum):
    USER = "USER"
    ALL = "ALL"
    BANK = "BANK"
    CARD = "CARD"


SELF_DELIVERY = "SELF_DELIVERY"
