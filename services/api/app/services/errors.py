from __future__ import annotations

from typing import Any


class MarketplaceError(Exception):
    """Base class for failures raised by the marketplace services."""


class ValidationError(MarketplaceError):
    def __init__(self, message: str, *, fields: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.fields = fields or {}


class Unauthorized(MarketplaceError):
    pass


class NotFound(MarketplaceError):
    def __init__(self, entity: str, entity_id: str | None = None) -> None:
        message = f"{entity} not found" if entity_id is None else f"{entity} {entity_id} not found"
        super().__init__(message)
        self.entity = entity
        self.entity_id = entity_id


class OfferInactive(MarketplaceError):
    def __init__(self, offer_id: str) -> None:
        super().__init__(f"Offer {offer_id} is not active")
        self.offer_id = offer_id


class PaymentNotConfirmed(MarketplaceError):
    def __init__(self, transaction_id: str) -> None:
        super().__init__("Order not Created Pending Payment!")
        self.transaction_id = transaction_id


class ConflictError(MarketplaceError):
    """A document changed underneath the caller or a uniqueness rule was hit."""


class DuplicateAccountError(ConflictError):
    def __init__(self, role: str, email: str) -> None:
        super().__init__(f"{role} already exists with this email: {email}")
        self.role = role
        self.email = email


class UpstreamFailure(MarketplaceError):
    """The document store or a collaborator failed; the message is passed through."""
