from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from packages.shared.schemas.commerce import SELF_DELIVERY
from sqlalchemy.orm import Session


@dataclass(frozen=True, slots=True)
class AssignmentResult:
    order_id: str
    assigned: bool
    delivery_agent_id: str | None = None
    reason: str = ""

    @property
    def self_delivery(self) -> bool:
        return self.delivery_agent_id == SELF_DELIVERY


class DeliveryAssignmentPolicy(Protocol):
    name: str

    def assign(self, db: Session, order_id: str, vendor_id: str | None) -> AssignmentResult: ...
