from __future__ import annotations

import structlog
from packages.shared.schemas.commerce import SELF_DELIVERY
from packages.shared.schemas.events import EntityTypeV1, EventTypeV1
from services.api.app.db.models import DeliveryAgent, Order
from services.api.app.services.audit import log_event
from services.api.app.services.catalog import find_vendor
from services.api.app.services.delivery_base import AssignmentResult
from services.api.app.services.documents import commit
from sqlalchemy.orm import Session

logger = structlog.get_logger(__name__)


class FirstAvailableInArea:
    """Bind an order to the first verified, available agent in the vendor's postal area.

    Agents are taken in the order the store returns them. There is no distance ranking
    and no load balancing; when nobody matches the vendor delivers the order itself.
    """

    name = "first_available"

    def assign(self, db: Session, order_id: str, vendor_id: str | None) -> AssignmentResult:
        vendor = find_vendor(db, vendor_id) if vendor_id else None
        if vendor is None:
            return AssignmentResult(order_id=order_id, assigned=False, reason="vendor not found")

        order = db.get(Order, order_id)
        if order is None:
            return AssignmentResult(order_id=order_id, assigned=False, reason="order not found")

        agents = (
            db.query(DeliveryAgent)
            .filter(
                DeliveryAgent.pincode == vendor.pincode,
                DeliveryAgent.verified.is_(True),
                DeliveryAgent.is_available.is_(True),
            )
            .all()
        )

        order.delivery_agent_id = agents[0].id if agents else SELF_DELIVERY
        log_event(
            db,
            actor_id=None,
            entity_type=EntityTypeV1.ORDER,
            entity_id=order.id,
            event_type=EventTypeV1.DELIVERY_ASSIGNED,
            event_payload={
                "policy": self.name,
                "delivery_agent_id": order.delivery_agent_id,
                "pincode": vendor.pincode,
                "candidates": len(agents),
            },
        )
        commit(db)

        logger.info(
            "Delivery assigned",
            order_id=order.id,
            delivery_agent_id=order.delivery_agent_id,
            candidates=len(agents),
        )
        return AssignmentResult(
            order_id=order.id,
            assigned=True,
            delivery_agent_id=order.delivery_agent_id,
        )
