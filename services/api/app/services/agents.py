from __future__ import annotations

import structlog
from packages.shared.schemas.events import EntityTypeV1, EventTypeV1
from services.api.app.db.models import DeliveryAgent
from services.api.app.services.audit import log_event
from services.api.app.services.documents import commit
from services.api.app.services.errors import NotFound
from services.api.app.services.identity import Principal, resolve_agent
from sqlalchemy.orm import Session

logger = structlog.get_logger(__name__)


def edit_profile(
    db: Session,
    principal: Principal,
    *,
    first_name: str,
    last_name: str,
    address: str,
) -> DeliveryAgent:
    agent = resolve_agent(db, principal)
    agent.first_name = first_name
    agent.last_name = last_name
    agent.address = address
    commit(db)
    return agent


def toggle_availability(
    db: Session,
    principal: Principal,
    *,
    lat: float | None = None,
    lng: float | None = None,
) -> DeliveryAgent:
    agent = resolve_agent(db, principal)
    if lat and lng:
        agent.lat = lat
        agent.lng = lng
    agent.is_available = not agent.is_available

    log_event(
        db,
        actor_id=agent.id,
        entity_type=EntityTypeV1.DELIVERY_AGENT,
        entity_id=agent.id,
        event_type=EventTypeV1.AGENT_STATUS_CHANGED,
        event_payload={"is_available": agent.is_available, "lat": agent.lat, "lng": agent.lng},
    )
    commit(db)

    logger.info("Agent availability changed", agent_id=agent.id, is_available=agent.is_available)
    return agent


def verify_agent(db: Session, agent_id: str, status: bool) -> DeliveryAgent:
    agent = db.get(DeliveryAgent, agent_id)
    if agent is None:
        raise NotFound("Delivery user", agent_id)

    agent.verified = status
    log_event(
        db,
        actor_id=None,
        entity_type=EntityTypeV1.DELIVERY_AGENT,
        entity_id=agent.id,
        event_type=EventTypeV1.AGENT_VERIFIED,
        event_payload={"verified": status},
    )
    commit(db)
    return agent


def list_agents(db: Session) -> list[DeliveryAgent]:
    return db.query(DeliveryAgent).order_by(DeliveryAgent.created_at.asc()).all()
