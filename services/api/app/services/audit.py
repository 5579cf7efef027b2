from __future__ import annotations

from packages.shared.schemas.events import EntityTypeV1, EventTypeV1
from services.api.app.db.models import EventLog
from services.api.app.services.documents import new_id
from sqlalchemy.orm import Session


def log_event(
    db: Session,
    *,
    actor_id: str | None,
    entity_type: EntityTypeV1,
    entity_id: str,
    event_type: EventTypeV1,
    event_payload: dict,
) -> None:
    """Stage an audit row; it is written by the caller's next commit."""
    db.add(
        EventLog(
            id=new_id(),
            actor_id=actor_id,
            entity_type=entity_type.value,
            entity_id=entity_id,
            event_type=event_type.value,
            event_payload_json=event_payload,
        )
    )


def list_events(
    db: Session,
    *,
    entity_id: str | None = None,
    event_type: str | None = None,
    limit: int = 200,
) -> list[EventLog]:
    query = db.query(EventLog)
    if entity_id:
        query = query.filter(EventLog.entity_id == entity_id)
    if event_type:
        query = query.filter(EventLog.event_type == event_type)
    return query.order_by(EventLog.created_at.desc()).limit(limit).all()
