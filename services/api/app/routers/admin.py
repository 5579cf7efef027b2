from __future__ import annotations

from fastapi import APIRouter, Depends
from packages.shared.schemas.events import EntityTypeV1, EventTypeV1, EventV1
from services.api.app.models.catalog import VendorCreateRequest, VendorCreateResponse, VendorOut
from services.api.app.models.delivery import AgentOut, AgentVerifyRequest
from services.api.app.models.payment import TransactionOut
from services.api.app.routers.deps import get_db
from services.api.app.routers.errors import raise_http_error
from services.api.app.services import agents, catalog, ledger
from services.api.app.services.audit import list_events
from services.api.app.services.errors import NotFound
from sqlalchemy.orm import Session

router = APIRouter()


@router.post("/v1/admin/vendor", response_model=VendorCreateResponse, status_code=201)
def create_vendor(payload: VendorCreateRequest, db: Session = Depends(get_db)) -> VendorCreateResponse:
    try:
        vendor = catalog.create_vendor(db, **payload.model_dump())
    except Exception as e:
        raise_http_error(e)

    return VendorCreateResponse(vendor=vendor.id)


@router.get("/v1/admin/vendors", response_model=list[VendorOut])
def get_vendors(db: Session = Depends(get_db)) -> list[VendorOut]:
    return [VendorOut.model_validate(v) for v in catalog.list_vendors(db)]


@router.get("/v1/admin/vendor/{vendor_id}", response_model=VendorOut)
def get_vendor(vendor_id: str, db: Session = Depends(get_db)) -> VendorOut:
    try:
        vendor = catalog.find_vendor(db, vendor_id)
        if vendor is None:
            raise NotFound("Vendor", vendor_id)
    except Exception as e:
        raise_http_error(e)

    return VendorOut.model_validate(vendor)


@router.get("/v1/admin/transactions", response_model=list[TransactionOut])
def get_transactions(limit: int = 200, db: Session = Depends(get_db)) -> list[TransactionOut]:
    return [TransactionOut.model_validate(t) for t in ledger.list_transactions(db, limit=limit)]


@router.get("/v1/admin/transaction/{transaction_id}", response_model=TransactionOut)
def get_transaction(transaction_id: str, db: Session = Depends(get_db)) -> TransactionOut:
    try:
        transaction = ledger.get_transaction(db, transaction_id)
    except Exception as e:
        raise_http_error(e)

    return TransactionOut.model_validate(transaction)


@router.put("/v1/admin/transaction/{transaction_id}/fail", response_model=TransactionOut)
def fail_transaction(transaction_id: str, db: Session = Depends(get_db)) -> TransactionOut:
    try:
        transaction = ledger.mark_failed(db, transaction_id)
    except Exception as e:
        raise_http_error(e)

    return TransactionOut.model_validate(transaction)


@router.put("/v1/admin/delivery/verify", response_model=AgentOut)
def verify_delivery_user(payload: AgentVerifyRequest, db: Session = Depends(get_db)) -> AgentOut:
    try:
        agent = agents.verify_agent(db, payload.id, payload.status)
    except Exception as e:
        raise_http_error(e)

    return AgentOut.model_validate(agent)


@router.get("/v1/admin/delivery/users", response_model=list[AgentOut])
def get_delivery_users(db: Session = Depends(get_db)) -> list[AgentOut]:
    return [AgentOut.model_validate(a) for a in agents.list_agents(db)]


@router.get("/v1/admin/events", response_model=list[EventV1])
def get_events(
    entity_id: str | None = None,
    event_type: str | None = None,
    limit: int = 200,
    db: Session = Depends(get_db),
) -> list[EventV1]:
    rows = list_events(db, entity_id=entity_id, event_type=event_type, limit=limit)

    return [
        EventV1(
            id=r.id,
            actor_id=r.actor_id,
            entity_type=EntityTypeV1(r.entity_type),
            entity_id=r.entity_id,
            event_type=EventTypeV1(r.event_type),
            payload=r.event_payload_json or {},
            created_at=r.created_at.isoformat(),
        )
        for r in rows
    ]
