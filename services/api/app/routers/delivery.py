from __future__ import annotations

from fastapi import APIRouter, Depends
from services.api.app.models.customer import ProfileEditRequest
from services.api.app.models.delivery import AgentOut, AgentSignupRequest, AgentStatusRequest
from services.api.app.routers.deps import get_db, get_principal
from services.api.app.routers.errors import raise_http_error
from services.api.app.services import agents, identity
from services.api.app.services.identity import Principal
from sqlalchemy.orm import Session

router = APIRouter()


@router.post("/v1/delivery/signup", response_model=AgentOut, status_code=201)
def signup(payload: AgentSignupRequest, db: Session = Depends(get_db)) -> AgentOut:
    try:
        agent = identity.signup_agent(db, **payload.model_dump())
    except Exception as e:
        raise_http_error(e)

    return AgentOut.model_validate(agent)


@router.get("/v1/delivery/profile", response_model=AgentOut)
def get_profile(
    principal: Principal = Depends(get_principal), db: Session = Depends(get_db)
) -> AgentOut:
    try:
        agent = identity.resolve_agent(db, principal)
    except Exception as e:
        raise_http_error(e)

    return AgentOut.model_validate(agent)


@router.patch("/v1/delivery/profile", response_model=AgentOut)
def edit_profile(
    payload: ProfileEditRequest,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
) -> AgentOut:
    try:
        agent = agents.edit_profile(
            db,
            principal,
            first_name=payload.first_name,
            last_name=payload.last_name,
            address=payload.address,
        )
    except Exception as e:
        raise_http_error(e)

    return AgentOut.model_validate(agent)


@router.put("/v1/delivery/change-status", response_model=AgentOut)
def change_status(
    payload: AgentStatusRequest,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
) -> AgentOut:
    try:
        agent = agents.toggle_availability(db, principal, lat=payload.lat, lng=payload.lng)
    except Exception as e:
        raise_http_error(e)

    return AgentOut.model_validate(agent)
