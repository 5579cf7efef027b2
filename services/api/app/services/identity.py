"""Identity collaborator.

Credentials are hashed explicitly before a document is persisted. Token issuance lives
in the gateway in front of this service; requests arrive with an already authenticated
principal.
"""

from __future__ import annotations

import hashlib
import secrets
from dataclasses import dataclass

import structlog
from packages.shared.schemas.events import EntityTypeV1, EventTypeV1
from services.api.app.db.models import Customer, DeliveryAgent
from services.api.app.services.audit import log_event
from services.api.app.services.documents import commit, new_id
from services.api.app.services.errors import DuplicateAccountError, Unauthorized
from sqlalchemy.orm import Session

logger = structlog.get_logger(__name__)

_PBKDF2_ITERATIONS = 240_000


@dataclass(frozen=True, slots=True)
class Principal:
    id: str
    email: str = ""
    verified: bool = False


def hash_password(password: str) -> str:
    salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), bytes.fromhex(salt), _PBKDF2_ITERATIONS)
    return f"pbkdf2_sha256${_PBKDF2_ITERATIONS}${salt}${digest.hex()}"


def signup_customer(db: Session, *, email: str, phone: str, password: str) -> Customer:
    if db.query(Customer).filter(Customer.email == email).first() is not None:
        raise DuplicateAccountError("Customer", email)

    customer = Customer(
        id=new_id(),
        email=email,
        password_hash=hash_password(password),
        phone=phone,
        cart=[],
        orders=[],
    )
    db.add(customer)
    log_event(
        db,
        actor_id=customer.id,
        entity_type=EntityTypeV1.CUSTOMER,
        entity_id=customer.id,
        event_type=EventTypeV1.CUSTOMER_SIGNED_UP,
        event_payload={"email": email},
    )
    commit(db)

    logger.info("Customer signed up", customer_id=customer.id)
    return customer


def resolve_customer(db: Session, principal: Principal) -> Customer:
    customer = db.get(Customer, principal.id)
    if customer is None:
        raise Unauthorized("User Not Authorised")
    return customer


def edit_customer_profile(
    db: Session,
    principal: Principal,
    *,
    first_name: str,
    last_name: str,
    address: str,
) -> Customer:
    customer = resolve_customer(db, principal)
    customer.first_name = first_name
    customer.last_name = last_name
    customer.address = address
    commit(db)
    return customer


def signup_agent(
    db: Session,
    *,
    email: str,
    phone: str,
    password: str,
    first_name: str,
    last_name: str,
    address: str,
    pincode: str,
) -> DeliveryAgent:
    if db.query(DeliveryAgent).filter(DeliveryAgent.email == email).first() is not None:
        raise DuplicateAccountError("Delivery user", email)

    agent = DeliveryAgent(
        id=new_id(),
        email=email,
        password_hash=hash_password(password),
        phone=phone,
        first_name=first_name,
        last_name=last_name,
        address=address,
        pincode=pincode,
        verified=False,
        is_available=False,
    )
    db.add(agent)
    log_event(
        db,
        actor_id=agent.id,
        entity_type=EntityTypeV1.DELIVERY_AGENT,
        entity_id=agent.id,
        event_type=EventTypeV1.AGENT_SIGNED_UP,
        event_payload={"email": email, "pincode": pincode},
    )
    commit(db)

    logger.info("Delivery agent signed up", agent_id=agent.id, pincode=pincode)
    return agent


def resolve_agent(db: Session, principal: Principal) -> DeliveryAgent:
    agent = db.get(DeliveryAgent, principal.id)
    if agent is None:
        raise Unauthorized("User Not Authorised to Access Delivery User Profile")
    return agent
