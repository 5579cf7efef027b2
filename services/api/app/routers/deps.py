from __future__ import annotations

from collections.abc import Generator

from fastapi import Header
from services.api.app.db.database import db_session
from services.api.app.routers.errors import raise_http_error
from services.api.app.services.errors import Unauthorized
from services.api.app.services.identity import Principal
from sqlalchemy.orm import Session


def get_db() -> Generator[Session, None, None]:
    db = db_session()
    try:
        yield db
    finally:
        db.close()


def get_principal(
    x_principal_id: str | None = Header(default=None),
    x_principal_email: str | None = Header(default=None),
    x_principal_verified: str | None = Header(default=None),
) -> Principal:
    """Principal authenticated by the gateway.

    The gateway verifies the bearer token and forwards the claims as headers; they are
    trusted as-is here.
    """

    principal_id = (x_principal_id or "").strip()
    if not principal_id:
        raise_http_error(Unauthorized("User not Authorized"))

    return Principal(
        id=principal_id,
        email=(x_principal_email or "").strip(),
        verified=(x_principal_verified or "").strip().lower() in {"1", "true", "yes"},
    )
