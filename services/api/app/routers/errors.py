from __future__ import annotations

import structlog
from fastapi import HTTPException
from services.api.app.services.errors import (
    ConflictError,
    DuplicateAccountError,
    NotFound,
    OfferInactive,
    PaymentNotConfirmed,
    Unauthorized,
    UpstreamFailure,
    ValidationError,
)

logger = structlog.get_logger(__name__)


def raise_http_error(e: Exception) -> None:
    if isinstance(e, ValidationError):
        detail = {"message": str(e), "fields": e.fields} if e.fields else str(e)
        raise HTTPException(status_code=400, detail=detail) from e

    if isinstance(e, Unauthorized):
        raise HTTPException(status_code=401, detail=str(e)) from e

    if isinstance(e, (NotFound, OfferInactive, PaymentNotConfirmed)):
        raise HTTPException(status_code=404, detail=str(e)) from e

    if isinstance(e, DuplicateAccountError):
        raise HTTPException(status_code=400, detail=str(e)) from e

    if isinstance(e, ConflictError):
        raise HTTPException(status_code=409, detail=str(e)) from e

    if isinstance(e, UpstreamFailure):
        raise HTTPException(status_code=502, detail=str(e)) from e

    logger.error("Unhandled error in request", error=repr(e))
    raise HTTPException(status_code=500, detail="Internal Server Error") from e
