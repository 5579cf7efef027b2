"""Single-document persistence.

Every save is its own commit. Versioned documents (customer, transaction, order) are
written with a compare-and-set on their version column, so a stale copy fails instead
of overwriting a newer one. Nothing here spans several documents.
"""

from __future__ import annotations

from uuid import uuid4

import structlog
from services.api.app.services.errors import ConflictError, UpstreamFailure
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

logger = structlog.get_logger(__name__)


def new_id() -> str:
    return uuid4().hex


def commit(db: Session) -> None:
    try:
        db.commit()
    except StaleDataError as e:
        db.rollback()
        logger.warning("Rejected stale document write", error=str(e))
        raise ConflictError("Document was modified concurrently; reload and retry") from e
    except IntegrityError as e:
        db.rollback()
        raise ConflictError(str(e.orig)) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Document store write failed", error=str(e))
        raise UpstreamFailure(str(e)) from e


def save(db: Session, document: object) -> None:
    db.add(document)
    commit(db)
