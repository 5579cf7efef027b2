from __future__ import annotations

import structlog
from services.api.app.config import env_flag
from services.api.app.db.database import get_engine
from services.api.app.db.models import Base

logger = structlog.get_logger(__name__)


def init_db() -> None:
    if not env_flag("DAWA_DB_AUTO_CREATE", default=True):
        logger.info("Skipping table creation", reason="DAWA_DB_AUTO_CREATE disabled")
        return

    engine = get_engine()
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready", tables=sorted(Base.metadata.tables))
