from __future__ import annotations

import os
from pathlib import Path

from services.api.app.config import env_flag
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

_ENGINE: Engine | None = None
_ENGINE_URL: str | None = None
_SESSIONMAKER: sessionmaker | None = None

_SQLITE_PREFIX = "sqlite+pysqlite:///"


def _default_db_url() -> str:
    # Local-only default. Production must provide DATABASE_URL explicitly.
    return f"{_SQLITE_PREFIX}.local/dawa.db"


def _ensure_sqlite_parent(url: str) -> None:
    if not url.startswith(_SQLITE_PREFIX):
        return
    path = url[len(_SQLITE_PREFIX) :]
    if path and path != ":memory:":
        Path(path).parent.mkdir(parents=True, exist_ok=True)


def get_engine() -> Engine:
    """Return a cached SQLAlchemy engine.

    The cache is keyed on DATABASE_URL so tests can point each case at its own file.
    """

    global _ENGINE, _ENGINE_URL, _SESSIONMAKER

    url = os.getenv("DATABASE_URL", _default_db_url())

    if _ENGINE is not None and _ENGINE_URL == url:
        return _ENGINE

    _ensure_sqlite_parent(url)
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    _ENGINE = create_engine(
        url,
        future=True,
        echo=env_flag("DAWA_DB_ECHO", default=False),
        connect_args=connect_args,
    )
    _ENGINE_URL = url
    # expire_on_commit=False keeps documents readable after each per-step commit.
    _SESSIONMAKER = sessionmaker(
        bind=_ENGINE,
        class_=Session,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    return _ENGINE


def db_session() -> Session:
    get_engine()  # ensure _SESSIONMAKER is created
    assert _SESSIONMAKER is not None
    return _SESSIONMAKER()
