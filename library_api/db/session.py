from __future__ import annotations

from typing import Any, Generator

from library_api.core.config import settings
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker


def _engine_kwargs(url: str, timeout: float) -> dict[str, Any]:
    if url.startswith("sqlite"):
        # Busy timeout for the single-file database; one connection may be shared across threads.
        return {"connect_args": {"check_same_thread": False, "timeout": timeout}}
    return {"pool_pre_ping": True, "pool_timeout": timeout}


def build_engine(url: str | None = None) -> Engine:
    url = url or settings.database_url
    return create_engine(url, **_engine_kwargs(url, settings.database_timeout_secs))


engine = build_engine()

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
