"""Database initialization script."""

from __future__ import annotations

import logging

from library_api.db.session import engine as default_engine
from library_api.models import Base
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)


def init_db(engine: Engine | None = None) -> None:
    """Create all tables that do not exist yet."""
    eng = engine or default_engine
    Base.metadata.create_all(bind=eng)
    logger.info("database tables ensured on %s", eng.url.render_as_string(hide_password=True))


if __name__ == "__main__":
    init_db()
