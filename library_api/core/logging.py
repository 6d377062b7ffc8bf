from __future__ import annotations

import logging

from library_api.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once; later calls only adjust the level."""
    lvl = (level or settings.log_level or "INFO").upper()
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=lvl, format=LOG_FORMAT)
    root.setLevel(lvl)

    # SQL echo is noisy at INFO; keep it behind DEBUG.
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if lvl == "DEBUG" else logging.WARNING
    )
