"""Logging setup for applications embedding ormwrap."""


import logging
import sys

from ormwrap.core.config import settings


def configure_logging(level: str | int | None = None) -> None:
    """Set up structured logging; DEBUG in development unless a level is given."""
    if level is None:
        level = logging.DEBUG if settings.is_development else settings.log_level
    if isinstance(level, str):
        level = level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,
    )
    # Quiet noisy libraries
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)
