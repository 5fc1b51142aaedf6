"""Logging setup for applications embedding the client."""
from __future__ import annotations

import logging
from typing import Optional

from .config import ClientSettings


def configure_logging(level: Optional[str] = None, *, settings: Optional[ClientSettings] = None) -> str:
    """Configure the root handler and the ``sfu_ws`` level.

    ``level`` wins over ``settings.log_level``; the default is INFO. Returns the
    level name applied.
    """
    if level is None:
        level = settings.log_level if settings is not None else "INFO"
    level = level.upper()
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
    )
    logging.getLogger("sfu_ws").setLevel(level)
    return level
