"""Process-wide logging configuration."""
from __future__ import annotations

import logging

from flask import Flask

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(app: Flask) -> None:
    """Route application and library logs through one stream handler."""

    level = logging.getLevelName(str(app.config.get("LOG_LEVEL", "INFO")).upper())
    if not isinstance(level, int):
        level = logging.INFO

    root = logging.getLogger()
    if not any(getattr(handler, "_coachsite", False) for handler in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._coachsite = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    root.setLevel(level)
    app.logger.setLevel(level)
