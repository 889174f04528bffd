"""Content repositories and the factory that picks one from configuration."""
from __future__ import annotations

from flask import current_app

from coachsite.app.repositories.base import ContentRepository, Record
from coachsite.app.repositories.database import DatabaseContentRepository
from coachsite.app.repositories.fallback import FallbackContentRepository
from coachsite.app.repositories.fixtures import FixtureContentRepository

__all__ = [
    "ContentRepository",
    "DatabaseContentRepository",
    "FallbackContentRepository",
    "FixtureContentRepository",
    "Record",
    "get_content_repository",
]


def get_content_repository() -> ContentRepository:
    """Return the repository selected by ``CONTENT_BACKEND``."""

    backend = (current_app.config.get("CONTENT_BACKEND") or "database").lower()
    if backend == "fixtures":
        return FixtureContentRepository()
    if backend == "database":
        return FallbackContentRepository(DatabaseContentRepository(), FixtureContentRepository())
    raise ValueError(f"Unknown CONTENT_BACKEND '{backend}'.")
