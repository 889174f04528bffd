"""Repository that falls back to the demo dataset when live reads fail."""
from __future__ import annotations

import logging
from typing import Callable, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from coachsite.app.repositories.base import ContentRepository, Record
from coachsite.extensions import db

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class FallbackContentRepository:
    """Read from ``primary``; use ``fallback`` on database errors or empty lists."""

    def __init__(self, primary: ContentRepository, fallback: ContentRepository) -> None:
        self.primary = primary
        self.fallback = fallback

    def _attempt(self, label: str, read: Callable[[ContentRepository], T]) -> tuple[T | None, bool]:
        try:
            return read(self.primary), True
        except SQLAlchemyError:
            db.session.rollback()
            LOGGER.exception("Error fetching %s; serving demo data", label)
            return None, False

    def _list(self, label: str, read: Callable[[ContentRepository], list[Record]]) -> list[Record]:
        records, ok = self._attempt(label, read)
        if ok and records:
            return records
        if ok:
            LOGGER.info("No %s found; serving demo data", label)
        return read(self.fallback)

    def list_blog_posts(self, limit: int | None = None) -> list[Record]:
        return self._list("blog posts", lambda repo: repo.list_blog_posts(limit))

    def get_blog_post(self, slug: str) -> Record | None:
        post, ok = self._attempt("blog post", lambda repo: repo.get_blog_post(slug))
        if post is not None:
            return post
        # A slug from the demo list only resolves when the live list is unusable too.
        if not ok or not self._primary_has_posts():
            return self.fallback.get_blog_post(slug)
        return None

    def _primary_has_posts(self) -> bool:
        posts, ok = self._attempt("blog posts", lambda repo: repo.list_blog_posts(1))
        return bool(ok and posts)

    def record_post_view(self, slug: str) -> None:
        try:
            self.primary.record_post_view(slug)
        except SQLAlchemyError:
            db.session.rollback()
            LOGGER.exception("Could not record a view for %s", slug)

    def list_testimonials(self, limit: int | None = None) -> list[Record]:
        return self._list("testimonials", lambda repo: repo.list_testimonials(limit))

    def list_resources(self) -> list[Record]:
        return self._list("resources", lambda repo: repo.list_resources())
