"""Read interface shared by the public content repositories."""
from __future__ import annotations

from typing import Any, Protocol

Record = dict[str, Any]


class ContentRepository(Protocol):
    """Source of the published content shown on the public site."""

    def list_blog_posts(self, limit: int | None = None) -> list[Record]: ...

    def get_blog_post(self, slug: str) -> Record | None: ...

    def record_post_view(self, slug: str) -> None: ...

    def list_testimonials(self, limit: int | None = None) -> list[Record]: ...

    def list_resources(self) -> list[Record]: ...
