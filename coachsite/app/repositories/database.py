"""Repository reading published content from the relational database."""
from __future__ import annotations

from coachsite.app.models import BlogPost, Resource, Testimonial
from coachsite.app.repositories.base import Record
from coachsite.extensions import db


class DatabaseContentRepository:
    """Published rows only, newest first."""

    def list_blog_posts(self, limit: int | None = None) -> list[Record]:
        query = BlogPost.query.filter_by(is_published=True).order_by(BlogPost.created_at.desc())
        if limit:
            query = query.limit(limit)
        return [post.to_dict() for post in query.all()]

    def get_blog_post(self, slug: str) -> Record | None:
        post = BlogPost.query.filter_by(slug=slug, is_published=True).first()
        return post.to_dict() if post else None

    def record_post_view(self, slug: str) -> None:
        BlogPost.query.filter_by(slug=slug).update(
            {BlogPost.views: BlogPost.views + 1}, synchronize_session=False
        )
        db.session.commit()

    def list_testimonials(self, limit: int | None = None) -> list[Record]:
        query = Testimonial.query.filter_by(is_published=True).order_by(
            Testimonial.created_at.desc()
        )
        if limit:
            query = query.limit(limit)
        return [testimonial.to_dict() for testimonial in query.all()]

    def list_resources(self) -> list[Record]:
        resources = Resource.query.order_by(Resource.created_at.desc()).all()
        return [resource.to_dict() for resource in resources]
