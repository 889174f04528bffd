"""Blog post manager."""
from __future__ import annotations

from http import HTTPStatus

from flask import current_app, jsonify, request
from flask.typing import ResponseReturnValue
from sqlalchemy.exc import IntegrityError

from coachsite.app.api.auth import admin_required
from coachsite.app.errors import ValidationError
from coachsite.app.models import BlogPost
from coachsite.app.repositories.fixtures import AUTHOR
from coachsite.app.services.content import BLOG_CATEGORIES, generate_slug
from coachsite.extensions import db

from . import admin_bp
from .common import apply_changes

TEXT_FIELDS = ("title", "excerpt", "content", "category", "featured_image", "author", "read_time")
BOOL_FIELDS = ("is_featured", "is_published")


def _post_counts() -> dict[str, int]:
    return {
        "total": BlogPost.query.count(),
        "published": BlogPost.query.filter_by(is_published=True).count(),
        "featured": BlogPost.query.filter_by(is_featured=True).count(),
        "drafts": BlogPost.query.filter_by(is_published=False).count(),
    }


def _apply(post: BlogPost, payload: dict) -> None:
    apply_changes(post, payload, text_fields=TEXT_FIELDS, bool_fields=BOOL_FIELDS)
    if not post.title:
        raise ValidationError("Title is required.")
    if post.category and post.category not in BLOG_CATEGORIES:
        raise ValidationError(f"category must be one of: {', '.join(BLOG_CATEGORIES)}.")
    if "slug" in payload or not post.slug:
        post.slug = generate_slug((payload.get("slug") or "").strip() or post.title)
    if not post.slug:
        raise ValidationError("A slug could not be generated from the title.")
    post.read_time = post.read_time or "5 min read"


def _save(post: BlogPost, status: HTTPStatus) -> ResponseReturnValue:
    with db.session.no_autoflush:
        clash = BlogPost.query.filter(BlogPost.slug == post.slug, BlogPost.id != post.id).first()
    if clash is not None:
        db.session.rollback()
        return jsonify(message=f"A post with slug '{post.slug}' already exists."), HTTPStatus.CONFLICT

    db.session.add(post)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return jsonify(message="A post with this slug already exists."), HTTPStatus.CONFLICT
    return jsonify(post=post.to_dict()), status


@admin_bp.get("/posts")
@admin_required
def list_posts() -> ResponseReturnValue:
    posts = BlogPost.query.order_by(BlogPost.created_at.desc()).all()
    return jsonify(posts=[post.to_dict() for post in posts], counts=_post_counts()), HTTPStatus.OK


@admin_bp.post("/posts")
@admin_required
def create_post() -> ResponseReturnValue:
    """Create a post; the slug is derived from the title when left blank."""

    payload = request.get_json(silent=True) or {}
    post = BlogPost(author=AUTHOR, is_featured=False, is_published=False, views=0)
    try:
        with db.session.no_autoflush:
            _apply(post, payload)
    except ValidationError as exc:
        return jsonify(message=str(exc)), HTTPStatus.BAD_REQUEST
    return _save(post, HTTPStatus.CREATED)


@admin_bp.put("/posts/<int:post_id>")
@admin_required
def update_post(post_id: int) -> ResponseReturnValue:
    post = db.get_or_404(BlogPost, post_id)
    payload = request.get_json(silent=True) or {}
    try:
        with db.session.no_autoflush:
            _apply(post, payload)
    except ValidationError as exc:
        db.session.rollback()
        return jsonify(message=str(exc)), HTTPStatus.BAD_REQUEST
    return _save(post, HTTPStatus.OK)


@admin_bp.delete("/posts/<int:post_id>")
@admin_required
def delete_post(post_id: int) -> ResponseReturnValue:
    post = db.get_or_404(BlogPost, post_id)
    db.session.delete(post)
    db.session.commit()
    current_app.logger.info("Blog post %s deleted", post_id)
    return jsonify(message="Post deleted."), HTTPStatus.OK


@admin_bp.post("/posts/<int:post_id>/toggle-published")
@admin_required
def toggle_published(post_id: int) -> ResponseReturnValue:
    """Flip the published flag and return the updated row."""

    post = db.get_or_404(BlogPost, post_id)
    post.is_published = not post.is_published
    db.session.commit()
    return jsonify(post=post.to_dict()), HTTPStatus.OK


@admin_bp.post("/posts/<int:post_id>/toggle-featured")
@admin_required
def toggle_featured(post_id: int) -> ResponseReturnValue:
    """Flip the featured flag and return the updated row."""

    post = db.get_or_404(BlogPost, post_id)
    post.is_featured = not post.is_featured
    db.session.commit()
    return jsonify(post=post.to_dict()), HTTPStatus.OK
