"""Endpoints backing the public marketing site."""
from __future__ import annotations

from http import HTTPStatus
from urllib.parse import quote

from flask import Blueprint, current_app, jsonify, request
from flask.typing import ResponseReturnValue
from sqlalchemy.exc import IntegrityError

from coachsite.app.errors import ValidationError
from coachsite.app.models import ContactMessage, NewsletterSubscriber
from coachsite.app.repositories import get_content_repository
from coachsite.app.services.content import (
    category_counts,
    filter_posts,
    render_post_content,
)
from coachsite.app.services.seo import page_head
from coachsite.app.services.session_store import Bookmark, bookmark_store
from coachsite.app.services.settings_service import SocialSettings, public_settings
from coachsite.app.validation import normalize_email, require_fields
from coachsite.extensions import db

public_bp = Blueprint("public", __name__)

TESTIMONIAL_LIMIT = 4
FEATURED_LIMIT = 2
WHATSAPP_MESSAGE = (
    "Hello Lillian! I'm interested in starting my transformation journey. "
    "I'd love to learn more about your coaching services."
)


@public_bp.get("/settings")
def site_settings() -> ResponseReturnValue:
    return jsonify(public_settings()), HTTPStatus.OK


@public_bp.get("/head")
def head_tags() -> ResponseReturnValue:
    """Return the SEO head tags for ``?page=`` (the home page by default)."""

    return jsonify(page_head(request.args.get("page"))), HTTPStatus.OK


@public_bp.get("/posts")
def list_posts() -> ResponseReturnValue:
    """List published posts with category filter, search and sort order."""

    posts = get_content_repository().list_blog_posts()
    try:
        selected = filter_posts(
            posts,
            category=request.args.get("category"),
            search=request.args.get("search"),
            sort=request.args.get("sort", "newest"),
        )
    except ValueError as exc:
        return jsonify(message=str(exc)), HTTPStatus.BAD_REQUEST

    limit = request.args.get("limit", type=int)
    if limit:
        selected = selected[:limit]

    featured = [post for post in posts if post.get("is_featured")][:FEATURED_LIMIT]
    return (
        jsonify(
            posts=selected,
            featured=featured,
            categories=category_counts(posts),
            total=len(selected),
        ),
        HTTPStatus.OK,
    )


@public_bp.get("/posts/<slug>")
def get_post(slug: str) -> ResponseReturnValue:
    """Return one post with rendered HTML and count the view."""

    repository = get_content_repository()
    post = repository.get_blog_post(slug)
    if post is None:
        return jsonify(message="Post not found."), HTTPStatus.NOT_FOUND

    repository.record_post_view(slug)
    post["content_html"] = str(render_post_content(post.get("content")))
    return jsonify(post), HTTPStatus.OK


@public_bp.get("/testimonials")
def list_testimonials() -> ResponseReturnValue:
    testimonials = get_content_repository().list_testimonials(limit=TESTIMONIAL_LIMIT)
    return jsonify(testimonials=testimonials), HTTPStatus.OK


@public_bp.get("/resources")
def list_resources() -> ResponseReturnValue:
    resources = get_content_repository().list_resources()
    category = request.args.get("category")
    if category and category != "all":
        resources = [item for item in resources if item.get("category") == category]
    return jsonify(resources=resources), HTTPStatus.OK


@public_bp.post("/contact")
def send_contact_message() -> ResponseReturnValue:
    """Store a message from the contact form."""

    payload = request.get_json(silent=True) or {}
    try:
        fields = require_fields(payload, ("name", "email", "message"))
        email = normalize_email(fields["email"])
    except ValidationError as exc:
        return jsonify(message=str(exc)), HTTPStatus.BAD_REQUEST

    contact = ContactMessage(
        name=fields["name"],
        email=email,
        company=(payload.get("company") or "").strip() or None,
        service=(payload.get("service") or "").strip() or None,
        message=fields["message"],
        status="unread",
    )
    db.session.add(contact)
    db.session.commit()
    current_app.logger.info("Contact message %s received", contact.id)

    return (
        jsonify(
            message="Thank you for your message! We'll get back to you soon.",
            contact=contact.to_dict(),
        ),
        HTTPStatus.CREATED,
    )


@public_bp.post("/newsletter")
def subscribe() -> ResponseReturnValue:
    """Add an email address to the newsletter list."""

    payload = request.get_json(silent=True) or {}
    try:
        email = normalize_email(payload.get("email")).lower()
    except ValidationError as exc:
        return jsonify(message=str(exc)), HTTPStatus.BAD_REQUEST

    already = jsonify(message="This email is already subscribed."), HTTPStatus.CONFLICT
    if NewsletterSubscriber.query.filter_by(email=email).first():
        return already

    subscriber = NewsletterSubscriber(
        email=email,
        source=(payload.get("source") or "website").strip() or "website",
        status="active",
    )
    db.session.add(subscriber)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return already

    return (
        jsonify(message="Successfully subscribed!", subscriber=subscriber.to_dict()),
        HTTPStatus.CREATED,
    )


@public_bp.get("/links")
def contact_links() -> ResponseReturnValue:
    """Return the WhatsApp deep link and the social profile URLs."""

    number = current_app.config.get("WHATSAPP_NUMBER", "")
    text = request.args.get("message") or WHATSAPP_MESSAGE
    social = SocialSettings.load_or_default().to_mapping()
    return (
        jsonify(
            whatsapp=f"https://wa.me/{number}?text={quote(text)}",
            social={key.removeprefix("social_"): url for key, url in social.items() if url},
        ),
        HTTPStatus.OK,
    )


def _visitor_id() -> str:
    visitor_id = (request.headers.get("X-Visitor-Id") or "").strip()
    if not visitor_id:
        raise ValidationError("X-Visitor-Id header is required.")
    return visitor_id


@public_bp.get("/bookmarks")
def list_bookmarks() -> ResponseReturnValue:
    try:
        visitor_id = _visitor_id()
    except ValidationError as exc:
        return jsonify(message=str(exc)), HTTPStatus.BAD_REQUEST

    bookmarks = bookmark_store().entries(visitor_id)
    return jsonify(bookmarks=[_bookmark_dict(item) for item in bookmarks]), HTTPStatus.OK


@public_bp.post("/bookmarks")
def add_bookmark() -> ResponseReturnValue:
    """Bookmark a post for the visitor; repeating the call is harmless."""

    payload = request.get_json(silent=True) or {}
    try:
        visitor_id = _visitor_id()
        if payload.get("id") in (None, ""):
            raise ValidationError("Bookmark id is required.")
        title = require_fields(payload, ("title",))["title"]
    except ValidationError as exc:
        return jsonify(message=str(exc)), HTTPStatus.BAD_REQUEST

    bookmark = Bookmark(id=payload["id"], title=title, slug=payload.get("slug") or None)
    store = bookmark_store()
    added = store.add(visitor_id, bookmark)
    bookmarks = [_bookmark_dict(item) for item in store.entries(visitor_id)]
    if not added:
        return jsonify(already_bookmarked=True, bookmarks=bookmarks), HTTPStatus.OK
    return jsonify(already_bookmarked=False, bookmarks=bookmarks), HTTPStatus.CREATED


@public_bp.delete("/bookmarks/<bookmark_id>")
def remove_bookmark(bookmark_id: str) -> ResponseReturnValue:
    try:
        visitor_id = _visitor_id()
    except ValidationError as exc:
        return jsonify(message=str(exc)), HTTPStatus.BAD_REQUEST

    if not bookmark_store().remove(visitor_id, bookmark_id):
        return jsonify(message="Bookmark not found."), HTTPStatus.NOT_FOUND
    return jsonify(message="Bookmark removed."), HTTPStatus.OK


def _bookmark_dict(bookmark: Bookmark) -> dict:
    return {"id": bookmark.id, "title": bookmark.title, "slug": bookmark.slug}
