"""Testimonials manager."""
from __future__ import annotations

from http import HTTPStatus

from flask import jsonify, request
from flask.typing import ResponseReturnValue

from coachsite.app.api.auth import admin_required
from coachsite.app.errors import ValidationError
from coachsite.app.models import Testimonial
from coachsite.extensions import db

from . import admin_bp
from .common import apply_changes


def _apply(testimonial: Testimonial, payload: dict) -> None:
    apply_changes(
        testimonial,
        payload,
        text_fields=("name", "title", "content", "image_url"),
        bool_fields=("is_published",),
        int_fields=("rating",),
    )
    if not testimonial.name or not testimonial.content:
        raise ValidationError("Name and content are required.")
    if testimonial.rating is None:
        testimonial.rating = 5
    if not 1 <= testimonial.rating <= 5:
        raise ValidationError("rating must be between 1 and 5.")


@admin_bp.get("/testimonials")
@admin_required
def list_testimonials() -> ResponseReturnValue:
    testimonials = Testimonial.query.order_by(Testimonial.created_at.desc()).all()
    return jsonify(testimonials=[item.to_dict() for item in testimonials]), HTTPStatus.OK


@admin_bp.post("/testimonials")
@admin_required
def create_testimonial() -> ResponseReturnValue:
    payload = request.get_json(silent=True) or {}
    testimonial = Testimonial(rating=5, is_published=True)
    try:
        _apply(testimonial, payload)
    except ValidationError as exc:
        return jsonify(message=str(exc)), HTTPStatus.BAD_REQUEST

    db.session.add(testimonial)
    db.session.commit()
    return jsonify(testimonial=testimonial.to_dict()), HTTPStatus.CREATED


@admin_bp.put("/testimonials/<int:testimonial_id>")
@admin_required
def update_testimonial(testimonial_id: int) -> ResponseReturnValue:
    testimonial = db.get_or_404(Testimonial, testimonial_id)
    try:
        _apply(testimonial, request.get_json(silent=True) or {})
    except ValidationError as exc:
        db.session.rollback()
        return jsonify(message=str(exc)), HTTPStatus.BAD_REQUEST

    db.session.commit()
    return jsonify(testimonial=testimonial.to_dict()), HTTPStatus.OK


@admin_bp.post("/testimonials/<int:testimonial_id>/toggle-published")
@admin_required
def toggle_testimonial(testimonial_id: int) -> ResponseReturnValue:
    """Flip the published flag and return the updated row."""

    testimonial = db.get_or_404(Testimonial, testimonial_id)
    testimonial.is_published = not testimonial.is_published
    db.session.commit()
    return jsonify(testimonial=testimonial.to_dict()), HTTPStatus.OK


@admin_bp.delete("/testimonials/<int:testimonial_id>")
@admin_required
def delete_testimonial(testimonial_id: int) -> ResponseReturnValue:
    testimonial = db.get_or_404(Testimonial, testimonial_id)
    db.session.delete(testimonial)
    db.session.commit()
    return jsonify(message="Testimonial deleted."), HTTPStatus.OK
