"""Contact message manager."""
from __future__ import annotations

from http import HTTPStatus

from flask import jsonify, request
from flask.typing import ResponseReturnValue

from coachsite.app.api.auth import admin_required
from coachsite.app.errors import ValidationError
from coachsite.app.models import CONTACT_STATUSES, ContactMessage
from coachsite.extensions import db

from . import admin_bp
from .common import status_counts, status_filter


@admin_bp.get("/contacts")
@admin_required
def list_contacts() -> ResponseReturnValue:
    try:
        status = status_filter(request.args.get("status"), CONTACT_STATUSES)
    except ValidationError as exc:
        return jsonify(message=str(exc)), HTTPStatus.BAD_REQUEST

    query = ContactMessage.query.order_by(ContactMessage.created_at.desc())
    if status:
        query = query.filter_by(status=status)

    return (
        jsonify(
            contacts=[message.to_dict() for message in query.all()],
            counts=status_counts(ContactMessage, CONTACT_STATUSES),
        ),
        HTTPStatus.OK,
    )


@admin_bp.get("/contacts/<int:contact_id>")
@admin_required
def get_contact(contact_id: int) -> ResponseReturnValue:
    """Return one message, marking it read the first time it is opened."""

    message = db.get_or_404(ContactMessage, contact_id)
    if message.status == "unread":
        message.status = "read"
        db.session.commit()
    return jsonify(contact=message.to_dict()), HTTPStatus.OK


@admin_bp.patch("/contacts/<int:contact_id>")
@admin_required
def update_contact(contact_id: int) -> ResponseReturnValue:
    """Advance a message's status; it never moves back towards ``unread``."""

    message = db.get_or_404(ContactMessage, contact_id)
    payload = request.get_json(silent=True) or {}
    status = (payload.get("status") or "").strip().lower()
    if status not in CONTACT_STATUSES:
        return (
            jsonify(message=f"status must be one of: {', '.join(CONTACT_STATUSES)}."),
            HTTPStatus.BAD_REQUEST,
        )

    if CONTACT_STATUSES.index(status) < CONTACT_STATUSES.index(message.status):
        return (
            jsonify(message=f"Cannot move a {message.status} message back to {status}."),
            HTTPStatus.CONFLICT,
        )

    message.status = status
    db.session.commit()
    return jsonify(contact=message.to_dict()), HTTPStatus.OK


@admin_bp.delete("/contacts/<int:contact_id>")
@admin_required
def delete_contact(contact_id: int) -> ResponseReturnValue:
    message = db.get_or_404(ContactMessage, contact_id)
    db.session.delete(message)
    db.session.commit()
    return jsonify(message="Message deleted."), HTTPStatus.OK
