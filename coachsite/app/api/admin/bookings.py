"""Bookings manager."""
from __future__ import annotations

from http import HTTPStatus

from flask import current_app, jsonify, request
from flask.typing import ResponseReturnValue

from coachsite.app.api.auth import admin_required
from coachsite.app.errors import ValidationError
from coachsite.app.models import BOOKING_STATUSES, Booking
from coachsite.extensions import db

from . import admin_bp
from .common import status_counts, status_filter


@admin_bp.get("/bookings")
@admin_required
def list_bookings() -> ResponseReturnValue:
    """List bookings newest first, optionally filtered by ``?status=``."""

    try:
        status = status_filter(request.args.get("status"), BOOKING_STATUSES)
    except ValidationError as exc:
        return jsonify(message=str(exc)), HTTPStatus.BAD_REQUEST

    query = Booking.query.order_by(Booking.created_at.desc())
    if status:
        query = query.filter_by(status=status)

    return (
        jsonify(
            bookings=[booking.to_dict() for booking in query.all()],
            counts=status_counts(Booking, BOOKING_STATUSES),
        ),
        HTTPStatus.OK,
    )


@admin_bp.get("/bookings/<int:booking_id>")
@admin_required
def get_booking(booking_id: int) -> ResponseReturnValue:
    booking = db.get_or_404(Booking, booking_id)
    return jsonify(booking=booking.to_dict()), HTTPStatus.OK


@admin_bp.patch("/bookings/<int:booking_id>")
@admin_required
def update_booking(booking_id: int) -> ResponseReturnValue:
    """Set a booking's status to any of the four allowed values."""

    booking = db.get_or_404(Booking, booking_id)
    payload = request.get_json(silent=True) or {}
    status = (payload.get("status") or "").strip().lower()
    if status not in BOOKING_STATUSES:
        return (
            jsonify(message=f"status must be one of: {', '.join(BOOKING_STATUSES)}."),
            HTTPStatus.BAD_REQUEST,
        )

    booking.status = status
    db.session.commit()
    current_app.logger.info("Booking %s marked %s", booking.id, status)
    return jsonify(booking=booking.to_dict()), HTTPStatus.OK


@admin_bp.delete("/bookings/<int:booking_id>")
@admin_required
def delete_booking(booking_id: int) -> ResponseReturnValue:
    booking = db.get_or_404(Booking, booking_id)
    db.session.delete(booking)
    db.session.commit()
    return jsonify(message="Booking deleted."), HTTPStatus.OK
