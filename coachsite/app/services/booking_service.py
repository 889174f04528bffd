"""Persistence helpers for bookings created by the booking wizard."""
from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from typing import Iterable

from flask import current_app

from coachsite.app.errors import ConflictError
from coachsite.app.models import Booking
from coachsite.app.services.booking_wizard import BookingRequest
from coachsite.extensions import db

LOGGER = logging.getLogger(__name__)


class SlotUnavailableError(ConflictError):
    """Raised when the requested date and time already hold a booking."""


def booked_slots(dates: Iterable[date]) -> dict[date, list[str]]:
    """Return the time labels already taken on each of ``dates``."""

    wanted = list(dates)
    if not wanted:
        return {}

    rows = (
        db.session.query(Booking.appointment_date, Booking.appointment_time)
        .filter(Booking.appointment_date.in_(wanted))
        .filter(Booking.status != "cancelled")
        .all()
    )
    taken: dict[date, list[str]] = defaultdict(list)
    for appointment_date, appointment_time in rows:
        taken[appointment_date].append(appointment_time)
    return dict(taken)


def _slot_is_taken(appointment_date: date, appointment_time: str) -> bool:
    return (
        Booking.query.filter_by(
            appointment_date=appointment_date, appointment_time=appointment_time
        )
        .filter(Booking.status != "cancelled")
        .first()
        is not None
    )


def create_booking(request: BookingRequest) -> Booking:
    """Insert a pending booking for ``request``.

    A slot already held by a non-cancelled booking is rejected when
    ``BOOKING_PREVENT_DOUBLE_BOOKING`` is set and only logged otherwise.
    """

    if _slot_is_taken(request.appointment_date, request.appointment_time):
        if current_app.config.get("BOOKING_PREVENT_DOUBLE_BOOKING", True):
            raise SlotUnavailableError(
                f"{request.appointment_time} on {request.appointment_date.isoformat()} "
                "is already booked."
            )
        LOGGER.warning(
            "Double booking accepted for %s at %s",
            request.appointment_date.isoformat(),
            request.appointment_time,
        )

    contact = request.contact
    booking = Booking(
        service_type=request.service_type,
        service_name=request.service_name,
        appointment_date=request.appointment_date,
        appointment_time=request.appointment_time,
        first_name=contact.first_name,
        last_name=contact.last_name,
        email=contact.email,
        phone=contact.phone or None,
        company=contact.company or None,
        message=contact.message or None,
        timezone=request.timezone,
        status="pending",
    )
    db.session.add(booking)
    db.session.commit()
    LOGGER.info("Booking %s created for %s", booking.id, request.service_type)
    return booking
