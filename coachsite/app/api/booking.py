"""Public booking endpoints: service catalog, availability and the booking wizard."""
from __future__ import annotations

from datetime import date
from http import HTTPStatus
from typing import Any

from flask import Blueprint, current_app, jsonify, request
from flask.typing import ResponseReturnValue
from sqlalchemy.exc import SQLAlchemyError

from coachsite.app.catalog import SERVICES
from coachsite.app.errors import ConflictError, ValidationError
from coachsite.app.services.booking_service import booked_slots, create_booking
from coachsite.app.services.booking_wizard import (
    TIME_SLOTS,
    BookingWizard,
    ContactDetails,
    WizardStep,
    available_dates,
)
from coachsite.app.services.session_store import wizard_store
from coachsite.extensions import db

booking_bp = Blueprint("booking", __name__)


def _today() -> date:
    return date.today()


def _new_wizard() -> BookingWizard:
    return BookingWizard(
        today=_today(),
        window_days=int(current_app.config.get("BOOKING_WINDOW_DAYS", 14)),
        timezone=current_app.config.get("BOOKING_TIMEZONE", "EST"),
    )


def _wizard_payload(wizard_id: str, wizard: BookingWizard) -> dict[str, Any]:
    payload = wizard.to_dict()
    payload["wizard_id"] = wizard_id
    payload["step_name"] = wizard.step.name.lower()
    if wizard.step is WizardStep.DATE_TIME_SELECTION:
        payload["date_options"] = [option.to_dict() for option in wizard.date_options]
        payload["time_slots"] = list(TIME_SLOTS)
    if wizard.step is WizardStep.CONFIRMATION:
        payload["confirmation"] = wizard.confirmation()
    return payload


def _slot_order(label: str) -> tuple[int, str]:
    # Labels outside the current slot list sort last.
    try:
        return TIME_SLOTS.index(label), label
    except ValueError:
        return len(TIME_SLOTS), label


def _wizard_not_found() -> ResponseReturnValue:
    return (
        jsonify(message="Booking session not found or expired."),
        HTTPStatus.NOT_FOUND,
    )


@booking_bp.get("/services")
def list_services() -> ResponseReturnValue:
    """Return the coaching services that can be booked."""

    return jsonify(services=[service.to_dict() for service in SERVICES]), HTTPStatus.OK


@booking_bp.get("/availability")
def availability() -> ResponseReturnValue:
    """Return bookable dates, the daily time slots and slots already taken."""

    window = int(current_app.config.get("BOOKING_WINDOW_DAYS", 14))
    options = available_dates(_today(), window)
    taken = booked_slots(option.value for option in options)

    dates = []
    for option in options:
        entry = option.to_dict()
        entry["booked_slots"] = sorted(taken.get(option.value, []), key=_slot_order)
        dates.append(entry)

    return (
        jsonify(
            dates=dates,
            time_slots=list(TIME_SLOTS),
            timezone=current_app.config.get("BOOKING_TIMEZONE", "EST"),
        ),
        HTTPStatus.OK,
    )


@booking_bp.post("/wizard")
def start_wizard() -> ResponseReturnValue:
    """Open a booking wizard on the service selection step."""

    wizard = _new_wizard()
    wizard_id = wizard_store().create(wizard)
    return jsonify(_wizard_payload(wizard_id, wizard)), HTTPStatus.CREATED


@booking_bp.get("/wizard/<wizard_id>")
def get_wizard(wizard_id: str) -> ResponseReturnValue:
    wizard = wizard_store().load(wizard_id)
    if wizard is None:
        return _wizard_not_found()
    return jsonify(_wizard_payload(wizard_id, wizard)), HTTPStatus.OK


@booking_bp.post("/wizard/<wizard_id>/service")
def choose_service(wizard_id: str) -> ResponseReturnValue:
    """Record the chosen service and move on to date and time selection."""

    store = wizard_store()
    wizard = store.load(wizard_id)
    if wizard is None:
        return _wizard_not_found()

    payload = request.get_json(silent=True) or {}
    try:
        wizard.select_service((payload.get("service") or "").strip())
        wizard.advance()
    except ValidationError as exc:
        return jsonify(message=str(exc)), HTTPStatus.BAD_REQUEST

    store.save(wizard_id, wizard)
    return jsonify(_wizard_payload(wizard_id, wizard)), HTTPStatus.OK


@booking_bp.post("/wizard/<wizard_id>/datetime")
def choose_datetime(wizard_id: str) -> ResponseReturnValue:
    """Record the chosen date and time slot and move on to contact details."""

    store = wizard_store()
    wizard = store.load(wizard_id)
    if wizard is None:
        return _wizard_not_found()

    payload = request.get_json(silent=True) or {}
    try:
        wizard.select_date(payload.get("date"))
        wizard.select_time(payload.get("time") or "")
        wizard.advance()
    except ValidationError as exc:
        return jsonify(message=str(exc)), HTTPStatus.BAD_REQUEST

    store.save(wizard_id, wizard)
    return jsonify(_wizard_payload(wizard_id, wizard)), HTTPStatus.OK


@booking_bp.post("/wizard/<wizard_id>/contact")
def submit_contact(wizard_id: str) -> ResponseReturnValue:
    """Validate contact details and create the booking."""

    store = wizard_store()
    wizard = store.load(wizard_id)
    if wizard is None:
        return _wizard_not_found()

    contact = ContactDetails.from_mapping(request.get_json(silent=True) or {})
    status, booking = _submit(wizard, contact)
    store.save(wizard_id, wizard)
    if booking is None:
        return jsonify(message=wizard.error, wizard=_wizard_payload(wizard_id, wizard)), status

    return (
        jsonify(
            booking=booking.to_dict(),
            confirmation=wizard.confirmation(),
            wizard=_wizard_payload(wizard_id, wizard),
        ),
        HTTPStatus.CREATED,
    )


@booking_bp.post("/wizard/<wizard_id>/back")
def go_back(wizard_id: str) -> ResponseReturnValue:
    """Return to the previous step without losing the selections made."""

    store = wizard_store()
    wizard = store.load(wizard_id)
    if wizard is None:
        return _wizard_not_found()

    try:
        wizard.back()
    except ValidationError as exc:
        return jsonify(message=str(exc)), HTTPStatus.BAD_REQUEST

    store.save(wizard_id, wizard)
    return jsonify(_wizard_payload(wizard_id, wizard)), HTTPStatus.OK


@booking_bp.delete("/wizard/<wizard_id>")
def close_wizard(wizard_id: str) -> ResponseReturnValue:
    """Close the wizard, discarding everything entered so far."""

    store = wizard_store()
    wizard = store.load(wizard_id)
    if wizard is None:
        return _wizard_not_found()

    wizard.close()
    store.discard(wizard_id)
    return jsonify(message="Booking closed.", wizard=wizard.to_dict()), HTTPStatus.OK


@booking_bp.post("/bookings")
def book_consultation() -> ResponseReturnValue:
    """Create a booking in one request, applying every wizard guard in order."""

    payload = request.get_json(silent=True) or {}
    wizard = _new_wizard()
    try:
        wizard.select_service((payload.get("service") or payload.get("service_type") or "").strip())
        wizard.advance()
        wizard.select_date(payload.get("date") or payload.get("appointment_date"))
        wizard.select_time(payload.get("time") or payload.get("appointment_time") or "")
        wizard.advance()
    except ValidationError as exc:
        return jsonify(message=str(exc)), HTTPStatus.BAD_REQUEST

    status, booking = _submit(wizard, ContactDetails.from_mapping(payload))
    if booking is None:
        return jsonify(message=wizard.error), status

    return (
        jsonify(booking=booking.to_dict(), confirmation=wizard.confirmation()),
        HTTPStatus.CREATED,
    )


def _submit(wizard: BookingWizard, contact: ContactDetails):
    """Run the wizard's submit step, mapping failures onto HTTP statuses."""

    try:
        booking = wizard.submit(contact, create_booking)
    except ConflictError as exc:
        wizard.error = str(exc)
        return HTTPStatus.CONFLICT, None
    except ValidationError as exc:
        wizard.error = str(exc)
        return HTTPStatus.BAD_REQUEST, None
    except SQLAlchemyError as exc:
        wizard.error = str(getattr(exc, "orig", None) or exc)
        db.session.rollback()
        current_app.logger.exception("Error creating booking")
        return HTTPStatus.INTERNAL_SERVER_ERROR, None
    return HTTPStatus.CREATED, booking
