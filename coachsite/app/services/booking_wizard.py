"""Linear four-step state machine behind the consultation booking modal.

The wizard moves strictly forward::

    SERVICE_SELECTION -> DATE_TIME_SELECTION -> CONTACT_DETAILS -> CONFIRMATION

Each edge is guarded: a known service must be chosen before leaving step one,
both a date and a time slot before leaving step two, and valid contact
details plus a successful create call before reaching the confirmation.
``CONFIRMATION`` is terminal; :meth:`BookingWizard.close` discards everything
and returns to the first step.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import IntEnum
from typing import Any, Callable

from coachsite.app.catalog import get_service, service_name
from coachsite.app.errors import ValidationError
from coachsite.app.validation import normalize_email

LOGGER = logging.getLogger(__name__)

TIME_SLOTS: tuple[str, ...] = (
    "9:00 AM",
    "9:30 AM",
    "10:00 AM",
    "10:30 AM",
    "11:00 AM",
    "11:30 AM",
    "1:00 PM",
    "1:30 PM",
    "2:00 PM",
    "2:30 PM",
    "3:00 PM",
    "3:30 PM",
    "4:00 PM",
    "4:30 PM",
)

SATURDAY = 5
SUNDAY = 6


class WizardStep(IntEnum):
    SERVICE_SELECTION = 1
    DATE_TIME_SELECTION = 2
    CONTACT_DETAILS = 3
    CONFIRMATION = 4


class WizardError(ValidationError):
    """Raised when a wizard action is not allowed from the current state."""


@dataclass(frozen=True, slots=True)
class DateOption:
    value: date
    label: str

    def to_dict(self) -> dict[str, str]:
        return {"value": self.value.isoformat(), "label": self.label}


def short_date_label(value: date) -> str:
    """Return a label such as ``Tue, Oct 20``."""

    return f"{value:%a, %b} {value.day}"


def long_date_label(value: date) -> str:
    """Return a label such as ``Tuesday, October 20, 2026``."""

    return f"{value:%A, %B} {value.day}, {value.year}"


def available_dates(today: date, window_days: int = 14) -> list[DateOption]:
    """Return the bookable weekdays in the ``window_days`` following ``today``."""

    options: list[DateOption] = []
    for offset in range(1, window_days + 1):
        candidate = today + timedelta(days=offset)
        if candidate.weekday() in (SATURDAY, SUNDAY):
            continue
        options.append(DateOption(value=candidate, label=short_date_label(candidate)))
    return options


def _parse_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    text = (value or "").strip() if isinstance(value, str) else ""
    if not text:
        raise WizardError("A date must be selected.")
    try:
        return date.fromisoformat(text)
    except ValueError as exc:
        raise WizardError("Dates must use YYYY-MM-DD format.") from exc


@dataclass
class ContactDetails:
    """Details collected on the third step of the wizard."""

    first_name: str
    last_name: str
    email: str
    phone: str = ""
    company: str = ""
    message: str = ""

    @classmethod
    def from_mapping(cls, payload: dict[str, Any]) -> "ContactDetails":
        """Build contact details from form data, accepting a single ``name`` field."""

        first_name = (payload.get("first_name") or "").strip()
        last_name = (payload.get("last_name") or "").strip()
        if not first_name and not last_name:
            parts = (payload.get("name") or "").strip().split(None, 1)
            if parts:
                first_name = parts[0]
                last_name = parts[1] if len(parts) > 1 else ""
        return cls(
            first_name=first_name,
            last_name=last_name,
            email=(payload.get("email") or "").strip(),
            phone=(payload.get("phone") or "").strip(),
            company=(payload.get("company") or "").strip(),
            message=(payload.get("message") or "").strip(),
        )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def validate(self) -> None:
        """Raise :class:`WizardError` unless a name and a valid email are present."""

        if not self.full_name:
            raise WizardError("Name is required.")
        try:
            self.email = normalize_email(self.email)
        except ValidationError as exc:
            raise WizardError(str(exc)) from exc

    def to_dict(self) -> dict[str, str]:
        return {
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "company": self.company,
            "message": self.message,
        }


@dataclass(frozen=True, slots=True)
class BookingRequest:
    """Everything needed to create a booking row."""

    service_type: str
    service_name: str
    appointment_date: date
    appointment_time: str
    contact: ContactDetails
    timezone: str


CreateBooking = Callable[[BookingRequest], Any]


@dataclass
class BookingWizard:
    """State for one open booking modal."""

    today: date
    window_days: int = 14
    timezone: str = "EST"
    step: WizardStep = WizardStep.SERVICE_SELECTION
    service: str | None = None
    selected_date: date | None = None
    selected_time: str | None = None
    contact: ContactDetails | None = None
    error: str | None = None
    booking_id: int | None = None
    _dates: list[DateOption] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        self.step = WizardStep(self.step)
        self._dates = available_dates(self.today, self.window_days)

    # ------------------------------------------------------------------
    # Step one
    # ------------------------------------------------------------------
    def select_service(self, service_id: str) -> None:
        self._require_step(WizardStep.SERVICE_SELECTION)
        if get_service(service_id) is None:
            raise WizardError(f"Unknown service '{service_id}'.")
        self.service = service_id

    # ------------------------------------------------------------------
    # Step two
    # ------------------------------------------------------------------
    @property
    def date_options(self) -> list[DateOption]:
        return list(self._dates)

    def select_date(self, value: date | str) -> None:
        self._require_step(WizardStep.DATE_TIME_SELECTION)
        chosen = _parse_date(value)
        if chosen not in {option.value for option in self._dates}:
            raise WizardError(f"{chosen.isoformat()} is not an available date.")
        self.selected_date = chosen

    def select_time(self, slot: str) -> None:
        self._require_step(WizardStep.DATE_TIME_SELECTION)
        slot = (slot or "").strip()
        if slot not in TIME_SLOTS:
            raise WizardError(f"'{slot}' is not an available time slot.")
        self.selected_time = slot

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def advance(self) -> WizardStep:
        """Move from step one or two to the next step if its guard holds."""

        if self.step is WizardStep.SERVICE_SELECTION:
            if not self.service:
                raise WizardError("Select a service to continue.")
            self.step = WizardStep.DATE_TIME_SELECTION
        elif self.step is WizardStep.DATE_TIME_SELECTION:
            if not self.selected_date or not self.selected_time:
                raise WizardError("Select both a date and a time to continue.")
            self.step = WizardStep.CONTACT_DETAILS
        elif self.step is WizardStep.CONTACT_DETAILS:
            raise WizardError("Submit your contact details to confirm the booking.")
        else:
            raise WizardError("This booking is already confirmed.")
        self.error = None
        return self.step

    def back(self) -> WizardStep:
        """Return to the previous step, keeping every selection made so far."""

        if self.step is WizardStep.DATE_TIME_SELECTION:
            self.step = WizardStep.SERVICE_SELECTION
        elif self.step is WizardStep.CONTACT_DETAILS:
            self.step = WizardStep.DATE_TIME_SELECTION
        elif self.step is WizardStep.SERVICE_SELECTION:
            raise WizardError("Already on the first step.")
        else:
            raise WizardError("This booking is already confirmed.")
        self.error = None
        return self.step

    def submit(self, contact: ContactDetails, create_booking: CreateBooking) -> Any:
        """Validate ``contact`` and create the booking via ``create_booking``.

        Any failure leaves the wizard on the contact step with the raw error
        message stored in :attr:`error` before the exception propagates.
        """

        self._require_step(WizardStep.CONTACT_DETAILS)
        self.contact = contact
        try:
            contact.validate()
            result = create_booking(self.booking_request())
        except Exception as exc:
            self.error = str(exc)
            LOGGER.info("Booking submission failed: %s", exc)
            raise

        self.booking_id = getattr(result, "id", None)
        self.error = None
        self.step = WizardStep.CONFIRMATION
        return result

    def close(self) -> None:
        """Discard all entered state and return to the first step."""

        self.step = WizardStep.SERVICE_SELECTION
        self.service = None
        self.selected_date = None
        self.selected_time = None
        self.contact = None
        self.error = None
        self.booking_id = None

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------
    def booking_request(self) -> BookingRequest:
        if not (self.service and self.selected_date and self.selected_time and self.contact):
            raise WizardError("The booking is incomplete.")
        return BookingRequest(
            service_type=self.service,
            service_name=service_name(self.service),
            appointment_date=self.selected_date,
            appointment_time=self.selected_time,
            contact=self.contact,
            timezone=self.timezone,
        )

    def confirmation(self) -> dict[str, Any]:
        self._require_step(WizardStep.CONFIRMATION)
        if self.selected_date is None:
            raise WizardError("The booking is incomplete.")
        return {
            "booking_id": self.booking_id,
            "service": service_name(self.service),
            "date": long_date_label(self.selected_date),
            "time": f"{self.selected_time} {self.timezone}",
            "email": self.contact.email if self.contact else None,
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "today": self.today.isoformat(),
            "window_days": self.window_days,
            "timezone": self.timezone,
            "step": int(self.step),
            "service": self.service,
            "selected_date": self.selected_date.isoformat() if self.selected_date else None,
            "selected_time": self.selected_time,
            "contact": self.contact.to_dict() if self.contact else None,
            "error": self.error,
            "booking_id": self.booking_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BookingWizard":
        contact_data = data.get("contact")
        selected = data.get("selected_date")
        return cls(
            today=date.fromisoformat(data["today"]),
            window_days=int(data.get("window_days", 14)),
            timezone=data.get("timezone") or "EST",
            step=WizardStep(int(data.get("step", WizardStep.SERVICE_SELECTION))),
            service=data.get("service"),
            selected_date=date.fromisoformat(selected) if selected else None,
            selected_time=data.get("selected_time"),
            contact=ContactDetails(**contact_data) if contact_data else None,
            error=data.get("error"),
            booking_id=data.get("booking_id"),
        )

    def _require_step(self, expected: WizardStep) -> None:
        if self.step is not expected:
            raise WizardError(
                f"Action not allowed on step {int(self.step)} ({self.step.name.lower()})."
            )
