from __future__ import annotations

from datetime import date
from types import SimpleNamespace
import unittest

from coachsite.app.services.booking_wizard import (
    TIME_SLOTS,
    BookingRequest,
    BookingWizard,
    ContactDetails,
    WizardError,
    WizardStep,
    available_dates,
    long_date_label,
    short_date_label,
)

MONDAY = date(2026, 10, 19)


class AvailableDatesTestCase(unittest.TestCase):
    """Date window and slot labels shown on the second wizard step."""

    def test_window_skips_today_and_weekends(self) -> None:
        options = available_dates(MONDAY)

        values = [option.value for option in options]
        self.assertEqual(len(values), 10)
        self.assertEqual(values[0], date(2026, 10, 20))
        self.assertEqual(values[-1], date(2026, 11, 2))
        self.assertNotIn(MONDAY, values)
        for value in values:
            self.assertLess(value.weekday(), 5)
            self.assertTrue(1 <= (value - MONDAY).days <= 14)

    def test_labels(self) -> None:
        self.assertEqual(short_date_label(date(2026, 10, 20)), "Tue, Oct 20")
        self.assertEqual(long_date_label(date(2026, 10, 20)), "Tuesday, October 20, 2026")
        self.assertEqual(available_dates(MONDAY)[0].to_dict(), {"value": "2026-10-20", "label": "Tue, Oct 20"})

    def test_time_slots_skip_lunch_hour(self) -> None:
        self.assertEqual(len(TIME_SLOTS), 14)
        self.assertEqual(TIME_SLOTS[0], "9:00 AM")
        self.assertEqual(TIME_SLOTS[-1], "4:30 PM")
        self.assertNotIn("12:00 PM", TIME_SLOTS)
        self.assertNotIn("12:30 PM", TIME_SLOTS)


class BookingWizardTestCase(unittest.TestCase):
    """Guards and transitions of the four-step booking wizard."""

    def setUp(self) -> None:
        self.wizard = BookingWizard(today=MONDAY)
        self.created: list[BookingRequest] = []

    def _create(self, request: BookingRequest):
        self.created.append(request)
        return SimpleNamespace(id=41)

    def _contact(self, **overrides) -> ContactDetails:
        values = {"first_name": "Jane", "last_name": "Doe", "email": "jane.doe@gmail.com"}
        values.update(overrides)
        return ContactDetails(**values)

    def _reach_contact_step(self) -> None:
        self.wizard.select_service("leadership")
        self.wizard.advance()
        self.wizard.select_date("2026-10-20")
        self.wizard.select_time("10:00 AM")
        self.wizard.advance()

    def test_cannot_advance_without_service(self) -> None:
        with self.assertRaises(WizardError):
            self.wizard.advance()
        self.assertEqual(self.wizard.step, WizardStep.SERVICE_SELECTION)

    def test_unknown_service_rejected(self) -> None:
        with self.assertRaises(WizardError):
            self.wizard.select_service("astrology")
        self.assertIsNone(self.wizard.service)

    def test_date_selection_requires_second_step(self) -> None:
        with self.assertRaises(WizardError):
            self.wizard.select_date("2026-10-20")

    def test_cannot_advance_without_date_and_time(self) -> None:
        self.wizard.select_service("executive")
        self.wizard.advance()
        self.wizard.select_date("2026-10-21")

        with self.assertRaises(WizardError):
            self.wizard.advance()
        self.assertEqual(self.wizard.step, WizardStep.DATE_TIME_SELECTION)

    def test_weekend_and_unknown_slot_rejected(self) -> None:
        self.wizard.select_service("executive")
        self.wizard.advance()

        with self.assertRaises(WizardError):
            self.wizard.select_date("2026-10-24")
        with self.assertRaises(WizardError):
            self.wizard.select_date("2026-10-19")
        with self.assertRaises(WizardError):
            self.wizard.select_time("12:00 PM")

    def test_successful_submission_reaches_confirmation(self) -> None:
        self._reach_contact_step()

        self.wizard.submit(self._contact(), self._create)

        self.assertEqual(self.wizard.step, WizardStep.CONFIRMATION)
        self.assertEqual(self.wizard.booking_id, 41)
        self.assertEqual(len(self.created), 1)
        request = self.created[0]
        self.assertEqual(request.service_type, "leadership")
        self.assertEqual(request.service_name, "Leadership Coaching")
        self.assertEqual(request.appointment_date, date(2026, 10, 20))
        self.assertEqual(request.timezone, "EST")

        confirmation = self.wizard.confirmation()
        self.assertEqual(confirmation["service"], "Leadership Coaching")
        self.assertEqual(confirmation["date"], "Tuesday, October 20, 2026")
        self.assertEqual(confirmation["time"], "10:00 AM EST")

    def test_invalid_email_keeps_contact_step(self) -> None:
        self._reach_contact_step()

        with self.assertRaises(WizardError):
            self.wizard.submit(self._contact(email="not-an-email"), self._create)

        self.assertEqual(self.wizard.step, WizardStep.CONTACT_DETAILS)
        self.assertIn("Email", self.wizard.error)
        self.assertEqual(self.created, [])

    def test_missing_name_rejected(self) -> None:
        self._reach_contact_step()

        with self.assertRaises(WizardError):
            self.wizard.submit(self._contact(first_name="", last_name=""), self._create)
        self.assertEqual(self.wizard.error, "Name is required.")

    def test_create_failure_records_raw_error(self) -> None:
        self._reach_contact_step()

        def failing_create(_request):
            raise RuntimeError("connection refused")

        with self.assertRaises(RuntimeError):
            self.wizard.submit(self._contact(), failing_create)

        self.assertEqual(self.wizard.step, WizardStep.CONTACT_DETAILS)
        self.assertEqual(self.wizard.error, "connection refused")

    def test_confirmation_is_terminal(self) -> None:
        self._reach_contact_step()
        self.wizard.submit(self._contact(), self._create)

        with self.assertRaises(WizardError):
            self.wizard.advance()
        with self.assertRaises(WizardError):
            self.wizard.submit(self._contact(), self._create)

    def test_back_keeps_selections(self) -> None:
        self._reach_contact_step()

        self.assertEqual(self.wizard.back(), WizardStep.DATE_TIME_SELECTION)
        self.assertEqual(self.wizard.back(), WizardStep.SERVICE_SELECTION)
        self.assertEqual(self.wizard.service, "leadership")
        self.assertEqual(self.wizard.selected_date, date(2026, 10, 20))
        self.assertEqual(self.wizard.selected_time, "10:00 AM")

        self.wizard.select_service("keynote")
        self.assertEqual(self.wizard.advance(), WizardStep.DATE_TIME_SELECTION)

    def test_back_from_first_step_and_confirmation_rejected(self) -> None:
        with self.assertRaises(WizardError):
            self.wizard.back()

        self._reach_contact_step()
        self.wizard.submit(self._contact(), self._create)
        with self.assertRaises(WizardError):
            self.wizard.back()
        self.assertEqual(self.wizard.step, WizardStep.CONFIRMATION)

    def test_incomplete_confirmation_raises_wizard_error(self) -> None:
        self.wizard.step = WizardStep.CONFIRMATION

        with self.assertRaises(WizardError):
            self.wizard.confirmation()

    def test_close_resets_everything(self) -> None:
        self._reach_contact_step()
        self.wizard.submit(self._contact(), self._create)

        self.wizard.close()

        self.assertEqual(self.wizard.step, WizardStep.SERVICE_SELECTION)
        self.assertIsNone(self.wizard.service)
        self.assertIsNone(self.wizard.selected_date)
        self.assertIsNone(self.wizard.selected_time)
        self.assertIsNone(self.wizard.contact)
        self.assertIsNone(self.wizard.error)
        self.assertIsNone(self.wizard.booking_id)

    def test_state_survives_serialization(self) -> None:
        self._reach_contact_step()

        restored = BookingWizard.from_dict(self.wizard.to_dict())

        self.assertEqual(restored.step, WizardStep.CONTACT_DETAILS)
        self.assertEqual(restored.service, "leadership")
        self.assertEqual(restored.selected_date, date(2026, 10, 20))
        self.assertEqual(restored.selected_time, "10:00 AM")


class ContactDetailsTestCase(unittest.TestCase):
    def test_single_name_field_is_split(self) -> None:
        contact = ContactDetails.from_mapping({"name": "Jane Amaka Doe", "email": " jane@gmail.com "})

        self.assertEqual(contact.first_name, "Jane")
        self.assertEqual(contact.last_name, "Amaka Doe")
        self.assertEqual(contact.email, "jane@gmail.com")

    def test_first_name_alone_is_enough(self) -> None:
        contact = ContactDetails(first_name="Jane", last_name="", email="jane@gmail.com")
        contact.validate()
        self.assertEqual(contact.full_name, "Jane")


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
