from __future__ import annotations

from datetime import date
from http import HTTPStatus
import unittest
from unittest.mock import patch

from coachsite.app import create_app
from coachsite.app.models import AuditLog, Booking
from coachsite.extensions import db

MONDAY = date(2026, 10, 19)


class BookingApiTestCase(unittest.TestCase):
    """Exercise the booking wizard endpoints end to end."""

    def setUp(self) -> None:  # noqa: D401 - documented in base class
        self.app = create_app("testing")

        self.app_context = self.app.app_context()
        self.app_context.push()
        db.create_all()

        self.today_patch = patch("coachsite.app.api.booking._today", return_value=MONDAY)
        self.today_patch.start()

        self.client = self.app.test_client()

    def tearDown(self) -> None:  # noqa: D401 - documented in base class
        self.today_patch.stop()
        db.session.remove()
        db.drop_all()
        self.app_context.pop()

    def _start(self) -> str:
        response = self.client.post("/api/booking/wizard")
        self.assertEqual(response.status_code, HTTPStatus.CREATED, response.get_data(as_text=True))
        payload = response.get_json()
        self.assertEqual(payload["step"], 1)
        return payload["wizard_id"]

    def _to_contact_step(self, wizard_id: str, slot: str = "10:00 AM") -> None:
        response = self.client.post(
            f"/api/booking/wizard/{wizard_id}/service", json={"service": "leadership"}
        )
        self.assertEqual(response.status_code, HTTPStatus.OK, response.get_data(as_text=True))
        self.assertEqual(response.get_json()["step"], 2)
        self.assertEqual(len(response.get_json()["date_options"]), 10)

        response = self.client.post(
            f"/api/booking/wizard/{wizard_id}/datetime",
            json={"date": "2026-10-20", "time": slot},
        )
        self.assertEqual(response.status_code, HTTPStatus.OK, response.get_data(as_text=True))
        self.assertEqual(response.get_json()["step"], 3)

    def _one_shot(self, **overrides):
        payload = {
            "service": "executive",
            "date": "2026-10-21",
            "time": "2:00 PM",
            "name": "Ada Obi",
            "email": "ada.obi@gmail.com",
        }
        payload.update(overrides)
        return self.client.post("/api/booking/bookings", json=payload)

    def test_services_catalog(self) -> None:
        response = self.client.get("/api/booking/services")

        self.assertEqual(response.status_code, HTTPStatus.OK)
        services = response.get_json()["services"]
        self.assertEqual(len(services), 14)
        self.assertTrue(all(service["duration"] == "30 min" for service in services))

    def test_full_wizard_flow_creates_pending_booking(self) -> None:
        wizard_id = self._start()
        self._to_contact_step(wizard_id)

        response = self.client.post(
            f"/api/booking/wizard/{wizard_id}/contact",
            json={"first_name": "Jane", "last_name": "Doe", "email": "jane.doe@gmail.com"},
        )

        self.assertEqual(response.status_code, HTTPStatus.CREATED, response.get_data(as_text=True))
        payload = response.get_json()
        self.assertEqual(
            payload["confirmation"]["service"], "Leadership Coaching"
        )
        self.assertEqual(payload["confirmation"]["date"], "Tuesday, October 20, 2026")
        self.assertEqual(payload["confirmation"]["time"], "10:00 AM EST")
        self.assertEqual(payload["wizard"]["step"], 4)

        booking = Booking.query.one()
        self.assertEqual(booking.status, "pending")
        self.assertEqual(booking.service_name, "Leadership Coaching")
        self.assertEqual(booking.appointment_date, date(2026, 10, 20))
        self.assertEqual(booking.full_name, "Jane Doe")

        audit = AuditLog.query.filter_by(action="booking.created").one()
        self.assertEqual(audit.entity_id, booking.id)
        self.assertEqual(audit.path, f"/api/booking/wizard/{wizard_id}/contact")

    def test_datetime_before_service_is_rejected(self) -> None:
        wizard_id = self._start()

        response = self.client.post(
            f"/api/booking/wizard/{wizard_id}/datetime",
            json={"date": "2026-10-20", "time": "10:00 AM"},
        )

        self.assertEqual(response.status_code, HTTPStatus.BAD_REQUEST)
        state = self.client.get(f"/api/booking/wizard/{wizard_id}").get_json()
        self.assertEqual(state["step"], 1)

    def test_invalid_contact_keeps_wizard_on_contact_step(self) -> None:
        wizard_id = self._start()
        self._to_contact_step(wizard_id)

        response = self.client.post(
            f"/api/booking/wizard/{wizard_id}/contact",
            json={"name": "Jane Doe", "email": "jane at example"},
        )

        self.assertEqual(response.status_code, HTTPStatus.BAD_REQUEST)
        state = self.client.get(f"/api/booking/wizard/{wizard_id}").get_json()
        self.assertEqual(state["step"], 3)
        self.assertIn("Email", state["error"])
        self.assertEqual(Booking.query.count(), 0)

    def test_taken_slot_conflicts(self) -> None:
        first = self._one_shot()
        self.assertEqual(first.status_code, HTTPStatus.CREATED, first.get_data(as_text=True))

        second = self._one_shot(name="Bola Ade", email="bola@gmail.com")

        self.assertEqual(second.status_code, HTTPStatus.CONFLICT)
        self.assertIn("already booked", second.get_json()["message"])
        self.assertEqual(Booking.query.count(), 1)

    def test_cancelled_booking_frees_its_slot(self) -> None:
        self._one_shot()
        Booking.query.one().status = "cancelled"
        db.session.commit()

        response = self._one_shot(email="second@gmail.com")

        self.assertEqual(response.status_code, HTTPStatus.CREATED)

    def test_double_booking_allowed_when_prevention_disabled(self) -> None:
        self.app.config["BOOKING_PREVENT_DOUBLE_BOOKING"] = False

        self._one_shot()
        with self.assertLogs("coachsite.app.services.booking_service", level="WARNING"):
            response = self._one_shot(email="second@gmail.com")

        self.assertEqual(response.status_code, HTTPStatus.CREATED)
        self.assertEqual(Booking.query.count(), 2)

    def test_one_shot_validates_like_the_wizard(self) -> None:
        response = self._one_shot(date="2026-10-24")
        self.assertEqual(response.status_code, HTTPStatus.BAD_REQUEST)

        response = self._one_shot(service="unknown")
        self.assertEqual(response.status_code, HTTPStatus.BAD_REQUEST)

        response = self._one_shot(name="")
        self.assertEqual(response.status_code, HTTPStatus.BAD_REQUEST)
        self.assertEqual(response.get_json()["message"], "Name is required.")

    def test_availability_lists_booked_slots(self) -> None:
        self._one_shot()

        response = self.client.get("/api/booking/availability")

        self.assertEqual(response.status_code, HTTPStatus.OK)
        payload = response.get_json()
        self.assertEqual(len(payload["time_slots"]), 14)
        self.assertEqual(payload["timezone"], "EST")
        by_date = {entry["value"]: entry for entry in payload["dates"]}
        self.assertEqual(by_date["2026-10-21"]["booked_slots"], ["2:00 PM"])
        self.assertEqual(by_date["2026-10-20"]["booked_slots"], [])
        self.assertNotIn("2026-10-24", by_date)

    def test_unknown_booked_label_sorts_last(self) -> None:
        self._one_shot(date="2026-10-20", time="10:00 AM")
        db.session.add(
            Booking(
                service_type="leadership",
                service_name="Leadership Coaching",
                appointment_date=date(2026, 10, 20),
                appointment_time="8:15 AM",
                first_name="Tobi",
                last_name="Ade",
                email="tobi.ade@gmail.com",
            )
        )
        db.session.commit()

        response = self.client.get("/api/booking/availability")

        self.assertEqual(response.status_code, HTTPStatus.OK, response.get_data(as_text=True))
        by_date = {entry["value"]: entry for entry in response.get_json()["dates"]}
        self.assertEqual(by_date["2026-10-20"]["booked_slots"], ["10:00 AM", "8:15 AM"])

    def test_back_returns_to_earlier_steps(self) -> None:
        wizard_id = self._start()
        self._to_contact_step(wizard_id)

        response = self.client.post(f"/api/booking/wizard/{wizard_id}/back")
        self.assertEqual(response.status_code, HTTPStatus.OK, response.get_data(as_text=True))
        payload = response.get_json()
        self.assertEqual(payload["step"], 2)
        self.assertEqual(payload["selected_date"], "2026-10-20")
        self.assertEqual(payload["selected_time"], "10:00 AM")
        self.assertEqual(len(payload["date_options"]), 10)

        response = self.client.post(f"/api/booking/wizard/{wizard_id}/back")
        self.assertEqual(response.get_json()["step"], 1)
        self.assertEqual(response.get_json()["service"], "leadership")

        first_step = self.client.post(f"/api/booking/wizard/{wizard_id}/back")
        self.assertEqual(first_step.status_code, HTTPStatus.BAD_REQUEST)

        response = self.client.post(
            f"/api/booking/wizard/{wizard_id}/service", json={"service": "keynote"}
        )
        self.assertEqual(response.status_code, HTTPStatus.OK, response.get_data(as_text=True))
        self.assertEqual(response.get_json()["service"], "keynote")
        self.assertEqual(response.get_json()["step"], 2)

        missing = self.client.post("/api/booking/wizard/missing/back")
        self.assertEqual(missing.status_code, HTTPStatus.NOT_FOUND)

    def test_closing_discards_the_wizard(self) -> None:
        wizard_id = self._start()
        self._to_contact_step(wizard_id)

        response = self.client.delete(f"/api/booking/wizard/{wizard_id}")

        self.assertEqual(response.status_code, HTTPStatus.OK)
        self.assertEqual(response.get_json()["wizard"]["step"], 1)
        self.assertIsNone(response.get_json()["wizard"]["service"])
        self.assertEqual(
            self.client.get(f"/api/booking/wizard/{wizard_id}").status_code,
            HTTPStatus.NOT_FOUND,
        )

    def test_unknown_wizard(self) -> None:
        response = self.client.post(
            "/api/booking/wizard/missing/service", json={"service": "leadership"}
        )
        self.assertEqual(response.status_code, HTTPStatus.NOT_FOUND)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
