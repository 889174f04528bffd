from __future__ import annotations

import json
import unittest
from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from coachsite.app import create_app
from coachsite.app.errors import ValidationError
from coachsite.app.models import SiteSetting
from coachsite.app.services.settings_service import (
    DEFAULT_SETTINGS,
    SECRET_MASK,
    EmailSettings,
    FeatureSettings,
    GeneralSettings,
    get_group,
    get_settings,
    initialize_settings,
    public_settings,
    update_setting,
)
from coachsite.extensions import db


class SettingsServiceTestCase(unittest.TestCase):
    """Seeding, typed loading and saving of site settings."""

    def setUp(self) -> None:  # noqa: D401 - documented in base class
        self.app = create_app("testing")

        self.app_context = self.app.app_context()
        self.app_context.push()
        db.create_all()

    def tearDown(self) -> None:  # noqa: D401 - documented in base class
        db.session.remove()
        db.drop_all()
        self.app_context.pop()

    def test_initialize_seeds_defaults_once(self) -> None:
        self.assertTrue(initialize_settings())
        self.assertEqual(SiteSetting.query.count(), len(DEFAULT_SETTINGS))

        update_setting("site_title", "Changed")
        self.assertTrue(initialize_settings())
        self.assertEqual(SiteSetting.query.count(), len(DEFAULT_SETTINGS))
        self.assertEqual(get_settings(["site_title"]), {"site_title": "Changed"})

    def test_initialize_skips_when_any_row_exists(self) -> None:
        update_setting("site_title", "Already here")

        self.assertTrue(initialize_settings())

        self.assertEqual(SiteSetting.query.count(), 1)

    def test_initialize_reports_database_errors(self) -> None:
        error = OperationalError("SELECT", {}, Exception("no such table"))
        with patch.object(db.session, "query", side_effect=error):
            with self.assertLogs("coachsite.app.services.settings_service", level="ERROR"):
                self.assertFalse(initialize_settings())

    def test_stored_strings_are_coerced(self) -> None:
        db.session.add(SiteSetting(key="booking_enabled", value="false"))
        db.session.add(SiteSetting(key="blog_enabled", value='"no"'))
        db.session.commit()

        features = FeatureSettings.load()

        self.assertIs(features.booking_enabled, False)
        self.assertIs(features.blog_enabled, False)
        self.assertIs(features.newsletter_enabled, True)

    def test_unconvertible_stored_value_uses_default(self) -> None:
        db.session.add(SiteSetting(key="smtp_port", value='""'))
        db.session.add(SiteSetting(key="smtp_host", value='"smtp.gmail.com"'))
        db.session.add(SiteSetting(key="posts_per_page", value='"lots"'))
        db.session.commit()

        with self.assertLogs("coachsite.app.services.settings_service", level="WARNING"):
            email = EmailSettings.load()
        self.assertEqual(email.smtp_port, 587)
        self.assertEqual(email.smtp_host, "smtp.gmail.com")

        with self.assertLogs("coachsite.app.services.settings_service", level="WARNING"):
            self.assertEqual(public_settings()["posts_per_page"], 6)

        with self.assertRaises(ValidationError):
            EmailSettings.from_mapping({"smtp_port": ""})
        self.assertEqual(
            EmailSettings.from_mapping({"smtp_port": ""}, strict=False).smtp_port, 587
        )

    def test_load_or_default_survives_database_errors(self) -> None:
        error = OperationalError("SELECT", {}, Exception("no such table"))
        with patch.object(GeneralSettings, "load", side_effect=error):
            with self.assertLogs("coachsite.app.services.settings_service", level="ERROR"):
                self.assertEqual(GeneralSettings.load_or_default(), GeneralSettings())

    def test_merge_rejects_unknown_keys(self) -> None:
        with self.assertRaises(ValidationError):
            GeneralSettings().merged({"smtp_host": "mail.example.com"})

        with self.assertRaises(ValidationError):
            EmailSettings().merged({"smtp_port": "many"})

    def test_mask_keeps_stored_secret(self) -> None:
        EmailSettings().merged({"smtp_password": "s3cret"}).save()

        loaded = EmailSettings.load()
        self.assertEqual(loaded.to_public_mapping()["smtp_password"], SECRET_MASK)

        loaded.merged({"smtp_password": SECRET_MASK, "smtp_port": "465"}).save()

        reloaded = EmailSettings.load()
        self.assertEqual(reloaded.smtp_password, "s3cret")
        self.assertEqual(reloaded.smtp_port, 465)
        stored = SiteSetting.query.filter_by(key="smtp_port").one()
        self.assertEqual(json.loads(stored.value), 465)

    def test_empty_secret_is_not_masked(self) -> None:
        self.assertEqual(EmailSettings().to_public_mapping()["smtp_password"], "")

    def test_public_settings_exclude_private_groups(self) -> None:
        update_setting("site_title", "Queen of Clarity")

        merged = public_settings()

        self.assertEqual(merged["site_title"], "Queen of Clarity")
        self.assertIn("portrait_url", merged)
        self.assertIn("primary_font", merged)
        self.assertNotIn("smtp_host", merged)
        self.assertNotIn("google_analytics_id", merged)
        self.assertNotIn("two_factor_auth", merged)

    def test_unknown_group(self) -> None:
        self.assertIs(get_group("email"), EmailSettings)
        with self.assertRaises(LookupError):
            get_group("colours")


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
