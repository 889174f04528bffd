from __future__ import annotations

from datetime import datetime, timedelta
import unittest
from unittest.mock import patch

from coachsite.app import create_app
from coachsite.app.models import StoredSession
from coachsite.app.services.booking_wizard import BookingWizard
from coachsite.app.services.session_store import (
    Bookmark,
    BookmarkStore,
    DatabaseSessionStore,
    MemorySessionStore,
    TokenBlocklist,
    WizardStore,
    init_session_store,
)
from coachsite.extensions import db

NOW = datetime(2026, 10, 19, 12, 0, 0)
CLOCK = "coachsite.app.services.session_store.utcnow"


class SessionStoreContract:
    """Behaviour shared by every session store backend."""

    def make_store(self):  # pragma: no cover - overridden
        raise NotImplementedError

    def test_round_trip_and_delete(self) -> None:
        store = self.make_store()
        store.set("bookmarks", "visitor", [{"id": 1, "title": "Post"}])

        self.assertEqual(store.get("bookmarks", "visitor"), [{"id": 1, "title": "Post"}])
        self.assertIsNone(store.get("wizards", "visitor"))

        store.delete("bookmarks", "visitor")
        self.assertIsNone(store.get("bookmarks", "visitor"))

    def test_entries_expire(self) -> None:
        store = self.make_store()
        with patch(CLOCK, return_value=NOW):
            store.set("wizards", "abc", {"step": 2}, timedelta(minutes=30))
            store.set("wizards", "forever", {"step": 1})

        with patch(CLOCK, return_value=NOW + timedelta(minutes=29)):
            self.assertEqual(store.get("wizards", "abc"), {"step": 2})

        with patch(CLOCK, return_value=NOW + timedelta(minutes=30)):
            self.assertIsNone(store.get("wizards", "abc"))
            self.assertEqual(store.get("wizards", "forever"), {"step": 1})


class MemorySessionStoreTestCase(SessionStoreContract, unittest.TestCase):
    def make_store(self) -> MemorySessionStore:
        return MemorySessionStore()

    def test_writes_sweep_expired_entries(self) -> None:
        store = self.make_store()
        with patch(CLOCK, return_value=NOW):
            for index in range(50):
                store.set("wizards", f"w{index}", {"step": 1}, timedelta(minutes=30))
            store.set("bookmarks", "visitor", [])
        self.assertEqual(len(store._entries), 51)

        with patch(CLOCK, return_value=NOW + timedelta(hours=1)):
            store.set("wizards", "fresh", {"step": 1}, timedelta(minutes=30))

        self.assertEqual(
            set(store._entries), {("bookmarks", "visitor"), ("wizards", "fresh")}
        )


class DatabaseSessionStoreTestCase(SessionStoreContract, unittest.TestCase):
    def setUp(self) -> None:  # noqa: D401 - documented in base class
        self.app = create_app("testing")

        self.app_context = self.app.app_context()
        self.app_context.push()
        db.create_all()

    def tearDown(self) -> None:  # noqa: D401 - documented in base class
        db.session.remove()
        db.drop_all()
        self.app_context.pop()

    def make_store(self) -> DatabaseSessionStore:
        return DatabaseSessionStore()

    def test_expired_rows_are_removed(self) -> None:
        store = self.make_store()
        with patch(CLOCK, return_value=NOW):
            store.set("wizards", "abc", {"step": 2}, timedelta(minutes=5))
        self.assertEqual(StoredSession.query.count(), 1)

        with patch(CLOCK, return_value=NOW + timedelta(hours=1)):
            self.assertIsNone(store.get("wizards", "abc"))
        self.assertEqual(StoredSession.query.count(), 0)

    def test_set_purges_other_expired_rows(self) -> None:
        store = self.make_store()
        with patch(CLOCK, return_value=NOW):
            store.set("wizards", "stale", {"step": 2}, timedelta(minutes=5))
            store.set("bookmarks", "visitor", [])

        with patch(CLOCK, return_value=NOW + timedelta(hours=1)):
            store.set("wizards", "fresh", {"step": 1}, timedelta(minutes=30))

        keys = {entry.key for entry in StoredSession.query.all()}
        self.assertEqual(keys, {"visitor", "fresh"})

    def test_set_overwrites_existing_entry(self) -> None:
        store = self.make_store()
        store.set("wizards", "abc", {"step": 1})
        store.set("wizards", "abc", {"step": 3})

        self.assertEqual(StoredSession.query.count(), 1)
        self.assertEqual(store.get("wizards", "abc"), {"step": 3})


class TypedStoresTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.store = MemorySessionStore()

    def test_bookmarks_ignore_duplicates(self) -> None:
        bookmarks = BookmarkStore(self.store, timedelta(days=1))

        self.assertTrue(bookmarks.add("v1", Bookmark(id=3, title="Resilient Teams")))
        self.assertFalse(bookmarks.add("v1", Bookmark(id="3", title="Resilient Teams")))
        self.assertEqual(len(bookmarks.entries("v1")), 1)
        self.assertEqual(bookmarks.entries("v2"), [])

        self.assertTrue(bookmarks.remove("v1", "3"))
        self.assertFalse(bookmarks.remove("v1", 3))

    def test_wizard_store(self) -> None:
        wizards = WizardStore(self.store, timedelta(minutes=60))
        wizard = BookingWizard(today=NOW.date())
        wizard.select_service("keynote")

        wizard_id = wizards.create(wizard)
        restored = wizards.load(wizard_id)

        self.assertIsNotNone(restored)
        self.assertEqual(restored.service, "keynote")
        wizards.discard(wizard_id)
        self.assertIsNone(wizards.load(wizard_id))

    def test_token_blocklist(self) -> None:
        blocklist = TokenBlocklist(self.store)
        with patch(CLOCK, return_value=NOW):
            blocklist.revoke("old-jti", NOW - timedelta(seconds=1))
            blocklist.revoke("live-jti", NOW + timedelta(hours=1))

            self.assertFalse(blocklist.is_revoked("old-jti"))
            self.assertTrue(blocklist.is_revoked("live-jti"))

        with patch(CLOCK, return_value=NOW + timedelta(hours=2)):
            self.assertFalse(blocklist.is_revoked("live-jti"))


class SessionStoreSelectionTestCase(unittest.TestCase):
    def test_backend_comes_from_config(self) -> None:
        app = create_app("testing")
        self.assertIsInstance(app.extensions["session_store"], MemorySessionStore)

        app.config["SESSION_STORE"] = "database"
        init_session_store(app)
        self.assertIsInstance(app.extensions["session_store"], DatabaseSessionStore)

        app.config["SESSION_STORE"] = "redis"
        with self.assertRaises(ValueError):
            init_session_store(app)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
