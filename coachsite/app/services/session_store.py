"""Expiring key/value storage for visitor and admin session state.

Bookmarks, open booking wizards and revoked admin tokens all live behind the
same small :class:`SessionStore` interface. Two backends exist: one keeps
entries in process memory, the other in the ``stored_sessions`` table. The
application picks one from ``SESSION_STORE`` at startup and handlers reach it
through :func:`get_session_store`.
"""
from __future__ import annotations

import json
import logging
import threading
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta
from typing import Any, Protocol
from uuid import uuid4

from flask import Flask, current_app

from coachsite.app.models import StoredSession, utcnow
from coachsite.app.services.booking_wizard import BookingWizard
from coachsite.extensions import db

LOGGER = logging.getLogger(__name__)

BOOKMARKS = "bookmarks"
WIZARDS = "wizards"
REVOKED_TOKENS = "revoked_tokens"


class SessionStore(Protocol):
    def get(self, namespace: str, key: str) -> Any | None: ...

    def set(
        self, namespace: str, key: str, value: Any, ttl: timedelta | None = None
    ) -> None: ...

    def delete(self, namespace: str, key: str) -> None: ...


def _expiry(ttl: timedelta | None) -> datetime | None:
    return utcnow() + ttl if ttl is not None else None


class MemorySessionStore:
    """Process-local store; entries vanish on restart."""

    def __init__(self) -> None:
        self._entries: dict[tuple[str, str], tuple[str, datetime | None]] = {}
        self._lock = threading.Lock()

    def get(self, namespace: str, key: str) -> Any | None:
        with self._lock:
            entry = self._entries.get((namespace, key))
            if entry is None:
                return None
            raw, expires_at = entry
            if expires_at is not None and expires_at <= utcnow():
                del self._entries[(namespace, key)]
                return None
        return json.loads(raw)

    def set(self, namespace: str, key: str, value: Any, ttl: timedelta | None = None) -> None:
        raw = json.dumps(value)
        with self._lock:
            self._purge_expired()
            self._entries[(namespace, key)] = (raw, _expiry(ttl))

    def delete(self, namespace: str, key: str) -> None:
        with self._lock:
            self._entries.pop((namespace, key), None)

    def _purge_expired(self) -> None:
        now = utcnow()
        expired = [
            entry_key
            for entry_key, (_raw, expires_at) in self._entries.items()
            if expires_at is not None and expires_at <= now
        ]
        for entry_key in expired:
            del self._entries[entry_key]


class DatabaseSessionStore:
    """Store backed by the ``stored_sessions`` table."""

    def get(self, namespace: str, key: str) -> Any | None:
        entry = StoredSession.query.filter_by(namespace=namespace, key=key).first()
        if entry is None:
            return None
        if entry.expires_at is not None and entry.expires_at <= utcnow():
            db.session.delete(entry)
            db.session.commit()
            return None
        return json.loads(entry.value)

    def set(self, namespace: str, key: str, value: Any, ttl: timedelta | None = None) -> None:
        purged = StoredSession.query.filter(StoredSession.expires_at <= utcnow()).delete(
            synchronize_session=False
        )
        if purged:
            LOGGER.debug("Purged %s expired session entries", purged)
        entry = StoredSession.query.filter_by(namespace=namespace, key=key).first()
        if entry is None:
            entry = StoredSession(namespace=namespace, key=key, value="null")
        entry.value = json.dumps(value)
        entry.expires_at = _expiry(ttl)
        db.session.add(entry)
        db.session.commit()

    def delete(self, namespace: str, key: str) -> None:
        StoredSession.query.filter_by(namespace=namespace, key=key).delete(
            synchronize_session=False
        )
        db.session.commit()


def init_session_store(app: Flask) -> None:
    """Attach the configured session store to ``app``."""

    backend = (app.config.get("SESSION_STORE") or "database").lower()
    if backend == "memory":
        store: SessionStore = MemorySessionStore()
    elif backend == "database":
        store = DatabaseSessionStore()
    else:
        raise ValueError(f"Unknown SESSION_STORE backend '{backend}'.")
    app.extensions["session_store"] = store
    LOGGER.debug("Using %s session store", backend)


def get_session_store() -> SessionStore:
    return current_app.extensions["session_store"]


# ----------------------------------------------------------------------
# Typed views over the raw store
# ----------------------------------------------------------------------
@dataclass(slots=True)
class Bookmark:
    id: int | str
    title: str
    slug: str | None = None


class BookmarkStore:
    """Per-visitor list of bookmarked blog posts."""

    def __init__(self, store: SessionStore, ttl: timedelta) -> None:
        self._store = store
        self._ttl = ttl

    def entries(self, visitor_id: str) -> list[Bookmark]:
        raw = self._store.get(BOOKMARKS, visitor_id) or []
        return [Bookmark(**item) for item in raw]

    def add(self, visitor_id: str, bookmark: Bookmark) -> bool:
        """Add ``bookmark``; return ``False`` if it was already present."""

        bookmarks = self.entries(visitor_id)
        if any(str(existing.id) == str(bookmark.id) for existing in bookmarks):
            return False
        bookmarks.append(bookmark)
        self._save(visitor_id, bookmarks)
        return True

    def remove(self, visitor_id: str, bookmark_id: int | str) -> bool:
        bookmarks = self.entries(visitor_id)
        remaining = [item for item in bookmarks if str(item.id) != str(bookmark_id)]
        if len(remaining) == len(bookmarks):
            return False
        self._save(visitor_id, remaining)
        return True

    def _save(self, visitor_id: str, bookmarks: list[Bookmark]) -> None:
        self._store.set(BOOKMARKS, visitor_id, [asdict(item) for item in bookmarks], self._ttl)


class WizardStore:
    """Open booking wizards keyed by a generated identifier."""

    def __init__(self, store: SessionStore, ttl: timedelta) -> None:
        self._store = store
        self._ttl = ttl

    def create(self, wizard: BookingWizard) -> str:
        wizard_id = uuid4().hex
        self.save(wizard_id, wizard)
        return wizard_id

    def load(self, wizard_id: str) -> BookingWizard | None:
        data = self._store.get(WIZARDS, wizard_id)
        return BookingWizard.from_dict(data) if data else None

    def save(self, wizard_id: str, wizard: BookingWizard) -> None:
        self._store.set(WIZARDS, wizard_id, wizard.to_dict(), self._ttl)

    def discard(self, wizard_id: str) -> None:
        self._store.delete(WIZARDS, wizard_id)


class TokenBlocklist:
    """Revoked admin token identifiers, kept until the token would expire anyway."""

    def __init__(self, store: SessionStore) -> None:
        self._store = store

    def revoke(self, jti: str, expires_at: datetime) -> None:
        remaining = expires_at - utcnow()
        if remaining <= timedelta(0):
            return
        self._store.set(REVOKED_TOKENS, jti, True, remaining)

    def is_revoked(self, jti: str) -> bool:
        return bool(self._store.get(REVOKED_TOKENS, jti))


def bookmark_store() -> BookmarkStore:
    days = int(current_app.config.get("BOOKMARK_TTL_DAYS", 365))
    return BookmarkStore(get_session_store(), timedelta(days=days))


def wizard_store() -> WizardStore:
    minutes = int(current_app.config.get("WIZARD_TTL_MINUTES", 60))
    return WizardStore(get_session_store(), timedelta(minutes=minutes))


def token_blocklist() -> TokenBlocklist:
    return TokenBlocklist(get_session_store())
