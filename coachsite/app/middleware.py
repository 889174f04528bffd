"""Application middleware utilities such as audit logging."""
from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from typing import Any

from flask import Flask, current_app, g, request
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError
from sqlalchemy.exc import SQLAlchemyError

from coachsite.app.models import AdminUser, AuditLog
from coachsite.extensions import db


@dataclass(slots=True)
class _AuditConfig:
    action: str
    entity_type: str
    response_key: str | None = None


# Keyed by the matched URL rule so paths carrying identifiers share one entry.
SIGNIFICANT_ACTIONS: dict[tuple[str, str], _AuditConfig] = {
    ("POST", "/api/auth/login"): _AuditConfig(
        action="admin.login",
        entity_type="admin_user",
    ),
    ("POST", "/api/booking/bookings"): _AuditConfig(
        action="booking.created",
        entity_type="booking",
        response_key="booking",
    ),
    ("POST", "/api/booking/wizard/<wizard_id>/contact"): _AuditConfig(
        action="booking.created",
        entity_type="booking",
        response_key="booking",
    ),
    ("POST", "/api/public/contact"): _AuditConfig(
        action="contact.created",
        entity_type="contact_message",
        response_key="contact",
    ),
    ("POST", "/api/public/newsletter"): _AuditConfig(
        action="newsletter.subscribed",
        entity_type="newsletter_subscriber",
        response_key="subscriber",
    ),
}


def register_audit_middleware(app: Flask) -> None:
    """Attach middleware that records audit logs for significant actions."""

    @app.before_request
    def _capture_audit_context() -> None:
        method = request.method.upper()
        rule = request.url_rule.rule if request.url_rule is not None else request.path
        config = SIGNIFICANT_ACTIONS.get((method, _normalize_path(rule)))
        if not config:
            g.audit_context = None
            return

        request_bytes = request.get_data(cache=True) or b""
        g.audit_context = {
            "config": config,
            "method": method,
            "path": _normalize_path(request.path),
            "request_bytes": request_bytes,
        }

    @app.after_request
    def _persist_audit_log(response):
        context: dict[str, Any] | None = getattr(g, "audit_context", None)
        if not context:
            return response

        if response.status_code >= 400:
            return response

        config: _AuditConfig = context["config"]
        admin = _resolve_admin(config.action, context["request_bytes"])
        entity_id = _determine_entity_id(config, response, admin)

        audit_log = AuditLog(
            admin_user_id=admin.id if admin else None,
            entity_type=config.entity_type,
            entity_id=entity_id,
            action=config.action,
            description=_default_description(config.action, admin, entity_id),
            method=context["method"],
            path=context["path"],
            request_hash=_hash_request(
                context["method"], context["path"], context["request_bytes"]
            ),
            response_hash=_hash_response(response),
        )

        db.session.add(audit_log)
        try:
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            current_app.logger.exception("Failed to persist audit log entry")

        return response


def _normalize_path(path: str) -> str:
    if path != "/" and path.endswith("/"):
        return path[:-1]
    return path


def _resolve_admin(action: str, request_bytes: bytes) -> AdminUser | None:
    admin = _current_admin()
    if admin:
        return admin

    if action == "admin.login":
        try:
            payload = json.loads(request_bytes.decode("utf-8") or "{}")
        except (UnicodeDecodeError, json.JSONDecodeError):
            return None
        email = (payload.get("email") or "").strip().lower()
        if not email:
            return None
        return AdminUser.query.filter_by(email=email).first()

    return None


def _current_admin() -> AdminUser | None:
    try:
        verify_jwt_in_request(optional=True)
    except (JWTExtendedException, PyJWTError):
        return None

    identity = get_jwt_identity()
    if identity is None:
        return None

    try:
        admin_id = int(identity)
    except (TypeError, ValueError):
        return None

    return db.session.get(AdminUser, admin_id)


def _determine_entity_id(config: _AuditConfig, response, admin: AdminUser | None) -> int | None:
    if config.action == "admin.login":
        return admin.id if admin else None

    if not config.response_key or not getattr(response, "is_json", False):
        return None

    data = response.get_json(silent=True) or {}
    entity = data.get(config.response_key) or {}
    return entity.get("id")


def _default_description(action: str, admin: AdminUser | None, entity_id: int | None) -> str | None:
    if action == "admin.login" and admin:
        return f"Admin {admin.email} signed in."
    if action == "booking.created" and entity_id:
        return f"Booking {entity_id} requested through the booking wizard."
    if action == "contact.created" and entity_id:
        return f"Contact message {entity_id} received."
    if action == "newsletter.subscribed" and entity_id:
        return f"Newsletter subscriber {entity_id} added."
    return None


def _hash_request(method: str, path: str, body: bytes) -> str:
    payload = f"{method}\n{path}\n".encode("utf-8") + body
    return hashlib.sha256(payload).hexdigest()


def _hash_response(response) -> str:
    body = response.get_data() or b""
    payload = f"{response.status_code}\n".encode("utf-8") + body
    return hashlib.sha256(payload).hexdigest()
