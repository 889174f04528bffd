"""Admin authentication endpoints and the ``admin_required`` guard."""
from __future__ import annotations

from datetime import datetime, timezone
from functools import wraps
from http import HTTPStatus
from typing import Any, Callable

from flask import g, jsonify, request
from flask.typing import ResponseReturnValue
from flask_jwt_extended import create_access_token, get_jwt, get_jwt_identity, jwt_required

from coachsite.app.models import AdminUser, utcnow
from coachsite.app.services.session_store import token_blocklist
from coachsite.extensions import bcrypt, db

from . import api_bp

ADMIN_ROLES = ("admin", "super_admin")


def _admin_from_token() -> AdminUser | None:
    identity = get_jwt_identity()
    try:
        admin_id = int(identity) if identity is not None else None
    except (TypeError, ValueError):
        admin_id = None
    if admin_id is None:
        return None
    return db.session.get(AdminUser, admin_id)


def admin_required(fn: Callable[..., Any]) -> Callable[..., Any]:
    """Require a valid token that belongs to an active admin account."""

    @wraps(fn)
    @jwt_required()
    def wrapper(*args: Any, **kwargs: Any) -> ResponseReturnValue:
        admin = _admin_from_token()
        if admin is None:
            return jsonify(message="Invalid token."), HTTPStatus.UNAUTHORIZED
        if not admin.is_active or admin.role not in ADMIN_ROLES:
            return jsonify(message="Admin access required."), HTTPStatus.FORBIDDEN
        g.current_admin = admin
        return fn(*args, **kwargs)

    return wrapper


def _profile(admin: AdminUser) -> dict[str, Any]:
    return {
        "id": admin.id,
        "email": admin.email,
        "full_name": admin.full_name,
        "role": admin.role,
        "last_login_at": admin.last_login_at.isoformat() if admin.last_login_at else None,
    }


@api_bp.post("/auth/login")
def login() -> ResponseReturnValue:
    """Authenticate an admin and return an access token."""

    payload = request.get_json(silent=True) or {}
    email = (payload.get("email") or "").strip().lower()
    password = payload.get("password") or ""

    if not email or not password:
        return (
            jsonify(message="Email and password are required."),
            HTTPStatus.BAD_REQUEST,
        )

    admin = AdminUser.query.filter_by(email=email).first()
    if not admin or not bcrypt.check_password_hash(admin.password_hash, password):
        return (
            jsonify(message="Invalid email or password."),
            HTTPStatus.UNAUTHORIZED,
        )

    if not admin.is_active:
        return jsonify(message="This account has been disabled."), HTTPStatus.FORBIDDEN

    admin.last_login_at = utcnow()
    db.session.add(admin)
    db.session.commit()

    access_token = create_access_token(identity=str(admin.id), additional_claims={"role": admin.role})
    return jsonify(access_token=access_token, admin=_profile(admin)), HTTPStatus.OK


@api_bp.get("/auth/me")
@jwt_required()
def current_admin() -> ResponseReturnValue:
    """Return the signed-in admin's profile."""

    identity = get_jwt_identity()
    if identity is None:
        return jsonify(message="Invalid token."), HTTPStatus.UNAUTHORIZED

    admin = _admin_from_token()
    if admin is None:
        return jsonify(message="Admin not found."), HTTPStatus.NOT_FOUND

    return jsonify(_profile(admin)), HTTPStatus.OK


@api_bp.post("/auth/logout")
@jwt_required()
def logout() -> ResponseReturnValue:
    """Revoke the presented token."""

    claims = get_jwt()
    expires_at = datetime.fromtimestamp(claims["exp"], tz=timezone.utc).replace(tzinfo=None)
    token_blocklist().revoke(claims["jti"], expires_at)
    return jsonify(message="Signed out."), HTTPStatus.OK
