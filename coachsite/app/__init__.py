"""Application factory for the coaching site backend."""
from __future__ import annotations

from http import HTTPStatus

from flask import Flask, jsonify
from flask_cors import CORS

from coachsite.app.errors import register_error_handlers
from coachsite.app.logging_setup import configure_logging
from coachsite.app.middleware import register_audit_middleware
from coachsite.app.models import AdminUser
from coachsite.app.services.session_store import init_session_store, token_blocklist
from coachsite.app.services.settings_service import initialize_settings
from coachsite.config import get_config
from coachsite.extensions import bcrypt, db, jwt, migrate


def create_app(config_name: str | None = None) -> Flask:
    """Create and configure the Flask application."""

    app = Flask(__name__)
    config_cls = get_config(config_name or app.config.get("ENV"))
    app.config.from_object(config_cls)

    configure_logging(app)
    register_extensions(app)
    register_jwt_callbacks()
    register_blueprints(app)
    register_error_handlers(app)
    init_session_store(app)

    if app.config.get("DEBUG"):
        _seed_dev_admin(app)

    if app.config.get("SEED_SETTINGS_ON_STARTUP"):
        with app.app_context():
            initialize_settings()

    register_audit_middleware(app)

    CORS(app)
    return app


def register_extensions(app: Flask) -> None:
    """Initialize Flask extensions."""

    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    bcrypt.init_app(app)


def register_jwt_callbacks() -> None:
    """Check revoked tokens and answer token failures with JSON bodies."""

    @jwt.token_in_blocklist_loader
    def _token_revoked(_jwt_header, jwt_payload) -> bool:
        return token_blocklist().is_revoked(jwt_payload["jti"])

    @jwt.unauthorized_loader
    def _missing_token(reason: str):
        return jsonify(message=reason), HTTPStatus.UNAUTHORIZED

    @jwt.invalid_token_loader
    def _invalid_token(reason: str):
        return jsonify(message=reason), HTTPStatus.UNAUTHORIZED

    @jwt.expired_token_loader
    def _expired_token(_jwt_header, _jwt_payload):
        return jsonify(message="Session expired. Please sign in again."), HTTPStatus.UNAUTHORIZED

    @jwt.revoked_token_loader
    def _revoked_token(_jwt_header, _jwt_payload):
        return jsonify(message="Session has been signed out."), HTTPStatus.UNAUTHORIZED


def register_blueprints(app: Flask) -> None:
    """Register application blueprints."""

    from coachsite.app.api import api_bp
    from coachsite.app.frontend import frontend_bp

    app.register_blueprint(api_bp, url_prefix="/api")
    app.register_blueprint(frontend_bp)


def _seed_dev_admin(app: Flask) -> None:
    """Create the tables and the configured admin account for development."""
    with app.app_context():
        db.create_all()
        email = app.config["ADMIN_EMAIL"].strip().lower()
        existing_admin = AdminUser.query.filter_by(email=email).first()
        if not existing_admin:
            password_hash = bcrypt.generate_password_hash(app.config["ADMIN_PASSWORD"]).decode(
                "utf-8"
            )
            dev_admin = AdminUser(
                email=email,
                password_hash=password_hash,
                role="super_admin",
                full_name=app.config["ADMIN_NAME"],
            )
            db.session.add(dev_admin)
            db.session.commit()
            app.logger.info("Seeded admin account %s", email)
