"""Exception types shared by services and the JSON error handlers."""
from __future__ import annotations

from http import HTTPStatus

from flask import Flask, current_app, jsonify
from sqlalchemy.exc import SQLAlchemyError

from coachsite.extensions import db


class ValidationError(ValueError):
    """Raised when submitted data is missing required fields or is malformed."""


class ConflictError(ValueError):
    """Raised when a write would duplicate an existing record."""


class RecordNotFound(LookupError):
    """Raised when a requested record does not exist."""


def register_error_handlers(app: Flask) -> None:
    """Attach JSON handlers for errors that escape individual endpoints."""

    @app.errorhandler(SQLAlchemyError)
    def _database_error(exc: SQLAlchemyError):
        db.session.rollback()
        current_app.logger.exception("Database call failed")
        detail = str(getattr(exc, "orig", None) or exc)
        return jsonify(message=detail), HTTPStatus.INTERNAL_SERVER_ERROR

    @app.errorhandler(HTTPStatus.NOT_FOUND)
    def _not_found(_exc):
        return jsonify(message="Resource not found."), HTTPStatus.NOT_FOUND

    @app.errorhandler(HTTPStatus.METHOD_NOT_ALLOWED)
    def _method_not_allowed(_exc):
        return jsonify(message="Method not allowed."), HTTPStatus.METHOD_NOT_ALLOWED
