"""API blueprint registration."""
from flask import Blueprint

api_bp = Blueprint("api", __name__)

# Import endpoints to ensure they are registered with the blueprint.
from . import auth  # noqa: E402,F401
from .admin import admin_bp  # noqa: E402,F401
from .booking import booking_bp  # noqa: E402,F401
from .public import public_bp  # noqa: E402,F401

api_bp.register_blueprint(booking_bp, url_prefix="/booking")
api_bp.register_blueprint(public_bp, url_prefix="/public")
api_bp.register_blueprint(admin_bp, url_prefix="/admin")
