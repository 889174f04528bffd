"""Admin dashboard blueprint; every endpoint requires an admin token."""
from flask import Blueprint

admin_bp = Blueprint("admin", __name__)

from . import (  # noqa: E402,F401
    bookings,
    contacts,
    overview,
    posts,
    resources,
    settings,
    subscribers,
    testimonials,
)
