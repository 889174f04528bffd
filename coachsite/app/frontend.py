"""HTML shells the public site and the admin dashboard mount into."""
from __future__ import annotations

from flask import Blueprint, render_template

from coachsite.app.services.seo import page_head
from coachsite.app.services.theme import google_fonts_url, load_fonts, stylesheet

frontend_bp = Blueprint("frontend", __name__)


def _site_context(page: str | None) -> dict:
    # Both loaders fall back to defaults when the settings table is unreadable.
    head = page_head(page)
    fonts = load_fonts()
    return {
        "head": head,
        "font_stylesheet": stylesheet(fonts),
        "google_fonts_url": google_fonts_url(fonts),
        "page": page or "home",
    }


@frontend_bp.get("/")
def home() -> str:
    """Render the public site shell."""

    return render_template("site/index.html", **_site_context(None))


@frontend_bp.get("/blog")
@frontend_bp.get("/blog/<path:path>")
def blog(path: str | None = None) -> str:
    """Render the public site shell with blog head tags."""

    return render_template("site/index.html", **_site_context("blog"))


@frontend_bp.get("/admin")
@frontend_bp.get("/admin/<path:path>")
def admin_dashboard(path: str | None = None) -> str:
    """Render the admin dashboard shell."""

    return render_template("admin/index.html")
