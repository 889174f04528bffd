"""Font theme helpers used by the admin font editor and its live preview."""
from __future__ import annotations

import logging
from dataclasses import replace
from urllib.parse import quote_plus

from coachsite.app.errors import ValidationError
from coachsite.app.services.settings_service import FontSettings

LOGGER = logging.getLogger(__name__)

GOOGLE_FONTS = (
    "Playfair Display", "Montserrat", "Dancing Script", "Open Sans", "Roboto",
    "Lato", "Oswald", "Source Sans Pro", "Raleway", "Poppins", "Merriweather",
    "PT Sans", "Ubuntu", "Nunito", "Work Sans", "Crimson Text", "Libre Baskerville",
    "Cormorant Garamond", "EB Garamond", "Lora", "Inter", "Fira Sans",
)
SYSTEM_FONTS = ("Arial", "Georgia", "Times New Roman", "Helvetica", "Verdana", "Trebuchet MS")
ALLOWED_FONTS = GOOGLE_FONTS + SYSTEM_FONTS

# Fonts the browser always has; they never go into the Google Fonts request.
_LOCAL_FONTS = {"Arial", "Georgia", "Times New Roman"}
_FONT_WEIGHTS = "300;400;500;600;700;800;900"
GOOGLE_FONTS_CSS = "https://fonts.googleapis.com/css2"


def _font_errors(settings: FontSettings) -> dict[str, str]:
    errors: dict[str, str] = {}
    for key in ("primary_font", "secondary_font", "accent_font"):
        family = getattr(settings, key)
        if family not in ALLOWED_FONTS:
            errors[key] = f"{key} '{family}' is not an available font."

    for key in ("body_font_size", "heading_font_size", "font_weight_normal", "font_weight_bold"):
        if not getattr(settings, key).isdigit():
            errors[key] = f"{key} must be a whole number."

    try:
        float(settings.line_height)
    except ValueError:
        errors["line_height"] = "line_height must be numeric."
    return errors


def validate_fonts(settings: FontSettings) -> None:
    """Raise :class:`ValidationError` for unknown font families or bad sizes."""

    errors = _font_errors(settings)
    if errors:
        raise ValidationError(next(iter(errors.values())))


def load_fonts() -> FontSettings:
    """Load the stored fonts, resetting any value that fails validation."""

    settings = FontSettings.load_or_default()
    errors = _font_errors(settings)
    if not errors:
        return settings
    for message in errors.values():
        LOGGER.warning("Ignoring stored font setting: %s", message)
    defaults = FontSettings()
    return replace(settings, **{key: getattr(defaults, key) for key in errors})


def css_variables(settings: FontSettings) -> dict[str, str]:
    return {
        "--font-primary": settings.primary_font,
        "--font-secondary": settings.secondary_font,
        "--font-accent": settings.accent_font,
        "--font-size-body": f"{settings.body_font_size}px",
        "--font-size-heading": f"{settings.heading_font_size}px",
        "--line-height": settings.line_height,
        "--font-weight-normal": settings.font_weight_normal,
        "--font-weight-bold": settings.font_weight_bold,
    }


def google_fonts_url(settings: FontSettings) -> str | None:
    """Return the stylesheet URL for the web fonts in ``settings``, if any."""

    families: list[str] = []
    for family in (settings.primary_font, settings.secondary_font, settings.accent_font):
        if family and family not in _LOCAL_FONTS and family not in families:
            families.append(family)
    if not families:
        return None
    query = "&".join(f"family={quote_plus(family)}:wght@{_FONT_WEIGHTS}" for family in families)
    return f"{GOOGLE_FONTS_CSS}?{query}&display=swap"


def stylesheet(settings: FontSettings) -> str:
    """Render the CSS custom properties as a ``:root`` block."""

    body = "\n".join(f"  {name}: {value};" for name, value in css_variables(settings).items())
    return f":root {{\n{body}\n}}"


def preview(settings: FontSettings) -> dict[str, object]:
    validate_fonts(settings)
    return {
        "settings": settings.to_mapping(),
        "css_variables": css_variables(settings),
        "google_fonts_url": google_fonts_url(settings),
        "stylesheet": stylesheet(settings),
    }
