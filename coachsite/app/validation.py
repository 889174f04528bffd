"""Input checks shared by the public forms and the admin editors."""
from __future__ import annotations

from typing import Any, Iterable
from urllib.parse import urlparse

from email_validator import EmailNotValidError, validate_email

from coachsite.app.errors import ValidationError


def normalize_email(value: str | None) -> str:
    """Return the normalized form of ``value`` or raise :class:`ValidationError`."""

    value = (value or "").strip()
    if not value:
        raise ValidationError("Email is required.")
    try:
        result = validate_email(value, check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValidationError(f"Email is not valid: {exc}") from exc
    return result.normalized


def require_fields(payload: dict[str, Any], names: Iterable[str]) -> dict[str, str]:
    """Strip the named string fields and fail if any of them is blank."""

    values = {name: (payload.get(name) or "").strip() for name in names}
    missing = [name for name, value in values.items() if not value]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}.")
    return values


def require_http_url(value: str | None, label: str = "URL") -> str:
    value = (value or "").strip()
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValidationError(f"{label} must be an http(s) URL.")
    return value


def coerce_bool(value: Any) -> bool:
    """Interpret JSON booleans, numbers and common truthy strings."""

    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "1", "yes", "on"}:
            return True
        if lowered in {"false", "0", "no", "off", ""}:
            return False
    raise ValidationError(f"Expected a boolean, got {value!r}.")
