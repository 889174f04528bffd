"""Helpers shared by the admin managers."""
from __future__ import annotations

from typing import Any, Iterable

from sqlalchemy import func

from coachsite.app.errors import ValidationError
from coachsite.app.validation import coerce_bool
from coachsite.extensions import db


def apply_changes(
    record: Any,
    payload: dict[str, Any],
    text_fields: Iterable[str] = (),
    bool_fields: Iterable[str] = (),
    int_fields: Iterable[str] = (),
) -> list[str]:
    """Copy the listed fields present in ``payload`` onto ``record``.

    Blank text becomes ``None``. Returns the names of the fields written.
    """

    changed: list[str] = []
    for name in text_fields:
        if name in payload:
            value = payload[name]
            value = value.strip() if isinstance(value, str) else value
            setattr(record, name, value or None)
            changed.append(name)
    for name in bool_fields:
        if name in payload:
            try:
                setattr(record, name, coerce_bool(payload[name]))
            except ValidationError as exc:
                raise ValidationError(f"{name}: {exc}") from exc
            changed.append(name)
    for name in int_fields:
        if name in payload:
            try:
                setattr(record, name, int(payload[name]))
            except (TypeError, ValueError) as exc:
                raise ValidationError(f"{name} must be a whole number.") from exc
            changed.append(name)
    return changed


def status_counts(model: Any, statuses: Iterable[str]) -> dict[str, int]:
    """Return row counts per status, including zero for unused statuses."""

    rows = db.session.query(model.status, func.count(model.id)).group_by(model.status).all()
    found = {status: count for status, count in rows}
    counts = {status: found.get(status, 0) for status in statuses}
    counts["all"] = sum(found.values())
    return counts


def status_filter(value: str | None, statuses: Iterable[str]) -> str | None:
    """Validate a ``?status=`` filter; ``all`` or nothing means no filter."""

    value = (value or "").strip().lower()
    if not value or value == "all":
        return None
    if value not in statuses:
        raise ValidationError(f"status must be one of: {', '.join(statuses)}.")
    return value
