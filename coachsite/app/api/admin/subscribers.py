"""Newsletter subscriber manager and CSV export."""
from __future__ import annotations

import csv
import io
from http import HTTPStatus

from flask import Response, jsonify, request
from flask.typing import ResponseReturnValue

from coachsite.app.api.auth import admin_required
from coachsite.app.errors import ValidationError
from coachsite.app.models import SUBSCRIBER_STATUSES, NewsletterSubscriber, utcnow
from coachsite.extensions import db

from . import admin_bp
from .common import status_filter

CSV_HEADER = ("Email", "Source", "Date Subscribed")


def _stats() -> dict[str, int]:
    month_start = utcnow().replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    return {
        "total": NewsletterSubscriber.query.count(),
        "active": NewsletterSubscriber.query.filter_by(status="active").count(),
        "unsubscribed": NewsletterSubscriber.query.filter_by(status="unsubscribed").count(),
        "this_month": NewsletterSubscriber.query.filter(
            NewsletterSubscriber.created_at >= month_start
        ).count(),
    }


@admin_bp.get("/subscribers")
@admin_required
def list_subscribers() -> ResponseReturnValue:
    try:
        status = status_filter(request.args.get("status"), SUBSCRIBER_STATUSES)
    except ValidationError as exc:
        return jsonify(message=str(exc)), HTTPStatus.BAD_REQUEST

    query = NewsletterSubscriber.query.order_by(NewsletterSubscriber.created_at.desc())
    if status:
        query = query.filter_by(status=status)

    return (
        jsonify(subscribers=[item.to_dict() for item in query.all()], stats=_stats()),
        HTTPStatus.OK,
    )


@admin_bp.patch("/subscribers/<int:subscriber_id>")
@admin_required
def update_subscriber(subscriber_id: int) -> ResponseReturnValue:
    subscriber = db.get_or_404(NewsletterSubscriber, subscriber_id)
    payload = request.get_json(silent=True) or {}
    status = (payload.get("status") or "").strip().lower()
    if status not in SUBSCRIBER_STATUSES:
        return (
            jsonify(message=f"status must be one of: {', '.join(SUBSCRIBER_STATUSES)}."),
            HTTPStatus.BAD_REQUEST,
        )

    subscriber.status = status
    db.session.commit()
    return jsonify(subscriber=subscriber.to_dict(), stats=_stats()), HTTPStatus.OK


@admin_bp.delete("/subscribers/<int:subscriber_id>")
@admin_required
def delete_subscriber(subscriber_id: int) -> ResponseReturnValue:
    subscriber = db.get_or_404(NewsletterSubscriber, subscriber_id)
    db.session.delete(subscriber)
    db.session.commit()
    return jsonify(message="Subscriber deleted."), HTTPStatus.OK


@admin_bp.get("/subscribers/export")
@admin_required
def export_subscribers() -> Response:
    """Download active subscribers as CSV."""

    subscribers = (
        NewsletterSubscriber.query.filter_by(status="active")
        .order_by(NewsletterSubscriber.created_at.desc())
        .all()
    )

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for subscriber in subscribers:
        writer.writerow(
            (subscriber.email, subscriber.source, subscriber.created_at.date().isoformat())
        )

    filename = f"newsletter-subscribers-{utcnow().date().isoformat()}.csv"
    return Response(
        buffer.getvalue(),
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
