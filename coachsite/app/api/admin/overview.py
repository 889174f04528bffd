"""Dashboard overview: headline counters and recent activity."""
from __future__ import annotations

from datetime import datetime
from http import HTTPStatus

from flask import jsonify
from flask.typing import ResponseReturnValue

from coachsite.app.api.auth import admin_required
from coachsite.app.models import (
    BlogPost,
    Booking,
    ContactMessage,
    NewsletterSubscriber,
    utcnow,
)

from . import admin_bp

RECENT_ACTIVITY_LIMIT = 10


def _month_start(now: datetime) -> datetime:
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def recent_activity(limit: int = RECENT_ACTIVITY_LIMIT) -> list[dict]:
    """Merge the latest bookings and contact messages, newest first."""

    bookings = Booking.query.order_by(Booking.created_at.desc()).limit(limit).all()
    messages = ContactMessage.query.order_by(ContactMessage.created_at.desc()).limit(limit).all()

    items = [
        {
            "type": "booking",
            "id": booking.id,
            "title": f"New booking from {booking.full_name}",
            "subtitle": booking.service_name,
            "status": booking.status,
            "created_at": booking.created_at,
        }
        for booking in bookings
    ] + [
        {
            "type": "message",
            "id": message.id,
            "title": f"Message from {message.name}",
            "subtitle": message.email,
            "status": message.status,
            "created_at": message.created_at,
        }
        for message in messages
    ]
    items.sort(key=lambda item: item["created_at"], reverse=True)
    for item in items:
        item["created_at"] = item["created_at"].isoformat()
    return items[:limit]


@admin_bp.get("/overview")
@admin_required
def overview() -> ResponseReturnValue:
    """Return the dashboard counters."""

    month_start = _month_start(utcnow())
    stats = {
        "total_bookings": Booking.query.count(),
        "pending_bookings": Booking.query.filter_by(status="pending").count(),
        "bookings_this_month": Booking.query.filter(Booking.created_at >= month_start).count(),
        "total_messages": ContactMessage.query.count(),
        "unread_messages": ContactMessage.query.filter_by(status="unread").count(),
        "active_subscribers": NewsletterSubscriber.query.filter_by(status="active").count(),
        "total_posts": BlogPost.query.count(),
        "published_posts": BlogPost.query.filter_by(is_published=True).count(),
    }
    return jsonify(stats=stats, recent_activity=recent_activity()), HTTPStatus.OK
