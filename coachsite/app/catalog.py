"""Static catalog of the consultation services offered through the booking flow."""
from __future__ import annotations

from dataclasses import asdict, dataclass

DEFAULT_SERVICE_NAME = "General Consultation"


@dataclass(frozen=True, slots=True)
class Service:
    id: str
    name: str
    description: str
    price: str
    duration: str = "30 min"

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


_FREE = "Free Consultation"
_DISCOVERY = "Complimentary Discovery Call"

SERVICES: tuple[Service, ...] = (
    Service("keynote", "Keynote Speaker Services", "Inspire Action. Transform Mindsets.", _FREE),
    Service("leadership", "Leadership Coaching", "Unlock Your Potential. Lead with Confidence.", _DISCOVERY),
    Service("executive", "Executive Coaching", "Elevate Performance. Achieve Exceptional Results.", _DISCOVERY),
    Service("retreats", "Destination Retreat Leader", "Reconnect. Refocus. Renew.", _FREE),
    Service("advisory", "Strategic Advisory", "Strategic Insight. Trusted Counsel.", _FREE),
    Service("business", "Business Coaching", "Grow Your Business. Unlock Potential.", _DISCOVERY),
    Service("organizational", "Organizational Development", "Build High-Performing Teams. Drive Results.", _FREE),
    Service("life", "Life Coaching", "Unlock Your Potential. Live with Purpose.", _DISCOVERY),
    Service("facilitation", "Facilitation Expertise", "Transform Conversations. Unlock Collaboration.", _FREE),
    Service("conflict", "Conflict Resolution & Mediation", "Resolve Conflicts with Clarity and Purpose.", _FREE),
    Service("spiritual", "Spiritual Coach/Advisor", "Nurture Your Spirit. Discover Your Path.", _DISCOVERY),
    Service("management", "Management Consultant", "Elevate Performance. Achieve Sustainable Growth.", _FREE),
    Service("capacity", "Capacity Development", "Strengthen Your Organization. Amplify Your Impact.", _FREE),
    Service("corporate", "Corporate Trainer", "Empower Your Team. Drive Business Results.", _FREE),
)

_SERVICES_BY_ID = {service.id: service for service in SERVICES}


def get_service(service_id: str | None) -> Service | None:
    if not service_id:
        return None
    return _SERVICES_BY_ID.get(service_id)


def service_name(service_id: str | None) -> str:
    """Return the display name for ``service_id`` or the generic fallback."""

    service = get_service(service_id)
    return service.name if service else DEFAULT_SERVICE_NAME
