"""Site settings stored as JSON-encoded key/value rows.

Settings are grouped into small typed dataclasses (general, SEO, social,
email, security and so on). Each group loads its own keys, coerces stored
values to the declared field types and saves back with an upsert per key.
The flat helpers at the bottom serve the public site, which only needs a
dictionary overlay.
"""
from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields
from typing import Any, ClassVar, Iterable, Type, TypeVar, get_type_hints

from sqlalchemy.exc import SQLAlchemyError

from coachsite.app.errors import RecordNotFound, ValidationError
from coachsite.app.models import SiteSetting
from coachsite.app.validation import coerce_bool
from coachsite.extensions import db

LOGGER = logging.getLogger(__name__)

SEED_BATCH_SIZE = 10
SECRET_MASK = "********"

G = TypeVar("G", bound="SettingsGroup")


def _decode(raw: str | None) -> Any:
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        return raw


def _coerce(value: Any, target: type, key: str) -> Any:
    if target is bool:
        try:
            return coerce_bool(value)
        except ValidationError as exc:
            raise ValidationError(f"{key}: {exc}") from exc
    if target is int:
        try:
            return int(value)
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"{key} must be a whole number.") from exc
    if value is None:
        return ""
    if isinstance(value, (list, dict)):
        return json.dumps(value)
    return str(value)


@dataclass
class SettingsGroup:
    """Base class for a named set of related settings keys."""

    name: ClassVar[str] = ""
    secret_fields: ClassVar[tuple[str, ...]] = ()

    @classmethod
    def keys(cls) -> list[str]:
        return [item.name for item in fields(cls)]

    @classmethod
    def _types(cls) -> dict[str, type]:
        hints = get_type_hints(cls)
        return {key: hints[key] for key in cls.keys()}

    @classmethod
    def from_mapping(cls: Type[G], values: dict[str, Any], strict: bool = True) -> G:
        """Build a group from ``values``, using field defaults for missing keys.

        With ``strict`` off, a value that cannot be converted to its field type
        is logged and replaced by the field default instead of raising.
        """

        defaults = cls()
        types = cls._types()
        kwargs = {}
        for key in cls.keys():
            if key in values and values[key] is not None:
                try:
                    kwargs[key] = _coerce(values[key], types[key], key)
                except ValidationError as exc:
                    if strict:
                        raise
                    LOGGER.warning("Ignoring stored %s setting: %s", cls.name, exc)
                    kwargs[key] = getattr(defaults, key)
            else:
                kwargs[key] = getattr(defaults, key)
        return cls(**kwargs)

    def to_mapping(self) -> dict[str, Any]:
        return asdict(self)

    def to_public_mapping(self) -> dict[str, Any]:
        """Return values with secret fields masked."""

        data = self.to_mapping()
        for key in self.secret_fields:
            if data.get(key):
                data[key] = SECRET_MASK
        return data

    def merged(self: G, payload: dict[str, Any]) -> G:
        """Return a copy with ``payload`` applied; unknown keys are rejected."""

        unknown = sorted(set(payload) - set(self.keys()))
        if unknown:
            raise ValidationError(
                f"Unknown {self.name} settings: {', '.join(unknown)}."
            )
        values = self.to_mapping()
        for key, value in payload.items():
            if key in self.secret_fields and value == SECRET_MASK:
                continue
            values[key] = value
        return type(self).from_mapping(values)

    @classmethod
    def load(cls: Type[G]) -> G:
        rows = SiteSetting.query.filter(SiteSetting.key.in_(cls.keys())).all()
        return cls.from_mapping({row.key: _decode(row.value) for row in rows}, strict=False)

    @classmethod
    def load_or_default(cls: Type[G]) -> G:
        """Load the group, falling back to its defaults if the database fails."""

        try:
            return cls.load()
        except SQLAlchemyError:
            db.session.rollback()
            LOGGER.exception("Error loading %s settings; using defaults", cls.name)
            return cls()

    def save(self) -> None:
        for key, value in self.to_mapping().items():
            _upsert(key, value)
        db.session.commit()
        LOGGER.info("Saved %s settings", self.name)


@dataclass
class GeneralSettings(SettingsGroup):
    name: ClassVar[str] = "general"

    site_title: str = "Lillian Adegbola - Queen of Clarity & Purpose"
    site_tagline: str = "Transforming Leaders, Empowering Lives"
    site_description: str = (
        "Empowering visionary leaders and ambitious achievers through transformational "
        "coaching, keynote speaking, and strategic guidance."
    )
    contact_email: str = "clarityqueen23@gmail.com"
    contact_phone: str = "+234 802 320 0539"
    contact_address: str = ""


@dataclass
class ImageSettings(SettingsGroup):
    name: ClassVar[str] = "images"

    portrait_url: str = "https://data.scriptsedgeonline.com/wp-content/uploads/2025/08/z-9c5N1_400x400.jpg"
    hero_portrait_url: str = "https://data.scriptsedgeonline.com/wp-content/uploads/2025/08/z-9c5N1_400x400.jpg"
    about_image_url: str = (
        "https://images.unsplash.com/photo-1573496359142-b8d87734a5a2"
        "?ixlib=rb-4.0.3&auto=format&fit=crop&w=800&q=80"
    )
    logo_url: str = ""
    favicon_url: str = ""


@dataclass
class SeoSettings(SettingsGroup):
    name: ClassVar[str] = "seo"

    meta_title: str = "Lillian Adegbola - Leadership Coach & Keynote Speaker"
    meta_description: str = (
        "Transform your leadership with Lillian Adegbola. Expert coaching, powerful "
        "keynotes, and strategic guidance for visionary leaders."
    )
    meta_keywords: str = (
        "leadership coaching, executive coaching, keynote speaker, business coaching, "
        "transformation, empowerment"
    )
    og_title: str = "Lillian Adegbola - Queen of Clarity & Purpose"
    og_description: str = (
        "Transforming leaders and empowering lives through fearless coaching and authentic growth."
    )
    og_image: str = "https://lillianadegbola.com/og-image.jpg"
    og_type: str = "website"
    og_url: str = "https://lillianadegbola.com"
    twitter_card: str = "summary_large_image"
    twitter_title: str = "Lillian Adegbola - Leadership Transformation"
    twitter_description: str = (
        "Unlock your fearless potential with transformational leadership coaching."
    )
    twitter_image: str = "https://lillianadegbola.com/twitter-image.jpg"
    twitter_site: str = "@LillianAdegbola"
    canonical_url: str = "https://lillianadegbola.com"
    robots_txt: str = "User-agent: *\nAllow: /"
    sitemap_enabled: bool = True
    schema_type: str = "Person"
    schema_name: str = "Lillian Adegbola"
    schema_job_title: str = "Leadership Coach & Keynote Speaker"
    schema_description: str = "Queen of Clarity & Purpose - Transforming leaders and empowering lives"
    schema_url: str = "https://lillianadegbola.com"
    schema_image: str = "https://lillianadegbola.com/profile-image.jpg"
    schema_same_as: str = json.dumps(
        [
            "https://ng.linkedin.com/in/lillianadegbola",
            "https://www.instagram.com/lillianadegbola/",
            "https://www.facebook.com/CoachLillianNkechiAdegbola/",
            "https://x.com/LillianAdegbola",
        ]
    )
    structured_data_enabled: bool = True
    google_site_verification: str = ""
    bing_site_verification: str = ""
    focus_keywords: str = (
        "leadership coaching, executive coaching, keynote speaker, business transformation"
    )
    target_audience: str = "executives, entrepreneurs, business leaders, professionals"
    content_strategy: str = "thought leadership, case studies, transformation stories"
    rank_tracking_keywords: str = json.dumps(
        [
            "leadership coach",
            "executive coach",
            "keynote speaker",
            "business coach",
            "transformation coach",
        ]
    )


@dataclass
class SocialSettings(SettingsGroup):
    name: ClassVar[str] = "social"

    social_linkedin: str = "https://ng.linkedin.com/in/lillianadegbola"
    social_facebook: str = "https://www.facebook.com/CoachLillianNkechiAdegbola/"
    social_instagram: str = "https://www.instagram.com/lillianadegbola/"
    social_twitter: str = "https://x.com/LillianAdegbola"
    social_youtube: str = ""
    social_tiktok: str = ""


@dataclass
class AnalyticsSettings(SettingsGroup):
    name: ClassVar[str] = "analytics"

    google_analytics_id: str = ""
    google_tag_manager_id: str = ""
    facebook_pixel_id: str = ""
    google_search_console: str = ""
    hotjar_id: str = ""
    linkedin_insight_tag: str = ""
    microsoft_clarity_id: str = ""


@dataclass
class FeatureSettings(SettingsGroup):
    name: ClassVar[str] = "features"

    booking_enabled: bool = True
    newsletter_enabled: bool = True
    blog_enabled: bool = True
    testimonials_enabled: bool = True
    contact_form_enabled: bool = True
    live_chat_enabled: bool = False
    cookie_banner_enabled: bool = True
    search_enabled: bool = False
    comments_enabled: bool = False
    social_sharing_enabled: bool = True


@dataclass
class BrandingSettings(SettingsGroup):
    name: ClassVar[str] = "branding"

    primary_color: str = "#032B44"
    secondary_color: str = "#F8E231"
    accent_color: str = "#DAA520"
    background_color: str = "#FFFFFF"
    text_color: str = "#2C2C2C"
    link_color: str = "#032B44"
    button_style: str = "rounded"
    font_primary: str = "Playfair Display"
    font_secondary: str = "Montserrat"


@dataclass
class ContentSettings(SettingsGroup):
    name: ClassVar[str] = "content"

    posts_per_page: int = 6
    excerpt_length: int = 150
    default_post_status: str = "draft"
    allow_comments: bool = False
    auto_excerpt: bool = True
    related_posts: bool = True


@dataclass
class EmailSettings(SettingsGroup):
    name: ClassVar[str] = "email"
    secret_fields: ClassVar[tuple[str, ...]] = ("smtp_password",)

    smtp_host: str = ""
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    smtp_secure: bool = True
    from_email: str = "clarityqueen23@gmail.com"
    from_name: str = "Lillian Adegbola"
    reply_to_email: str = ""
    email_notifications: bool = True


@dataclass
class SecuritySettings(SettingsGroup):
    name: ClassVar[str] = "security"

    cache_enabled: bool = True
    compression_enabled: bool = True
    ssl_redirect: bool = True
    maintenance_mode: bool = False
    api_rate_limit: int = 100
    backup_enabled: bool = True
    security_headers: bool = True
    two_factor_auth: bool = False


@dataclass
class PerformanceSettings(SettingsGroup):
    name: ClassVar[str] = "performance"

    lazy_loading: bool = True
    image_optimization: bool = True
    minification: bool = True
    compression: bool = True
    caching_enabled: bool = True
    breadcrumbs_enabled: bool = True


@dataclass
class LegalSettings(SettingsGroup):
    name: ClassVar[str] = "legal"

    privacy_policy_url: str = "/privacy-policy"
    terms_of_service_url: str = "/terms-of-service"
    cookie_policy_url: str = "/cookie-policy"
    gdpr_enabled: bool = False
    ccpa_enabled: bool = False
    age_verification: bool = False


@dataclass
class FontSettings(SettingsGroup):
    name: ClassVar[str] = "fonts"

    primary_font: str = "Playfair Display"
    secondary_font: str = "Montserrat"
    accent_font: str = "Dancing Script"
    body_font_size: str = "16"
    heading_font_size: str = "48"
    line_height: str = "1.6"
    font_weight_normal: str = "400"
    font_weight_bold: str = "700"


SETTINGS_GROUPS: dict[str, Type[SettingsGroup]] = {
    group.name: group
    for group in (
        GeneralSettings,
        ImageSettings,
        SeoSettings,
        SocialSettings,
        AnalyticsSettings,
        FeatureSettings,
        BrandingSettings,
        ContentSettings,
        EmailSettings,
        SecuritySettings,
        PerformanceSettings,
        LegalSettings,
        FontSettings,
    )
}

PUBLIC_GROUPS: tuple[Type[SettingsGroup], ...] = (
    GeneralSettings,
    ImageSettings,
    SocialSettings,
    FeatureSettings,
    BrandingSettings,
    ContentSettings,
    LegalSettings,
    FontSettings,
)

DEFAULT_SETTINGS: dict[str, Any] = {
    key: value
    for group in SETTINGS_GROUPS.values()
    for key, value in group().to_mapping().items()
}


def get_group(name: str) -> Type[SettingsGroup]:
    try:
        return SETTINGS_GROUPS[name]
    except KeyError as exc:
        raise RecordNotFound(f"Unknown settings group '{name}'.") from exc


def _upsert(key: str, value: Any) -> SiteSetting:
    setting = SiteSetting.query.filter_by(key=key).first()
    if setting is None:
        setting = SiteSetting(key=key)
    setting.value = json.dumps(value)
    db.session.add(setting)
    return setting


def initialize_settings() -> bool:
    """Seed :data:`DEFAULT_SETTINGS` when the settings table is empty.

    Returns ``True`` when settings exist afterwards and ``False`` if the
    database could not be read or written.
    """

    try:
        existing = db.session.query(SiteSetting.id).limit(1).first()
    except SQLAlchemyError:
        db.session.rollback()
        LOGGER.exception("Error checking settings")
        return False

    if existing is not None:
        LOGGER.info("Settings already exist in database")
        return True

    LOGGER.info("No settings found, inserting defaults")
    items = list(DEFAULT_SETTINGS.items())
    batches = (len(items) + SEED_BATCH_SIZE - 1) // SEED_BATCH_SIZE
    try:
        for index in range(0, len(items), SEED_BATCH_SIZE):
            batch = items[index : index + SEED_BATCH_SIZE]
            db.session.add_all(
                SiteSetting(key=key, value=json.dumps(value)) for key, value in batch
            )
            db.session.commit()
            LOGGER.debug("Inserted settings batch %s/%s", index // SEED_BATCH_SIZE + 1, batches)
    except SQLAlchemyError:
        db.session.rollback()
        LOGGER.exception("Error initializing settings")
        return False

    LOGGER.info("Default settings initialized")
    return True


def get_settings(keys: Iterable[str] | None = None) -> dict[str, Any]:
    """Return decoded settings, optionally restricted to ``keys``."""

    query = SiteSetting.query
    if keys is not None:
        query = query.filter(SiteSetting.key.in_(list(keys)))
    return {row.key: _decode(row.value) for row in query.all()}


def update_setting(key: str, value: Any) -> None:
    _upsert(key, value)
    db.session.commit()


def public_settings() -> dict[str, Any]:
    """Return the flat settings overlay consumed by the public site."""

    merged: dict[str, Any] = {}
    for group in PUBLIC_GROUPS:
        merged.update(group.load_or_default().to_mapping())
    return merged
