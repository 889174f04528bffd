"""SEO scoring and head-tag generation."""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Callable

from coachsite.app.services.settings_service import GeneralSettings, SeoSettings


@dataclass(frozen=True, slots=True)
class SeoCheck:
    key: str
    label: str
    points: int
    predicate: Callable[[SeoSettings], bool]


def _filled(value: str | None) -> bool:
    return bool(value and value.strip())


SEO_CHECKS: tuple[SeoCheck, ...] = (
    SeoCheck("meta_title", "Meta title is 30-60 characters", 10,
             lambda s: 30 <= len(s.meta_title or "") <= 60),
    SeoCheck("meta_description", "Meta description is 120-160 characters", 10,
             lambda s: 120 <= len(s.meta_description or "") <= 160),
    SeoCheck("meta_keywords", "Meta keywords are set", 5, lambda s: _filled(s.meta_keywords)),
    SeoCheck("og_title", "Open Graph title is set", 8, lambda s: _filled(s.og_title)),
    SeoCheck("og_description", "Open Graph description is set", 8,
             lambda s: _filled(s.og_description)),
    SeoCheck("og_image", "Open Graph image is set", 8, lambda s: _filled(s.og_image)),
    SeoCheck("twitter_card", "Twitter card type is set", 7, lambda s: _filled(s.twitter_card)),
    SeoCheck("canonical_url", "Canonical URL is set", 8, lambda s: _filled(s.canonical_url)),
    SeoCheck("schema_type", "Schema.org type is set", 10, lambda s: _filled(s.schema_type)),
    SeoCheck("sitemap_enabled", "Sitemap is enabled", 5, lambda s: bool(s.sitemap_enabled)),
    SeoCheck("robots_txt", "robots.txt is configured", 5, lambda s: _filled(s.robots_txt)),
    SeoCheck("focus_keywords", "Focus keywords are set", 8, lambda s: _filled(s.focus_keywords)),
    SeoCheck("google_site_verification", "Google site verification is set", 5,
             lambda s: _filled(s.google_site_verification)),
    SeoCheck("structured_data_enabled", "Structured data is enabled", 8,
             lambda s: bool(s.structured_data_enabled)),
)

MAX_SEO_SCORE = sum(check.points for check in SEO_CHECKS)


def calculate_seo_score(seo: SeoSettings) -> dict[str, Any]:
    """Return the weighted score for ``seo`` and the checks it failed."""

    score = 0
    failing: list[dict[str, Any]] = []
    for check in SEO_CHECKS:
        if check.predicate(seo):
            score += check.points
        else:
            failing.append({"key": check.key, "label": check.label, "points": check.points})
    return {"score": score, "max_score": MAX_SEO_SCORE, "failing_checks": failing}


def _same_as(raw: str) -> list[str]:
    try:
        value = json.loads(raw or "[]")
    except ValueError:
        return [item.strip() for item in (raw or "").split(",") if item.strip()]
    return [str(item) for item in value] if isinstance(value, list) else []


def build_head_tags(
    seo: SeoSettings,
    general: GeneralSettings | None = None,
    overrides: dict[str, str] | None = None,
) -> dict[str, Any]:
    """Return the title, meta tags, links and JSON-LD for a page head.

    ``overrides`` may replace ``title``, ``description`` and ``canonical_url``
    for individual pages such as the blog index.
    """

    overrides = overrides or {}
    title = overrides.get("title") or seo.meta_title or (general.site_title if general else "")
    description = overrides.get("description") or seo.meta_description
    canonical = overrides.get("canonical_url") or seo.canonical_url

    candidates = [
        ("name", "description", description),
        ("name", "keywords", seo.meta_keywords),
        ("property", "og:title", seo.og_title),
        ("property", "og:description", seo.og_description),
        ("property", "og:image", seo.og_image),
        ("property", "og:type", seo.og_type),
        ("property", "og:url", seo.og_url),
        ("name", "twitter:card", seo.twitter_card),
        ("name", "twitter:title", seo.twitter_title),
        ("name", "twitter:description", seo.twitter_description),
        ("name", "twitter:image", seo.twitter_image),
        ("name", "twitter:site", seo.twitter_site),
        ("name", "google-site-verification", seo.google_site_verification),
        ("name", "msvalidate.01", seo.bing_site_verification),
    ]
    meta = [
        {"attribute": attribute, "name": name, "content": content}
        for attribute, name, content in candidates
        if content
    ]
    links = [{"rel": "canonical", "href": canonical}] if canonical else []

    structured_data = None
    if seo.structured_data_enabled and seo.schema_type:
        structured_data = {
            "@context": "https://schema.org",
            "@type": seo.schema_type,
            "name": seo.schema_name,
            "jobTitle": seo.schema_job_title,
            "description": seo.schema_description,
            "url": seo.schema_url,
            "image": seo.schema_image,
            "sameAs": _same_as(seo.schema_same_as),
        }

    return {"title": title, "meta": meta, "links": links, "structured_data": structured_data}


PAGE_TITLES = {
    "blog": "Blog - Leadership Insights & Transformation Stories",
}


def page_head(page: str | None = None) -> dict[str, Any]:
    """Build head tags for a named public page from the stored settings."""

    seo = SeoSettings.load_or_default()
    general = GeneralSettings.load_or_default()
    overrides: dict[str, str] = {}
    if page in PAGE_TITLES:
        overrides["title"] = f"{PAGE_TITLES[page]} | {general.site_title}"
        base = (seo.canonical_url or "").rstrip("/")
        if base:
            overrides["canonical_url"] = f"{base}/{page}"
    return build_head_tags(seo, general, overrides)
