"""Site settings editors: settings groups, SEO, fonts and the portrait."""
from __future__ import annotations

from http import HTTPStatus
from typing import Type

from flask import current_app, g, jsonify, request
from flask.typing import ResponseReturnValue

from coachsite.app.api.auth import admin_required
from coachsite.app.errors import ValidationError
from coachsite.app.services.seo import build_head_tags, calculate_seo_score
from coachsite.app.services.settings_service import (
    SETTINGS_GROUPS,
    FontSettings,
    GeneralSettings,
    ImageSettings,
    SeoSettings,
    SettingsGroup,
    get_group,
    get_settings,
    update_setting,
)
from coachsite.app.services.theme import (
    ALLOWED_FONTS,
    GOOGLE_FONTS,
    SYSTEM_FONTS,
    load_fonts,
    preview,
)
from coachsite.app.validation import require_http_url

from . import admin_bp


def _update_group(group_cls: Type[SettingsGroup], payload: dict) -> SettingsGroup:
    current = load_fonts() if group_cls is FontSettings else group_cls.load()
    updated = current.merged(payload)
    if isinstance(updated, FontSettings):
        preview(updated)
    updated.save()
    admin = getattr(g, "current_admin", None)
    current_app.logger.info(
        "%s updated %s settings", admin.email if admin else "unknown admin", group_cls.name
    )
    return updated


@admin_bp.get("/settings")
@admin_required
def list_setting_groups() -> ResponseReturnValue:
    return jsonify(groups=sorted(SETTINGS_GROUPS)), HTTPStatus.OK


@admin_bp.get("/settings/<group>")
@admin_required
def get_settings_group(group: str) -> ResponseReturnValue:
    try:
        group_cls = get_group(group)
    except LookupError as exc:
        return jsonify(message=str(exc)), HTTPStatus.NOT_FOUND
    return jsonify(settings=group_cls.load().to_public_mapping()), HTTPStatus.OK


@admin_bp.put("/settings/<group>")
@admin_required
def update_settings_group(group: str) -> ResponseReturnValue:
    """Save a settings group; keys outside the group are rejected."""

    try:
        group_cls = get_group(group)
    except LookupError as exc:
        return jsonify(message=str(exc)), HTTPStatus.NOT_FOUND

    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return jsonify(message="A JSON object is required."), HTTPStatus.BAD_REQUEST

    try:
        updated = _update_group(group_cls, payload)
    except ValidationError as exc:
        return jsonify(message=str(exc)), HTTPStatus.BAD_REQUEST
    return jsonify(settings=updated.to_public_mapping()), HTTPStatus.OK


def _seo_report(seo: SeoSettings) -> dict:
    report = calculate_seo_score(seo)
    report["settings"] = seo.to_mapping()
    report["head"] = build_head_tags(seo, GeneralSettings.load())
    return report


@admin_bp.get("/seo")
@admin_required
def seo_overview() -> ResponseReturnValue:
    """Return SEO settings with their score and the checks still failing."""

    return jsonify(_seo_report(SeoSettings.load())), HTTPStatus.OK


@admin_bp.put("/seo")
@admin_required
def update_seo() -> ResponseReturnValue:
    payload = request.get_json(silent=True) or {}
    try:
        seo = _update_group(SeoSettings, payload)
    except ValidationError as exc:
        return jsonify(message=str(exc)), HTTPStatus.BAD_REQUEST
    return jsonify(_seo_report(seo)), HTTPStatus.OK


@admin_bp.get("/fonts")
@admin_required
def get_fonts() -> ResponseReturnValue:
    fonts = load_fonts()
    return (
        jsonify(
            settings=fonts.to_mapping(),
            preview=preview(fonts),
            google_fonts=list(GOOGLE_FONTS),
            system_fonts=list(SYSTEM_FONTS),
        ),
        HTTPStatus.OK,
    )


@admin_bp.put("/fonts")
@admin_required
def update_fonts() -> ResponseReturnValue:
    payload = request.get_json(silent=True) or {}
    try:
        fonts = _update_group(FontSettings, payload)
    except ValidationError as exc:
        return jsonify(message=str(exc)), HTTPStatus.BAD_REQUEST
    return jsonify(settings=fonts.to_mapping(), preview=preview(fonts)), HTTPStatus.OK


@admin_bp.post("/fonts/preview")
@admin_required
def preview_fonts() -> ResponseReturnValue:
    """Compute the theme for unsaved font choices."""

    payload = request.get_json(silent=True) or {}
    try:
        fonts = load_fonts().merged(payload)
        result = preview(fonts)
    except ValidationError as exc:
        return (
            jsonify(message=str(exc), allowed_fonts=list(ALLOWED_FONTS)),
            HTTPStatus.BAD_REQUEST,
        )
    return jsonify(result), HTTPStatus.OK


@admin_bp.get("/portrait")
@admin_required
def get_portrait() -> ResponseReturnValue:
    stored = get_settings(["portrait_url"]).get("portrait_url")
    return jsonify(portrait_url=stored or ImageSettings().portrait_url), HTTPStatus.OK


@admin_bp.put("/portrait")
@admin_required
def update_portrait() -> ResponseReturnValue:
    """Replace the portrait shown on the public site."""

    payload = request.get_json(silent=True) or {}
    try:
        url = require_http_url(payload.get("portrait_url"), "portrait_url")
    except ValidationError as exc:
        return jsonify(message=str(exc)), HTTPStatus.BAD_REQUEST

    update_setting("portrait_url", url)
    current_app.logger.info("%s replaced the portrait", g.current_admin.email)
    return jsonify(portrait_url=url), HTTPStatus.OK
