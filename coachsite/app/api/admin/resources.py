"""Downloadable resources manager."""
from __future__ import annotations

from http import HTTPStatus

from flask import jsonify, request
from flask.typing import ResponseReturnValue

from coachsite.app.api.auth import admin_required
from coachsite.app.errors import ValidationError
from coachsite.app.models import Resource
from coachsite.extensions import db

from . import admin_bp
from .common import apply_changes

TEXT_FIELDS = ("title", "description", "category", "type", "size", "url", "image")


def _apply(resource: Resource, payload: dict) -> None:
    apply_changes(
        resource,
        payload,
        text_fields=TEXT_FIELDS,
        bool_fields=("premium",),
        int_fields=("downloads",),
    )
    if not resource.title:
        raise ValidationError("Title is required.")
    resource.type = resource.type or "PDF"


@admin_bp.get("/resources")
@admin_required
def list_resources() -> ResponseReturnValue:
    resources = Resource.query.order_by(Resource.created_at.desc()).all()
    return jsonify(resources=[resource.to_dict() for resource in resources]), HTTPStatus.OK


@admin_bp.post("/resources")
@admin_required
def create_resource() -> ResponseReturnValue:
    payload = request.get_json(silent=True) or {}
    resource = Resource(downloads=0, premium=False)
    try:
        _apply(resource, payload)
    except ValidationError as exc:
        return jsonify(message=str(exc)), HTTPStatus.BAD_REQUEST

    db.session.add(resource)
    db.session.commit()
    return jsonify(resource=resource.to_dict()), HTTPStatus.CREATED


@admin_bp.put("/resources/<int:resource_id>")
@admin_required
def update_resource(resource_id: int) -> ResponseReturnValue:
    resource = db.get_or_404(Resource, resource_id)
    try:
        _apply(resource, request.get_json(silent=True) or {})
    except ValidationError as exc:
        db.session.rollback()
        return jsonify(message=str(exc)), HTTPStatus.BAD_REQUEST

    db.session.commit()
    return jsonify(resource=resource.to_dict()), HTTPStatus.OK


@admin_bp.delete("/resources/<int:resource_id>")
@admin_required
def delete_resource(resource_id: int) -> ResponseReturnValue:
    resource = db.get_or_404(Resource, resource_id)
    db.session.delete(resource)
    db.session.commit()
    return jsonify(message="Resource deleted."), HTTPStatus.OK
