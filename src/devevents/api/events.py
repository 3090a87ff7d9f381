from __future__ import annotations

import logging

from flask import Blueprint, jsonify, request
from pymongo.errors import PyMongoError

from devevents.api import error_response
from devevents.auth import check_admin
from devevents.errors import DuplicateEvent, InvalidInput, Unauthorized
from devevents.media import cloudinary
from devevents.repositories.events import (
    build_event_document,
    create_event,
    get_all_events,
    get_event_by_slug,
    get_similar_events_by_slug,
)
from devevents.serialization import serialize
from devevents.validation import parse_json_list, pick_fields, validate_image, validate_slug

bp = Blueprint("api_events", __name__)

logger = logging.getLogger(__name__)


@bp.get("/events")
def list_events():
    """
    GET /api/events
    All events, newest first.
    """
    try:
        events = get_all_events()
    except Exception as e:
        logger.error("Event fetching failed: %s", e)
        return error_response("Event fetching failed", str(e) or "INTERNAL_ERROR", 500)
    return jsonify({"ok": True, "message": "Events fetched successfully", "events": serialize(events)})


@bp.get("/events/<slug>")
def get_event(slug: str):
    """
    GET /api/events/<slug>
    """
    try:
        validate_slug(slug)
    except InvalidInput as e:
        return error_response(e.message, e.code, 400)

    try:
        event = get_event_by_slug(slug)
    except PyMongoError as e:
        logger.error("Database error fetching event %s: %s", slug, e)
        return error_response("Database connection or query failed", "DATABASE_ERROR", 503)
    except Exception:
        logger.exception("Unexpected error in GET /api/events/%s", slug)
        return error_response(
            "An unexpected error occurred while fetching the event", "INTERNAL_ERROR", 500
        )

    if not event:
        return error_response(f"Event with slug '{slug}' not found", "EVENT_NOT_FOUND", 404)
    return jsonify({"ok": True, "message": "Event fetched successfully", "event": serialize(event)})


@bp.get("/events/<slug>/similar")
def similar_events(slug: str):
    """
    GET /api/events/<slug>/similar
    Events sharing at least one tag; empty when the slug is unknown.
    """
    try:
        validate_slug(slug)
    except InvalidInput as e:
        return error_response(e.message, e.code, 400)

    try:
        events = get_similar_events_by_slug(slug)
    except PyMongoError as e:
        logger.error("Database error fetching similar events for %s: %s", slug, e)
        return error_response("Database connection or query failed", "DATABASE_ERROR", 503)
    return jsonify({"ok": True, "slug": slug, "events": serialize(events)})


@bp.post("/events")
def post_event():
    """
    POST /api/events  (multipart/form-data, admin)
    Fields: image (file), tags + agenda (JSON arrays), and the event text fields.
    Everything is validated before the image leaves this process.
    """
    try:
        check_admin(request.headers.get("Authorization"))
    except Unauthorized as e:
        return error_response(e.message, e.code, 401)

    try:
        file = request.files.get("image")
        image_bytes = validate_image(file)
        tags = parse_json_list(request.form.get("tags"), "tags")
        agenda = parse_json_list(request.form.get("agenda"), "agenda")
        payload = pick_fields(request.form)
    except InvalidInput as e:
        return error_response(e.message, e.code, 400)

    payload.update(tags=tags, agenda=agenda)
    slug = (request.form.get("slug") or "").strip()
    if slug:
        payload["slug"] = slug

    try:
        # image URL is unknown until upload; placeholder lets every other check run first
        doc = build_event_document(dict(payload, image="pending-upload"))
        if get_event_by_slug(doc["slug"]):
            raise DuplicateEvent(f"An event with slug '{doc['slug']}' already exists")
        payload["image"] = cloudinary.upload_image(image_bytes, file.filename, file.mimetype)
        event = create_event(payload)
    except InvalidInput as e:
        return error_response(e.message, e.code, 400)
    except DuplicateEvent as e:
        return error_response(e.message, e.code, 409)
    except Exception:
        logger.exception("Event creation failed")
        return error_response("Event creation failed", "INTERNAL_ERROR", 500)

    return jsonify({"ok": True, "message": "Event created successfully", "event": serialize(event)}), 201
