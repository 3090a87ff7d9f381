from __future__ import annotations

import logging

from flask import Blueprint, jsonify, request
from pymongo.errors import PyMongoError

from devevents.api import error_response
from devevents.auth import check_admin
from devevents.errors import InvalidInput, Unauthorized
from devevents.repositories.bookings import create_booking, get_bookings_count, get_bookings_for_event
from devevents.serialization import serialize
from devevents.validation import validate_slug

bp = Blueprint("api_bookings", __name__)

logger = logging.getLogger(__name__)

_STATUS = {
    None: 201,
    "INVALID_EMAIL": 400,
    "EVENT_NOT_FOUND": 404,
    "ALREADY_BOOKED": 409,
    "BOOKING_FAILED": 500,
}


@bp.post("/events/<slug>/bookings")
def book_event(slug: str):
    """
    POST /api/events/<slug>/bookings   body: {"email": "..."} (JSON or form)
    """
    body = request.get_json(silent=True) or {}
    email = body.get("email") if isinstance(body, dict) else None
    if email is None:
        email = request.form.get("email")

    result = create_booking(slug, email)
    status = _STATUS.get(result.code, 400)
    return jsonify({"ok": result.success, **result.to_dict()}), status


@bp.get("/events/<slug>/bookings")
def bookings_count(slug: str):
    """
    GET /api/events/<slug>/bookings
    Number of bookings (0 for an unknown event).
    """
    try:
        validate_slug(slug)
    except InvalidInput as e:
        return error_response(e.message, e.code, 400)

    try:
        count = get_bookings_count(slug)
    except PyMongoError as e:
        logger.error("Database error counting bookings for %s: %s", slug, e)
        return error_response("Database connection or query failed", "DATABASE_ERROR", 503)
    return jsonify({"ok": True, "slug": slug, "count": count})


@bp.get("/events/<slug>/bookings/list")
def list_bookings(slug: str):
    """
    GET /api/events/<slug>/bookings/list  (admin)
    """
    try:
        check_admin(request.headers.get("Authorization"))
    except Unauthorized as e:
        return error_response(e.message, e.code, 401)

    try:
        validate_slug(slug)
    except InvalidInput as e:
        return error_response(e.message, e.code, 400)

    try:
        rows = get_bookings_for_event(slug)
    except PyMongoError as e:
        logger.error("Database error listing bookings for %s: %s", slug, e)
        return error_response("Database connection or query failed", "DATABASE_ERROR", 503)
    return jsonify({"ok": True, "slug": slug, "count": len(rows), "bookings": serialize(rows)})
