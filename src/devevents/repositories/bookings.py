from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional

from pymongo import DESCENDING
from pymongo.errors import DuplicateKeyError

from devevents import config
from devevents.db.mongo import get_collection
from devevents.errors import InvalidInput
from devevents.repositories.events import get_event, get_event_by_slug
from devevents.validation import normalize_email

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BookingResult:
    success: bool
    message: str
    code: Optional[str] = None

    def to_dict(self) -> Dict:
        out = {"success": self.success, "message": self.message}
        if self.code:
            out["error"] = self.code
        return out


BOOKED = BookingResult(True, "Successfully booked! Check your email for confirmation.")
NOT_FOUND = BookingResult(False, "Event not found", "EVENT_NOT_FOUND")
ALREADY_BOOKED = BookingResult(False, "You have already booked this event", "ALREADY_BOOKED")
FAILED = BookingResult(False, "Failed to create booking. Please try again.", "BOOKING_FAILED")


def _bookings():
    return get_collection(config.BOOKINGS_COLLECTION)


def create_booking(event_ref: str, email: str) -> BookingResult:
    """
    Book ``email`` onto the event identified by slug (or id).

    Never raises: bad email, unknown event, duplicate booking and storage
    failures all come back as a failed BookingResult. An existing booking is
    looked up first; the unique (eventId, email) index catches the race where
    two requests both pass that lookup.
    """
    try:
        email = normalize_email(email)
    except InvalidInput as e:
        return BookingResult(False, e.message, e.code)

    try:
        event = get_event(event_ref)
        if not event:
            return NOT_FOUND

        if _bookings().find_one({"eventId": event["_id"], "email": email}, {"_id": 1}):
            return ALREADY_BOOKED

        now = datetime.now(timezone.utc)
        _bookings().insert_one({"eventId": event["_id"], "email": email, "createdAt": now, "updatedAt": now})
    except DuplicateKeyError:
        return ALREADY_BOOKED
    except Exception:
        logger.exception("Error creating booking for %s", event_ref)
        return FAILED

    logger.info("Booked %s onto %s", email, event["slug"])
    return BOOKED


def get_bookings_count(slug: str) -> int:
    event = get_event_by_slug(slug)
    if not event:
        return 0
    return _bookings().count_documents({"eventId": event["_id"]})


def get_bookings_for_event(slug: str) -> List[Dict]:
    """Bookings for an event, newest first; [] when the event is unknown."""
    event = get_event_by_slug(slug)
    if not event:
        return []
    cur = _bookings().find({"eventId": event["_id"]}).sort("createdAt", DESCENDING)
    return list(cur)
