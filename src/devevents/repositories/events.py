from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Union

from bson import ObjectId
from pymongo import DESCENDING
from pymongo.errors import DuplicateKeyError, PyMongoError

from devevents import config
from devevents.db.mongo import get_collection
from devevents.errors import DuplicateEvent, InvalidInput, PersistenceError
from devevents.schemas import EventInput, validate_event_input
from devevents.validation import SLUG_PATTERN, normalize_date, normalize_time, slugify

logger = logging.getLogger(__name__)


def _events():
    return get_collection(config.EVENTS_COLLECTION)


def build_event_document(data: Union[EventInput, Mapping[str, Any]]) -> Dict:
    """
    Validated, normalised event document ready for insert. No I/O.
    Slug defaults to one derived from the title; date becomes YYYY-MM-DD and
    time HH:MM.
    """
    event = validate_event_input(data)
    doc = event.model_dump()

    slug = doc.pop("slug") or slugify(event.title)
    if not slug or not SLUG_PATTERN.match(slug):
        raise InvalidInput("Cannot derive a slug from the title", "INVALID_SLUG_FORMAT", "slug")
    doc["slug"] = slug
    doc["date"] = normalize_date(event.date)
    doc["time"] = normalize_time(event.time)
    return doc


def create_event(data: Union[EventInput, Mapping[str, Any]]) -> Dict:
    """
    Validate and insert a new event; returns the stored document (with _id).
    Raises InvalidInput before any write, DuplicateEvent when the slug is
    taken, PersistenceError for any other failed write.
    """
    doc = build_event_document(data)
    slug = doc["slug"]

    now = datetime.now(timezone.utc)
    doc["createdAt"] = now
    doc["updatedAt"] = now

    try:
        res = _events().insert_one(doc)
    except DuplicateKeyError as e:
        raise DuplicateEvent(f"An event with slug '{slug}' already exists") from e
    except PyMongoError as e:
        logger.error("Event insert failed for slug %s: %s", slug, e)
        raise PersistenceError("Event could not be saved") from e

    doc["_id"] = res.inserted_id
    logger.info("Created event %s (%s)", slug, res.inserted_id)
    return doc


def get_event_by_slug(slug: str) -> Optional[Dict]:
    return _events().find_one({"slug": slug})


def get_event(ref: str) -> Optional[Dict]:
    """
    Resolve an event by slug, or by its id when ``ref`` looks like an ObjectId.
    """
    event = get_event_by_slug(ref)
    if event is None and ObjectId.is_valid(ref):
        event = _events().find_one({"_id": ObjectId(ref)})
    return event


def get_all_events() -> List[Dict]:
    """All events, newest first."""
    cur = _events().find({}).sort([("createdAt", DESCENDING), ("_id", DESCENDING)])
    return list(cur)


def get_similar_events_by_slug(slug: str) -> List[Dict]:
    """
    Other events sharing at least one tag with the event at ``slug``.
    Unknown slug -> [].
    """
    event = _events().find_one({"slug": slug}, {"_id": 1, "tags": 1})
    if not event or not event.get("tags"):
        return []
    cur = _events().find({"_id": {"$ne": event["_id"]}, "tags": {"$in": list(event["tags"])}})
    return list(cur)
