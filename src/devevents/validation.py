"""
Input checks applied before anything touches the database or the media host.
"""
from __future__ import annotations

import json
import re
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from devevents.errors import InvalidInput
from devevents.schemas import REQUIRED_TEXT_FIELDS, SLUG_REGEX

SLUG_PATTERN = re.compile(SLUG_REGEX)
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

ALLOWED_MIME_TYPES = ("image/jpeg", "image/png", "image/webp", "image/gif")
MAX_FILE_SIZE = 5 * 1024 * 1024  # 5 MiB

_DATE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d", "%m/%d/%Y", "%B %d, %Y", "%b %d, %Y", "%d %B %Y", "%d %b %Y")
_TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})(\s*(AM|PM))?$", re.IGNORECASE)


# ---------------------------
# Slug / email
# ---------------------------

def validate_slug(slug: Optional[str]) -> str:
    if not slug or not isinstance(slug, str):
        raise InvalidInput("Slug parameter is required and must be a string", "INVALID_SLUG_FORMAT", "slug")
    if not SLUG_PATTERN.match(slug):
        raise InvalidInput(
            "Invalid slug format. Slug must contain only lowercase letters, numbers, and hyphens",
            "INVALID_SLUG_FORMAT",
            "slug",
        )
    return slug


def normalize_email(email: Optional[str]) -> str:
    """Trim + lowercase, then check the simple local@domain.tld shape."""
    value = email.strip().lower() if isinstance(email, str) else ""
    if not value or not EMAIL_PATTERN.match(value):
        raise InvalidInput("Please provide a valid email address", "INVALID_EMAIL", "email")
    return value


def slugify(text: str) -> str:
    s = text.lower().strip()
    s = re.sub(r"[^a-z0-9\s_-]", "", s)
    s = re.sub(r"[\s_]+", "-", s)
    s = re.sub(r"-+", "-", s)
    return s.strip("-")


# ---------------------------
# Date / time normalisation
# ---------------------------

def normalize_date(value: str) -> str:
    """Return YYYY-MM-DD."""
    raw = value.strip()
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(raw, fmt).date().isoformat()
        except ValueError:
            continue
    raise InvalidInput(f"Invalid date format: {value}", "INVALID_DATE", "date")


def normalize_time(value: str) -> str:
    """Return 24h HH:MM from 'HH:MM' or 'H:MM AM/PM'."""
    m = _TIME_PATTERN.match(value.strip())
    if not m:
        raise InvalidInput("Invalid time format. Use HH:MM or HH:MM AM/PM", "INVALID_TIME", "time")
    hours, minutes = int(m.group(1)), int(m.group(2))
    period = (m.group(4) or "").upper()
    if period:
        if not 1 <= hours <= 12:
            raise InvalidInput("Invalid time values", "INVALID_TIME", "time")
        if period == "PM" and hours != 12:
            hours += 12
        if period == "AM" and hours == 12:
            hours = 0
    if hours > 23 or minutes > 59:
        raise InvalidInput("Invalid time values", "INVALID_TIME", "time")
    return f"{hours:02d}:{minutes:02d}"


# ---------------------------
# Admin form helpers
# ---------------------------

def parse_json_list(raw: Any, field: str) -> List[Any]:
    """
    Decode a JSON-encoded array sent as a form field (tags, agenda).
    """
    code = f"INVALID_{field.upper()}"
    label = field.capitalize()
    if not isinstance(raw, str) or not raw.strip():
        raise InvalidInput(f"{label} are required and must be a valid JSON array", code, field)
    try:
        value = json.loads(raw)
    except ValueError:
        raise InvalidInput(f"Invalid {field} format. Must be a valid JSON array", code, field) from None
    if not isinstance(value, list):
        raise InvalidInput(f"Invalid {field} format. Must be a valid JSON array", code, field)
    return value


def pick_fields(form: Mapping[str, Any]) -> Dict[str, str]:
    """
    Keep only the allowlisted text fields, trimmed; reject the first one that
    is missing or blank.
    """
    payload: Dict[str, str] = {}
    for name in REQUIRED_TEXT_FIELDS:
        value = form.get(name)
        if isinstance(value, str):
            payload[name] = value.strip()
    for name in REQUIRED_TEXT_FIELDS:
        if not payload.get(name):
            raise InvalidInput(f"Missing required field: {name}", "MISSING_FIELD", name)
    return payload


def validate_image(file) -> bytes:
    """
    Check an uploaded werkzeug FileStorage: present, allowed MIME type, then size.
    Returns the file bytes.
    """
    if file is None or not getattr(file, "filename", None):
        raise InvalidInput("Image file is required", "IMAGE_REQUIRED", "image")

    if file.mimetype not in ALLOWED_MIME_TYPES:
        raise InvalidInput(
            f"Invalid file type. Allowed types: {', '.join(ALLOWED_MIME_TYPES)}",
            "INVALID_FILE_TYPE",
            "image",
        )

    data = file.stream.read(MAX_FILE_SIZE + 1)
    if len(data) > MAX_FILE_SIZE:
        raise InvalidInput(
            f"File too large. Maximum size: {MAX_FILE_SIZE // (1024 * 1024)}MB",
            "FILE_TOO_LARGE",
            "image",
        )
    return data
