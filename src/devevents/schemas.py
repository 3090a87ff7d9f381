from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from devevents.errors import InvalidInput

SLUG_REGEX = r"^[a-z0-9-]+$"
EVENT_MODES = ("online", "offline", "hybrid")


# ---------- Event ----------
class EventInput(BaseModel):
    """Everything needed to create an event. Shared by every write path."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    title: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=1000)
    overview: str = Field(min_length=1, max_length=500)
    venue: str = Field(min_length=1)
    location: str = Field(min_length=1)
    date: str = Field(min_length=1)
    time: str = Field(min_length=1)
    mode: Literal["online", "offline", "hybrid"]
    audience: str = Field(min_length=1)
    organizer: str = Field(min_length=1)
    image: str = Field(min_length=1)
    tags: List[str] = Field(min_length=1)
    agenda: List[str] = Field(min_length=1)
    slug: Optional[str] = Field(default=None, pattern=SLUG_REGEX)

    @field_validator("tags", "agenda")
    @classmethod
    def strip_items(cls, v: List[str]) -> List[str]:
        items = [s.strip() for s in v]
        if any(not s for s in items):
            raise ValueError("items must be non-empty strings")
        return items

    @field_validator("mode", mode="before")
    @classmethod
    def lower_mode(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


# Text fields accepted from the admin form, in the order they are checked.
REQUIRED_TEXT_FIELDS = tuple(
    name for name in EventInput.model_fields if name not in ("image", "tags", "agenda", "slug")
)

_LIST_CODES = {"tags": "INVALID_TAGS", "agenda": "INVALID_AGENDA"}


def _to_invalid_input(err: ValidationError) -> InvalidInput:
    first = err.errors()[0]
    field = str(first["loc"][0]) if first.get("loc") else None
    kind = first.get("type", "")

    if field in _LIST_CODES:
        return InvalidInput(
            f"{field.capitalize()} must be a non-empty list of strings", _LIST_CODES[field], field
        )
    if field == "mode" and kind != "missing":
        return InvalidInput(
            f"Invalid mode. Must be one of: {', '.join(EVENT_MODES)}", "INVALID_MODE", field
        )
    if field == "slug":
        return InvalidInput(
            "Invalid slug format. Slug must contain only lowercase letters, numbers, and hyphens",
            "INVALID_SLUG_FORMAT",
            field,
        )
    if kind == "string_too_long":
        limit = first.get("ctx", {}).get("max_length")
        return InvalidInput(f"{field} cannot exceed {limit} characters", "FIELD_TOO_LONG", field)
    if kind in ("missing", "string_too_short"):
        return InvalidInput(f"Missing required field: {field}", "MISSING_FIELD", field)
    return InvalidInput(f"Invalid value for {field}: {first.get('msg')}", "VALIDATION_ERROR", field)


def validate_event_input(data) -> EventInput:
    """Build an EventInput or raise InvalidInput naming the first bad field."""
    if isinstance(data, EventInput):
        return data
    try:
        return EventInput.model_validate(data)
    except ValidationError as e:
        raise _to_invalid_input(e) from e
