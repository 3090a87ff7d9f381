from __future__ import annotations

from datetime import date, datetime
from typing import Any

from bson import ObjectId


def serialize(value: Any) -> Any:
    """
    Plain, JSON-safe copy of a stored document (or list of them):
    ObjectId -> str, datetime/date -> ISO-8601, containers mapped element-wise.
    Anything else passes through unchanged.
    """
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: serialize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize(v) for v in value]
    return value
