from __future__ import annotations

import io
import json

IMAGE_URL = "https://res.cloudinary.com/demo/image/upload/v1/DevEvent/banner.png"

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def event_payload(**overrides):
    data = {
        "title": "Go Systems Summit",
        "description": "Two days of talks on building systems software in Go.",
        "overview": "Concurrency, tooling and production war stories.",
        "image": IMAGE_URL,
        "venue": "Kulturbrauerei",
        "location": "Berlin, Germany",
        "date": "2026-11-05",
        "time": "09:00",
        "mode": "online",
        "audience": "Backend developers",
        "organizer": "Go Berlin",
        "tags": ["go", "systems"],
        "agenda": ["9am kickoff"],
    }
    data.update(overrides)
    return data


def event_form(image=None, **overrides):
    """Multipart form for POST /api/events (tags/agenda JSON-encoded)."""
    data = event_payload(**overrides)
    data.pop("image")
    form = {k: v for k, v in data.items() if v is not None}
    for key in ("tags", "agenda"):
        if isinstance(form.get(key), list):
            form[key] = json.dumps(form[key])
    if image is None:
        image = (io.BytesIO(PNG_BYTES), "banner.png", "image/png")
    if image is not False:
        form["image"] = image
    return form
