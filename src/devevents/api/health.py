from __future__ import annotations
from datetime import datetime, timezone
from flask import Blueprint, jsonify

from devevents import config
from devevents.db.mongo import get_db, ping

bp = Blueprint("api_health", __name__)

@bp.get("/health")
def health():
    db_ok = ping()
    now = datetime.now(timezone.utc).isoformat()

    return jsonify({
        "ok": True,
        "status": "ok" if db_ok else "degraded",
        "time_utc": now,
        "env": config.FLASK_ENV,
        "config": {
            "mongo_db": config.MONGO_DB,
            "cors_origins": config.CORS_ORIGINS,
            "admin_secret_set": bool(config.API_SECRET_KEY),
            "media_configured": bool(
                config.CLOUDINARY_URL or (config.CLOUDINARY_CLOUD_NAME and config.CLOUDINARY_API_SECRET)
            ),
        },
        "db": {
            "ping": db_ok,
        }
    })

@bp.get("/debug-counts")
def debug_counts():
    """
    Counts for core collections to quickly verify writes.
    Safe even if collections are empty/missing.
    """
    db = get_db()
    def count(name: str) -> int:
        try:
            return db[name].estimated_document_count()
        except Exception:
            return 0

    return jsonify({
        config.EVENTS_COLLECTION: count(config.EVENTS_COLLECTION),
        config.BOOKINGS_COLLECTION: count(config.BOOKINGS_COLLECTION),
    })
