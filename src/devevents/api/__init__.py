from __future__ import annotations

import importlib
from typing import Optional

from flask import Blueprint, jsonify

API_MODULES = [
    "health",
    "events",
    "bookings",
]


def error_response(message: str, error: Optional[str], status: int):
    body = {"ok": False, "message": message}
    if error:
        body["error"] = error
    return jsonify(body), status


def register_api(app):
    api_bp = Blueprint("api", __name__, url_prefix="/api")

    for name in API_MODULES:
        mod_qualname = f"{__name__}.{name}"
        mod = importlib.import_module(mod_qualname)
        bp = getattr(mod, "bp", None)
        if bp is None:
            app.logger.warning("Module %s has no `bp`; skipping", mod_qualname)
            continue
        api_bp.register_blueprint(bp)

    app.register_blueprint(api_bp)
