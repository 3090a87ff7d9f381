from __future__ import annotations

import hmac
import logging
import secrets
from typing import Optional

from devevents import config
from devevents.errors import Unauthorized

logger = logging.getLogger(__name__)


def generate_api_secret() -> str:
    """
    New random admin secret. Paste it into .env as API_SECRET_KEY=...
    """
    return secrets.token_hex(32)


def check_admin(authorization: Optional[str]) -> None:
    """
    Require 'Bearer <API_SECRET_KEY>'. With no secret configured the check is
    skipped (development mode).
    """
    api_key = config.API_SECRET_KEY
    if not api_key:
        logger.warning("API_SECRET_KEY not configured - running in development mode")
        return

    if not authorization or not authorization.startswith("Bearer "):
        raise Unauthorized("Unauthorized - Invalid or missing API key")

    token = authorization[len("Bearer "):]
    # constant-time compare
    if not hmac.compare_digest(token.encode("utf-8"), api_key.encode("utf-8")):
        raise Unauthorized("Unauthorized - Invalid or missing API key")
