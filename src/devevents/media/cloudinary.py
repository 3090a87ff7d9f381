# devevents/media/cloudinary.py
from __future__ import annotations

import hashlib
import logging
import time
from typing import Dict, Tuple
from urllib.parse import urlparse

import requests

from devevents import config
from devevents.errors import MediaUploadError

logger = logging.getLogger(__name__)


# -----------------------------
# Credentials
# -----------------------------
def _credentials() -> Tuple[str, str, str]:
    """(cloud_name, api_key, api_secret) from CLOUDINARY_URL or the discrete vars."""
    if config.CLOUDINARY_URL:
        u = urlparse(config.CLOUDINARY_URL)
        if u.scheme == "cloudinary" and u.hostname and u.username and u.password:
            return u.hostname, u.username, u.password
        raise MediaUploadError("CLOUDINARY_URL is malformed")
    cloud, key, secret = config.CLOUDINARY_CLOUD_NAME, config.CLOUDINARY_API_KEY, config.CLOUDINARY_API_SECRET
    if not (cloud and key and secret):
        raise MediaUploadError("Cloudinary credentials are not set")
    return cloud, key, secret


def sign_params(params: Dict[str, str], api_secret: str) -> str:
    """Cloudinary signature: sha1 of sorted 'k=v&k=v' + secret."""
    to_sign = "&".join(f"{k}={params[k]}" for k in sorted(params) if params[k] not in (None, ""))
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


# -----------------------------
# Upload
# -----------------------------
def upload_image(data: bytes, filename: str, mimetype: str) -> str:
    """
    Upload image bytes to the configured folder; returns the https URL.
    """
    cloud, api_key, api_secret = _credentials()
    params = {"folder": config.CLOUDINARY_UPLOAD_FOLDER, "timestamp": str(int(time.time()))}
    form = dict(params, api_key=api_key, signature=sign_params(params, api_secret))
    url = f"{config.CLOUDINARY_API_BASE.rstrip('/')}/{cloud}/image/upload"

    logger.info("Uploading %s (%d bytes) to %s", filename, len(data), url)
    try:
        r = requests.post(url, data=form, files={"file": (filename, data, mimetype)}, timeout=60)
        r.raise_for_status()
        body = r.json()
    except (requests.RequestException, ValueError) as e:
        logger.error("Image upload failed: %s", e)
        raise MediaUploadError("Image upload failed") from e

    secure_url = body.get("secure_url") if isinstance(body, dict) else None
    if not secure_url:
        logger.error("Image upload returned no secure_url: %s", body)
        raise MediaUploadError("Upload failed - no result")
    return secure_url
