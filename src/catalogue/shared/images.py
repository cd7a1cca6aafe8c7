"""Normalisation of image inputs.

Images arrive either as names of files already stored by the upload layer or
as external links. Links may be sent as a list or as a JSON-encoded string.
"""

import json

import structlog

from shared.config import config

logger = structlog.get_logger(__name__)


def upload_path(kind: str, filename: str) -> str:
    """Public path recorded for an uploaded file, e.g. ``/uploads/events/a.png``."""
    return f"{config.UPLOAD_URL_PREFIX}/{kind}/{filename.lstrip('/')}"


def parse_image_links(raw) -> list[str]:
    """Return external links as a list; malformed JSON yields no links."""
    if raw is None or raw == "":
        return []
    if isinstance(raw, list | tuple):
        return [str(link).strip() for link in raw if link and str(link).strip()]

    text = str(raw).strip()
    if not text.startswith("["):
        # A single bare link
        return [text]

    try:
        links = json.loads(text)
    except json.JSONDecodeError:
        logger.warning("Ignoring malformed image links payload", payload=text[:200])
        return []

    if not isinstance(links, list):
        logger.warning("Ignoring image links payload that is not a list", payload=text[:200])
        return []
    return [str(link).strip() for link in links if link and str(link).strip()]


def collect_images(kind: str, uploads=None, links=None) -> list[str]:
    """Uploaded file paths first, then external links, in request order."""
    paths = [upload_path(kind, name) for name in (uploads or []) if name]
    return paths + parse_image_links(links)
