"""Response helpers for load test observability.

Every Storefront API response is wrapped in an envelope::

    {"success": true,  "message": "...", "data": {...}}
    {"success": false, "message": "...", "error": {...}}
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from requests import Response


def envelope_data(response: Response) -> Any:
    """Return the ``data`` member of a successful envelope."""
    return response.json()["data"]


def extract_error_detail(response: Response) -> str:
    """Extract a human-readable error message from an API error response.

    Returns a compact string suitable for Locust failure messages and log lines.
    Gracefully handles unparseable bodies and missing fields.
    """
    try:
        body = response.json()
    except ValueError:
        # Not JSON, return raw text, truncated
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if not isinstance(body, dict):
        return str(body)[:300]

    message = body.get("message")
    error = body.get("error")
    if isinstance(error, dict):
        fields = " | ".join(f"{k}: {v}" for k, v in error.items())
        return f"{message} ({fields})" if message else fields
    if message:
        return str(message)
    if error:
        return str(error)

    # Unknown shape
    return str(body)[:300]
