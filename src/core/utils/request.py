"""Helpers for reading API Gateway proxy events."""

from collections.abc import Mapping
from typing import Any


def get_header(event: Mapping[str, Any], name: str) -> str | None:
    """Case-insensitive header lookup."""
    headers = event.get("headers") or {}
    wanted = name.lower()

    for key, value in headers.items():
        if key.lower() == wanted:
            return value

    return None


def resolve_base_url(event: Mapping[str, Any], configured: str | None = None) -> str | None:
    """Return the public base URL for building local asset URLs.

    Prefers the configured value, then forwarded proxy headers, then the
    Host header. Returns None when no host is known.
    """
    if configured:
        return configured.rstrip("/")

    host = get_header(event, "X-Forwarded-Host") or get_header(event, "Host")
    if not host:
        return None

    proto = get_header(event, "X-Forwarded-Proto") or "https"
    # Proxies may append hops: "https, http"
    proto = proto.split(",")[0].strip()
    host = host.split(",")[0].strip()

    return f"{proto}://{host}"
