"""Origin allow-listing for the public widget endpoints."""
from urllib.parse import urlsplit

from flask import request


def host_of(value: str | None) -> str | None:
    """
    Lower-cased hostname of a URL or bare host ("https://Example.com:8443/x" -> "example.com").
    Returns None when nothing usable is present.
    """
    value = (value or "").strip().lower()
    if not value:
        return None
    if "//" not in value:
        value = "//" + value
    try:
        host = urlsplit(value).hostname
    except ValueError:
        return None
    return host or None


def origin_allowed(origin: str | None, allowed_domains) -> bool:
    """An empty allow-list permits everyone; otherwise the origin host must match exactly."""
    allowed = {h for h in (host_of(d) for d in (allowed_domains or [])) if h}
    if not allowed:
        return True
    host = host_of(origin)
    return bool(host and host in allowed)


def request_origin() -> str | None:
    # Some browsers omit Origin on same-origin GETs; Referer carries the embedding page then
    return request.headers.get("Origin") or request.headers.get("Referer")
