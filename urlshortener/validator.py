"""URL validation helpers."""

from __future__ import annotations

from urllib.parse import urlsplit

_DIGITS = frozenset("0123456789")


def _valid_port(port: str) -> bool:
    return port == "" or (port.startswith(":") and all(c in _DIGITS for c in port[1:]))


def _valid_host(host: str) -> bool:
    if any(c.isspace() for c in host):
        return False
    if host.startswith("["):
        closing = host.find("]")
        return closing != -1 and _valid_port(host[closing + 1:])
    colon = host.rfind(":")
    return colon == -1 or _valid_port(host[colon:])


def _parse(value: str) -> tuple[str, str] | None:
    """Return ``(scheme, host)`` of ``value``, or None if it cannot be parsed."""
    if any(ord(c) < 0x20 or ord(c) == 0x7F for c in value):
        return None
    if value[:1].isspace():
        return None
    try:
        parts = urlsplit(value)
    except ValueError:
        return None
    host = parts.netloc.rpartition("@")[2]
    if not _valid_host(host):
        return None
    return parts.scheme.lower(), host


def is_valid_url(value: str) -> bool:
    """Tell whether ``value`` is an absolute http(s) URL with a host."""
    if not value:
        return False
    parsed = _parse(value)
    if parsed is None:
        return False
    scheme, host = parsed
    return scheme in ("http", "https") and host != ""


def is_same_domain(url: str, domain: str) -> bool:
    """Tell whether ``url`` and ``domain`` share a host, ignoring case."""
    left = _parse(url)
    right = _parse(domain)
    if left is None or right is None:
        return False
    return left[1].casefold() == right[1].casefold()