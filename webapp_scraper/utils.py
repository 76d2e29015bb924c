# File: webapp_scraper/utils.py
"""webapp_scraper.utils: URL normalization, origin comparison and identifier helpers."""

from __future__ import annotations

import re
from typing import Optional, Sequence, Tuple
from urllib.parse import urlsplit, urlunsplit

__all__: Sequence[str] = (
    "normalize_url",
    "origin_of",
    "same_origin",
    "is_http_url",
    "sanitize_identifier",
    "screenshot_name",
    "document_id",
)

_DEFAULT_PORTS = {"http": 80, "https": 443}
_NON_ALNUM_RE = re.compile(r"[^a-zA-Z0-9]")


def normalize_url(url: str) -> str:
    """
    Normalize an absolute URL so that equivalent URLs compare equal.

    * scheme and host are lower-cased, the default port is dropped;
    * the fragment is removed;
    * trailing slashes of the path are removed (``https://ex.com/`` becomes
      ``https://ex.com``).

    The operation is idempotent: ``normalize_url(normalize_url(u)) == normalize_url(u)``.
    """
    parts = urlsplit(url.strip())
    scheme = parts.scheme.lower()
    host = (parts.hostname or "").lower()
    if ":" in host:
        host = f"[{host}]"
    port = parts.port
    netloc = host if port is None or port == _DEFAULT_PORTS.get(scheme) else f"{host}:{port}"
    if parts.username:
        userinfo = parts.username + (f":{parts.password}" if parts.password else "")
        netloc = f"{userinfo}@{netloc}"
    path = parts.path.rstrip("/")
    return urlunsplit((scheme, netloc, path, parts.query, ""))


def origin_of(url: str) -> Tuple[str, str, Optional[int]]:
    """Return ``(scheme, host, port)`` with the scheme's default port filled in."""
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    port = parts.port if parts.port is not None else _DEFAULT_PORTS.get(scheme)
    return scheme, (parts.hostname or "").lower(), port


def same_origin(url: str, other: str) -> bool:
    """Scheme, host and port all equal."""
    return origin_of(url) == origin_of(other)


def is_http_url(url: str) -> bool:
    return urlsplit(url).scheme.lower() in ("http", "https")


def sanitize_identifier(url: str) -> str:
    """Replace every non-alphanumeric character of *url* with ``_``."""
    return _NON_ALNUM_RE.sub("_", url)


def screenshot_name(url: str) -> str:
    return f"page-{sanitize_identifier(url)}"


def document_id(url: str) -> str:
    return f"page-{sanitize_identifier(url)}"
