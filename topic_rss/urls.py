from __future__ import annotations

import html
from typing import Optional
from urllib.parse import quote, urlsplit

_ALLOWED_SCHEMES = ("http", "https")
# Keep reserved characters and existing escapes intact, encode the rest.
_SAFE_CHARS = "/:?#[]@!$&()*+,;=%-._~"


def clean_url(value: Optional[str]) -> str:
    """
    Escape and validate a URL taken from feed content.

    Returns the cleaned http(s) URL, or "" when the value cannot be used.
    """
    if not isinstance(value, str):
        return ""
    url = html.unescape(value).strip()
    if not url:
        return ""
    if url.startswith("//"):
        url = "https:" + url
    url = quote(url, safe=_SAFE_CHARS)
    try:
        parts = urlsplit(url)
    except ValueError:
        return ""
    if parts.scheme.lower() not in _ALLOWED_SCHEMES or not parts.netloc:
        return ""
    return url


def is_valid_url(value: Optional[str]) -> bool:
    """Strict check: the value is already an absolute URL with a host and no whitespace."""
    if not isinstance(value, str) or not value:
        return False
    if any(ch.isspace() for ch in value):
        return False
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    return bool(parts.scheme) and bool(parts.netloc)
