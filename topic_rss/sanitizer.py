from __future__ import annotations

import html
import re
import warnings
from typing import Iterable, List

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning

from .models import FilterConfig


# Photo credit / caption boilerplate common to wire and newspaper feeds.
_GENERAL_PATTERNS = (
    r"Photo by[^.]+\.",
    r"Photo: [^.]+\.",
    # Photo credit must run before Credit, which would otherwise leave "Photo" behind.
    r"Photo credit: [^.]+\.",
    r"Credit: [^.]+\.",
    r"via Getty Images[^.]*\.",
    r"AP Photo[^.]*\.",
)
_GENERAL_FILTERS = [re.compile(p, re.IGNORECASE) for p in _GENERAL_PATTERNS]
_WHITESPACE_RUN = re.compile(r"\s{2,}")

TRIM_MARKER = "&hellip;"


def build_filters(custom_patterns: Iterable[str]) -> List[re.Pattern]:
    """
    General filters followed by one case-insensitive literal filter per non-blank
    custom line. Custom text is always matched verbatim.
    """
    filters = list(_GENERAL_FILTERS)
    for line in custom_patterns:
        text = (line or "").strip()
        if text:
            filters.append(re.compile(re.escape(text), re.IGNORECASE))
    return filters


def _one_pass(text: str, filters: List[re.Pattern]) -> str:
    for pattern in filters:
        text = pattern.sub("", text)
    text = _WHITESPACE_RUN.sub(" ", text)
    return text.strip()


def sanitize_description(description: str, config: FilterConfig) -> str:
    """Remove credit boilerplate and configured phrases, then normalize whitespace."""
    filters = build_filters(config.custom_filter_patterns)
    text = description or ""
    # A removal can splice together a new match; run until nothing changes.
    while True:
        cleaned = _one_pass(text, filters)
        if cleaned == text:
            return cleaned
        text = cleaned


def strip_markup(text: str) -> str:
    if not text:
        return ""
    if "<" not in text and "&" not in text:
        return text
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", MarkupResemblesLocatorWarning)
        soup = BeautifulSoup(text, "html.parser")
    for tag in soup(["script", "style"]):
        tag.decompose()
    return soup.get_text()


def trim_words(text: str, limit: int = 30, more: str = TRIM_MARKER) -> str:
    """
    Keep at most `limit` whitespace-delimited words of plain text, HTML-escaped,
    with `more` appended when words were cut.
    """
    words = text.split()
    trimmed = html.escape(" ".join(words[:limit]), quote=False)
    if len(words) > limit:
        trimmed += more
    return trimmed
