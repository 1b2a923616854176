from __future__ import annotations

import calendar
import time
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Dict, List, Optional

from .models import FeedItem


def _to_datetime(entry: Dict[str, Any]) -> Optional[datetime]:
    """
    Convert feed entry date fields to timezone-aware UTC datetime.
    Priority: published_parsed -> updated_parsed -> created_parsed -> raw strings -> None.
    """
    for key in ("published_parsed", "updated_parsed", "created_parsed"):
        val = entry.get(key)
        if isinstance(val, time.struct_time):
            try:
                # feedparser normalizes *_parsed values to UTC
                return datetime.fromtimestamp(calendar.timegm(val), tz=timezone.utc)
            except (OverflowError, ValueError, OSError):
                continue
    for key in ("published", "updated", "created"):
        s = entry.get(key)
        if isinstance(s, str) and s.strip():
            dt = _parse_date_string(s.strip())
            if dt is not None:
                return dt
    return None


def _parse_date_string(value: str) -> Optional[datetime]:
    try:
        dt = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        try:
            dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _first(entry: Dict[str, Any], key: str, field: str) -> Optional[str]:
    values = entry.get(key)
    if not isinstance(values, list):
        return None
    for v in values:
        if isinstance(v, dict):
            s = v.get(field)
            if isinstance(s, str) and s.strip():
                return s.strip()
    return None


def _get_enclosure(entry: Dict[str, Any]) -> Optional[str]:
    href = _first(entry, "enclosures", "href")
    if href:
        return href
    links = entry.get("links")
    if isinstance(links, list):
        for link in links:
            if isinstance(link, dict) and link.get("rel") == "enclosure":
                href = link.get("href")
                if isinstance(href, str) and href.strip():
                    return href.strip()
    return None


def _get_permalink(entry: Dict[str, Any]) -> str:
    for key in ("link", "feedburner_origlink"):
        v = entry.get(key)
        if isinstance(v, str) and v.strip():
            return v.strip()
    # RSS guids are permalinks unless marked otherwise
    for key in ("id", "guid"):
        v = entry.get(key)
        if isinstance(v, str) and v.strip().lower().startswith(("http://", "https://")):
            return v.strip()
    return ""


def _get_tags(entry: Dict[str, Any]) -> Dict[str, str]:
    tags: Dict[str, str] = {}
    for key, value in entry.items():
        if isinstance(key, str) and isinstance(value, str):
            tags.setdefault(key.lower(), value)
    return tags


def parse_entry(entry: Dict[str, Any]) -> FeedItem:
    """
    Map a raw feed entry (from feedparser) to a FeedItem.

    feedparser exposes content:encoded as `content`, media-RSS as
    `media_content`/`media_thumbnail`, and keeps unknown plain elements
    (e.g. `post-thumbnail`) as top-level string keys.
    """
    title = (entry.get("title") or "").strip()
    description = entry.get("summary") or entry.get("description") or ""

    return FeedItem(
        title=title,
        description=description if isinstance(description, str) else "",
        permalink=_get_permalink(entry),
        published_at=_to_datetime(entry),
        enclosure_link=_get_enclosure(entry),
        media_content_url=_first(entry, "media_content", "url"),
        media_thumbnail_url=_first(entry, "media_thumbnail", "url"),
        encoded_content=_first(entry, "content", "value"),
        tags=_get_tags(entry),
    )


def parse_entries(entries: List[Dict[str, Any]]) -> List[FeedItem]:
    return [parse_entry(e) for e in entries]
