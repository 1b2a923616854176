"""
Read-only adapters for the feed and filter settings owned by the host.

Two shapes are supported: the CMS option arrays (a url -> label mapping plus a
settings dict with newline-separated text fields) and environment variables,
optionally loaded from a `.env` file.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Tuple

from dotenv import load_dotenv

from .core import DEFAULT_MAX_ITEMS
from .exceptions import ConfigError
from .models import FeedSource, FilterConfig

DEFAULT_DISPLAY_NAME = "Topic RSS"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class Settings:
    sources: Tuple[FeedSource, ...] = ()
    filters: FilterConfig = field(default_factory=FilterConfig)
    max_items: int = DEFAULT_MAX_ITEMS
    max_workers: int = 1
    display_name: str = DEFAULT_DISPLAY_NAME


def split_lines(text: Optional[str]) -> List[str]:
    """Split a textarea-style value into trimmed, non-blank lines."""
    if not text:
        return []
    return [line.strip() for line in str(text).splitlines() if line.strip()]


def sources_from_mapping(feeds: Mapping[str, Optional[str]]) -> List[FeedSource]:
    out: List[FeedSource] = []
    seen = set()
    for url, label in feeds.items():
        url = (url or "").strip()
        if not url or url in seen:
            continue
        seen.add(url)
        out.append(FeedSource(url=url, label=label or ""))
    return out


def _as_bool(value: Any, name: str, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    s = str(value).strip().lower()
    if s in _TRUE:
        return True
    if s in _FALSE:
        return False
    raise ConfigError(f"{name}: expected a boolean, got {value!r}")


def _as_int(value: Any, name: str, minimum: int = 0) -> int:
    try:
        n = int(str(value).strip())
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{name}: expected an integer, got {value!r}") from e
    if n < minimum:
        raise ConfigError(f"{name}: must be >= {minimum}, got {n}")
    return n


def filter_config_from_settings(settings: Mapping[str, Any]) -> FilterConfig:
    """
    Build a FilterConfig from the CMS settings array.

    Keys: blocked_titles, custom_filters (newline-separated text),
    skip_short_content, use_fallback_images, short_content_threshold.
    """
    kwargs: dict = {
        "blocked_titles": frozenset(split_lines(settings.get("blocked_titles"))),
        "custom_filter_patterns": tuple(split_lines(settings.get("custom_filters"))),
        "skip_short_content": _as_bool(settings.get("skip_short_content"), "skip_short_content"),
        "use_fallback_images": _as_bool(
            settings.get("use_fallback_images"), "use_fallback_images", default=True
        ),
    }
    if settings.get("short_content_threshold") not in (None, ""):
        kwargs["short_content_threshold"] = _as_int(
            settings["short_content_threshold"], "short_content_threshold"
        )
    return FilterConfig(**kwargs)


def _parse_feed_lines(text: Optional[str]) -> List[FeedSource]:
    feeds = {}
    for line in split_lines(text):
        url, _, label = line.partition("|")
        feeds.setdefault(url.strip(), label.strip())
    return sources_from_mapping(feeds)


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Load settings from environment variables (TOPIC_RSS_*).

    When `env` is None, a `.env` file is loaded first and os.environ is used.
    """
    if env is None:
        load_dotenv()
        env = os.environ

    filters = filter_config_from_settings({
        "blocked_titles": env.get("TOPIC_RSS_BLOCKED_TITLES"),
        "custom_filters": env.get("TOPIC_RSS_CUSTOM_FILTERS"),
        "skip_short_content": env.get("TOPIC_RSS_SKIP_SHORT_CONTENT", "false"),
        "use_fallback_images": env.get("TOPIC_RSS_USE_FALLBACK_IMAGES", "true"),
        "short_content_threshold": env.get("TOPIC_RSS_SHORT_CONTENT_THRESHOLD"),
    })
    return Settings(
        sources=tuple(_parse_feed_lines(env.get("TOPIC_RSS_FEEDS"))),
        filters=filters,
        max_items=_as_int(env.get("TOPIC_RSS_MAX_ITEMS", DEFAULT_MAX_ITEMS), "TOPIC_RSS_MAX_ITEMS"),
        max_workers=_as_int(env.get("TOPIC_RSS_MAX_WORKERS", 1), "TOPIC_RSS_MAX_WORKERS", minimum=1),
        display_name=(env.get("TOPIC_RSS_NAME") or "").strip() or DEFAULT_DISPLAY_NAME,
    )
