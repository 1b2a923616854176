from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import FrozenSet, Mapping, Optional, Tuple
from urllib.parse import urlparse

from .exceptions import ConfigError

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class FeedSource:
    """A configured feed. A blank label falls back to the feed's host name."""
    url: str
    label: str = ""

    def __post_init__(self) -> None:
        if not (self.label or "").strip():
            object.__setattr__(self, "label", urlparse(self.url).netloc or self.url)
        else:
            object.__setattr__(self, "label", self.label.strip())


@dataclass(frozen=True)
class FilterConfig:
    """Immutable snapshot of the content filtering settings for one run."""
    blocked_titles: FrozenSet[str] = frozenset()
    custom_filter_patterns: Tuple[str, ...] = ()
    skip_short_content: bool = False
    short_content_threshold: int = 100
    use_fallback_images: bool = True
    description_words: int = 30
    deduplicate: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "blocked_titles", frozenset(t.strip() for t in self.blocked_titles if t and t.strip())
        )
        object.__setattr__(self, "custom_filter_patterns", tuple(self.custom_filter_patterns))
        if self.short_content_threshold < 0:
            raise ConfigError("short_content_threshold must be >= 0")
        if self.description_words <= 0:
            raise ConfigError("description_words must be > 0")


@dataclass(frozen=True)
class FeedItem:
    """
    One parsed feed entry, reduced to the fields the pipeline reads.

    `tags` holds generic, non-namespaced item elements keyed by lower-cased name.
    """
    title: str = ""
    description: str = ""
    permalink: str = ""
    published_at: Optional[datetime] = None
    enclosure_link: Optional[str] = None
    media_content_url: Optional[str] = None
    media_thumbnail_url: Optional[str] = None
    encoded_content: Optional[str] = None
    tags: Mapping[str, str] = field(default_factory=dict)

    def tag(self, name: str) -> Optional[str]:
        value = self.tags.get(name.lower())
        if value is None:
            value = self.tags.get(name.lower().replace("-", "_"))
        return value


@dataclass(frozen=True)
class Article:
    """
    Display-ready article summary.

    `title` and `description` are HTML-escaped. `image` is "" when no image was found.
    """
    title: str
    link: str
    description: str
    published_at: datetime
    source: str
    image: str = ""


class SkipReason(str, Enum):
    BLOCKED_TITLE = "blocked-title"
    TOO_SHORT = "too-short"


@dataclass(frozen=True)
class Skip:
    reason: SkipReason
