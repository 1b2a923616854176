from __future__ import annotations

import html
from datetime import datetime, timezone
from typing import Optional, Union

from .images import ImageResolver
from .models import EPOCH, Article, FeedItem, FilterConfig, Skip, SkipReason
from .sanitizer import sanitize_description, strip_markup, trim_words
from .urls import clean_url


def _as_utc(value: Optional[datetime]) -> datetime:
    if value is None:
        return EPOCH
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_article(
    item: FeedItem,
    source_label: str,
    config: FilterConfig,
    *,
    resolver: Optional[ImageResolver] = None,
) -> Union[Article, Skip]:
    """
    Convert a parsed feed item into an Article, or a Skip when filtering rules
    reject it.

    Rules:
    - trimmed title exactly in `config.blocked_titles` -> Skip(BLOCKED_TITLE)
    - `skip_short_content` and plain-text description shorter than
      `short_content_threshold` -> Skip(TOO_SHORT)
    A bad permalink becomes "" and a missing date becomes the epoch; neither skips the item.
    """
    title = item.title or ""
    if title.strip() in config.blocked_titles:
        return Skip(SkipReason.BLOCKED_TITLE)

    plain = strip_markup(item.description or "")
    if config.skip_short_content and len(plain) < config.short_content_threshold:
        return Skip(SkipReason.TOO_SHORT)

    description = trim_words(sanitize_description(plain, config), config.description_words)

    image = (resolver or ImageResolver()).resolve(item, source_label, config)

    return Article(
        title=html.escape(title),
        link=clean_url(item.permalink),
        description=description,
        published_at=_as_utc(item.published_at),
        source=source_label,
        image=image,
    )
