"""
Best-effort image discovery for feed items.

Each strategy looks at one metadata scheme and returns a candidate URL or None.
`ImageResolver` runs them in order and keeps the first candidate that survives
URL cleaning; a per-source fallback image is used only when every strategy misses.
"""
from __future__ import annotations

import logging
import re
from typing import Callable, Mapping, Optional, Sequence, Tuple

from .models import FeedItem, FilterConfig
from .urls import clean_url, is_valid_url

logger = logging.getLogger(__name__)

Strategy = Callable[[FeedItem], Optional[str]]

_IMG_SRC = re.compile(r"""<img[^>]+src=['"]([^'"]+)['"][^>]*>""", re.IGNORECASE)
_THUMBNAIL_URL = re.compile(r'"thumbnailUrl"\s*:\s*"([^"]+)"')

# Meta fields some CMS exports attach to items; values may be opaque IDs.
META_FIELDS = ("_thumbnail_id", "featured_image", "post_image", "image_url")

# Lower-cased brand substring of a source label -> fallback image.
FALLBACK_IMAGES: Mapping[str, str] = {
    "nesn": "https://s47719.pcdn.co/wp-content/plugins/arsenal-images/dist/svg/nesn-editorial.svg",
}


def _first_img_src(markup: Optional[str]) -> Optional[str]:
    if not markup:
        return None
    m = _IMG_SRC.search(markup)
    return m.group(1) if m else None


def from_enclosure(item: FeedItem) -> Optional[str]:
    return item.enclosure_link


def from_media_content(item: FeedItem) -> Optional[str]:
    return item.media_content_url


def from_media_thumbnail(item: FeedItem) -> Optional[str]:
    return item.media_thumbnail_url


def from_encoded_content(item: FeedItem) -> Optional[str]:
    """JSON-LD `thumbnailUrl` embedded in content:encoded, else its first <img>."""
    content = item.encoded_content
    if not content:
        return None
    m = _THUMBNAIL_URL.search(content)
    if m:
        return m.group(1).replace("\\/", "/")
    return _first_img_src(content)


def from_post_thumbnail(item: FeedItem) -> Optional[str]:
    return item.tag("post-thumbnail")


def from_featured_image(item: FeedItem) -> Optional[str]:
    return item.tag("featuredImage")


def from_description(item: FeedItem) -> Optional[str]:
    return _first_img_src(item.description)


def from_meta_fields(item: FeedItem) -> Optional[str]:
    for name in META_FIELDS:
        value = item.tag(name)
        if value and is_valid_url(value.strip()):
            return value.strip()
    return None


DEFAULT_STRATEGIES: Tuple[Strategy, ...] = (
    from_enclosure,
    from_media_content,
    from_media_thumbnail,
    from_encoded_content,
    from_post_thumbnail,
    from_featured_image,
    from_description,
    from_meta_fields,
)


def fallback_image(source_label: str, config: FilterConfig) -> str:
    if not config.use_fallback_images:
        return ""
    label = (source_label or "").lower()
    for brand, url in FALLBACK_IMAGES.items():
        if brand in label:
            return url
    return ""


class ImageResolver:
    def __init__(self, strategies: Sequence[Strategy] = DEFAULT_STRATEGIES) -> None:
        self.strategies = tuple(strategies)

    def resolve(self, item: FeedItem, source_label: str, config: FilterConfig) -> str:
        for strategy in self.strategies:
            candidate = clean_url(strategy(item))
            if candidate:
                return candidate
        image = fallback_image(source_label, config)
        if not image:
            logger.debug("No image found for %r (%s)", item.title, source_label)
        return image

