from __future__ import annotations

import logging
from functools import partial
from typing import Iterable, List, Optional, Sequence

from .exceptions import ConfigError, RSSFetchError
from .fetcher import FetchFunc, fetch_feed, fetch_many
from .images import ImageResolver
from .models import Article, FeedItem, FeedSource, FilterConfig, Skip
from .normalizer import to_article

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITEMS = 30


def _dedupe_key(article: Article) -> tuple:
    if article.link:
        return ("link", article.link)
    return ("title", article.source, article.title)


def _drop_duplicates(articles: List[Article]) -> List[Article]:
    """First occurrence wins, by link or, for link-less articles, by source and title."""
    seen = set()
    out = []
    for a in articles:
        key = _dedupe_key(a)
        if key not in seen:
            seen.add(key)
            out.append(a)
    return out


def _unique_sources(sources: Iterable[FeedSource]) -> List[FeedSource]:
    seen = set()
    out = []
    for s in sources:
        if s.url in seen:
            continue
        seen.add(s.url)
        out.append(s)
    return out


class FeedAggregator:
    """
    High-level API: fetch the configured feeds and return display-ready Articles.

    Pipeline: fetch → normalize (filter, sanitize, resolve image) → merge →
    deduplicate → sort (newest first) → cap

    The per-feed cap is applied before merging and the global cap after sorting,
    so an early source with many items can crowd out newer items from a later
    source that were beyond that source's own cap.
    """

    def __init__(
        self,
        *,
        fetch: Optional[FetchFunc] = None,
        max_workers: int = 1,
        agent: Optional[str] = None,
        resolver: Optional[ImageResolver] = None,
    ) -> None:
        if fetch is None:
            fetch = partial(fetch_feed, agent=agent) if agent else fetch_feed
        self.fetch = fetch
        self.max_workers = max_workers
        self.resolver = resolver or ImageResolver()

    def aggregate(
        self,
        sources: Sequence[FeedSource],
        config: Optional[FilterConfig] = None,
        max_items: int = DEFAULT_MAX_ITEMS,
    ) -> List[Article]:
        if isinstance(max_items, bool) or not isinstance(max_items, int):
            raise ConfigError(f"max_items must be an int, got {max_items!r}")
        if max_items < 0:
            raise ConfigError(f"max_items must be >= 0, got {max_items}")
        if not sources or max_items == 0:
            return []
        config = config or FilterConfig()

        sources = _unique_sources(sources)
        outcomes = fetch_many(
            [s.url for s in sources],
            max_workers=self.max_workers,
            fetch=self.fetch,
        )

        # Merge per-source results in configured order
        articles: List[Article] = []
        for source, outcome in zip(sources, outcomes):
            if isinstance(outcome, RSSFetchError):
                logger.warning("Skipping feed %s (%s): %s", source.label, source.url, outcome)
                continue
            try:
                items = outcome.items(0, max_items)
            except Exception:
                logger.exception("Skipping feed %s (%s): unreadable items", source.label, source.url)
                continue
            articles.extend(self._normalize_feed(source, items, config))

        if config.deduplicate:
            articles = _drop_duplicates(articles)

        # sorted() is stable, so ties keep source order then item order
        articles = sorted(articles, key=lambda a: a.published_at, reverse=True)
        return articles[:max_items]

    def _normalize_feed(
        self, source: FeedSource, items: Iterable[FeedItem], config: FilterConfig
    ) -> List[Article]:
        out: List[Article] = []
        skipped = 0
        for item in items:
            try:
                result = to_article(item, source.label, config, resolver=self.resolver)
            except Exception:
                # Skip malformed rows
                logger.debug("Failed to normalize item from %s", source.url, exc_info=True)
                continue
            if isinstance(result, Skip):
                skipped += 1
                continue
            out.append(result)
        logger.debug("Feed %s: %d accepted, %d filtered", source.label, len(out), skipped)
        return out


def aggregate(
    sources: Sequence[FeedSource],
    config: Optional[FilterConfig] = None,
    max_items: int = DEFAULT_MAX_ITEMS,
    *,
    max_workers: int = 1,
) -> List[Article]:
    """Aggregate `sources` with the default feedparser-backed fetcher."""
    return FeedAggregator(max_workers=max_workers).aggregate(sources, config, max_items)
