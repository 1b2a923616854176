"""
topic_rss

Aggregates several RSS/Atom feeds into one newest-first list of display-ready
article summaries for a "topic feed" widget.

Core ideas:
- Input: FeedSource(url, label) list + FilterConfig
- Process: fetch → filter (blocked titles, short content) → sanitize description
  → resolve image → merge → sort (newest first) → cap
- Output: List[Article]

Example
-------
from topic_rss import FeedSource, FilterConfig, aggregate

articles = aggregate(
    [
        FeedSource("https://nesn.com/feed/", "NESN"),
        FeedSource("https://www.espn.com/espn/rss/news", "ESPN"),
    ],
    FilterConfig(blocked_titles={"Daily Odds"}, skip_short_content=True),
    max_items=10,
)

for a in articles:
    print(a.published_at, a.source, a.title, a.image)
"""
from .core import DEFAULT_MAX_ITEMS, FeedAggregator, aggregate
from .exceptions import ConfigError, RSSFetchError
from .models import Article, FeedItem, FeedSource, FilterConfig, Skip, SkipReason

__all__ = [
    "Article",
    "ConfigError",
    "DEFAULT_MAX_ITEMS",
    "FeedAggregator",
    "FeedItem",
    "FeedSource",
    "FilterConfig",
    "RSSFetchError",
    "Skip",
    "SkipReason",
    "aggregate",
]
