from __future__ import annotations

import concurrent.futures as _fut
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Union

import feedparser

from .exceptions import RSSFetchError
from .models import FeedItem
from .parser import parse_entries

logger = logging.getLogger(__name__)


class FeedHandle:
    """A fetched feed whose entries can be read as FeedItems."""

    def __init__(self, url: str, entries: Sequence[Dict[str, Any]]) -> None:
        self.url = url
        self.entries = list(entries)

    def __len__(self) -> int:
        return len(self.entries)

    def items(self, offset: int = 0, limit: Optional[int] = None) -> List[FeedItem]:
        offset = max(0, offset)
        end = None if limit is None else offset + max(0, limit)
        return parse_entries(self.entries[offset:end])


FetchFunc = Callable[[str], FeedHandle]
FetchOutcome = Union[FeedHandle, RSSFetchError]


def fetch_feed(url: str, *, agent: Optional[str] = None) -> FeedHandle:
    """
    Fetch a single feed URL and return a handle on its entries.

    Raises RSSFetchError on network/parse issues, or when the feed is malformed
    (bozo) and nothing could be recovered from it.
    """
    try:
        # Keep <script> blocks: content:encoded may carry JSON-LD image metadata.
        # Every field read from entries is escaped or URL-validated later.
        if agent:
            feed = feedparser.parse(url, agent=agent, sanitize_html=False)
        else:
            feed = feedparser.parse(url, sanitize_html=False)
    except Exception as e:  # pragma: no cover - surface as domain error
        raise RSSFetchError(f"Failed to fetch feed: {url} ({e})") from e

    entries = getattr(feed, "entries", None)
    if not isinstance(entries, list):
        raise RSSFetchError(f"Feed has no entries: {url}")

    if getattr(feed, "bozo", 0):
        exc = getattr(feed, "bozo_exception", None)
        if not entries:
            msg = f"Invalid RSS/Atom feed: {url}"
            if exc:
                msg += f" ({exc})"
            raise RSSFetchError(msg)
        logger.warning("Feed %s is malformed but usable: %s", url, exc)

    status = getattr(feed, "status", None)
    if isinstance(status, int) and status >= 400:
        raise RSSFetchError(f"HTTP {status} fetching feed: {url}")

    return FeedHandle(url, entries)


def _fetch_one(fetch: FetchFunc, url: str) -> FetchOutcome:
    try:
        return fetch(url)
    except RSSFetchError as e:
        return e
    except Exception as e:
        logger.exception("Unexpected error fetching %s", url)
        return RSSFetchError(f"Failed to fetch feed: {url} ({e})")


def fetch_many(
    urls: Iterable[str],
    *,
    max_workers: int = 1,
    fetch: FetchFunc = fetch_feed,
) -> List[FetchOutcome]:
    """
    Fetch multiple feeds, returning one FeedHandle or RSSFetchError per URL in input order.

    Failures on individual URLs are isolated and never abort the batch. With
    max_workers > 1 the fetches run in a thread pool; results are still placed
    by input position, not completion order.
    """
    url_list = list(urls)
    max_workers = max(1, int(max_workers or 1))
    if max_workers == 1 or len(url_list) <= 1:
        return [_fetch_one(fetch, u) for u in url_list]

    with _fut.ThreadPoolExecutor(max_workers=min(max_workers, len(url_list))) as ex:
        futures = [ex.submit(_fetch_one, fetch, u) for u in url_list]
        return [fu.result() for fu in futures]
