"""
news_fetcher.py
---------------
Fetch crypto headlines from several RSS feeds in parallel and keep the
recent ones (configurable look-back, default 24 hours).

A feed that fails to download or parse contributes nothing; the remaining
feeds still make it into the batch.

# Usage:
# >>> from data_processing.news_fetcher import fetch_latest_news
# >>> articles = fetch_latest_news(hours_back=24, limit=50)
"""

from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Mapping
import datetime as dt
import logging
import os
import feedparser
from bs4 import BeautifulSoup
from data_processing.models import Article

# ---------------------------------------------------------------------------
RSS_FEEDS: Dict[str, str] = {
    "coindesk": "https://www.coindesk.com/arc/outboundfeeds/rss/",
    "cointelegraph": "https://cointelegraph.com/rss",
    "decrypt": "https://decrypt.co/feed",
    "theblock": "https://www.theblock.co/rss.xml",
    "bitcoinmagazine": "https://bitcoinmagazine.com/feed",
    "newsbtc": "https://www.newsbtc.com/feed/",
    "beincrypto": "https://beincrypto.com/feed/",
    "cryptoslate": "https://cryptoslate.com/feed/",
}
LOOKBACK_HOURS = int(os.getenv("NEWS_LOOKBACK_HOURS", 24))
MAX_ARTICLES = int(os.getenv("NEWS_FETCH_LIMIT", 50))
MAX_WORKERS = 8

logger = logging.getLogger(__name__)
# ---------------------------------------------------------------------------


def _entry_timestamp(entry) -> dt.datetime:
    parsed = entry.get("published_parsed") or entry.get("updated_parsed")
    if parsed:
        return dt.datetime(*parsed[:6], tzinfo=dt.UTC)
    return dt.datetime.now(dt.UTC)


def _plain_text(html: str) -> str:
    return BeautifulSoup(html, "html.parser").get_text(" ", strip=True)


def _parse_entry(entry, index: int, source_name: str) -> Article:
    guid = entry.get("id") or entry.get("guid") or index
    description = _plain_text(entry.get("summary", "") or "")
    return Article(
        id=f"{source_name}-{guid}",
        title=(entry.get("title") or "").strip() or "Untitled",
        source=source_name,
        url=entry.get("link") or "#",
        timestamp=_entry_timestamp(entry),
        description=description or None,
    )


def parse_feed(
    url: str,
    source_name: str,
    parse: Callable[[str], Any] = feedparser.parse,
) -> List[Article]:
    """Return every entry of one feed as an :class:`Article`.

    Download and parse errors are logged and produce an empty list.
    """
    try:
        feed = parse(url)
    except Exception as exc:  # noqa: BLE001
        logger.error("Error parsing %s RSS: %s", source_name, exc)
        return []

    entries = list(getattr(feed, "entries", None) or [])
    if not entries and getattr(feed, "bozo", False):
        logger.warning(
            "Feed %s returned no entries (%s)",
            source_name,
            getattr(feed, "bozo_exception", "malformed feed"),
        )
        return []

    return [_parse_entry(e, i, source_name) for i, e in enumerate(entries)]


def fetch_latest_news(
    hours_back: float = LOOKBACK_HOURS,
    limit: int = MAX_ARTICLES,
    feeds: Mapping[str, str] | None = None,
    parse: Callable[[str], Any] | None = None,
) -> List[Article]:
    """Collect articles from ``feeds`` newer than ``hours_back``, newest first."""
    feeds = RSS_FEEDS if feeds is None else feeds
    if not feeds:
        return []
    parse = parse or feedparser.parse

    with ThreadPoolExecutor(max_workers=min(MAX_WORKERS, len(feeds))) as pool:
        futures = {
            name: pool.submit(parse_feed, url, name, parse)
            for name, url in feeds.items()
        }
        articles: list[Article] = []
        for name, future in futures.items():
            try:
                articles.extend(future.result())
            except Exception as exc:  # noqa: BLE001
                logger.error("Feed %s failed: %s", name, exc)

    cutoff = dt.datetime.now(dt.UTC) - dt.timedelta(hours=hours_back)
    recent = [a for a in articles if a.timestamp >= cutoff]
    recent.sort(key=lambda a: a.timestamp, reverse=True)

    logger.info(
        "Collected %d articles from %d feeds (%d within %sh)",
        len(articles),
        len(feeds),
        len(recent),
        hours_back,
    )
    return recent[:limit]


# CLI test --------------------------------------------------------------------
if __name__ == "__main__":
    for art in fetch_latest_news():
        print(f"[{art.source}] {art.title}")
