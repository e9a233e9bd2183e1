"""RSS/Atom feed source adapter (Google News search feeds by default)."""

from __future__ import annotations

import hashlib
import logging
import re
from html import unescape

import feedparser

from packerspulse.ingestion.adapter import SourceAdapter
from packerspulse.ingestion.fetch import fetch_text
from packerspulse.ingestion.records import (
    SOURCE_PRIORS,
    FeedRecord,
    Source,
    as_str,
    derive_title,
    parse_timestamp,
)

logger = logging.getLogger(__name__)

_HTML_TAG_RE = re.compile(r"<[^>]+>")
_WHITESPACE_RE = re.compile(r"\s+")

DEFAULT_FEEDS = [
    "https://news.google.com/rss/search?q=Green%20Bay%20Packers&hl=en-US&gl=US&ceid=US:en",
    "https://news.google.com/rss/search?q=Packers%20trade&hl=en-US&gl=US&ceid=US:en",
    "https://news.google.com/rss/search?q=Jordan%20Love%20Packers&hl=en-US&gl=US&ceid=US:en",
]


def strip_html(text: str) -> str:
    """Remove HTML tags, unescape entities, and collapse whitespace."""
    return _WHITESPACE_RE.sub(" ", unescape(_HTML_TAG_RE.sub(" ", text))).strip()


def _sha1(text: str) -> str:
    return hashlib.sha1(text.encode("utf-8")).hexdigest()


def _get_author(entry: dict) -> str:
    author = entry.get("author")
    if author:
        return as_str(author)
    # Google News names the publisher in <source>
    source = entry.get("source") or {}
    if isinstance(source, dict):
        return as_str(source.get("title"))
    return ""


def _get_snippet(entry: dict) -> str:
    """Plain-text body: content:encoded if present, else summary/description."""
    content = entry.get("content")
    if content and isinstance(content, list) and isinstance(content[0], dict):
        return strip_html(as_str(content[0].get("value")))
    return strip_html(as_str(entry.get("summary") or entry.get("description")))


def map_entries(feed) -> list[FeedRecord]:
    """Map a parsed feedparser result into FeedRecords."""
    records: list[FeedRecord] = []
    for entry in feed.get("entries") or []:
        snippet = _get_snippet(entry)
        title = derive_title(as_str(entry.get("title")).strip(), snippet)
        link = as_str(entry.get("link"))
        records.append(
            FeedRecord(
                source=Source.GOOGLE_NEWS,
                source_id=link or as_str(entry.get("id")) or _sha1(title),
                author=_get_author(entry),
                title=title,
                text=snippet,
                url=link,
                created_at=parse_timestamp(
                    entry.get("published") or entry.get("updated")
                ),
                score=SOURCE_PRIORS[Source.GOOGLE_NEWS],
            )
        )
    return records


class RSSAdapter(SourceAdapter):
    """Adapter for RSS and Atom feeds."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._feeds: list[str] = list(DEFAULT_FEEDS)

    @property
    def name(self) -> str:
        return "rss"

    def configure(self, config: dict) -> None:
        """Accept feed configuration.

        Expected format:
        {
            "feeds": ["https://...", ...]
        }
        """
        self._feeds = list(config.get("feeds", DEFAULT_FEEDS))

    def fetch(self) -> list[FeedRecord]:
        """Fetch records from all configured feeds."""
        all_items: list[FeedRecord] = []
        for url in self._feeds:
            try:
                items = self._fetch_feed(url)
                all_items.extend(items)
            except Exception:
                logger.exception("Failed to fetch feed %s", url)
        return all_items

    def _fetch_feed(self, url: str) -> list[FeedRecord]:
        """Fetch and parse a single RSS/Atom feed."""
        body = fetch_text(url, **self._fetch_kwargs())
        feed = feedparser.parse(body)
        if feed.get("bozo") and not feed.get("entries"):
            raise ValueError(f"Unparseable feed document: {feed.get('bozo_exception')}")
        items = map_entries(feed)
        logger.info("Fetched %d items from %s", len(items), url)
        return items
