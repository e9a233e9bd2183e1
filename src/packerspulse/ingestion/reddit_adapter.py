"""Reddit source adapter — fetches subreddit JSON listings."""

from __future__ import annotations

import logging
import time

from packerspulse.ingestion.adapter import SourceAdapter
from packerspulse.ingestion.fetch import fetch_json
from packerspulse.ingestion.records import (
    SOURCE_PRIORS,
    FeedRecord,
    Source,
    as_str,
    derive_title,
    parse_timestamp,
)

logger = logging.getLogger(__name__)

_REDDIT_BASE = "https://www.reddit.com"
_FETCH_DELAY = 0.5  # seconds between listing fetches

DEFAULT_LISTINGS = [
    "https://www.reddit.com/r/GreenBayPackers/.json?limit=50",
]


def _post_url(post: dict) -> str:
    url = as_str(post.get("url"))
    if url:
        return url
    permalink = as_str(post.get("permalink"))
    if permalink:
        return f"{_REDDIT_BASE}{permalink}"
    return ""


def map_listing(payload) -> list[FeedRecord]:
    """Map a Reddit listing body (``data.children[].data``) into FeedRecords."""
    if not isinstance(payload, dict):
        return []
    listing = payload.get("data") or {}
    children = listing.get("children") if isinstance(listing, dict) else None

    records: list[FeedRecord] = []
    for child in children or []:
        post = child.get("data") if isinstance(child, dict) else None
        if not isinstance(post, dict):
            continue
        selftext = as_str(post.get("selftext"))
        records.append(
            FeedRecord(
                source=Source.REDDIT,
                source_id=as_str(post.get("id")),
                author=as_str(post.get("author")),
                title=derive_title(as_str(post.get("title")), selftext),
                text=selftext,
                url=_post_url(post),
                created_at=parse_timestamp(post.get("created_utc")),
                score=SOURCE_PRIORS[Source.REDDIT],
            )
        )
    return records


class RedditAdapter(SourceAdapter):
    """Adapter for Reddit subreddit listings."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._listings: list[str] = list(DEFAULT_LISTINGS)

    @property
    def name(self) -> str:
        return "reddit"

    def configure(self, config: dict) -> None:
        self._listings = list(config.get("listings", DEFAULT_LISTINGS))

    def fetch(self) -> list[FeedRecord]:
        all_items: list[FeedRecord] = []
        for i, url in enumerate(self._listings):
            if i > 0:
                time.sleep(_FETCH_DELAY)
            try:
                items = self._fetch_listing(url)
                all_items.extend(items)
            except Exception:
                logger.exception("Failed to fetch Reddit listing %s", url)
        return all_items

    def _fetch_listing(self, url: str) -> list[FeedRecord]:
        data = fetch_json(url, **self._fetch_kwargs())
        items = map_listing(data)
        logger.info("Fetched %d posts from %s", len(items), url)
        return items
