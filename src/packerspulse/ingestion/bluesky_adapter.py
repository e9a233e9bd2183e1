"""Bluesky source adapter — public post search over a fixed list of queries."""

from __future__ import annotations

import logging
import time

from packerspulse.ingestion.adapter import SourceAdapter
from packerspulse.ingestion.fetch import fetch_json
from packerspulse.ingestion.records import (
    SOURCE_PRIORS,
    TITLE_MAX_CHARS,
    FeedRecord,
    Source,
    as_str,
    parse_timestamp,
)

logger = logging.getLogger(__name__)

_SEARCH_URL = "https://public.api.bsky.app/xrpc/app.bsky.feed.searchPosts"
_POST_URL = "https://bsky.app/profile/{}/post/{}"

DEFAULT_QUERIES = [
    "Green Bay Packers",
    "Packers trade OR rumor",
    "Jordan Love",
    "Brian Gutekunst",
    "Matt LaFleur",
    "#GoPackGo",
]
DEFAULT_LIMIT = 20
DEFAULT_QUERY_PAUSE = 0.6  # seconds between queries, public API rate limit


def _post_url(handle: str, uri: str) -> str:
    # at://did:plc:xyz/app.bsky.feed.post/<rkey>
    rkey = uri.rsplit("/", 1)[-1] if uri else ""
    if handle and rkey:
        return _POST_URL.format(handle, rkey)
    return ""


def map_posts(payload) -> list[FeedRecord]:
    """Map a searchPosts response body into FeedRecords."""
    if not isinstance(payload, dict):
        return []
    posts = payload.get("posts") or []
    records: list[FeedRecord] = []
    for post in posts:
        if not isinstance(post, dict):
            continue
        record = post.get("record") or {}
        author = post.get("author") or {}
        text = as_str(record.get("text") if isinstance(record, dict) else None)
        handle = as_str(author.get("handle") if isinstance(author, dict) else None)
        uri = as_str(post.get("uri"))
        records.append(
            FeedRecord(
                source=Source.BLUESKY,
                source_id=uri,
                author=handle,
                title=text[:TITLE_MAX_CHARS],
                text=text,
                url=_post_url(handle, uri),
                created_at=parse_timestamp(post.get("indexedAt")),
                score=SOURCE_PRIORS[Source.BLUESKY],
            )
        )
    return records


class BlueskyAdapter(SourceAdapter):
    """Adapter for Bluesky post search."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._queries: list[str] = list(DEFAULT_QUERIES)
        self._limit = DEFAULT_LIMIT
        self._query_pause = DEFAULT_QUERY_PAUSE

    @property
    def name(self) -> str:
        return "bluesky"

    def configure(self, config: dict) -> None:
        self._queries = list(config.get("queries", DEFAULT_QUERIES))
        self._limit = int(config.get("limit", DEFAULT_LIMIT))
        self._query_pause = float(config.get("query_pause", DEFAULT_QUERY_PAUSE))

    def fetch(self) -> list[FeedRecord]:
        all_items: list[FeedRecord] = []
        for i, query in enumerate(self._queries):
            if i > 0:
                time.sleep(self._query_pause)
            try:
                items = self._search(query)
                all_items.extend(items)
            except Exception:
                logger.exception("Failed Bluesky search for %r", query)
        return all_items

    def _search(self, query: str) -> list[FeedRecord]:
        data = fetch_json(
            _SEARCH_URL,
            params={"q": query, "limit": str(self._limit)},
            **self._fetch_kwargs(),
        )
        items = map_posts(data)
        logger.info("Fetched %d posts from Bluesky for %r", len(items), query)
        return items
