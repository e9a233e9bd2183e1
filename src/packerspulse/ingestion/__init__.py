"""Ingestion pipeline — source fetching, normalization, deduplication, ranking."""

from packerspulse.ingestion.bluesky_adapter import BlueskyAdapter
from packerspulse.ingestion.reddit_adapter import RedditAdapter
from packerspulse.ingestion.registry import register_adapter
from packerspulse.ingestion.rss_adapter import RSSAdapter

register_adapter("bluesky", BlueskyAdapter)
register_adapter("rss", RSSAdapter)
register_adapter("reddit", RedditAdapter)
