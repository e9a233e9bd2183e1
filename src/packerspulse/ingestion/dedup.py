"""Deduplication key computation for merged records."""

from __future__ import annotations

import hashlib

from packerspulse.ingestion.records import FeedRecord


def strip_query(url: str) -> str:
    """Drop everything from the first ``?`` onward."""
    return url.split("?", 1)[0]


def content_hash(title: str, text: str) -> str:
    """SHA-1 hex digest of ``title|text``, for records without a URL."""
    combined = f"{title}|{text}"
    return hashlib.sha1(combined.encode("utf-8")).hexdigest()


def compute_dedup_key(record: FeedRecord) -> str:
    """URL without its query string, or a content hash when the URL is empty.

    Two records whose URLs differ only in the query string share a key.
    """
    if record.url:
        return strip_query(record.url)
    return content_hash(record.title, record.text)
