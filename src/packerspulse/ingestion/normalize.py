"""Normalization — merge adapter output, drop duplicates, apply the recency boost."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone

from packerspulse.ingestion.dedup import compute_dedup_key
from packerspulse.ingestion.records import FeedRecord, parse_datetime

logger = logging.getLogger(__name__)

RECENCY_WINDOW = timedelta(hours=24)


def recency_boost(created_at: str, now: datetime) -> float:
    """Linear decay from 1 (just created) to 0 at 24h and beyond.

    Future-skewed timestamps are held at 1.
    """
    age = now - parse_datetime(created_at, now)
    boost = 1.0 - age / RECENCY_WINDOW
    return min(1.0, max(0.0, boost))


def dedupe(records: Iterable[FeedRecord | None]) -> list[FeedRecord]:
    """Keep the first record seen for each dedup key, skipping None entries."""
    seen: set[str] = set()
    unique: list[FeedRecord] = []
    for record in records:
        if record is None:
            continue
        key = compute_dedup_key(record)
        if key in seen:
            logger.debug("Dropping duplicate %s %s", record.source.value, record.source_id)
            continue
        seen.add(key)
        unique.append(record)
    return unique


def normalize_records(
    records: Iterable[FeedRecord | None],
    now: datetime | None = None,
) -> list[FeedRecord]:
    """Deduplicate *records* and add each survivor's recency boost to its prior.

    Scores only ever grow here. Output keeps first-seen order; ranking is a
    separate step.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    unique = dedupe(records)
    return [
        dataclasses.replace(
            record, score=record.score + recency_boost(record.created_at, now)
        )
        for record in unique
    ]
