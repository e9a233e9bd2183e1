"""Shared fixtures and record builders."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from packerspulse.ingestion.records import SOURCE_PRIORS, FeedRecord, Source

NOW = datetime(2025, 10, 5, 12, 0, tzinfo=timezone.utc)


def make_record(
    source=Source.BLUESKY,
    title="Packers news",
    text="",
    url="",
    age_hours: float = 0.0,
    score: float | None = None,
    source_id="id-1",
    author="",
) -> FeedRecord:
    return FeedRecord(
        source=source,
        source_id=source_id,
        author=author,
        title=title,
        text=text,
        url=url,
        created_at=(NOW - timedelta(hours=age_hours)).isoformat(),
        score=SOURCE_PRIORS[source] if score is None else score,
    )


@pytest.fixture()
def now() -> datetime:
    return NOW
