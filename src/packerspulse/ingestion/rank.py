"""Ordering rules for the feed and the scoreboard."""

from __future__ import annotations

from packerspulse.ingestion.records import FeedRecord, GameRecord, parse_datetime

MAX_GAMES = 4


def rank_records(records: list[FeedRecord]) -> list[FeedRecord]:
    """Score descending, ties broken by newest ``created_at``. No cap."""
    # Two stable passes: secondary key first.
    by_time = sorted(records, key=lambda r: parse_datetime(r.created_at), reverse=True)
    return sorted(by_time, key=lambda r: r.score, reverse=True)


def rank_games(games: list[GameRecord], limit: int = MAX_GAMES) -> list[GameRecord]:
    """Live games first, then newest date; keep at most *limit*."""
    by_date = sorted(games, key=lambda g: parse_datetime(g.date), reverse=True)
    ordered = sorted(by_date, key=lambda g: g.live, reverse=True)
    return ordered[:limit]
