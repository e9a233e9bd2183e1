"""Storage layer — snapshot files and the fail-safe commit policy."""

from packerspulse.storage.snapshot import (
    FeedSnapshot,
    GameSnapshot,
    PersistOutcome,
    commit_feed,
    load_snapshot,
    write_games,
)

__all__ = [
    "FeedSnapshot",
    "GameSnapshot",
    "PersistOutcome",
    "commit_feed",
    "load_snapshot",
    "write_games",
]
