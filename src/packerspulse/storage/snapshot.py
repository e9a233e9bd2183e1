"""Snapshot persistence with the preserve-previous-on-empty policy.

A run either commits its own ranked records (COMMIT_NEW) or, when it produced
nothing and an earlier non-empty snapshot exists, re-commits that snapshot
unchanged (PRESERVE_PREVIOUS). A total source outage therefore never wipes
content that was already published.
"""

from __future__ import annotations

import enum
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from packerspulse.digest.renderer import DEFAULT_TOPIC, EMPTY_DIGEST, render_digest_html
from packerspulse.ingestion.records import FeedRecord, GameRecord
from packerspulse.storage.files import atomic_write

logger = logging.getLogger(__name__)

FEED_FILENAME = "data.json"
DIGEST_FILENAME = "digest.html"
SCORES_FILENAME = "scores.json"


class PersistOutcome(str, enum.Enum):
    COMMIT_NEW = "commit_new"
    PRESERVE_PREVIOUS = "preserve_previous"


@dataclass(frozen=True)
class FeedSnapshot:
    """The persisted unit: run timestamp plus the ordered records."""

    generated_at: str
    items: list[FeedRecord] = field(default_factory=list)
    # Document as read from disk; written back unchanged when preserved.
    raw: dict | None = field(default=None, compare=False, repr=False)

    def to_dict(self) -> dict:
        if self.raw is not None:
            return self.raw
        return {
            "generated_at": self.generated_at,
            "items": [item.to_dict() for item in self.items],
        }


@dataclass(frozen=True)
class GameSnapshot:
    updated_at: str
    games: list[GameRecord] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "updated_at": self.updated_at,
            "games": [game.to_dict() for game in self.games],
        }


@dataclass(frozen=True)
class CommitResult:
    """What a feed commit wrote."""

    outcome: PersistOutcome
    snapshot: FeedSnapshot
    digest: str


def load_snapshot(path: str | Path) -> FeedSnapshot | None:
    """Read a previously written data.json.

    Returns None when the file is missing, unreadable, or not a snapshot.
    ``items`` holds the records that could be rebuilt (for the digest);
    ``raw`` keeps the parsed document untouched so it can be re-committed.
    """
    path = Path(path)
    if not path.exists():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        logger.warning("Ignoring unreadable snapshot %s", path, exc_info=True)
        return None
    if not isinstance(data, dict) or not isinstance(data.get("items"), list):
        logger.warning("Ignoring malformed snapshot %s", path)
        return None

    items: list[FeedRecord] = []
    for raw in data["items"]:
        try:
            items.append(FeedRecord.from_dict(raw))
        except (AttributeError, ValueError):
            logger.warning("Skipping unreadable snapshot item: %r", raw)
    generated_at = data.get("generated_at")
    if not isinstance(generated_at, str):
        generated_at = ""
    return FeedSnapshot(generated_at=generated_at, items=items, raw=data)


def _has_items(snapshot: FeedSnapshot) -> bool:
    if snapshot.raw is not None:
        return bool(snapshot.raw.get("items"))
    return bool(snapshot.items)


def decide(ranked: list[FeedRecord], previous: FeedSnapshot | None) -> PersistOutcome:
    """Pick the outcome for a run. Pure; no I/O."""
    if ranked:
        return PersistOutcome.COMMIT_NEW
    if previous is not None and _has_items(previous):
        return PersistOutcome.PRESERVE_PREVIOUS
    return PersistOutcome.COMMIT_NEW


def _write_json(path: Path, data: dict) -> None:
    with atomic_write(path) as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def _write_text(path: Path, text: str) -> None:
    with atomic_write(path) as f:
        f.write(text)


def commit_feed(
    output_dir: str | Path,
    ranked: list[FeedRecord],
    now: datetime | None = None,
    topic: str = DEFAULT_TOPIC,
) -> CommitResult:
    """Write data.json and digest.html for this run.

    Reads the previous snapshot at most once and writes each artifact once.
    Write failures propagate.
    """
    output_dir = Path(output_dir)
    if now is None:
        now = datetime.now(timezone.utc)
    feed_path = output_dir / FEED_FILENAME

    previous = None if ranked else load_snapshot(feed_path)
    outcome = decide(ranked, previous)

    if outcome is PersistOutcome.PRESERVE_PREVIOUS:
        snapshot = previous
        logger.warning(
            "No records this run; preserving snapshot from %s (%d items)",
            snapshot.generated_at, len(snapshot.items),
        )
    else:
        snapshot = FeedSnapshot(generated_at=now.isoformat(), items=list(ranked))

    digest = render_digest_html(snapshot.items, topic) if snapshot.items else EMPTY_DIGEST

    _write_json(feed_path, snapshot.to_dict())
    _write_text(output_dir / DIGEST_FILENAME, digest)
    logger.info(
        "Committed %s: %d items to %s", outcome.value, len(snapshot.items), feed_path
    )
    return CommitResult(outcome=outcome, snapshot=snapshot, digest=digest)


def write_games(
    output_dir: str | Path,
    games: list[GameRecord],
    now: datetime | None = None,
) -> GameSnapshot:
    """Write scores.json unconditionally; an empty list is a valid result."""
    if now is None:
        now = datetime.now(timezone.utc)
    snapshot = GameSnapshot(updated_at=now.isoformat(), games=list(games))
    _write_json(Path(output_dir) / SCORES_FILENAME, snapshot.to_dict())
    logger.info("Wrote %d game(s) to %s", len(snapshot.games), output_dir)
    return snapshot
