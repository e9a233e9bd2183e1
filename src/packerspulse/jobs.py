"""Run orchestration — feed pipeline and scoreboard jobs."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from packerspulse.config import Config
import packerspulse.ingestion  # noqa: F401  — triggers adapter registration
from packerspulse.ingestion.normalize import normalize_records
from packerspulse.ingestion.rank import rank_records
from packerspulse.ingestion.records import FeedRecord
from packerspulse.ingestion.registry import get_adapter_class
from packerspulse.scores.scoreboard import fetch_games
from packerspulse.storage.snapshot import (
    GameSnapshot,
    PersistOutcome,
    commit_feed,
    write_games,
)

logger = logging.getLogger(__name__)

# Fetch order: micro-blog, syndication, forum.
DEFAULT_ADAPTERS = [
    {"type": "bluesky", "enabled": True},
    {"type": "rss", "enabled": True},
    {"type": "reddit", "enabled": True},
]


@dataclass(frozen=True)
class PipelineResult:
    """Counts and outcome of one feed run."""

    source_counts: dict[str, int] = field(default_factory=dict)
    total_raw: int = 0
    total_unique: int = 0
    outcome: PersistOutcome = PersistOutcome.COMMIT_NEW
    items_written: int = 0


def _load_adapter_configs(config: Config) -> list[dict]:
    """Adapter list from the sources file, or the built-in one."""
    if not config.sources_config_path:
        return [dict(entry) for entry in DEFAULT_ADAPTERS]
    with open(config.sources_config_path) as f:
        sources = json.load(f)
    return list(sources.get("adapters", []))


def _collect(config: Config) -> tuple[list[FeedRecord], dict[str, int]]:
    """Run each enabled adapter in order; a failing adapter contributes nothing."""
    records: list[FeedRecord] = []
    counts: dict[str, int] = {}

    for adapter_config in _load_adapter_configs(config):
        adapter_type = adapter_config.get("type", "")
        adapter_cls = get_adapter_class(adapter_type)
        if adapter_cls is None:
            logger.warning("Unknown adapter type '%s', skipping", adapter_type)
            continue
        if not adapter_config.get("enabled", True):
            continue

        adapter = adapter_cls(
            timeout=config.fetch_timeout_seconds,
            max_retries=config.fetch_max_retries,
            retry_pause=config.fetch_retry_pause_seconds,
        )
        adapter.configure({"query_pause": config.query_pause_seconds, **adapter_config})
        try:
            fetched = adapter.fetch()
        except Exception:
            logger.exception("Adapter '%s' fetch failed", adapter.name)
            fetched = []

        counts[adapter.name] = counts.get(adapter.name, 0) + len(fetched)
        records.extend(fetched)
        logger.info("Adapter '%s' returned %d record(s)", adapter.name, len(fetched))

    return records, counts


def run_pipeline(config: Config, now: datetime | None = None) -> PipelineResult:
    """Fetch every source, merge, rank, and commit data.json + digest.html.

    Adapter failures only shrink the input. Errors outside the adapters
    (output directory, sources file, writes) propagate.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    Path(config.output_dir).mkdir(parents=True, exist_ok=True)

    records, counts = _collect(config)
    unique = normalize_records(records, now)
    ranked = rank_records(unique)

    committed = commit_feed(config.output_dir, ranked, now, topic=config.topic_name)

    result = PipelineResult(
        source_counts=counts,
        total_raw=len(records),
        total_unique=len(unique),
        outcome=committed.outcome,
        items_written=len(committed.snapshot.items),
    )
    logger.info(
        "Feed run complete: %d raw, %d unique, %s (%d written)",
        result.total_raw, result.total_unique, result.outcome.value, result.items_written,
    )
    return result


def run_scores(config: Config, now: datetime | None = None) -> GameSnapshot:
    """Fetch the scoreboard and rewrite scores.json."""
    Path(config.output_dir).mkdir(parents=True, exist_ok=True)
    games = fetch_games(
        config.team_name,
        config.team_abbr,
        timeout=config.scores_timeout_seconds,
        max_retries=config.fetch_max_retries,
        retry_pause=config.fetch_retry_pause_seconds,
    )
    return write_games(config.output_dir, games, now)


def run_all(config: Config) -> None:
    """Feed pipeline, then scoreboard.

    A failure in one job does not skip the other; the first error is
    re-raised once both have run.
    """
    first_error: Exception | None = None
    for name, job in (("pipeline", run_pipeline), ("scores", run_scores)):
        try:
            job(config)
        except Exception as e:
            logger.exception("Job %s failed", name)
            if first_error is None:
                first_error = e
    if first_error is not None:
        raise first_error
