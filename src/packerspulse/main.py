"""Application entry point — one run by default, or a blocking interval schedule."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.interval import IntervalTrigger

from packerspulse.config import Config, load_config
from packerspulse.jobs import run_all, run_pipeline, run_scores

logger = logging.getLogger("packerspulse")


def _setup_logging(log_level: str, log_format: str) -> None:
    """Configure root logger based on config."""
    level = getattr(logging, log_level.upper(), logging.INFO)

    if log_format == "json":
        formatter = logging.Formatter(
            json.dumps(
                {
                    "time": "%(asctime)s",
                    "level": "%(levelname)s",
                    "logger": "%(name)s",
                    "message": "%(message)s",
                }
            )
        )
    else:
        formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)


def _select_job(args: argparse.Namespace):
    if args.feed_only:
        return run_pipeline
    if args.scores_only:
        return run_scores
    return run_all


def _build_scheduler(config: Config, job) -> BlockingScheduler:
    """Create a BlockingScheduler that runs *job* on the configured interval."""
    scheduler = BlockingScheduler()

    def _guarded():
        try:
            job(config)
        except Exception:
            logger.exception("Scheduled run failed; scheduler will continue")

    scheduler.add_job(
        _guarded,
        trigger=IntervalTrigger(minutes=config.schedule_interval_minutes),
        id="packerspulse",
        name="Feed + scoreboard refresh",
    )
    return scheduler


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="packerspulse",
        description="Fetch, merge, and rank topic posts; write data.json, digest.html, scores.json.",
    )
    only = parser.add_mutually_exclusive_group()
    only.add_argument("--feed-only", action="store_true", help="skip the scoreboard")
    only.add_argument("--scores-only", action="store_true", help="only refresh scores.json")
    parser.add_argument(
        "--every",
        action="store_true",
        help="keep running, repeating every SCHEDULE_INTERVAL_MINUTES",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Run once (or on a schedule). Returns the process exit code."""
    args = _parse_args(argv)
    try:
        config = load_config()
    except ValueError as exc:
        print(f"packerspulse: {exc}", file=sys.stderr)
        return 1

    _setup_logging(config.log_level, config.log_format)
    logger.info("Packers Pulse starting (output=%s)", config.output_dir)

    job = _select_job(args)
    try:
        job(config)
    except Exception:
        logger.exception("Run failed")
        return 1

    if args.every:
        scheduler = _build_scheduler(config, job)
        logger.info("Scheduler starting (every %d min)", config.schedule_interval_minutes)
        try:
            scheduler.start()
        except (KeyboardInterrupt, SystemExit):
            logger.info("Scheduler shutting down")
    return 0


if __name__ == "__main__":
    sys.exit(main())
