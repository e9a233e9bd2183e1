"""Configuration loading and validation."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


@dataclass(frozen=True)
class Config:
    """Application configuration. All values sourced from environment variables."""

    # Output
    output_dir: str = "./docs"
    sources_config_path: str | None = None

    # Topic
    topic_name: str = "Packers"
    team_name: str = "Green Bay Packers"
    team_abbr: str = "GB"

    # Fetching
    fetch_timeout_seconds: float = 20.0
    fetch_max_retries: int = 2
    fetch_retry_pause_seconds: float = 1.0
    query_pause_seconds: float = 0.6
    scores_timeout_seconds: float = 15.0

    # Scheduling (only used with --every)
    schedule_interval_minutes: int = 60

    # Application
    log_level: str = "INFO"
    log_format: str = "json"


def _env_int(name: str, default: int, minimum: int = 0) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")
    return value


def load_config(env_path: str | Path | None = None) -> Config:
    """Load configuration from environment variables.

    Loads a .env file if present (for local development). Every variable is
    optional; a malformed numeric value raises ValueError naming the variable.
    """
    load_dotenv(dotenv_path=env_path)

    return Config(
        # Output
        output_dir=os.environ.get("OUTPUT_DIR", "./docs"),
        sources_config_path=os.environ.get("SOURCES_CONFIG_PATH") or None,
        # Topic
        topic_name=os.environ.get("TOPIC_NAME", "Packers"),
        team_name=os.environ.get("TEAM_NAME", "Green Bay Packers"),
        team_abbr=os.environ.get("TEAM_ABBR", "GB"),
        # Fetching
        fetch_timeout_seconds=_env_float("FETCH_TIMEOUT_SECONDS", 20.0),
        fetch_max_retries=_env_int("FETCH_MAX_RETRIES", 2),
        fetch_retry_pause_seconds=_env_float("FETCH_RETRY_PAUSE_SECONDS", 1.0),
        query_pause_seconds=_env_float("QUERY_PAUSE_SECONDS", 0.6),
        scores_timeout_seconds=_env_float("SCORES_TIMEOUT_SECONDS", 15.0),
        # Scheduling
        schedule_interval_minutes=_env_int("SCHEDULE_INTERVAL_MINUTES", 60, minimum=1),
        # Application
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
        log_format=os.environ.get("LOG_FORMAT", "json"),
    )
