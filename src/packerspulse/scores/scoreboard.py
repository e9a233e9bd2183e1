"""ESPN scoreboard adapter — filters the NFL scoreboard down to one team's games."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from packerspulse.ingestion.fetch import fetch_json
from packerspulse.ingestion.rank import rank_games
from packerspulse.ingestion.records import GameRecord, as_str, parse_timestamp

logger = logging.getLogger(__name__)

SCOREBOARD_URL = "https://site.api.espn.com/apis/site/v2/sports/football/nfl/scoreboard"
DEFAULT_TEAM_NAME = "Green Bay Packers"
DEFAULT_TEAM_ABBR = "GB"
LIVE_STATE = "in"

_MISSING_SIDE = {"name": "", "abbr": "?", "score": "", "home_away": ""}


def _get(obj, *keys):
    """Walk nested dicts; any missing or non-dict level yields None."""
    for key in keys:
        if not isinstance(obj, dict):
            return None
        obj = obj.get(key)
    return obj


def _competitors(competition: dict) -> list[dict]:
    teams = []
    for competitor in competition.get("competitors") or []:
        if not isinstance(competitor, dict):
            continue
        teams.append({
            "name": as_str(_get(competitor, "team", "displayName")),
            "abbr": as_str(_get(competitor, "team", "abbreviation")),
            "score": as_str(competitor.get("score")),
            "home_away": as_str(competitor.get("homeAway")),
        })
    return teams


def _is_target(team: dict, team_name: str, team_abbr: str) -> bool:
    # An empty configured value never matches, even against a blank competitor.
    if team_name and team["name"] == team_name:
        return True
    return bool(team_abbr) and team["abbr"] == team_abbr


def format_label(away: dict, home: dict, detail: str) -> str:
    label = f"{away['abbr']} {away['score']} @ {home['abbr']} {home['score']}"
    if detail:
        label += f" • {detail}"
    return label


def map_scoreboard(
    payload,
    team_name: str = DEFAULT_TEAM_NAME,
    team_abbr: str = DEFAULT_TEAM_ABBR,
    now: datetime | None = None,
) -> list[GameRecord]:
    """Map a scoreboard body into GameRecords for the target team (unranked)."""
    if now is None:
        now = datetime.now(timezone.utc)
    events = payload.get("events") if isinstance(payload, dict) else None
    if not isinstance(events, list):
        return []

    games: list[GameRecord] = []
    for event in events:
        if not isinstance(event, dict):
            continue
        competitions = event.get("competitions")
        competition = competitions[0] if isinstance(competitions, list) and competitions else None
        if not isinstance(competition, dict):
            continue

        teams = _competitors(competition)
        if not any(_is_target(t, team_name, team_abbr) for t in teams):
            continue

        state = as_str(
            _get(competition, "status", "type", "state")
            or _get(event, "status", "type", "state")
        )
        detail = as_str(_get(competition, "status", "type", "shortDetail"))
        date = parse_timestamp(event.get("date") or competition.get("date"), now)

        away = next((t for t in teams if t["home_away"] == "away"), _MISSING_SIDE)
        home = next((t for t in teams if t["home_away"] == "home"), _MISSING_SIDE)

        games.append(
            GameRecord(label=format_label(away, home, detail), live=state == LIVE_STATE, date=date)
        )
    return games


def fetch_games(
    team_name: str = DEFAULT_TEAM_NAME,
    team_abbr: str = DEFAULT_TEAM_ABBR,
    *,
    timeout: float = 15.0,
    max_retries: int = 2,
    retry_pause: float = 1.0,
) -> list[GameRecord]:
    """Fetch, filter, and rank the target team's games.

    Never raises: any failure is logged and yields an empty list.
    """
    try:
        data = fetch_json(
            SCOREBOARD_URL,
            timeout=timeout,
            max_retries=max_retries,
            retry_pause=retry_pause,
        )
        games = rank_games(map_scoreboard(data, team_name, team_abbr))
    except Exception:
        logger.exception("Scoreboard fetch failed")
        return []
    logger.info("Scoreboard: %d game(s) for %s", len(games), team_abbr)
    return games
