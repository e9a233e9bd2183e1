"""Record types shared by every adapter, plus the tolerant timestamp and title rules."""

from __future__ import annotations

import enum
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

TITLE_MAX_CHARS = 120
FALLBACK_TOPIC = "multiple developing items"


class Source(str, enum.Enum):
    """Origin adapter of a FeedRecord. Values are the tags written to data.json."""

    BLUESKY = "Bluesky"
    GOOGLE_NEWS = "GoogleNews"
    REDDIT = "Reddit"


# Fixed per-source prior, before the recency boost.
SOURCE_PRIORS: dict[Source, float] = {
    Source.BLUESKY: 1.0,
    Source.REDDIT: 1.1,
    Source.GOOGLE_NEWS: 1.2,
}


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _to_datetime(value) -> datetime | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (int, float)):
        try:
            dt = datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
        try:
            dt = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            # RSS feeds use RFC 2822 dates
            try:
                dt = parsedate_to_datetime(raw)
            except (TypeError, ValueError):
                return None
            if dt is None:
                return None
    else:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_timestamp(value, now: datetime | None = None) -> str:
    """Return *value* as an ISO-8601 UTC string.

    Accepts ISO-8601 or RFC 2822 strings, epoch seconds, or datetimes.
    Anything missing or unparseable becomes *now* (the current time by
    default), so the result always parses.
    """
    dt = _to_datetime(value)
    if dt is None:
        dt = now if now is not None else _now_utc()
    return dt.isoformat()


def parse_datetime(value: str, now: datetime | None = None) -> datetime:
    """Parse a stored ``created_at`` back into an aware datetime (same fallback)."""
    dt = _to_datetime(value)
    if dt is None:
        return now if now is not None else _now_utc()
    return dt


def derive_title(title: str | None, text: str | None, fallback: str = "") -> str:
    """Title, else the body truncated to 120 chars, else *fallback*."""
    if title:
        return title
    if text:
        return text[:TITLE_MAX_CHARS]
    return fallback


def as_str(value) -> str:
    """Coerce an optional payload field to a string, never None."""
    if value is None:
        return ""
    return str(value)


@dataclass(frozen=True)
class FeedRecord:
    """One normalized post, article, or forum entry."""

    source: Source
    source_id: str
    author: str
    title: str
    text: str
    url: str
    created_at: str
    score: float

    def to_dict(self) -> dict:
        data = asdict(self)
        data["source"] = self.source.value
        return data

    @classmethod
    def from_dict(cls, data: dict, now: datetime | None = None) -> FeedRecord:
        """Rebuild a record from data.json, applying the same field fallbacks.

        Raises ValueError for an unknown source tag.
        """
        source = Source(data.get("source"))
        text = as_str(data.get("text"))
        try:
            score = max(0.0, float(data.get("score") or 0.0))
        except (TypeError, ValueError):
            score = SOURCE_PRIORS[source]
        return cls(
            source=source,
            source_id=as_str(data.get("source_id")),
            author=as_str(data.get("author")),
            title=derive_title(as_str(data.get("title")), text),
            text=text,
            url=as_str(data.get("url")),
            created_at=parse_timestamp(data.get("created_at"), now),
            score=score,
        )


@dataclass(frozen=True)
class GameRecord:
    """One scoreboard line for the target team."""

    label: str
    live: bool
    date: str

    def to_dict(self) -> dict:
        return asdict(self)
