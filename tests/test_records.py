"""Tests for packerspulse.ingestion.records — record types and shared fallbacks."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from packerspulse.ingestion.records import (
    FeedRecord,
    GameRecord,
    Source,
    derive_title,
    parse_datetime,
    parse_timestamp,
)

NOW = datetime(2025, 10, 5, 12, 0, tzinfo=timezone.utc)


class TestParseTimestamp:
    def test_iso_with_z_suffix(self):
        assert parse_timestamp("2025-10-05T10:00:00.000Z", NOW) == "2025-10-05T10:00:00+00:00"

    def test_iso_with_offset_converted_to_utc(self):
        assert parse_timestamp("2025-10-05T05:00:00-05:00", NOW) == "2025-10-05T10:00:00+00:00"

    def test_naive_iso_assumed_utc(self):
        assert parse_timestamp("2025-10-05T10:00:00", NOW) == "2025-10-05T10:00:00+00:00"

    def test_rfc2822(self):
        assert parse_timestamp("Sun, 05 Oct 2025 10:00:00 GMT", NOW) == "2025-10-05T10:00:00+00:00"

    def test_epoch_seconds(self):
        assert parse_timestamp(1759658400, NOW) == "2025-10-05T10:00:00+00:00"

    @pytest.mark.parametrize("value", [None, "", "   ", "not a date", {}, True])
    def test_invalid_falls_back_to_now(self, value):
        assert parse_timestamp(value, NOW) == NOW.isoformat()

    def test_fallback_without_now_still_parses(self):
        result = parse_timestamp(None)
        assert parse_datetime(result).tzinfo is not None


class TestDeriveTitle:
    def test_prefers_title(self):
        assert derive_title("Headline", "body") == "Headline"

    def test_truncates_text_to_120(self):
        assert derive_title("", "x" * 300) == "x" * 120

    def test_fallback_when_both_empty(self):
        assert derive_title("", "", "generic") == "generic"
        assert derive_title(None, None) == ""


class TestFeedRecord:
    def test_to_dict_uses_source_tag(self):
        record = FeedRecord(
            source=Source.REDDIT, source_id="abc", author="u1", title="T", text="",
            url="https://example.com", created_at=NOW.isoformat(), score=1.1,
        )
        data = record.to_dict()
        assert data["source"] == "Reddit"
        assert set(data) == {
            "source", "source_id", "author", "title", "text", "url", "created_at", "score",
        }

    def test_from_dict_fills_missing_fields(self):
        record = FeedRecord.from_dict({"source": "Bluesky", "text": "hello", "author": None}, NOW)
        assert record.author == ""
        assert record.title == "hello"
        assert record.url == ""
        assert record.created_at == NOW.isoformat()

    def test_from_dict_rejects_unknown_source(self):
        with pytest.raises(ValueError):
            FeedRecord.from_dict({"source": "Myspace"})


def test_game_record_to_dict():
    game = GameRecord(label="GB 21 @ CHI 14", live=True, date=NOW.isoformat())
    assert game.to_dict() == {"label": "GB 21 @ CHI 14", "live": True, "date": NOW.isoformat()}
