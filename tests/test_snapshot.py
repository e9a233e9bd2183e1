"""Tests for packerspulse.storage.snapshot — fail-safe persistence."""

from __future__ import annotations

import json
from datetime import timedelta
from unittest.mock import patch

import pytest
from conftest import NOW, make_record

from packerspulse.digest.renderer import EMPTY_DIGEST
from packerspulse.ingestion.records import GameRecord
from packerspulse.storage.snapshot import (
    FeedSnapshot,
    PersistOutcome,
    commit_feed,
    decide,
    load_snapshot,
    write_games,
)

T0 = "2025-10-04T08:00:00+00:00"


def _write_previous(tmp_path, items, generated_at=T0):
    snapshot = FeedSnapshot(generated_at=generated_at, items=items)
    (tmp_path / "data.json").write_text(json.dumps(snapshot.to_dict(), indent=2))
    return snapshot


class TestDecide:
    def test_non_empty_commits_new(self):
        previous = FeedSnapshot(generated_at=T0, items=[make_record()])
        assert decide([make_record()], previous) is PersistOutcome.COMMIT_NEW

    def test_empty_with_previous_preserves(self):
        previous = FeedSnapshot(generated_at=T0, items=[make_record()])
        assert decide([], previous) is PersistOutcome.PRESERVE_PREVIOUS

    def test_empty_without_previous_commits_new(self):
        assert decide([], None) is PersistOutcome.COMMIT_NEW

    def test_empty_previous_is_not_preserved(self):
        assert decide([], FeedSnapshot(generated_at=T0, items=[])) is PersistOutcome.COMMIT_NEW


class TestLoadSnapshot:
    def test_missing_file(self, tmp_path):
        assert load_snapshot(tmp_path / "data.json") is None

    def test_unreadable_json(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text("{not json")
        assert load_snapshot(path) is None

    def test_wrong_shape(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text(json.dumps({"items": "nope"}))
        assert load_snapshot(path) is None

    def test_skips_bad_items(self, tmp_path):
        path = tmp_path / "data.json"
        good = make_record(title="Good").to_dict()
        path.write_text(json.dumps({"generated_at": T0, "items": [good, {"source": "Nope"}, 5]}))
        snapshot = load_snapshot(path)
        assert snapshot.generated_at == T0
        assert [r.title for r in snapshot.items] == ["Good"]
        assert len(snapshot.raw["items"]) == 3


class TestCommitFeed:
    def test_commit_new_writes_fresh_snapshot(self, tmp_path):
        _write_previous(tmp_path, [make_record(title="Old")])
        ranked = [make_record(title="New A", url="https://a.com/1"), make_record(title="New B")]

        result = commit_feed(tmp_path, ranked, NOW)

        assert result.outcome is PersistOutcome.COMMIT_NEW
        data = json.loads((tmp_path / "data.json").read_text())
        assert data["generated_at"] == NOW.isoformat()
        assert [item["title"] for item in data["items"]] == ["New A", "New B"]
        digest = (tmp_path / "digest.html").read_text()
        assert "New A" in digest
        assert digest == result.digest

    def test_preserve_previous_on_empty_run(self, tmp_path):
        previous = _write_previous(tmp_path, [
            make_record(title="Kept 1", url="https://a.com/1", age_hours=30),
            make_record(title="Kept 2", url="https://a.com/2", age_hours=31),
        ])
        before = json.loads((tmp_path / "data.json").read_text())

        result = commit_feed(tmp_path, [], NOW + timedelta(hours=1))

        assert result.outcome is PersistOutcome.PRESERVE_PREVIOUS
        after = json.loads((tmp_path / "data.json").read_text())
        assert after["generated_at"] == T0
        assert after == before
        assert result.snapshot == previous
        digest = (tmp_path / "digest.html").read_text()
        assert "Kept 1" in digest
        assert digest != EMPTY_DIGEST

    def test_preserve_rewrites_foreign_snapshot_unchanged(self, tmp_path):
        before = {
            "generated_at": "2025-10-04T08:00:00.000Z",
            "items": [
                {
                    "source": "Bluesky",
                    "source_id": "at://x/app.bsky.feed.post/1",
                    "author": "fan",
                    "title": "",
                    "text": "Body only",
                    "url": "",
                    "created_at": "2025-10-04T07:00:00.000Z",
                    "score": 1.5,
                },
                {"source": "Myspace", "title": "kept even if unreadable"},
            ],
        }
        (tmp_path / "data.json").write_text(json.dumps(before))

        result = commit_feed(tmp_path, [], NOW + timedelta(hours=1))

        assert result.outcome is PersistOutcome.PRESERVE_PREVIOUS
        after = json.loads((tmp_path / "data.json").read_text())
        assert after == before
        assert "Body only" in (tmp_path / "digest.html").read_text()

    def test_bootstrap_empty_without_previous(self, tmp_path):
        result = commit_feed(tmp_path, [], NOW)

        assert result.outcome is PersistOutcome.COMMIT_NEW
        data = json.loads((tmp_path / "data.json").read_text())
        assert data == {"generated_at": NOW.isoformat(), "items": []}
        assert (tmp_path / "digest.html").read_text() == EMPTY_DIGEST

    def test_corrupt_previous_treated_as_bootstrap(self, tmp_path):
        (tmp_path / "data.json").write_text("garbage")
        result = commit_feed(tmp_path, [], NOW)
        assert result.outcome is PersistOutcome.COMMIT_NEW
        assert result.snapshot.items == []

    def test_write_failure_propagates_and_keeps_previous(self, tmp_path):
        _write_previous(tmp_path, [make_record(title="Old")])
        before = (tmp_path / "data.json").read_text()

        with patch("packerspulse.storage.snapshot.json.dump", side_effect=OSError("disk full")):
            with pytest.raises(OSError):
                commit_feed(tmp_path, [make_record(title="New")], NOW)

        assert (tmp_path / "data.json").read_text() == before
        assert not list(tmp_path.glob(".data.json.*"))

    def test_missing_directory_raises(self, tmp_path):
        with pytest.raises(OSError):
            commit_feed(tmp_path / "nope", [make_record()], NOW)


class TestWriteGames:
    def test_writes_games(self, tmp_path):
        games = [GameRecord(label="GB 7 @ CHI 0 • Q1", live=True, date=NOW.isoformat())]
        snapshot = write_games(tmp_path, games, NOW)
        data = json.loads((tmp_path / "scores.json").read_text())
        assert data == {
            "updated_at": NOW.isoformat(),
            "games": [{"label": "GB 7 @ CHI 0 • Q1", "live": True, "date": NOW.isoformat()}],
        }
        assert snapshot.games == games

    def test_empty_overwrites_previous(self, tmp_path):
        write_games(tmp_path, [GameRecord(label="x", live=False, date=NOW.isoformat())], NOW)
        write_games(tmp_path, [], NOW)
        assert json.loads((tmp_path / "scores.json").read_text())["games"] == []
