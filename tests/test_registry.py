"""Tests for packerspulse.ingestion.registry — adapter registration."""

from packerspulse.ingestion.adapter import SourceAdapter
from packerspulse.ingestion.bluesky_adapter import BlueskyAdapter
from packerspulse.ingestion.reddit_adapter import RedditAdapter
from packerspulse.ingestion.registry import (
    _REGISTRY,
    get_adapter_class,
    register_adapter,
    registered_types,
)
from packerspulse.ingestion.rss_adapter import RSSAdapter


def test_builtin_adapters_registered():
    import packerspulse.ingestion  # noqa: F401

    assert get_adapter_class("bluesky") is BlueskyAdapter
    assert get_adapter_class("rss") is RSSAdapter
    assert get_adapter_class("reddit") is RedditAdapter
    assert {"bluesky", "reddit", "rss"} <= set(registered_types())


def test_unknown_type_returns_none():
    assert get_adapter_class("nonexistent") is None


def test_register_custom_adapter():
    class DummyAdapter(SourceAdapter):
        @property
        def name(self):
            return "dummy"

        def fetch(self):
            return []

        def configure(self, config):
            pass

    register_adapter("dummy", DummyAdapter)
    try:
        assert get_adapter_class("dummy") is DummyAdapter
        assert DummyAdapter().fetch() == []
    finally:
        _REGISTRY.pop("dummy", None)
