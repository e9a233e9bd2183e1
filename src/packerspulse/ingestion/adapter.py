"""Source adapter interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from packerspulse.ingestion.fetch import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_RETRY_PAUSE,
    DEFAULT_TIMEOUT,
)
from packerspulse.ingestion.records import FeedRecord


class SourceAdapter(ABC):
    """Abstract base class for source adapters.

    Every adapter knows how to fetch one source family and map its payload
    into FeedRecords. Failures of a single query, feed, or listing are caught
    inside ``fetch``; the rest of the system is source-agnostic.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_pause: float = DEFAULT_RETRY_PAUSE,
    ) -> None:
        self._timeout = timeout
        self._max_retries = max_retries
        self._retry_pause = retry_pause

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable adapter name."""

    @abstractmethod
    def fetch(self) -> list[FeedRecord]:
        """Fetch and map records from every configured endpoint."""

    @abstractmethod
    def configure(self, config: dict) -> None:
        """Accept adapter-specific configuration."""

    def _fetch_kwargs(self) -> dict:
        return {
            "timeout": self._timeout,
            "max_retries": self._max_retries,
            "retry_pause": self._retry_pause,
        }
