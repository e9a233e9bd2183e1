"""Exception types raised across the pipeline."""

from __future__ import annotations


class PackersPulseError(Exception):
    """Base class for errors raised by packerspulse."""


class FetchError(PackersPulseError):
    """A request failed on every attempt of its retry budget."""

    def __init__(self, url: str, attempts: int, message: str) -> None:
        super().__init__(f"GET {url} failed after {attempts} attempt(s): {message}")
        self.url = url
        self.attempts = attempts
