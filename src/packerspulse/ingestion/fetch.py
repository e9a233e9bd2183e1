"""Resilient HTTP GET — per-attempt timeout with a bounded, fixed-pause retry loop."""

from __future__ import annotations

import logging
import time

import httpx

from packerspulse.errors import FetchError

logger = logging.getLogger(__name__)

USER_AGENT = "PackersPulse/1.0 (+github-actions)"
DEFAULT_TIMEOUT = 20.0
DEFAULT_MAX_RETRIES = 2
DEFAULT_RETRY_PAUSE = 1.0


def _get(
    url: str,
    *,
    headers: dict | None,
    params: dict | None,
    timeout: float,
    max_retries: int,
    retry_pause: float,
    parse_json: bool,
):
    merged_headers = {"User-Agent": USER_AGENT}
    if headers:
        merged_headers.update(headers)

    attempts = max(0, max_retries) + 1
    last_error: Exception | None = None
    for attempt in range(attempts):
        try:
            response = httpx.get(
                url,
                params=params,
                headers=merged_headers,
                timeout=timeout,
                follow_redirects=True,
            )
            response.raise_for_status()
            return response.json() if parse_json else response.text
        except (httpx.HTTPError, ValueError) as exc:
            last_error = exc
            logger.warning(
                "GET %s failed (attempt %d/%d): %s",
                url, attempt + 1, attempts, exc,
            )

        if attempt < attempts - 1:
            time.sleep(retry_pause)

    raise FetchError(url, attempts, str(last_error)) from last_error


def fetch_json(
    url: str,
    *,
    headers: dict | None = None,
    params: dict | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    max_retries: int = DEFAULT_MAX_RETRIES,
    retry_pause: float = DEFAULT_RETRY_PAUSE,
):
    """GET *url* and return the decoded JSON body.

    A network error, timeout, non-2xx status, or malformed JSON fails the
    attempt. Failed attempts are retried up to *max_retries* times after a
    fixed *retry_pause*; the timeout applies to each attempt separately.
    Raises FetchError once the budget is spent.
    """
    return _get(
        url,
        headers=headers,
        params=params,
        timeout=timeout,
        max_retries=max_retries,
        retry_pause=retry_pause,
        parse_json=True,
    )


def fetch_text(
    url: str,
    *,
    headers: dict | None = None,
    params: dict | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    max_retries: int = DEFAULT_MAX_RETRIES,
    retry_pause: float = DEFAULT_RETRY_PAUSE,
) -> str:
    """Like fetch_json, but return the raw body (feed documents)."""
    return _get(
        url,
        headers=headers,
        params=params,
        timeout=timeout,
        max_retries=max_retries,
        retry_pause=retry_pause,
        parse_json=False,
    )
