"""HTML digest rendering — a three-paragraph summary of the top-ranked records."""

from __future__ import annotations

import logging

from packerspulse.ingestion.records import FALLBACK_TOPIC, FeedRecord, derive_title

logger = logging.getLogger(__name__)

DIGEST_CONSIDERED = 10
DIGEST_HIGHLIGHTS = 8
DEFAULT_TOPIC = "Packers"

EMPTY_DIGEST = "<p>No new items yet. Check back after the first hourly update.</p>"
METHODOLOGY = (
    "This feed merges Bluesky, Google News, and Reddit, removes near-duplicates, "
    "and ranks by recency and relevance."
)

_ESCAPES = {"&": "&amp;", "<": "&lt;", ">": "&gt;"}


def escape_html(text: str) -> str:
    """Escape ``& < >`` only; quotes pass through."""
    return "".join(_ESCAPES.get(c, c) for c in text)


def render_digest_html(records: list[FeedRecord], topic: str = DEFAULT_TOPIC) -> str:
    """Render the digest for an already-ranked record list.

    Returns EMPTY_DIGEST when there is nothing to summarize.
    """
    top = records[:DIGEST_CONSIDERED]
    if not top:
        return EMPTY_DIGEST

    lead = top[0]
    first_title = derive_title(lead.title, lead.text, FALLBACK_TOPIC)
    bullets = " ".join(
        f"• {escape_html(derive_title(r.title, r.text))} ({escape_html(r.source.value)})"
        for r in top[:DIGEST_HIGHLIGHTS]
    )

    paragraphs = [
        f"{escape_html(topic)} buzz in the last day centers on {escape_html(first_title)}.",
        f"Highlights: {bullets}",
        METHODOLOGY,
    ]
    logger.debug("Rendered digest from %d record(s)", len(top))
    return "".join(f"<p>{p}</p>" for p in paragraphs)
