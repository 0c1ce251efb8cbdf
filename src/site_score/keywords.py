"""Weighted keyword extraction across on-page zones."""

import re
from urllib.parse import urlparse

from .models import Keyword, PageSignals, round_half_up

TOP_KEYWORDS = 8
COVERAGE_KEYWORDS = 5
MIN_WORD_LENGTH = 4

STOP_WORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by",
    "is", "it", "this", "that", "are", "was", "were", "be", "been", "have", "has", "had",
    "do", "does", "did", "will", "would", "could", "should", "may", "might", "can", "not",
    "no", "we", "you", "your", "our", "my", "their", "its", "from", "up", "about", "into",
    "as", "if", "when", "than", "so", "all", "any", "both", "each", "more", "most", "other",
    "some", "such", "only", "own", "same", "too", "very", "just", "how", "what", "which",
    "who", "where", "why", "get", "also", "new", "use", "used", "page", "site", "web", "com",
    "http", "https", "click", "here", "read", "view", "learn", "contact", "home", "menu",
    "search", "privacy", "terms", "cookie", "cookies", "copyright", "rights", "reserved",
})

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")


def tokenize(text: str) -> list[str]:
    """Lower-case words long enough to matter, stop-words removed."""
    cleaned = _NON_ALNUM.sub(" ", text.lower())
    return [w for w in cleaned.split() if len(w) >= MIN_WORD_LENGTH and w not in STOP_WORDS]


def _zones(signals: PageSignals) -> list[tuple[str, int]]:
    return [
        (signals.title or "", 5),
        (" ".join(signals.h1), 4),
        (signals.meta_description or "", 3),
        (" ".join(signals.h2[:8]), 2),
        (signals.body_text, 1),
    ]


def extract_keywords(signals: PageSignals, page_url: str, limit: int = TOP_KEYWORDS) -> list[Keyword]:
    """Rank words by weighted frequency across title, headings, meta and body.

    Ties keep the order in which words were first seen.
    """
    freq: dict[str, int] = {}
    for text, weight in _zones(signals):
        for word in tokenize(text):
            freq[word] = freq.get(word, 0) + weight

    ranked = sorted(freq.items(), key=lambda item: item[1], reverse=True)[:limit]

    url_path = urlparse(page_url).path.lower()
    title = (signals.title or "").lower()
    h1 = " ".join(signals.h1).lower()
    meta = (signals.meta_description or "").lower()

    return [
        Keyword(
            word=word,
            count=count,
            in_title=word in title,
            in_h1=word in h1,
            in_meta_description=word in meta,
            in_url=word in url_path,
        )
        for word, count in ranked
    ]


def keyword_coverage(keywords: list[Keyword]) -> int:
    """Average share of key zones (title, H1, meta, URL) the top keywords reach, 0-100."""
    top = keywords[:COVERAGE_KEYWORDS]
    if not top:
        return 0
    total = sum(sum(k.zone_flags) / 4 for k in top)
    return round_half_up(total / len(top) * 100)
