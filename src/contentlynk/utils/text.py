# src/contentlynk/utils/text.py
"""Slug, reading-time and excerpt helpers for post text."""

from __future__ import annotations

import math
import re
import unicodedata

WORDS_PER_MINUTE = 200
DEFAULT_EXCERPT_LENGTH = 160
SLUG_FALLBACK = "post"

_REMOVED_CHARS = re.compile(r"[*+~.()'\"!:@]")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_TAG = re.compile(r"<[^>]*>")
_WHITESPACE = re.compile(r"\s+")


def generate_slug(title: str) -> str:
    """Convert a title to a lower-case, dash-separated URL slug.

    Examples:
        "Hello World" -> "hello-world"
        "What's New? (2024)" -> "whats-new-2024"
        "Café au lait" -> "cafe-au-lait"
    """
    if not title:
        return SLUG_FALLBACK
    # Fold accents onto their ASCII base letters
    ascii_title = (
        unicodedata.normalize("NFKD", title).encode("ascii", "ignore").decode("ascii")
    )
    slug = _REMOVED_CHARS.sub("", ascii_title.lower())
    slug = _NON_ALNUM.sub("-", slug).strip("-")
    return slug or SLUG_FALLBACK


def numbered_slug(base: str, attempt: int) -> str:
    """Return the ``attempt``-th candidate for ``base``; attempt 0 is the base itself."""
    return base if attempt == 0 else f"{base}-{attempt}"


def count_words(text: str) -> int:
    return len(text.split())


def calculate_reading_time(text: str) -> int:
    """Estimate reading time in whole minutes at 200 words per minute, minimum 1."""
    minutes = math.ceil(count_words(text) / WORDS_PER_MINUTE)
    return max(1, minutes)


def strip_markup(text: str) -> str:
    """Remove HTML tags and collapse runs of whitespace."""
    return _WHITESPACE.sub(" ", _TAG.sub("", text)).strip()


def generate_excerpt(text: str, max_length: int = DEFAULT_EXCERPT_LENGTH) -> str:
    """Plain-text preview of ``text``, truncated with ``...`` past ``max_length``."""
    cleaned = strip_markup(text)
    if len(cleaned) <= max_length:
        return cleaned
    return cleaned[:max_length].rstrip() + "..."
