"""Free-text scrubbing for names, comments and descriptions."""

from __future__ import annotations

import html
import re
import unicodedata

_TAG_PATTERN = re.compile(r"<[^>]*>")
_WHITESPACE_PATTERN = re.compile(r"\s+")
_TRANSACTION_REF_PATTERN = re.compile(r"[^A-Z0-9_-]")


def strip_markup(value: str) -> str:
    """Remove HTML tags and entities and drop control characters."""
    text = html.unescape(_TAG_PATTERN.sub("", value))
    text = _TAG_PATTERN.sub("", text)
    return "".join(
        ch for ch in text if ch in "\n\t" or unicodedata.category(ch)[0] != "C"
    )


def normalize_whitespace(value: str) -> str:
    return _WHITESPACE_PATTERN.sub(" ", value).strip()


def clean_text(value: str | None, max_length: int) -> str | None:
    """Strip markup, trim and truncate; empty results become ``None``."""
    if value is None:
        return None
    text = strip_markup(value).strip()[:max_length].strip()
    return text or None


def clean_name(value: str) -> str:
    return normalize_whitespace(strip_markup(value))


def clean_transaction_ref(value: str | None) -> str | None:
    if value is None:
        return None
    ref = _TRANSACTION_REF_PATTERN.sub("", value.strip().upper())[:100]
    return ref or None


__all__ = [
    "clean_name",
    "clean_text",
    "clean_transaction_ref",
    "normalize_whitespace",
    "strip_markup",
]
