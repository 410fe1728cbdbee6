# backend/venturelens/services/sanitizer.py
"""
Best-effort HTML to plain text.

This is deliberately regex based, not a parser: malformed or oddly nested
markup can leak fragments of text, which is acceptable for summarisation.
"""
from __future__ import annotations

import re

from ..core.config import get_settings

_BLOCK_PATTERNS = [
    re.compile(rf"<{tag}\b[^>]*>.*?</{tag}\s*>", re.IGNORECASE | re.DOTALL)
    for tag in ("script", "style", "nav", "footer")
]
_TAG_RE = re.compile(r"<[^>]+>")
_WHITESPACE_RE = re.compile(r"\s+")


def strip_markup(html: str) -> str:
    """
    Drop script/style/nav/footer blocks and replace remaining tags with a space.

    Line breaks survive so callers can still split the result into paragraphs.
    """
    text = html or ""
    for pattern in _BLOCK_PATTERNS:
        text = pattern.sub("", text)
    return _TAG_RE.sub(" ", text)


def sanitize_html(html: str, max_chars: int | None = None) -> str:
    if max_chars is None:
        max_chars = get_settings().ENRICH_TEXT_MAX_CHARS

    text = strip_markup(html)
    # Unclosed tags ("<div class=") survive the tag pass
    text = text.replace("<", " ").replace(">", " ")
    text = _WHITESPACE_RE.sub(" ", text).strip()
    return text[:max_chars]
