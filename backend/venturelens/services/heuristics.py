# backend/venturelens/services/heuristics.py
"""
Non-AI extraction: meta description or best-scoring paragraph as summary,
word frequency for keywords. Never raises on string input.
"""
from __future__ import annotations

import html as html_lib
import re
from collections import Counter
from dataclasses import dataclass, field
from typing import List, Optional

MIN_PARAGRAPH_LEN = 80
MAX_SUMMARY_FRAGMENTS = 3
FALLBACK_SUMMARY_FRAGMENTS = 2
DEFAULT_KEYWORD_LIMIT = 8

BUSINESS_WORDS = [
    "platform",
    "software",
    "solution",
    "product",
    "service",
    "company",
    "technology",
    "ai",
    "fintech",
    "developer",
    "enterprise",
    "customers",
    "business",
]

STOP_WORDS = frozenset(
    {
        "this", "that", "with", "from", "have", "your", "about", "their",
        "they", "will", "more", "than", "into", "using", "also", "such",
        "where", "which", "been", "were", "when", "what", "some", "each",
        "does", "just", "only", "very", "most", "over", "here", "then",
        "them", "these", "those", "could", "would", "should", "every",
        "under", "after", "before", "other", "being", "between", "through",
        "there", "while", "because", "within", "across", "many", "much",
        "make", "made", "like", "well", "page", "click", "cookies",
    }
)

_META_DESCRIPTION_RES = [
    re.compile(
        r"""<meta\s+[^>]*?name\s*=\s*["']description["'][^>]*?content\s*=\s*(["'])(.*?)\1""",
        re.IGNORECASE | re.DOTALL,
    ),
    re.compile(
        r"""<meta\s+[^>]*?content\s*=\s*(["'])(.*?)\1[^>]*?name\s*=\s*["']description["']""",
        re.IGNORECASE | re.DOTALL,
    ),
]
_WORD_RE = re.compile(r"\b[a-z]{4,}\b")


@dataclass
class HeuristicExtraction:
    summary: str = ""
    keywords: List[str] = field(default_factory=list)


def extract_meta_description(html: str) -> Optional[str]:
    for pattern in _META_DESCRIPTION_RES:
        match = pattern.search(html or "")
        if match:
            content = html_lib.unescape(match.group(2)).strip()
            return content or None
    return None


def score_paragraph(paragraph: str) -> int:
    lower = paragraph.lower()
    return sum(1 for word in BUSINESS_WORDS if word in lower)


def best_paragraph(stripped_text: str) -> Optional[str]:
    """
    Highest-scoring paragraph longer than MIN_PARAGRAPH_LEN.

    ``stripped_text`` is tag-free text whose line breaks are still intact.
    Ties keep document order.
    """
    paragraphs = [p.strip() for p in (stripped_text or "").split("\n")]
    paragraphs = [p for p in paragraphs if len(p) > MIN_PARAGRAPH_LEN]
    if not paragraphs:
        return None
    # sorted() is stable, so equal scores stay in original order
    ranked = sorted(paragraphs, key=score_paragraph, reverse=True)
    return ranked[0]


def trim_fragments(text: str, limit: int = MAX_SUMMARY_FRAGMENTS) -> str:
    return ". ".join(text.split(". ")[:limit])


def fallback_summary(sanitized_text: str) -> str:
    if not sanitized_text:
        return ""
    head = trim_fragments(sanitized_text, FALLBACK_SUMMARY_FRAGMENTS).rstrip(".")
    return f"{head}." if head else ""


def select_summary(html: str, stripped_text: str, sanitized_text: str) -> str:
    candidate = extract_meta_description(html) or best_paragraph(stripped_text)
    if candidate:
        return trim_fragments(candidate)
    return fallback_summary(sanitized_text)


def extract_keywords(text: str, limit: int = DEFAULT_KEYWORD_LIMIT) -> List[str]:
    words = _WORD_RE.findall((text or "").lower())
    freq = Counter(w for w in words if w not in STOP_WORDS)
    # most_common sorts stably, so ties keep first-seen order
    return [word for word, _ in freq.most_common(limit)]


def heuristic_extract(
    html: str,
    stripped_text: str,
    sanitized_text: str,
    *,
    keyword_limit: int = DEFAULT_KEYWORD_LIMIT,
) -> HeuristicExtraction:
    return HeuristicExtraction(
        summary=select_summary(html, stripped_text, sanitized_text),
        keywords=extract_keywords(sanitized_text, keyword_limit),
    )
