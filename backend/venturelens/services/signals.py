# backend/venturelens/services/signals.py
from __future__ import annotations

from typing import List, Tuple

# (substring cues, signal); evaluated against lowercased raw HTML so that
# link targets like href="/careers" count even though they never reach
# the sanitized text.
STRUCTURAL_RULES: List[Tuple[Tuple[str, ...], str]] = [
    (("/careers", "/jobs"), "Hiring (careers page)"),
    (("/blog",), "Content marketing (blog)"),
    (("/changelog",), "Shipping updates (changelog)"),
    (("/pricing",), "Monetized product (pricing page)"),
    (("/docs", "documentation"), "Developer-focused (docs)"),
    (("/api", "api reference"), "Platform play (public API)"),
    (("open source", "github.com"), "Open source presence"),
    (("soc 2", "gdpr", "compliance"), "Enterprise-ready (compliance)"),
]

# Evaluated against lowercased sanitized text. Plain substring matching, so
# "ai" also fires on words such as "maintain".
LEXICAL_RULES: List[Tuple[Tuple[str, ...], str]] = [
    (("saas",), "SaaS Business Model"),
    (("ai",), "AI-Focused"),
    (("machine learning",), "Uses Machine Learning"),
    (("api",), "API-Based Product"),
    (("developer",), "Developer Tools Focused"),
    (("fintech",), "Fintech Sector"),
    (("enterprise",), "Enterprise Customers"),
    (("startup",), "Startup-Focused"),
]


def _apply(rules: List[Tuple[Tuple[str, ...], str]], haystack: str) -> List[str]:
    return [signal for cues, signal in rules if any(cue in haystack for cue in cues)]


def detect_structural_signals(raw_html_lower: str) -> List[str]:
    return _apply(STRUCTURAL_RULES, raw_html_lower or "")


def detect_lexical_signals(text_lower: str) -> List[str]:
    return _apply(LEXICAL_RULES, text_lower or "")


def detect_signals(
    raw_html_lower: str,
    text_lower: str,
    *,
    include_lexical: bool = True,
) -> List[str]:
    """
    All signals in rule order, structural first. Not truncated; callers cap
    the list when assembling a response.
    """
    signals = detect_structural_signals(raw_html_lower)
    if include_lexical:
        signals.extend(detect_lexical_signals(text_lower))
    return signals
