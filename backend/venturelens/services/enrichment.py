# backend/venturelens/services/enrichment.py
"""
Website enrichment pipeline.

    fetch -> sanitize -> detect signals -> extract (AI or heuristic) -> result

Each call builds all intermediate values fresh. Fetch failures propagate as
``UpstreamFetchError`` (502). Failures in the optional AI stage never
propagate; they degrade to the heuristic result with a ``note``.
"""
from __future__ import annotations

import logging
from typing import Any, List, Optional
from uuid import uuid4

import httpx

from ..core.config import get_settings
from ..core.errors import (
    AIExtractionError,
    EnrichmentError,
    InternalEnrichmentError,
    InvalidRequestError,
)
from ..schemas.enrichment import EnrichmentResult, SourceRef
from .ai_extraction import ai_extract
from .fetcher import RawPage, fetch_page
from .heuristics import heuristic_extract
from .llm import get_llm_client, llm_configured
from .sanitizer import sanitize_html, strip_markup
from .signals import detect_signals, detect_structural_signals

logger = logging.getLogger(__name__)

WEBSITE_REQUIRED_MESSAGE = "Website URL is required."
AI_UNAVAILABLE_NOTICE = "AI extraction unavailable; showing heuristic summary."
AI_UNPARSABLE_NOTICE = "AI response could not be parsed; showing heuristic summary."


def merge_signals(primary: List[str], secondary: List[str], limit: int) -> List[str]:
    """Concatenate in priority order, drop exact duplicates, cap at ``limit``."""
    merged: List[str] = []
    for signal in [*primary, *secondary]:
        if signal and signal not in merged:
            merged.append(signal)
    return merged[:limit]


def build_result(
    website: str,
    page: RawPage,
    *,
    ai_outcome: Optional[Any] = None,
) -> EnrichmentResult:
    """
    Heuristic result for ``page``, optionally overlaid with an AI outcome.

    ``ai_outcome`` is either an ``AIExtraction`` (success) or an
    ``AIExtractionError`` (degrade). Kept synchronous and side-effect free so
    it can be exercised without network access.
    """
    settings = get_settings()
    stripped = strip_markup(page.html)
    text = sanitize_html(page.html, settings.ENRICH_TEXT_MAX_CHARS)
    html_lower = page.html.lower()
    text_lower = text.lower()
    sources = [SourceRef.now(website)]

    heuristic = heuristic_extract(
        page.html, stripped, text, keyword_limit=settings.ENRICH_MAX_KEYWORDS
    )
    detected = detect_signals(
        html_lower, text_lower, include_lexical=settings.ENRICH_LEXICAL_SIGNALS
    )

    if ai_outcome is None:
        return EnrichmentResult(
            summary=heuristic.summary,
            keywords=heuristic.keywords,
            signals=detected[: settings.ENRICH_MAX_SIGNALS],
            sources=sources,
        )

    if isinstance(ai_outcome, AIExtractionError):
        notice = AI_UNPARSABLE_NOTICE if ai_outcome.parse_failure else AI_UNAVAILABLE_NOTICE
        note = (
            "AI response parsing failed; heuristic extraction used."
            if ai_outcome.parse_failure
            else f"AI extraction failed ({ai_outcome}); heuristic extraction used."
        )
        return EnrichmentResult(
            summary=heuristic.summary,
            what_they_do=[notice],
            keywords=heuristic.keywords,
            signals=detected[: settings.ENRICH_MAX_SIGNALS],
            sources=sources,
            note=note,
        )

    return EnrichmentResult(
        summary=ai_outcome.summary,
        what_they_do=ai_outcome.what_they_do,
        keywords=ai_outcome.keywords,
        signals=merge_signals(
            ai_outcome.signals,
            detect_structural_signals(html_lower),
            settings.ENRICH_MAX_SIGNALS,
        ),
        sources=sources,
    )


async def enrich_website(
    website: str | None,
    *,
    http_client: httpx.AsyncClient | None = None,
    llm_client: Any | None = None,
    request_id: str | None = None,
) -> EnrichmentResult:
    """
    Run the full pipeline for one URL.

    ``llm_client`` overrides the shared OpenAI client; when neither it nor a
    credential is available the heuristic path is used silently.
    """
    website = (website or "").strip()
    if not website:
        raise InvalidRequestError(WEBSITE_REQUIRED_MESSAGE)

    request_id = request_id or str(uuid4())
    settings = get_settings()

    logger.info(
        "Enriching website",
        extra={"request_id": request_id, "website": website, "stage": "start"},
    )

    try:
        page = await fetch_page(website, client=http_client)

        client = llm_client
        if client is None and llm_configured():
            client = get_llm_client()

        ai_outcome = None
        if client is not None:
            try:
                ai_outcome = await ai_extract(
                    client,
                    sanitize_html(page.html, settings.ENRICH_TEXT_MAX_CHARS),
                    detect_structural_signals(page.html.lower()),
                    request_id=request_id,
                )
            except AIExtractionError as e:
                logger.warning(
                    "AI extraction failed, falling back to heuristics: %s",
                    e,
                    extra={"request_id": request_id, "website": website, "stage": "ai_extract"},
                )
                ai_outcome = e

        result = build_result(website, page, ai_outcome=ai_outcome)
    except EnrichmentError:
        raise
    except Exception as e:
        logger.exception(
            "Enrichment failed: %s",
            e,
            extra={"request_id": request_id, "website": website, "stage": "extract"},
        )
        raise InternalEnrichmentError(str(e) or type(e).__name__) from e

    logger.info(
        "Enrichment completed",
        extra={
            "request_id": request_id,
            "website": website,
            "stage": "done",
        },
    )
    return result
