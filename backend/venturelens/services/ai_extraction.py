# backend/venturelens/services/ai_extraction.py
from __future__ import annotations

import asyncio
import json
import logging
import re
import textwrap
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ..core.config import get_settings
from ..core.errors import AIExtractionError
from ..schemas.enrichment import AIExtraction
from .llm import limit_llm_concurrency

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a venture capital analyst. You read company websites and "
    "return strict JSON only."
)

_FENCE_RE = re.compile(r"^\s*```(?:json)?\s*(.*?)\s*```\s*$", re.IGNORECASE | re.DOTALL)


def build_prompt(text: str, signals: List[str]) -> str:
    signal_block = ", ".join(signals) if signals else "none detected"
    return textwrap.dedent(
        """
        Analyse the following company website content.

        Return JSON with exactly these fields:
        {{
          "summary": "1-2 sentence description of what the company does",
          "whatTheyDo": ["3-6 short bullet points"],
          "keywords": ["5-10 lowercase keywords"],
          "signals": ["2-4 short business signals"]
        }}

        Rules:
        - Use only facts present in the content.
        - Do NOT invent customers, funding or metrics.
        - The response must be valid JSON with no surrounding text.

        Signals detected from the page structure: {signals}

        Website content:
        {text}
        """
    ).format(signals=signal_block, text=text)


def strip_code_fences(raw: str) -> str:
    match = _FENCE_RE.match(raw or "")
    if match:
        return match.group(1)
    return (raw or "").strip()


def parse_ai_payload(raw: str) -> Optional[AIExtraction]:
    """
    Best-effort parse of the model output into ``AIExtraction``.

    Tries the text as-is (minus Markdown fences), then the outermost
    ``{...}`` slice. Returns None when nothing usable comes back.
    """
    body = strip_code_fences(raw)
    if not body:
        return None

    data: Any = None
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, RecursionError):
        start = body.find("{")
        end = body.rfind("}")
        if start != -1 and end != -1 and end > start:
            try:
                data = json.loads(body[start : end + 1])
            except (json.JSONDecodeError, RecursionError):
                return None

    if not isinstance(data, dict):
        return None

    try:
        return AIExtraction.model_validate(data)
    except ValidationError as e:
        logger.warning("AI payload failed validation: %s", e)
        return None


async def ai_extract(
    client: Any,
    text: str,
    structural_signals: List[str],
    *,
    request_id: str | None = None,
) -> AIExtraction:
    """
    Ask the language model for a structured summary of ``text``.

    Raises ``AIExtractionError`` on provider failure (``parse_failure=False``)
    or on an unusable response (``parse_failure=True``).
    """
    settings = get_settings()
    prompt = build_prompt(text, structural_signals)

    def _call_sync() -> str:
        kwargs: Dict[str, Any] = {
            "model": settings.LLM_MODEL,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "temperature": settings.LLM_TEMPERATURE,
        }
        if settings.LLM_JSON_MODE:
            kwargs["response_format"] = {"type": "json_object"}

        with limit_llm_concurrency():
            resp = client.chat.completions.create(**kwargs)
        return resp.choices[0].message.content or ""

    try:
        raw = await asyncio.to_thread(_call_sync)
    except Exception as e:
        raise AIExtractionError(f"{type(e).__name__}: {e}") from e

    parsed = parse_ai_payload(raw)
    if parsed is None:
        logger.warning(
            "AI response was not valid JSON (%d chars)",
            len(raw),
            extra={"request_id": request_id, "stage": "ai_extract"},
        )
        raise AIExtractionError("AI response could not be parsed.", parse_failure=True)

    return parsed
