from uuid import uuid4

from fastapi import APIRouter

from ..schemas.enrichment import EnrichmentRequest, EnrichmentResult
from ..services.enrichment import enrich_website
from ..services.llm import llm_configured

router = APIRouter(tags=["enrichment"])


@router.post(
    "/enrich",
    response_model=EnrichmentResult,
    response_model_exclude_none=True,
)
async def enrich(payload: EnrichmentRequest):
    """
    Scrape one website and return summary, keywords and signals.

    - 400 when ``website`` is missing or blank (no network call is made).
    - 502 when the site is unreachable, times out or answers non-2xx.
    - 200 with a ``note`` when the AI stage failed and heuristics were used.
    """
    request_id = str(uuid4())
    return await enrich_website(payload.website, request_id=request_id)


@router.get("/health")
def health():
    return {"status": "ok", "llm_enabled": llm_configured()}
