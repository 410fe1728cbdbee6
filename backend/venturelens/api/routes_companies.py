from uuid import uuid4
import logging

from fastapi import APIRouter, Query

from ..core.config import get_settings
from ..schemas.companies import CompanyOut, CompanyPage
from ..schemas.enrichment import EnrichmentResult
from ..services.caching import cached_get
from ..services.companies import (
    ALL_INDUSTRIES,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    get_company,
    list_industries,
    search_companies,
)
from ..services.enrichment import enrich_website

router = APIRouter(tags=["companies"])

logger = logging.getLogger(__name__)


def _cache_key(company_id: str) -> str:
    return f"enrichment:{company_id}"


@router.get("/companies", response_model=CompanyPage)
def list_companies(
    search: str = "",
    industry: str = ALL_INDUSTRIES,
    sort: str = "name",
    page: int = Query(1, ge=1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
):
    return search_companies(
        search=search,
        industry=industry,
        sort=sort,
        page=page,
        page_size=page_size,
    )


@router.get("/companies/industries", response_model=list[str])
def get_industries():
    return list_industries()


@router.get("/companies/{company_id}", response_model=CompanyOut)
def get_company_detail(company_id: str):
    return get_company(company_id).to_dict()


@router.post(
    "/companies/{company_id}/enrich",
    response_model=EnrichmentResult,
    response_model_exclude_none=True,
)
async def enrich_company(company_id: str, refresh: bool = False):
    """
    Enrich a catalog company's website, caching the result per company.

    A cached result is served unless ``refresh`` is set. Degraded results
    (AI stage fell back to heuristics) are returned but not cached.
    """
    company = get_company(company_id)
    key = _cache_key(company.id)

    if not refresh:
        cached = await cached_get(key)
        if cached is not None:
            logger.info(
                "Serving cached enrichment",
                extra={"company_id": company.id, "stage": "cache_hit"},
            )
            return EnrichmentResult.model_validate(cached)

    request_id = str(uuid4())
    result = await enrich_website(company.website, request_id=request_id)

    if not result.degraded:
        await cached_get(
            key,
            set_value=result.model_dump(mode="json", by_alias=True, exclude_none=True),
            ttl=get_settings().ENRICHMENT_CACHE_TTL_SECONDS,
        )

    return result
