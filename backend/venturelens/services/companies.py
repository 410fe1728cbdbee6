# backend/venturelens/services/companies.py
"""
Read-only company catalog backing the dashboard tables.

Filtering, sorting and pagination mirror the companies table: name substring
search, exact industry match ("All" disables it), ascending sort on a single
field, 1-based pages.
"""
from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Dict, List, Optional

from ..core.errors import CompanyNotFoundError, InvalidRequestError

ALL_INDUSTRIES = "All"
SORT_FIELDS = ("name", "industry", "location", "stage", "website")
DEFAULT_PAGE_SIZE = 5
MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class Company:
    id: str
    name: str
    industry: str
    location: str
    stage: str
    website: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


COMPANIES: List[Company] = [
    Company("1", "FinCore", "Fintech", "New York", "Seed", "https://example.com"),
    Company("2", "TaskFlow", "Productivity", "San Francisco", "Series A", "https://example.com"),
    Company("3", "DevStack", "Developer Tools", "Berlin", "Pre-Seed", "https://example.com"),
    Company("4", "PayBridge", "Fintech", "London", "Series B", "https://example.com"),
    Company("5", "CloudNova", "Developer Tools", "Toronto", "Seed", "https://example.com"),
    Company("6", "FlowSync", "Productivity", "Austin", "Series A", "https://example.com"),
    Company("7", "DataForge", "Developer Tools", "Singapore", "Seed", "https://example.com"),
    Company("8", "FinStack", "Fintech", "Chicago", "Series C", "https://example.com"),
    Company("9", "TeamPilot", "Productivity", "Boston", "Seed", "https://example.com"),
    Company("10", "CodeLift", "Developer Tools", "Amsterdam", "Series A", "https://example.com"),
    Company("11", "WealthGrid", "Fintech", "Dubai", "Series B", "https://example.com"),
    Company("12", "FocusBoard", "Productivity", "Sydney", "Pre-Seed", "https://example.com"),
    Company("13", "APIWorks", "Developer Tools", "Paris", "Seed", "https://example.com"),
    Company("14", "LedgerLoop", "Fintech", "Zurich", "Series A", "https://example.com"),
    Company("15", "SprintOps", "Productivity", "Tokyo", "Series B", "https://example.com"),
]


def get_company(company_id: str, companies: Optional[List[Company]] = None) -> Company:
    for company in companies if companies is not None else COMPANIES:
        if company.id == company_id:
            return company
    raise CompanyNotFoundError(company_id)


def list_industries(companies: Optional[List[Company]] = None) -> List[str]:
    return sorted({c.industry for c in (companies if companies is not None else COMPANIES)})


def search_companies(
    search: str = "",
    industry: str = ALL_INDUSTRIES,
    sort: str = "name",
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
    companies: Optional[List[Company]] = None,
) -> Dict[str, object]:
    if sort not in SORT_FIELDS:
        raise InvalidRequestError(
            f"Invalid sort field '{sort}'. Expected one of: {', '.join(SORT_FIELDS)}."
        )

    page = max(1, page)
    page_size = max(1, min(page_size, MAX_PAGE_SIZE))
    needle = (search or "").strip().lower()
    industry = (industry or ALL_INDUSTRIES).strip()

    rows = companies if companies is not None else COMPANIES
    matches = [c for c in rows if needle in c.name.lower()]
    if industry != ALL_INDUSTRIES:
        matches = [c for c in matches if c.industry == industry]
    matches.sort(key=lambda c: getattr(c, sort).lower())

    start = (page - 1) * page_size
    return {
        "items": [c.to_dict() for c in matches[start : start + page_size]],
        "total": len(matches),
        "page": page,
        "page_size": page_size,
        "total_pages": math.ceil(len(matches) / page_size),
    }
