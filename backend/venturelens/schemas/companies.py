# backend/venturelens/schemas/companies.py
from pydantic import BaseModel


class CompanyOut(BaseModel):
    id: str
    name: str
    industry: str
    location: str
    stage: str
    website: str


class CompanyPage(BaseModel):
    items: list[CompanyOut]
    total: int
    page: int
    page_size: int
    total_pages: int
