# backend/venturelens/schemas/enrichment.py
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_WEBSITE_LEN = 2048


class EnrichmentRequest(BaseModel):
    # Optional at the schema level so a missing website yields our own 400
    # instead of FastAPI's 422.
    website: str | None = None

    @field_validator("website", mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        if v is None:
            return None
        if isinstance(v, str):
            stripped = v.strip()
            return stripped or None
        return v

    @field_validator("website")
    @classmethod
    def validate_website(cls, v: str | None) -> str | None:
        if v is None:
            return v
        if len(v) > MAX_WEBSITE_LEN:
            raise ValueError("website URL is too long")
        return v


class SourceRef(BaseModel):
    url: str
    timestamp: str

    @classmethod
    def now(cls, url: str) -> "SourceRef":
        stamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
        return cls(url=url, timestamp=stamp.replace("+00:00", "Z"))


class EnrichmentResult(BaseModel):
    """Response contract of the enrichment endpoints (camelCase on the wire)."""

    summary: str = ""
    what_they_do: list[str] | None = Field(default=None, alias="whatTheyDo")
    keywords: list[str] = []
    signals: list[str] = []
    sources: list[SourceRef] = []
    # Diagnostic for degraded responses (AI stage failed, heuristics used)
    note: str | None = None
    error: str | None = None

    model_config = ConfigDict(populate_by_name=True)

    @property
    def degraded(self) -> bool:
        return self.note is not None


def _string_items(v):
    if v is None:
        return []
    if isinstance(v, str):
        return [v]
    if not isinstance(v, list):
        raise ValueError("expected a list of strings")
    return [item.strip() for item in v if isinstance(item, str) and item.strip()]


class AIExtraction(BaseModel):
    """
    Payload returned by the language model, validated once at the boundary.

    Missing fields fall back to empty values; non-string list entries are
    dropped rather than failing the whole payload.
    """

    summary: str = ""
    what_they_do: list[str] = Field(default_factory=list, alias="whatTheyDo")
    keywords: list[str] = Field(default_factory=list)
    signals: list[str] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("summary", mode="before")
    @classmethod
    def _summary_text(cls, v):
        if v is None:
            return ""
        if not isinstance(v, str):
            raise ValueError("summary must be a string")
        return v.strip()

    @field_validator("what_they_do", "keywords", "signals", mode="before")
    @classmethod
    def _string_lists(cls, v):
        return _string_items(v)
