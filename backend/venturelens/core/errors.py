"""
Error taxonomy for the enrichment API.

Every error that can reach a caller carries its HTTP status and a short,
human-readable message. The API layer renders them as ``{"error": message}``.
"""
from __future__ import annotations


class EnrichmentError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidRequestError(EnrichmentError):
    """Missing or malformed caller input (400)."""

    status_code = 400


class CompanyNotFoundError(EnrichmentError):
    status_code = 404

    def __init__(self, company_id: str) -> None:
        super().__init__("Company not found.")
        self.company_id = company_id


class UpstreamFetchError(EnrichmentError):
    """The target website could not be retrieved (502)."""

    status_code = 502


class NetworkError(UpstreamFetchError):
    """Unreachable host, DNS failure, malformed URL or timeout."""


class HttpStatusError(UpstreamFetchError):
    """The target website answered with a non-success status."""

    def __init__(self, http_status: int) -> None:
        super().__init__(f"Failed to fetch website (HTTP {http_status}).")
        self.http_status = http_status


class InternalEnrichmentError(EnrichmentError):
    """Unexpected failure while sanitizing or extracting (500)."""

    status_code = 500

    def __init__(self, detail: str) -> None:
        super().__init__(f"Enrichment failed: {detail}")


class AIExtractionError(Exception):
    """
    Failure inside the language-model stage.

    Never reaches a caller: the pipeline catches it and degrades to the
    heuristic result.
    """

    def __init__(self, message: str, *, parse_failure: bool = False) -> None:
        super().__init__(message)
        self.parse_failure = parse_failure
