"""
Tests for enrichment.py

End-to-end pipeline runs against a mocked website and a stub language model.
"""
import asyncio

import httpx
import pytest

from venturelens.core.errors import (
    HttpStatusError,
    InternalEnrichmentError,
    InvalidRequestError,
    NetworkError,
)
from venturelens.services import enrichment
from venturelens.services.enrichment import (
    AI_UNAVAILABLE_NOTICE,
    AI_UNPARSABLE_NOTICE,
    enrich_website,
    merge_signals,
)

from tests.fixtures.enrichment_fixtures import (
    AI_PAYLOAD,
    AI_REPLY_FENCED,
    AI_REPLY_GARBAGE,
    AI_REPLY_JSON,
    CUELESS_HTML,
    META_DESCRIPTION,
    SCENARIO_D_HTML,
    STRUCTURED_HTML,
    FakeLLMClient,
)


def _enrich(website, html="<html></html>", status=200, llm_client=None, handler=None):
    calls = []

    def default_handler(request):
        calls.append(request)
        return httpx.Response(status, text=html)

    async def _run():
        transport = httpx.MockTransport(handler or default_handler)
        async with httpx.AsyncClient(transport=transport) as client:
            return await enrich_website(website, http_client=client, llm_client=llm_client)

    return asyncio.run(_run()), calls


class TestMergeSignals:
    def test_primary_first_and_capped(self):
        assert merge_signals(["a", "b", "c"], ["d", "e"], 4) == ["a", "b", "c", "d"]

    def test_exact_duplicates_dropped(self):
        assert merge_signals(["a", "b"], ["b", "c"], 4) == ["a", "b", "c"]

    def test_blank_entries_dropped(self):
        assert merge_signals(["", "a"], [], 4) == ["a"]


class TestInputValidation:
    @pytest.mark.parametrize("website", ["", "   ", None])
    def test_blank_website_rejected_without_fetch(self, website):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200)

        with pytest.raises(InvalidRequestError) as exc_info:
            _enrich(website, handler=handler)
        assert exc_info.value.message == "Website URL is required."
        assert exc_info.value.status_code == 400
        assert calls == []


class TestHeuristicPipeline:
    """No LLM credential configured: heuristics only."""

    def test_scenario_page(self):
        result, calls = _enrich("https://example.com", html=SCENARIO_D_HTML)

        assert len(calls) == 1
        assert result.summary == META_DESCRIPTION
        assert result.signals == ["AI-Focused", "Developer Tools Focused"]
        assert "with" not in result.keywords
        assert result.what_they_do is None
        assert result.note is None
        assert result.error is None

    def test_single_source_with_timestamp(self):
        result, _ = _enrich("https://example.com", html=SCENARIO_D_HTML)
        assert len(result.sources) == 1
        assert result.sources[0].url == "https://example.com"
        assert result.sources[0].timestamp.endswith("Z")

    def test_signals_capped_at_four(self):
        html = STRUCTURED_HTML.replace("</main>", "<p>AI fintech startup for enterprise</p></main>")
        result, _ = _enrich("https://example.com", html=html)
        assert len(result.signals) == 4
        assert result.signals[0] == "Hiring (careers page)"

    def test_empty_page_is_not_an_error(self):
        result, _ = _enrich("https://example.com", html="")
        assert result.summary == ""
        assert result.keywords == []
        assert result.signals == []


class TestFetchFailures:
    def test_http_404_propagates(self):
        with pytest.raises(HttpStatusError) as exc_info:
            _enrich("https://example.com/missing", status=404)
        assert exc_info.value.message == "Failed to fetch website (HTTP 404)."

    def test_timeout_propagates_as_network_error(self):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        with pytest.raises(NetworkError):
            _enrich("https://slow.example.com", handler=handler)

    def test_llm_not_called_when_fetch_fails(self):
        llm = FakeLLMClient(reply=AI_REPLY_JSON)
        with pytest.raises(HttpStatusError):
            _enrich("https://example.com", status=500, llm_client=llm)
        assert llm.completions.calls == []


class TestAIPipeline:
    """LLM client available."""

    def test_success_uses_model_fields_and_merges_signals(self):
        llm = FakeLLMClient(reply=AI_REPLY_JSON)
        result, _ = _enrich("https://example.com", html=STRUCTURED_HTML, llm_client=llm)

        assert result.summary == AI_PAYLOAD["summary"]
        assert result.what_they_do == AI_PAYLOAD["whatTheyDo"]
        assert result.keywords == AI_PAYLOAD["keywords"]
        assert result.signals == AI_PAYLOAD["signals"] + ["Hiring (careers page)"]
        assert result.note is None

    def test_prompt_receives_structural_signals_only(self):
        llm = FakeLLMClient(reply=AI_REPLY_JSON)
        _enrich("https://example.com", html=SCENARIO_D_HTML, llm_client=llm)
        prompt = llm.completions.calls[0]["messages"][1]["content"]
        assert "none detected" in prompt
        assert "AI-Focused" not in prompt

    def test_fenced_reply_accepted(self):
        llm = FakeLLMClient(reply=AI_REPLY_FENCED)
        result, _ = _enrich("https://example.com", html=SCENARIO_D_HTML, llm_client=llm)
        assert result.summary == AI_PAYLOAD["summary"]

    def test_sparse_reply_uses_defaults(self):
        llm = FakeLLMClient(reply='{"summary": "Short."}')
        result, _ = _enrich("https://example.com", html=CUELESS_HTML, llm_client=llm)
        assert result.summary == "Short."
        assert result.what_they_do == []
        assert result.keywords == []
        assert result.signals == []

    def test_transport_error_degrades_to_heuristics(self):
        llm = FakeLLMClient(error=TimeoutError("provider timed out"))
        result, _ = _enrich("https://example.com", html=SCENARIO_D_HTML, llm_client=llm)

        assert result.what_they_do == [AI_UNAVAILABLE_NOTICE]
        assert result.summary == META_DESCRIPTION
        assert "platform" in result.keywords
        assert result.signals == ["AI-Focused", "Developer Tools Focused"]
        assert result.note and "provider timed out" in result.note
        assert result.error is None

    def test_unparsable_reply_degrades_to_heuristics(self):
        llm = FakeLLMClient(reply=AI_REPLY_GARBAGE)
        result, _ = _enrich("https://example.com", html=SCENARIO_D_HTML, llm_client=llm)

        assert result.what_they_do == [AI_UNPARSABLE_NOTICE]
        assert result.summary == META_DESCRIPTION
        assert "platform" in result.keywords
        assert "parsing failed" in result.note

    def test_deeply_nested_reply_degrades_to_heuristics(self):
        llm = FakeLLMClient(reply="[" * 100000)
        result, _ = _enrich("https://example.com", html=SCENARIO_D_HTML, llm_client=llm)

        assert result.what_they_do == [AI_UNPARSABLE_NOTICE]
        assert result.summary == META_DESCRIPTION
        assert result.error is None

    def test_configured_credential_selects_shared_client(self, monkeypatch):
        llm = FakeLLMClient(reply=AI_REPLY_JSON)
        monkeypatch.setattr(enrichment, "llm_configured", lambda: True)
        monkeypatch.setattr(enrichment, "get_llm_client", lambda: llm)

        result, _ = _enrich("https://example.com", html=SCENARIO_D_HTML)
        assert result.summary == AI_PAYLOAD["summary"]
        assert len(llm.completions.calls) == 1


class TestUnexpectedFailures:
    def test_extraction_crash_becomes_internal_error(self, monkeypatch):
        def boom(*args, **kwargs):
            raise ValueError("boom")

        monkeypatch.setattr(enrichment, "heuristic_extract", boom)
        with pytest.raises(InternalEnrichmentError) as exc_info:
            _enrich("https://example.com", html=SCENARIO_D_HTML)
        assert exc_info.value.message == "Enrichment failed: boom"
        assert exc_info.value.status_code == 500

    def test_fetch_crash_becomes_internal_error(self, monkeypatch):
        async def broken_fetch(url, *, client=None):
            raise RuntimeError("socket closed")

        monkeypatch.setattr(enrichment, "fetch_page", broken_fetch)
        with pytest.raises(InternalEnrichmentError) as exc_info:
            _enrich("https://example.com")
        assert exc_info.value.message == "Enrichment failed: socket closed"
