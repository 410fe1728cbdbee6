import pytest

from venturelens.core.config import get_settings
from venturelens.services.llm import get_llm_client

_ISOLATED_ENV = ("OPENAI_API_KEY", "OPENROUTER_API_KEY", "REDIS_URL")


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Run every test without LLM credentials or Redis, with fresh settings."""
    for name in _ISOLATED_ENV:
        monkeypatch.setenv(name, "")
    get_settings.cache_clear()
    get_llm_client.cache_clear()
    yield
    get_settings.cache_clear()
    get_llm_client.cache_clear()
