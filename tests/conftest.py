"""
Test configuration and fixtures for pytest.

This module provides shared fixtures used across all tests:
- Settings built without reading .env
- Fake providers that record their calls (no network)
- A fresh AIMonitor per test
- Test client (FastAPI TestClient) wired to the fakes
"""

import asyncio
from typing import Dict, Generator, List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.core.config import Settings
from app.ai.monitoring import AIMonitor
from app.ai.providers import ProviderReply, ProviderType
from app.deps import get_ai_monitor, get_model_query_service
from app.services.model_query_service import ModelQueryService


# ---------------------------------------------------------------------------
# SETTINGS
# ---------------------------------------------------------------------------

def make_settings(**overrides) -> Settings:
    """Settings that ignore .env; explicit values win over the environment."""
    values = {
        "OPENAI_API_KEY": "",
        "GEMINI_API_KEY": "",
        "CLAUDE_API_KEY": "",
        "MAX_TOKENS": None,
        "AI_REQUEST_TIMEOUT": 5.0,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings_factory():
    """Build Settings with overrides: settings_factory(OPENAI_API_KEY="sk-test")."""
    return make_settings


@pytest.fixture
def settings() -> Settings:
    return make_settings()


# ---------------------------------------------------------------------------
# FAKE PROVIDERS
# ---------------------------------------------------------------------------

class FakeProvider:
    """
    Stand-in for an AIProvider.

    Records every (prompt, max_tokens) call. Returns ``reply`` after
    ``delay`` seconds, or raises ``error`` if set.
    """

    def __init__(
        self,
        provider_type: ProviderType,
        reply: Optional[ProviderReply] = None,
        error: Optional[Exception] = None,
        delay: float = 0.0,
    ):
        self.provider_type = provider_type
        self.model = f"{provider_type.value}-test-model"
        self.reply = reply or ProviderReply(
            text=f"Answer from {provider_type.value}",
            tokens_used=10,
        )
        self.error = error
        self.delay = delay
        self.calls: List[Tuple[str, int]] = []

    async def call(self, prompt: str, max_tokens: int) -> ProviderReply:
        self.calls.append((prompt, max_tokens))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def fake_providers() -> Dict[ProviderType, FakeProvider]:
    return {provider_type: FakeProvider(provider_type) for provider_type in ProviderType}


@pytest.fixture
def monitor() -> AIMonitor:
    return AIMonitor()


@pytest.fixture
def service(settings, fake_providers, monitor) -> ModelQueryService:
    return ModelQueryService(settings=settings, providers=fake_providers, monitor=monitor)


# ---------------------------------------------------------------------------
# CLIENT FIXTURE
# ---------------------------------------------------------------------------

@pytest.fixture
def client(service: ModelQueryService, monitor: AIMonitor) -> Generator[TestClient, None, None]:
    """
    Create a test client backed by the fake providers.

    Overrides the service and monitor dependencies; cleared afterwards.
    """
    app.dependency_overrides[get_model_query_service] = lambda: service
    app.dependency_overrides[get_ai_monitor] = lambda: monitor

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
