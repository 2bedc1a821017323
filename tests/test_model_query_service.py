"""
Tests for ModelQueryService - validation, fan-out and per-model isolation.
"""

import asyncio

import pytest

from app.ai.providers import ProviderError, ProviderReply, ProviderType
from app.services.model_query_service import (
    UNKNOWN_ERROR_MESSAGE,
    ModelQueryService,
    ModelSelectionRequiredError,
    PromptRequiredError,
    QueryValidationError,
    UnsupportedModelsError,
)


def total_calls(fake_providers):
    return sum(len(provider.calls) for provider in fake_providers.values())


# ---------------------------------------------------------------------------
# VALIDATION
# ---------------------------------------------------------------------------

class TestValidation:
    """Invalid input is rejected before any provider is called."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("prompt", [None, "", "   ", "\n\t "])
    async def test_blank_prompt(self, service, fake_providers, prompt):
        with pytest.raises(PromptRequiredError) as exc_info:
            await service.aggregate(prompt, ["openai"])

        assert exc_info.value.code == "PROMPT_REQUIRED"
        assert total_calls(fake_providers) == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("models", [None, []])
    async def test_no_models(self, service, fake_providers, models):
        with pytest.raises(ModelSelectionRequiredError) as exc_info:
            await service.aggregate("Hi", models)

        assert exc_info.value.code == "MODEL_SELECTION_REQUIRED"
        assert total_calls(fake_providers) == 0

    @pytest.mark.asyncio
    async def test_prompt_checked_before_models(self, service):
        """Test a blank prompt wins over a missing model list."""
        with pytest.raises(PromptRequiredError):
            await service.aggregate("  ", [])

    @pytest.mark.asyncio
    async def test_unsupported_model(self, service, fake_providers):
        with pytest.raises(UnsupportedModelsError) as exc_info:
            await service.aggregate("Hi", ["openai", "mistral"])

        assert exc_info.value.code == "UNSUPPORTED_MODELS:mistral"
        assert exc_info.value.invalid == ["mistral"]
        assert total_calls(fake_providers) == 0

    @pytest.mark.asyncio
    async def test_unsupported_models_listed_once_in_order(self, service):
        with pytest.raises(UnsupportedModelsError) as exc_info:
            await service.aggregate("Hi", ["llama", "gemini", "mistral", "llama"])

        assert exc_info.value.code == "UNSUPPORTED_MODELS:llama,mistral"

    def test_validation_errors_share_base_class(self):
        assert issubclass(PromptRequiredError, QueryValidationError)
        assert issubclass(ModelSelectionRequiredError, QueryValidationError)
        assert issubclass(UnsupportedModelsError, QueryValidationError)


# ---------------------------------------------------------------------------
# FAN-OUT
# ---------------------------------------------------------------------------

class TestAggregate:
    """Tests for the concurrent fan-out."""

    @pytest.mark.asyncio
    async def test_all_models_succeed(self, service, fake_providers):
        result = await service.aggregate("Explain OSI model", ["openai", "gemini", "claude"])

        assert result.prompt == "Explain OSI model"
        assert [item.id for item in result.results] == [
            ProviderType.OPENAI,
            ProviderType.GEMINI,
            ProviderType.CLAUDE,
        ]
        for item in result.results:
            assert item.success
            assert item.text == f"Answer from {item.id.value}"
            assert item.tokens_used == 10
            assert item.error is None

    @pytest.mark.asyncio
    async def test_prompt_is_trimmed(self, service, fake_providers):
        result = await service.aggregate("  Hello there \n", ["gemini"])

        assert result.prompt == "Hello there"
        assert fake_providers[ProviderType.GEMINI].calls == [("Hello there", 800)]

    @pytest.mark.asyncio
    async def test_duplicates_are_collapsed(self, service, fake_providers):
        """Test each model is called once and reported once, in first-seen order."""
        result = await service.aggregate("Hi", ["openai", "gemini", "openai"])

        assert [item.id for item in result.results] == [ProviderType.OPENAI, ProviderType.GEMINI]
        assert len(fake_providers[ProviderType.OPENAI].calls) == 1
        assert len(fake_providers[ProviderType.GEMINI].calls) == 1
        assert fake_providers[ProviderType.CLAUDE].calls == []

    @pytest.mark.asyncio
    async def test_providers_are_called_concurrently(self, service, fake_providers):
        """Test Claude can only finish once OpenAI has started, so calls must overlap."""
        openai_started = asyncio.Event()
        claude = fake_providers[ProviderType.CLAUDE]
        openai = fake_providers[ProviderType.OPENAI]

        async def claude_call(prompt, max_tokens):
            await openai_started.wait()
            return ProviderReply(text="Claude answer")

        async def openai_call(prompt, max_tokens):
            openai_started.set()
            return ProviderReply(text="OpenAI answer")

        claude.call = claude_call
        openai.call = openai_call

        result = await asyncio.wait_for(service.aggregate("Hi", ["claude", "openai"]), timeout=1)

        assert [item.text for item in result.results] == ["Claude answer", "OpenAI answer"]

    @pytest.mark.asyncio
    async def test_order_follows_request_not_completion(self, service, fake_providers):
        fake_providers[ProviderType.CLAUDE].delay = 0.05
        fake_providers[ProviderType.OPENAI].delay = 0.02

        result = await service.aggregate("Hi", ["claude", "openai", "gemini"])

        assert [item.id for item in result.results] == [
            ProviderType.CLAUDE,
            ProviderType.OPENAI,
            ProviderType.GEMINI,
        ]

    @pytest.mark.asyncio
    async def test_one_failure_does_not_affect_others(self, service, fake_providers):
        fake_providers[ProviderType.GEMINI].error = ProviderError(
            "Gemini: API key not valid. | 400", provider="gemini", status_code=400
        )

        result = await service.aggregate("Hi", ["openai", "gemini", "claude"])

        openai_result, gemini_result, claude_result = result.results
        assert openai_result.text == "Answer from openai"
        assert claude_result.text == "Answer from claude"
        assert gemini_result.success is False
        assert gemini_result.error == "Gemini: API key not valid. | 400"
        assert gemini_result.text is None
        assert gemini_result.tokens_used is None

    @pytest.mark.asyncio
    async def test_all_failures_still_return_results(self, service, fake_providers):
        for provider in fake_providers.values():
            provider.error = RuntimeError("boom")

        result = await service.aggregate("Hi", ["openai", "claude"])

        assert [item.error for item in result.results] == ["boom", "boom"]

    @pytest.mark.asyncio
    async def test_empty_error_message_uses_default(self, service, fake_providers):
        fake_providers[ProviderType.OPENAI].error = RuntimeError()

        result = await service.aggregate("Hi", ["openai"])

        assert result.results[0].error == UNKNOWN_ERROR_MESSAGE

    @pytest.mark.asyncio
    async def test_reply_fields_are_carried_over(self, service, fake_providers):
        fake_providers[ProviderType.OPENAI].reply = ProviderReply(
            text="Hello", tokens_used=42, tokens_remaining=958
        )

        result = await service.aggregate("Hi", ["openai"])

        item = result.results[0]
        assert item.text == "Hello"
        assert item.tokens_used == 42
        assert item.tokens_remaining == 958

    @pytest.mark.asyncio
    async def test_missing_provider_becomes_error_result(self, settings, fake_providers, monitor):
        """Test a provider absent from the registry is reported, not raised."""
        del fake_providers[ProviderType.CLAUDE]
        service = ModelQueryService(settings=settings, providers=fake_providers, monitor=monitor)

        result = await service.aggregate("Hi", ["openai", "claude"])

        assert result.results[0].success
        assert result.results[1].id == ProviderType.CLAUDE
        assert "claude" in result.results[1].error


# ---------------------------------------------------------------------------
# TOKEN BUDGET
# ---------------------------------------------------------------------------

class TestTokenBudget:
    """MAX_TOKENS is resolved once and passed to every provider."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "raw, expected",
        [(None, 800), ("500", 500), ("10000", 4000), ("abc", 800)],
    )
    async def test_budget_passed_to_providers(
        self, settings_factory, fake_providers, monitor, raw, expected
    ):
        service = ModelQueryService(
            settings=settings_factory(MAX_TOKENS=raw),
            providers=fake_providers,
            monitor=monitor,
        )

        await service.aggregate("Hi", ["openai", "claude"])

        assert fake_providers[ProviderType.OPENAI].calls == [("Hi", expected)]
        assert fake_providers[ProviderType.CLAUDE].calls == [("Hi", expected)]


# ---------------------------------------------------------------------------
# MONITORING
# ---------------------------------------------------------------------------

class TestMonitoring:
    """Every provider call is recorded by the monitor."""

    @pytest.mark.asyncio
    async def test_counters_updated(self, service, fake_providers, monitor):
        fake_providers[ProviderType.CLAUDE].error = ProviderError("Claude: overloaded")

        await service.aggregate("Hi", ["openai", "claude"])

        stats = monitor.get_stats()
        assert stats.total_requests == 2
        assert stats.successful_requests == 1
        assert stats.failed_requests == 1
        assert stats.total_tokens == 10
        assert stats.requests_by_provider == {"openai": 1, "claude": 1}
        assert stats.failures_by_provider == {"claude": 1}

    @pytest.mark.asyncio
    async def test_rejected_query_not_counted(self, service, monitor):
        with pytest.raises(QueryValidationError):
            await service.aggregate("", ["openai"])

        assert monitor.get_stats().total_requests == 0
