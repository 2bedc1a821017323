"""
Model Query Service - Fan one prompt out to several LLM providers.

This service owns the whole query flow. The router only adapts HTTP.

Flow:
=====
1. Validate the prompt and the requested model list (no network yet)
2. Deduplicate the model list, keeping first-occurrence order
3. Resolve the token budget once for the request
4. Call every requested provider concurrently (asyncio.gather)
5. Capture each provider's failure in its own result
6. Return the results in the requested order

Once validation passes, aggregate() never raises: a provider that fails
gets an ``error`` in its result and the others are unaffected.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence
from uuid import uuid4

from app.core.config import Settings, settings as app_settings, resolve_max_tokens
from app.ai.providers import AIProvider, ProviderType, build_providers
from app.ai.monitoring import AIMonitor, ai_monitor


logger = logging.getLogger("fanout.services.models")

UNKNOWN_ERROR_MESSAGE = "Unknown error while querying the model."


# ---------------------------------------------------------------------------
# VALIDATION EXCEPTIONS
# ---------------------------------------------------------------------------
# Raised before any provider is called. The router maps them to HTTP 400
# using ``code`` as the response detail.


class QueryValidationError(Exception):
    """Base exception for invalid query input."""

    code: str = "INVALID_QUERY"

    def __init__(self, code: Optional[str] = None):
        if code:
            self.code = code
        super().__init__(self.code)


class PromptRequiredError(QueryValidationError):
    """The prompt is missing, empty or whitespace-only."""
    code = "PROMPT_REQUIRED"


class ModelSelectionRequiredError(QueryValidationError):
    """No model was selected."""
    code = "MODEL_SELECTION_REQUIRED"


class UnsupportedModelsError(QueryValidationError):
    """One or more requested models are not supported."""

    def __init__(self, invalid: Sequence[str]):
        self.invalid = list(invalid)
        super().__init__(f"UNSUPPORTED_MODELS:{','.join(self.invalid)}")


# ---------------------------------------------------------------------------
# RESULT TYPES
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ModelResult:
    """Outcome of one provider call: either ``text`` or ``error`` is set."""
    id: ProviderType
    text: Optional[str] = None
    error: Optional[str] = None
    tokens_used: Optional[int] = None
    tokens_remaining: Optional[int] = None

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class QueryResult:
    """The trimmed prompt and one ModelResult per requested model, in order."""
    prompt: str
    results: List[ModelResult] = field(default_factory=list)


# ---------------------------------------------------------------------------
# MODEL QUERY SERVICE
# ---------------------------------------------------------------------------

class ModelQueryService:
    """
    Validates a query and fans it out to the selected providers.

    Usage:
        result = await model_query_service.aggregate(
            prompt="Explain the OSI model",
            models=["openai", "gemini"],
        )
        for item in result.results:
            print(item.id, item.text or item.error)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        providers: Optional[Dict[ProviderType, AIProvider]] = None,
        monitor: Optional[AIMonitor] = None,
    ):
        self._settings = settings or app_settings
        self._providers = providers if providers is not None else build_providers(self._settings)
        self._monitor = monitor or ai_monitor

    async def aggregate(
        self,
        prompt: Optional[str],
        models: Optional[Sequence[str]],
    ) -> QueryResult:
        """
        Send the prompt to every requested model and collect the answers.

        Args:
            prompt: The user's prompt (trimmed before use)
            models: Requested provider ids; duplicates are collapsed

        Returns:
            QueryResult with one ModelResult per unique model, in request order

        Raises:
            PromptRequiredError: Prompt missing or blank
            ModelSelectionRequiredError: No model requested
            UnsupportedModelsError: Unknown model ids were requested
        """
        normalized_prompt = (prompt or "").strip()
        if not normalized_prompt:
            raise PromptRequiredError()

        if not models:
            raise ModelSelectionRequiredError()

        unique_models = list(dict.fromkeys(models))
        supported = set(ProviderType.values())
        invalid = [model for model in unique_models if model not in supported]
        if invalid:
            raise UnsupportedModelsError(invalid)

        selected = [ProviderType(model) for model in unique_models]
        max_tokens = resolve_max_tokens(self._settings.MAX_TOKENS)
        request_id = uuid4().hex[:12]

        self._monitor.track_request(
            request_id=request_id,
            prompt=normalized_prompt,
            providers=[provider.value for provider in selected],
            max_tokens=max_tokens,
        )

        results = await asyncio.gather(
            *(
                self._query_one(request_id, provider, normalized_prompt, max_tokens)
                for provider in selected
            )
        )

        return QueryResult(prompt=normalized_prompt, results=list(results))

    async def _query_one(
        self,
        request_id: str,
        provider_type: ProviderType,
        prompt: str,
        max_tokens: int,
    ) -> ModelResult:
        """Call one provider, turning any failure into an error result."""
        start_time = time.time()
        provider = self._providers.get(provider_type)
        model_name = str(getattr(provider, "model", "unknown"))

        try:
            if provider is None:
                raise LookupError(f"No provider registered for {provider_type.value}.")
            reply = await provider.call(prompt, max_tokens)
            result = ModelResult(
                id=provider_type,
                text=reply.text,
                tokens_used=reply.tokens_used,
                tokens_remaining=reply.tokens_remaining,
            )
        except Exception as e:
            message = str(e) or UNKNOWN_ERROR_MESSAGE
            logger.error(f"Model {provider_type.value} failed: {message}")
            result = ModelResult(id=provider_type, error=message)

        self._monitor.track_result(
            request_id=request_id,
            provider=provider_type.value,
            model=model_name,
            latency_ms=(time.time() - start_time) * 1000,
            success=result.success,
            tokens_used=result.tokens_used,
            error=result.error,
        )
        return result


# ---------------------------------------------------------------------------
# SINGLETON INSTANCE
# ---------------------------------------------------------------------------
model_query_service = ModelQueryService()
