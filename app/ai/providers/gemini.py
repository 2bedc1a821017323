"""
Gemini Provider - Google's GenAI SDK.

Calls generate_content on the async client (client.aio) with a single
user part. The answer is the first candidate's parts, joined with blank
lines. The SDK passes the API key to the generativelanguage API.
"""

import logging
from typing import Any, Optional

from google import genai
from google.genai import errors, types

from app.core.config import Settings
from app.ai.providers.base import (
    AIProvider,
    DEFAULT_TEMPERATURE,
    ProviderReply,
    ProviderType,
    join_texts,
)
from app.ai.providers.errors import ProviderError

logger = logging.getLogger("fanout.ai.gemini")


class GeminiProvider(AIProvider):
    provider_type = ProviderType.GEMINI
    display_name = "Gemini"
    api_key_setting = "GEMINI_API_KEY"
    model_setting = "GEMINI_MODEL"

    def __init__(self, settings: Optional[Settings] = None, client: Any = None):
        """
        Args:
            settings: Settings to read the key and model from (default: global settings)
            client: Pre-built genai.Client, used instead of creating one
        """
        super().__init__(settings)
        self._injected_client = client

    def _build_client(self, api_key: str) -> Any:
        if self._injected_client is not None:
            return self._injected_client
        timeout_ms = int(self._settings.AI_REQUEST_TIMEOUT * 1000)
        return genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=timeout_ms),
        )

    async def call(self, prompt: str, max_tokens: int) -> ProviderReply:
        client = self._get_client()

        config = types.GenerateContentConfig(
            temperature=DEFAULT_TEMPERATURE,
            max_output_tokens=max_tokens,
        )

        try:
            response = await client.aio.models.generate_content(
                model=self.model,
                contents=[types.Content(role="user", parts=[types.Part(text=prompt)])],
                config=config,
            )
        except errors.APIError as e:
            raise ProviderError(
                self._format_api_error(getattr(e, "details", None)),
                provider=self.provider_type.value,
                status_code=getattr(e, "code", None),
            ) from e
        except Exception as e:
            # Transport errors come from httpx, or from aiohttp when it is installed
            raise ProviderError(
                self._transport_error_message(e),
                provider=self.provider_type.value,
            ) from e

        reply = ProviderReply(
            text=self._text_or_placeholder(self._extract_text(response)),
            tokens_used=self._usage_field(response, "total_token_count"),
            tokens_remaining=self._usage_field(response, "remaining_token_count"),
        )

        logger.info(f"Gemini request completed with model {self.model}, tokens: {reply.tokens_used}")
        return reply

    # --- helpers ---

    def _extract_text(self, response: Any) -> str:
        candidates = getattr(response, "candidates", None) or []
        if not candidates:
            return ""
        content = getattr(candidates[0], "content", None)
        parts = getattr(content, "parts", None) or []
        return join_texts(getattr(part, "text", None) for part in parts)

    def _usage_field(self, response: Any, name: str) -> Optional[int]:
        # usage_metadata is None when the API reports no usage
        usage = getattr(response, "usage_metadata", None)
        if usage is None:
            return None
        return getattr(usage, name, None)
