"""
OpenAI Provider - GPT client via the chat completions API.

Sends the prompt as a single user message and reads the first choice.
Authentication is a bearer token, handled by the SDK.

API Documentation: https://platform.openai.com/docs/api-reference/chat
"""

import logging
from typing import Optional

import httpx
from openai import AsyncOpenAI, APIConnectionError, APIStatusError

from app.core.config import Settings
from app.ai.providers.base import (
    AIProvider,
    DEFAULT_TEMPERATURE,
    TEXT_JOINER,
    ProviderReply,
    ProviderType,
    first_present,
)
from app.ai.providers.errors import ProviderError

logger = logging.getLogger("fanout.ai.openai")


class OpenAIProvider(AIProvider):
    """
    OpenAI GPT provider implementation.

    Usage:
        provider = OpenAIProvider()
        reply = await provider.call("Explain the OSI model", max_tokens=800)
    """

    provider_type = ProviderType.OPENAI
    display_name = "OpenAI"
    api_key_setting = "OPENAI_API_KEY"
    model_setting = "OPENAI_MODEL"

    def __init__(
        self,
        settings: Optional[Settings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            settings: Settings to read the key and model from (default: global settings)
            http_client: Optional httpx client handed to the SDK (used by tests)
        """
        super().__init__(settings)
        self._http_client = http_client

    def _build_client(self, api_key: str) -> AsyncOpenAI:
        return AsyncOpenAI(
            api_key=api_key,
            max_retries=0,
            timeout=self._settings.AI_REQUEST_TIMEOUT,
            http_client=self._http_client,
        )

    async def call(self, prompt: str, max_tokens: int) -> ProviderReply:
        client = self._get_client()

        try:
            response = await client.chat.completions.create(
                model=self.model,
                temperature=DEFAULT_TEMPERATURE,
                max_tokens=max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except APIStatusError as e:
            raise ProviderError(
                self._format_api_error(e.body),
                provider=self.provider_type.value,
                status_code=e.status_code,
            ) from e
        except APIConnectionError as e:
            raise ProviderError(
                self._transport_error_message(e),
                provider=self.provider_type.value,
            ) from e

        content = None
        if response.choices:
            content = response.choices[0].message.content
        if isinstance(content, list):
            content = TEXT_JOINER.join(str(item) for item in content)

        usage = response.usage
        reply = ProviderReply(
            text=self._text_or_placeholder(content or ""),
            tokens_used=getattr(usage, "total_tokens", None),
            tokens_remaining=first_present(
                getattr(usage, "remaining_tokens", None),
                getattr(usage, "tokens_remaining", None),
            ),
        )

        logger.info(f"OpenAI request completed with model {self.model}, tokens: {reply.tokens_used}")
        return reply
