"""
Claude Provider - Anthropic client via the messages API.

Claude returns its answer as a list of content segments; the text
segments are joined with blank lines. The SDK sends the API key in
the x-api-key header along with the anthropic-version header.

API Documentation: https://docs.anthropic.com/en/api/messages
"""

import logging
from typing import Optional

import httpx2
from anthropic import AsyncAnthropic, APIConnectionError, APIStatusError

from app.core.config import Settings
from app.ai.providers.base import (
    AIProvider,
    DEFAULT_TEMPERATURE,
    ProviderReply,
    ProviderType,
    first_present,
    join_texts,
)
from app.ai.providers.errors import ProviderError

logger = logging.getLogger("fanout.ai.claude")


class ClaudeProvider(AIProvider):
    """
    Anthropic Claude provider implementation.

    Usage:
        provider = ClaudeProvider()
        reply = await provider.call("Compare TCP and UDP", max_tokens=800)
    """

    provider_type = ProviderType.CLAUDE
    display_name = "Claude"
    api_key_setting = "CLAUDE_API_KEY"
    model_setting = "CLAUDE_MODEL"

    def __init__(
        self,
        settings: Optional[Settings] = None,
        http_client: Optional[httpx2.AsyncClient] = None,
    ):
        super().__init__(settings)
        self._http_client = http_client

    def _build_client(self, api_key: str) -> AsyncAnthropic:
        return AsyncAnthropic(
            api_key=api_key,
            max_retries=0,
            timeout=self._settings.AI_REQUEST_TIMEOUT,
            http_client=self._http_client,
        )

    async def call(self, prompt: str, max_tokens: int) -> ProviderReply:
        client = self._get_client()

        try:
            response = await client.messages.create(
                model=self.model,
                max_tokens=max_tokens,
                temperature=DEFAULT_TEMPERATURE,
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

        # Claude returns a list of content blocks; only text blocks carry text
        segments = response.content or []
        text = join_texts(getattr(segment, "text", None) for segment in segments)

        usage = response.usage
        reply = ProviderReply(
            text=self._text_or_placeholder(text),
            tokens_used=first_present(
                getattr(usage, "total_tokens", None),
                getattr(usage, "output_tokens", None),
            ),
            tokens_remaining=getattr(usage, "tokens_remaining", None),
        )

        logger.info(f"Claude request completed with model {self.model}, tokens: {reply.tokens_used}")
        return reply
