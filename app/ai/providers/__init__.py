"""
AI Providers Module - Unified clients for the supported LLM providers.

This module provides consistent interfaces to different AI providers:
- OpenAI (chat completions)
- Google Gemini (generate content)
- Anthropic Claude (messages)

Each provider has the same interface, making them interchangeable:
    reply = await provider.call(prompt, max_tokens)

Providers are looked up by ProviderType through build_providers().
"""

from typing import Dict, Optional

from app.core.config import Settings
from app.ai.providers.base import AIProvider, ProviderReply, ProviderType
from app.ai.providers.errors import AIProviderError, MissingCredentialError, ProviderError
from app.ai.providers.openai_provider import OpenAIProvider
from app.ai.providers.gemini import GeminiProvider
from app.ai.providers.anthropic_provider import ClaudeProvider


PROVIDER_CLASSES = {
    ProviderType.OPENAI: OpenAIProvider,
    ProviderType.GEMINI: GeminiProvider,
    ProviderType.CLAUDE: ClaudeProvider,
}


def build_providers(settings: Optional[Settings] = None) -> Dict[ProviderType, AIProvider]:
    """Create one provider per ProviderType, all reading the same settings."""
    return {
        provider_type: provider_class(settings)
        for provider_type, provider_class in PROVIDER_CLASSES.items()
    }


__all__ = [
    "AIProvider",
    "AIProviderError",
    "ClaudeProvider",
    "GeminiProvider",
    "MissingCredentialError",
    "OpenAIProvider",
    "PROVIDER_CLASSES",
    "ProviderError",
    "ProviderReply",
    "ProviderType",
    "build_providers",
]
