"""
Base AI Provider - Abstract interface for all LLM providers.

This module defines the contract that all AI providers must follow.
Every provider turns the same (prompt, max_tokens) request into its own
wire format and hands back the same ProviderReply, so the model query
service can fan a prompt out without knowing which provider it talks to.

Design Pattern: Strategy Pattern
================================
The base class defines the interface, and each provider implements it.
Providers are looked up by ProviderType, never by branching on names.

Example:
    provider = GeminiProvider()  # or OpenAIProvider() or ClaudeProvider()
    reply = await provider.call("Hello, world!", max_tokens=800)
    print(reply.text)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional

from app.core.config import Settings, settings as app_settings
from app.ai.providers.errors import MissingCredentialError


# Every provider is called with the same sampling temperature
DEFAULT_TEMPERATURE = 0.7

# Separator used when a provider splits its answer into several parts
TEXT_JOINER = "\n\n"


class ProviderType(str, Enum):
    """Enum of supported AI providers, in display order."""
    OPENAI = "openai"
    GEMINI = "gemini"
    CLAUDE = "claude"

    @classmethod
    def values(cls) -> list:
        return [member.value for member in cls]


@dataclass(frozen=True)
class ProviderReply:
    """
    Normalized answer from any AI provider.

    Attributes:
        text: The generated answer, never empty (a placeholder is used instead)
        tokens_used: Token count reported by the provider, if any
        tokens_remaining: Remaining quota reported by the provider, if any
    """
    text: str
    tokens_used: Optional[int] = None
    tokens_remaining: Optional[int] = None


def first_present(*values: Any) -> Any:
    """Return the first value that is not None (0 counts as present)."""
    for value in values:
        if value is not None:
            return value
    return None


def join_texts(texts: Iterable[Optional[str]]) -> str:
    """Join text fragments with blank lines, treating None as empty."""
    return TEXT_JOINER.join(text or "" for text in texts)


class AIProvider(ABC):
    """
    Abstract base class for AI providers.

    All providers (OpenAI, Gemini, Claude) implement call().
    Subclasses declare which settings hold their credential and model.

    Responsibilities:
    - Read their own credential lazily, at call time
    - Issue exactly one request per call (no retries, no streaming)
    - Raise AIProviderError subclasses on failure
    """

    provider_type: ProviderType
    display_name: str
    api_key_setting: str
    model_setting: str

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or app_settings
        self._client: Any = None
        self._client_key: Optional[str] = None

    @property
    def model(self) -> str:
        """Model name for this provider, from settings."""
        return getattr(self._settings, self.model_setting)

    @abstractmethod
    async def call(self, prompt: str, max_tokens: int) -> ProviderReply:
        """
        Send the prompt to the provider and normalize its answer.

        Args:
            prompt: The user's prompt, already trimmed
            max_tokens: Maximum tokens in the response

        Returns:
            ProviderReply with the extracted text and token accounting

        Raises:
            MissingCredentialError: The provider's API key is not configured
            ProviderError: Error status from the provider or transport failure
        """

    def _require_api_key(self) -> str:
        """Read the API key from settings or raise MissingCredentialError."""
        value = getattr(self._settings, self.api_key_setting, "")
        if not value:
            raise MissingCredentialError(self.api_key_setting, provider=self.provider_type.value)
        return value

    @abstractmethod
    def _build_client(self, api_key: str) -> Any:
        """Create the SDK client for this provider."""

    def _get_client(self) -> Any:
        """
        Return the SDK client, reading the credential at call time.

        The client is reused until the configured key changes.
        """
        api_key = self._require_api_key()
        if self._client is None or self._client_key != api_key:
            self._client = self._build_client(api_key)
            self._client_key = api_key
        return self._client

    def _format_api_error(self, payload: Any) -> str:
        """
        Build a readable message from a provider error payload.

        Accepts either the full body ({"error": {...}}) or the inner error
        object. Picks message, code and type, in that order, skipping blanks.
        """
        error = payload
        if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
            error = payload["error"]

        if isinstance(error, dict):
            parts = [error.get(key) for key in ("message", "code", "type")]
            parts = [str(part) for part in parts if part]
            if parts:
                return f"{self.display_name}: {' | '.join(parts)}"

        return f"{self.display_name}: Failed to query {self.display_name}."

    def _transport_error_message(self, exc: Exception) -> str:
        description = str(exc) or exc.__class__.__name__
        return f"{self.display_name}: {description}"

    def _text_or_placeholder(self, text: str) -> str:
        return text.strip() or f"(No content returned by {self.display_name}.)"
