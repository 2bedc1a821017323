"""
Provider exceptions.

Adapters raise these; the model query service catches them per provider
and turns them into that provider's ``error`` field.
"""

from typing import Optional


class AIProviderError(Exception):
    """Base exception for all provider call failures."""

    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message)
        self.provider = provider


class MissingCredentialError(AIProviderError):
    """Raised when a provider's API key is not configured."""

    def __init__(self, env_name: str, provider: Optional[str] = None):
        super().__init__(f"Environment variable {env_name} is not configured.", provider)
        self.env_name = env_name


class ProviderError(AIProviderError):
    """Raised when the provider answers with an error status or the call never completes."""

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, provider)
        self.status_code = status_code
