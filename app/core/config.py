"""
Configuration module - centralized settings for the entire application.
Uses pydantic-settings to load values from environment variables and .env file.
"""

import math
from typing import Any, List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


# ---------------------------------------------------------------------------
# TOKEN BUDGET LIMITS
# ---------------------------------------------------------------------------
DEFAULT_MAX_TOKENS = 800
MAX_TOKENS_CEILING = 4000


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Pydantic-settings automatically:
    1. Reads from environment variables (highest priority)
    2. Falls back to .env file values
    3. Uses default values if neither exists

    To override in production, set environment variables:
        export OPENAI_API_KEY=sk-...
        export FRONTEND_URL=https://compare.example.com,https://admin.example.com
    """

    # ---------------------------------------------------------------------------
    # PYDANTIC SETTINGS CONFIGURATION
    # ---------------------------------------------------------------------------
    model_config = SettingsConfigDict(
        env_file=".env",        # Load from .env file in project root
        env_file_encoding="utf-8",
        extra="ignore",         # Ignore extra env vars not defined here
    )

    # ---------------------------------------------------------------------------
    # APPLICATION SETTINGS
    # ---------------------------------------------------------------------------
    # APP_NAME: Display name shown in API docs and logging
    APP_NAME: str = "Prompt Fan-out"

    # LOG_LEVEL: Level applied to the "fanout" logger tree
    LOG_LEVEL: str = "INFO"

    # HOST / PORT: Bind address used by run()
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # FRONTEND_URL: Comma-separated list of origins allowed by CORS
    # - An empty value lets any origin call the API
    FRONTEND_URL: str = "http://localhost:5173"

    # ---------------------------------------------------------------------------
    # AI/LLM PROVIDER CREDENTIALS
    # ---------------------------------------------------------------------------
    # A provider without a key still shows up in results, with an error
    OPENAI_API_KEY: str = ""
    GEMINI_API_KEY: str = ""
    CLAUDE_API_KEY: str = ""

    # ---------------------------------------------------------------------------
    # AI MODEL CONFIGURATION
    # ---------------------------------------------------------------------------
    OPENAI_MODEL: str = "gpt-4o-mini"
    GEMINI_MODEL: str = "gemini-1.5-flash-latest"
    CLAUDE_MODEL: str = "claude-3-5-sonnet-20240620"

    # MAX_TOKENS: Raw token budget, kept as text and resolved per request
    # with resolve_max_tokens() so a bad value falls back instead of failing startup
    MAX_TOKENS: Optional[str] = None

    # AI request timeout in seconds (transport level, per provider call)
    AI_REQUEST_TIMEOUT: float = 60.0

    @property
    def allowed_origins(self) -> List[str]:
        """Origins parsed from FRONTEND_URL, blanks dropped."""
        return [value.strip() for value in self.FRONTEND_URL.split(",") if value.strip()]


def resolve_max_tokens(raw: Any) -> int:
    """
    Turn a configured token budget into the value sent to providers.

    Non-numeric, non-finite and non-positive values give DEFAULT_MAX_TOKENS.
    Valid values are floored and capped at MAX_TOKENS_CEILING.

    Examples:
        resolve_max_tokens("abc")   -> 800
        resolve_max_tokens("10000") -> 4000
        resolve_max_tokens("500")   -> 500
    """
    try:
        parsed = float(raw)
    except (TypeError, ValueError):
        return DEFAULT_MAX_TOKENS

    if not math.isfinite(parsed) or parsed <= 0:
        return DEFAULT_MAX_TOKENS

    floored = int(math.floor(parsed))
    if floored <= 0:
        return DEFAULT_MAX_TOKENS
    return min(floored, MAX_TOKENS_CEILING)


# ---------------------------------------------------------------------------
# GLOBAL SETTINGS INSTANCE
# ---------------------------------------------------------------------------
# Usage: from app.core.config import settings
settings = Settings()
