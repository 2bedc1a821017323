"""
Pydantic schemas for the model query API.

These schemas define the REST contract used by app/routers/models.py.
Field names on the wire are camelCase (tokensUsed, tokensRemaining).
"""

from typing import Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from app.services.model_query_service import ModelResult, QueryResult


# ============== QUERY ==============

class SubmitPromptRequest(BaseModel):
    """
    Request to fan a prompt out to several models.

    Both fields are optional here so the service can report the exact
    validation failure (PROMPT_REQUIRED, MODEL_SELECTION_REQUIRED).
    """
    prompt: Optional[str] = Field(default=None, description="Prompt sent to every model")
    models: Optional[List[str]] = Field(
        default=None,
        validation_alias=AliasChoices("models", "providers"),
        description="Model ids: openai, gemini, claude",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "prompt": "Explain the OSI model",
                "models": ["openai", "gemini", "claude"],
            }
        }
    )


class ModelResultResponse(BaseModel):
    """One model's answer, or its error."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    text: Optional[str] = None
    error: Optional[str] = None
    tokens_used: Optional[int] = Field(default=None, alias="tokensUsed")
    tokens_remaining: Optional[int] = Field(default=None, alias="tokensRemaining")

    @classmethod
    def from_result(cls, result: ModelResult) -> "ModelResultResponse":
        return cls(
            id=result.id.value,
            text=result.text,
            error=result.error,
            tokens_used=result.tokens_used,
            tokens_remaining=result.tokens_remaining,
        )


class QueryModelsResponse(BaseModel):
    """The trimmed prompt and one result per requested model."""
    prompt: str
    results: List[ModelResultResponse]

    @classmethod
    def from_result(cls, result: QueryResult) -> "QueryModelsResponse":
        return cls(
            prompt=result.prompt,
            results=[ModelResultResponse.from_result(item) for item in result.results],
        )


# ============== STATS ==============

class ModelStatsResponse(BaseModel):
    """Usage counters since startup."""
    total_requests: int
    successful_requests: int
    failed_requests: int
    success_rate: str
    total_tokens: int
    avg_latency_ms: float
    requests_by_provider: Dict[str, int]
    failures_by_provider: Dict[str, int]
    tokens_by_provider: Dict[str, int]
