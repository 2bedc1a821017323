"""
Models Router - API endpoint for fanning a prompt out to several LLMs.

This router handles HTTP only. All business logic lives in
ModelQueryService.

Architecture:
=============
```
┌─────────────────┐
│ POST            │
│ /models/query   │  ← HTTP handling only (this file)
└────────┬────────┘
         │
         ▼
┌─────────────────┐
│ ModelQuery      │  ← Validation + concurrent fan-out
│ Service         │
└────────┬────────┘
         │
   ┌─────┼─────┐
   ▼     ▼     ▼
 OpenAI Gemini Claude
```
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from app.ai.monitoring import AIMonitor
from app.deps import get_ai_monitor, get_model_query_service
from app.schemas.models import (
    ModelStatsResponse,
    QueryModelsResponse,
    SubmitPromptRequest,
)
from app.services.model_query_service import ModelQueryService, QueryValidationError


# ---------------------------------------------------------------------------
# LOGGER SETUP
# ---------------------------------------------------------------------------
logger = logging.getLogger("fanout.api")


# ---------------------------------------------------------------------------
# ROUTER SETUP
# ---------------------------------------------------------------------------
router = APIRouter(prefix="/models", tags=["models"])


# ---------------------------------------------------------------------------
# ENDPOINTS
# ---------------------------------------------------------------------------

@router.post(
    "/query",
    response_model=QueryModelsResponse,
    response_model_exclude_none=True,
    response_model_by_alias=True,
)
async def query_models(
    request: SubmitPromptRequest,
    service: ModelQueryService = Depends(get_model_query_service),
):
    """
    Send one prompt to several models in parallel.

    Every requested model gets a result; a model that fails carries an
    ``error`` instead of ``text``.

    **Validation errors (400):**
    - `PROMPT_REQUIRED`
    - `MODEL_SELECTION_REQUIRED`
    - `UNSUPPORTED_MODELS:<comma-list>`
    """
    try:
        result = await service.aggregate(prompt=request.prompt, models=request.models)
    except QueryValidationError as e:
        logger.info(f"Rejected model query: {e.code}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.code,
        )

    return QueryModelsResponse.from_result(result)


@router.get("/stats", response_model=ModelStatsResponse)
async def get_model_stats(monitor: AIMonitor = Depends(get_ai_monitor)):
    """
    Get provider usage statistics since startup.

    Returns call counts, failures, tokens and average latency per provider.
    """
    stats = monitor.get_stats()
    return ModelStatsResponse(**stats.to_dict())
