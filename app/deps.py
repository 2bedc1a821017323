"""
Dependencies module - reusable FastAPI dependencies for route handlers.
Route handlers receive services through Depends() so tests can swap them
with app.dependency_overrides.
"""

from app.ai.monitoring import AIMonitor, ai_monitor
from app.services.model_query_service import ModelQueryService, model_query_service


def get_model_query_service() -> ModelQueryService:
    """Return the shared ModelQueryService."""
    return model_query_service


def get_ai_monitor() -> AIMonitor:
    """Return the shared AIMonitor."""
    return ai_monitor
