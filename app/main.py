"""
Main application entry point - FastAPI app instance and configuration.
This is where the ASGI application is created and configured.
Run with: uvicorn app.main:app --reload --port 3000
"""

import uvicorn
from fastapi import FastAPI  # The FastAPI framework
from fastapi.middleware.cors import CORSMiddleware  # Cross-Origin Resource Sharing

from app.core.config import settings  # Application settings
from app.ai.monitoring import configure_logging
from app.routers import models  # Prompt fan-out API
from app.routers import ui  # Side-by-side comparison page


configure_logging(settings.LOG_LEVEL)

# ---------------------------------------------------------------------------
# CREATE FASTAPI APPLICATION
# ---------------------------------------------------------------------------
# - docs_url: Swagger UI, visit http://localhost:3000/docs
# - redoc_url: ReDoc, visit http://localhost:3000/redoc
app = FastAPI(
    title=settings.APP_NAME,
    docs_url="/docs",
    redoc_url="/redoc",
)

# ---------------------------------------------------------------------------
# CORS MIDDLEWARE
# ---------------------------------------------------------------------------
# FRONTEND_URL holds a comma-separated list of allowed origins.
# An empty list lets any origin call the API.
allowed_origins = settings.allowed_origins

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins or ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# REGISTER ROUTERS
# ---------------------------------------------------------------------------
# models.router: /models/query, /models/stats
# ui.router: / comparison page
app.include_router(models.router)
app.include_router(ui.router)


# ---------------------------------------------------------------------------
# HEALTH CHECK ENDPOINT
# ---------------------------------------------------------------------------
@app.get("/health", tags=["health"])
def health_check():
    """
    Simple health check endpoint.

    Does NOT call any provider; it only confirms the process is serving.

    Returns:
        {"status": "ok"}
    """
    return {"status": "ok"}


def run() -> None:
    """Start the server on HOST:PORT (console script entry point)."""
    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT)
