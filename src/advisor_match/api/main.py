"""FastAPI application factory and configuration."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from advisor_match.api.deps import verify_api_key
from advisor_match.api.exceptions import register_exception_handlers
from advisor_match.api.middleware import RequestLoggingMiddleware
from advisor_match.api.version import BUILD_VERSION
from advisor_match.config.settings import Settings
from advisor_match.logging_config import setup_logging

logger = logging.getLogger("advisor_match.api.main")


def _load_default_env() -> None:
    """Load .env file from project root if not already loaded."""
    project_root = Path(__file__).resolve().parents[3]
    load_dotenv(dotenv_path=project_root / ".env", override=False)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    logger.info(
        "advisor-match API %s starting (workers=%d, floor=%d)",
        BUILD_VERSION,
        settings.match_workers,
        settings.min_score_floor,
    )
    yield


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Explicit settings (tests); loaded from env/.env when omitted.

    Returns:
        Configured FastAPI application instance.
    """
    if settings is None:
        _load_default_env()
        settings = Settings()

    # Configure logging before anything else
    setup_logging(settings.log_level)

    app = FastAPI(
        title="Advisor Match API",
        description=(
            "Scores and ranks advisors for advisory-practice clients. "
            "Provides batch match runs and single-pair explanations."
        ),
        version=BUILD_VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request logging middleware (outermost, wraps everything)
    app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app)

    from advisor_match.api.health.router import router as health_router
    from advisor_match.api.matching.router import router as matching_router

    app.include_router(health_router, tags=["health"])
    app.include_router(
        matching_router,
        prefix="/api/v1/match",
        tags=["match"],
        dependencies=[Depends(verify_api_key)],
    )

    @app.get("/", include_in_schema=False)
    def root():
        """Root endpoint - points at the docs."""
        return {
            "message": "Advisor Match API",
            "docs": "/docs",
            "health": "/health",
        }

    return app
