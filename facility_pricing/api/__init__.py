"""
FastAPI application factory and API package.

Run with:
    uvicorn facility_pricing.api:app --reload --port 8000

Or via main.py:
    python -m facility_pricing.main --serve
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from facility_pricing.config import get_settings
from facility_pricing.api.routes import (
    facilities_router,
    health_router,
    plans_router,
    strategies_router,
)

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Application factory — create and configure the FastAPI instance."""
    settings = get_settings()

    application = FastAPI(
        title="Facility Pricing API",
        description="Monthly pricing, frequency comparison and proposal lines for cleaning facilities",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # CORS: allow the frontend (adjust origins in production)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(health_router, tags=["Health"])
    application.include_router(plans_router, prefix="/api/pricing-plans", tags=["Pricing Plans"])
    application.include_router(strategies_router, prefix="/api/pricing-strategies", tags=["Pricing Strategies"])
    application.include_router(facilities_router, prefix="/api/facilities", tags=["Facilities"])

    logger.info(f"{settings.app_name} API configured (mock_mode={settings.mock_mode})")
    return application


# Module-level instance for `uvicorn facility_pricing.api:app`
app = create_app()
