"""
Analytics Assistant - Backend Layer

Entry point for the mock business-analytics backend.

Run with ``uvicorn backend.app.main:app --port 3001``.
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from backend.app.config import AppConfig
from backend.app.engine.classifier import StageClassifier
from backend.app.engine.inquiry_engine import InquiryEngine
from backend.app.routes.events.events_route import router as events_router
from backend.app.routes.inquiry.inquiry_route import router as inquiry_router
from backend.app.routes.inquiry.session_route import router as session_router

logger = logging.getLogger(__name__)

_ENDPOINTS = [
    "POST /api/sessions - Create a new session",
    "GET /api/sessions/{sessionId} - Get session details",
    "GET /api/sessions/{sessionId}/validate - Check that a session exists",
    "GET /api/sessions/{sessionId}/inquiries - List inquiries of a session",
    "POST /api/sessions/{sessionId}/inquiries - Submit a new inquiry",
    "GET /api/inquiries/{inquiryId} - Get inquiry status and details",
    "GET /api/inquiries/{inquiryId}/stream - Stream the answer",
    "WS /ws - inquiry_updated events",
]


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )


def create_app(
    config: Optional[AppConfig] = None,
    classifier: Optional[StageClassifier] = None,
) -> FastAPI:
    """Build the FastAPI application with its own engine instance."""
    config = config or AppConfig()
    engine = InquiryEngine.from_config(config, classifier=classifier)

    # Application lifespan (startup / shutdown)
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # --- Startup ---
        logger.info("Starting Analytics Assistant backend...")
        logger.info("Available endpoints:")
        for line in _ENDPOINTS:
            logger.info("  %s", line)

        yield  # Application runs here.

        # --- Shutdown ---
        await engine.shutdown()
        logger.info("Shutting down Analytics Assistant backend.")

    app = FastAPI(
        title="Analytics Assistant",
        description="Mock natural-language business analytics backend",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.engine = engine
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s - %d (%.0fms)",
            request.method, request.url.path, response.status_code, duration_ms,
        )
        return response

    # Routes
    app.include_router(session_router)
    app.include_router(inquiry_router)
    app.include_router(events_router)

    # Health check
    @app.get("/health")
    async def health_check():
        """Liveness probe with in-memory store counters."""
        return {
            "status": "healthy",
            "sessions": engine.sessions.count(),
            "inquiries": engine.inquiries.count(),
            "processing": engine.pipeline.active_count,
            "subscribers": engine.broadcaster.subscriber_count,
        }

    return app


_config = AppConfig()
configure_logging(_config.log_level)

# Application
app = create_app(_config)
