"""
Core FastAPI application factory.
"""

import logging
import time
from datetime import datetime
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from ..config.settings import Settings, get_settings
from ..api.health import router as health_router
from ..api.projects import router as projects_router
from ..services.ai_service import ProjectAIService, create_ai_service
from ..services.project_store import ProjectStore
from .error_handlers import register_exception_handlers


def configure_logging(log_level: str = "INFO"):
    """Configure structured logging."""
    logging.basicConfig(format="%(message)s", level=log_level.upper())

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def create_app(
    settings: Optional[Settings] = None,
    ai_service: Optional[ProjectAIService] = None,
    project_store: Optional[ProjectStore] = None,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    The AI service and project store can be injected; otherwise the AI service
    is built here when GEMINI_API_KEY is set and the store on first request.
    """
    settings = settings or get_settings()

    # Configure logging
    configure_logging(settings.log_level)
    logger = structlog.get_logger(__name__)

    # Create FastAPI app
    app = FastAPI(
        title=settings.app_name,
        description="Electronics/robotics project planning chatbot backend",
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc"
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    if ai_service is None and settings.gemini_configured:
        try:
            ai_service = create_ai_service(settings.ai_provider, settings)
            logger.info("AI Service initialized successfully")
        except Exception as e:
            logger.error("Failed to initialize AI Service", error=str(e))

    app.state.settings = settings
    app.state.ai_service = ai_service
    app.state.project_store = project_store

    register_exception_handlers(app)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log every request with its status and duration."""
        started = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "Handled request",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        return response

    @app.on_event("startup")
    async def startup_event():
        logger.info(
            "Server configuration",
            port=settings.api_port,
            environment=settings.environment,
            cors_origin=settings.cors_origin,
            gemini_api_configured=settings.gemini_configured,
            google_sheets_configured=settings.sheets_configured,
        )

    @app.on_event("shutdown")
    async def shutdown_event():
        service = app.state.ai_service
        if service is not None:
            await service.completion_client.aclose()

    # Include routers
    app.include_router(health_router, prefix="/api", tags=["health"])
    app.include_router(projects_router, prefix="/api", tags=["projects"])

    # Add root route
    @app.get("/")
    async def root():
        """Root endpoint with API information."""
        return {
            "message": settings.app_name,
            "version": settings.app_version,
            "status": "running",
            "timestamp": datetime.now().isoformat(),
            "docs": "/docs",
            "endpoints": {
                "health": "/api/health",
                "test_gemini": "/api/test-gemini",
                "process_project": "/api/process-project",
                "store_project": "/api/store-project",
                "verify_payment": "/api/verify-payment",
                "update_project_status": "/api/update-project-status"
            }
        }

    return app
