"""
Health check service endpoints.
"""

from fastapi import APIRouter, Request
from typing import Any, Dict

import structlog

from ..core.error_handlers import error_response
from ..models.api import HealthResponse
from .dependencies import get_ai_service

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get("/health")
async def health_check(request: Request) -> Dict[str, Any]:
    """Report whether the AI service is up and the Gemini key is set."""
    logger.info("Health check requested")
    settings = request.app.state.settings
    return HealthResponse(
        status="healthy",
        ai_service=request.app.state.ai_service is not None,
        gemini_configured=settings.gemini_configured,
    ).to_wire()


@router.get("/test-gemini")
async def test_gemini(request: Request):
    """Round-trip a trivial prompt through the model."""
    try:
        logger.info("Testing Gemini API connection")
        ai_service = get_ai_service(request)
        text = await ai_service.test_connection()

        logger.info("Gemini API test successful", response=text[:200])
        return {
            "success": True,
            "message": "Gemini API test successful",
            "response": text,
        }
    except Exception as e:
        logger.error("Gemini API test failed", error=str(e))
        return error_response(
            f"Gemini API test failed: {e}",
            500,
            e,
            request.app.state.settings.debug,
        )
