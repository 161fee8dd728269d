"""
FastAPI dependencies that hand out the services held on app.state.

Services are built on first use so a missing API key or sheet id only fails
the endpoints that need them.
"""

import structlog
from fastapi import Request

from ..config.settings import Settings
from ..core.exceptions import GenerationError
from ..integrations.google.sheets_client import GoogleSheetsRowStore
from ..services.ai_service import ProjectAIService, create_ai_service
from ..services.project_store import ROW_WIDTH, ProjectStore

logger = structlog.get_logger(__name__)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_ai_service(request: Request) -> ProjectAIService:
    """Return the app's AI service, creating it if the key is configured."""
    state = request.app.state
    if state.ai_service is None:
        settings: Settings = state.settings
        if not settings.gemini_configured:
            raise GenerationError("Gemini API key not configured")
        state.ai_service = create_ai_service(settings.ai_provider, settings)
    return state.ai_service


def get_project_store(request: Request) -> ProjectStore:
    """Return the app's project store, connecting to Google Sheets on first use."""
    state = request.app.state
    if state.project_store is None:
        row_store = GoogleSheetsRowStore.from_settings(state.settings, width=ROW_WIDTH)
        state.project_store = ProjectStore(row_store)
    return state.project_store
