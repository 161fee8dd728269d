"""
Domain services: AI generation and project storage.
"""

from .ai_service import ProjectAIService, clean_json_response, create_ai_service
from .project_store import ProjectStore

__all__ = ["ProjectAIService", "ProjectStore", "clean_json_response", "create_ai_service"]
