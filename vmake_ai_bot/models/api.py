"""
Request and response models for the HTTP API.
Every response carries a `success` flag; failures add a `message`.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from .project import CamelModel, ProjectSubmission, StatusUpdate


class ProcessProjectRequest(ProjectSubmission):
    """Body of POST /api/process-project. Only the description is required."""
    description: str = Field(..., min_length=1)


class StoreProjectRequest(ProjectSubmission):
    """Body of POST /api/store-project: the submission plus the AI results."""
    parts_list: Optional[Dict[str, Any]] = None
    analysis: Optional[Dict[str, Any]] = None
    submission_id: Optional[str] = None

    def submission(self) -> ProjectSubmission:
        return ProjectSubmission.model_validate(
            self.model_dump(include=set(ProjectSubmission.model_fields))
        )

    def results(self) -> Dict[str, Any]:
        return {"partsList": self.parts_list, "analysis": self.analysis}


class VerifyPaymentRequest(CamelModel):
    transaction_id: Optional[str] = None


class UpdateProjectStatusRequest(StatusUpdate):
    """Body of POST /api/update-project-status."""


class HealthResponse(CamelModel):
    status: str
    ai_service: bool
    gemini_configured: bool


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    error: Optional[str] = None
