# Models Module
"""
Pydantic models for request/response validation.
"""

from .project import (
    CamelModel,
    Challenge,
    Complexity,
    EstimatedCost,
    Feasibility,
    Part,
    PartsList,
    ProjectAnalysis,
    ProjectSubmission,
    Recommendation,
    StatusUpdate,
    StoredProject
)

from .api import (
    ErrorResponse,
    HealthResponse,
    ProcessProjectRequest,
    StoreProjectRequest,
    UpdateProjectStatusRequest,
    VerifyPaymentRequest
)

__all__ = [
    # Project models
    "CamelModel",
    "Challenge",
    "Complexity",
    "EstimatedCost",
    "Feasibility",
    "Part",
    "PartsList",
    "ProjectAnalysis",
    "ProjectSubmission",
    "Recommendation",
    "StatusUpdate",
    "StoredProject",

    # API models
    "ErrorResponse",
    "HealthResponse",
    "ProcessProjectRequest",
    "StoreProjectRequest",
    "UpdateProjectStatusRequest",
    "VerifyPaymentRequest"
]
