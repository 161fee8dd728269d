"""
Project API endpoints.
Handles AI processing, storage, payment verification and status updates for
chat submissions.
"""

import asyncio
from typing import Awaitable, TypeVar

import structlog
from fastapi import APIRouter, Depends

from ..config.settings import Settings
from ..core.error_handlers import error_response
from ..core.exceptions import GenerationError, ProjectNotFoundError
from ..models.api import (
    ProcessProjectRequest,
    StoreProjectRequest,
    UpdateProjectStatusRequest,
    VerifyPaymentRequest
)
from ..services.ai_service import ProjectAIService
from ..services.project_store import ProjectStore, new_submission_id
from .dependencies import get_ai_service, get_app_settings, get_project_store

logger = structlog.get_logger(__name__)
router = APIRouter()

T = TypeVar("T")

MIN_TRANSACTION_ID_LENGTH = 6


async def _with_timeout(call: Awaitable[T], seconds: float, message: str) -> T:
    try:
        return await asyncio.wait_for(call, timeout=seconds)
    except asyncio.TimeoutError as e:
        raise GenerationError(message) from e


@router.post("/process-project")
async def process_project(
    payload: ProcessProjectRequest,
    ai_service: ProjectAIService = Depends(get_ai_service),
    settings: Settings = Depends(get_app_settings)
):
    """
    Generate the parts list and feasibility analysis for a submission.

    Each AI call is bounded by AI_TIMEOUT_SECONDS. The returned submissionId
    should be passed back to store-project and update-project-status.
    """
    try:
        logger.info("Processing project request received", project_name=payload.project_name)

        parts_list = await _with_timeout(
            ai_service.generate_parts_list(payload.description),
            settings.ai_timeout_seconds,
            "Parts list generation timed out",
        )
        logger.info("Parts list generated successfully")

        analysis = await _with_timeout(
            ai_service.analyze_project(payload),
            settings.ai_timeout_seconds,
            "Project analysis timed out",
        )
        logger.info("Project analysis completed")

        return {
            "success": True,
            "partsList": parts_list.to_wire(),
            "analysis": analysis.to_wire(),
            "submissionId": new_submission_id(),
        }

    except Exception as e:
        logger.error("Error processing project", error=str(e), error_type=type(e).__name__)
        return error_response(str(e) or "Failed to process project", 500, e, settings.debug)


@router.post("/store-project")
async def store_project(
    payload: StoreProjectRequest,
    store: ProjectStore = Depends(get_project_store),
    settings: Settings = Depends(get_app_settings)
):
    """Append the submission and its AI results to the project sheet."""
    try:
        logger.info("Storing project data", project_name=payload.project_name)

        result = await store.append(
            payload.submission(),
            payload.results(),
            submission_id=payload.submission_id,
        )

        logger.info("Project stored successfully", submission_id=result["submissionId"])
        return {"success": True, "data": result}

    except Exception as e:
        logger.error("Error storing project", error=str(e))
        return error_response(str(e) or "Failed to store project", 500, e, settings.debug)


@router.post("/verify-payment")
async def verify_payment(payload: VerifyPaymentRequest):
    """
    Accept any transaction id longer than five characters.

    There is no payment gateway behind this check.
    """
    transaction_id = payload.transaction_id
    logger.info("Payment verification requested", transaction_id=transaction_id)

    if not transaction_id or len(transaction_id) < MIN_TRANSACTION_ID_LENGTH:
        logger.warning("Invalid transaction ID provided", transaction_id=transaction_id)
        return error_response("Invalid transaction ID", 400)

    logger.info("Payment verified successfully", transaction_id=transaction_id)
    return {"success": True, "message": "Payment verified successfully"}


@router.post("/update-project-status")
async def update_project_status(
    payload: UpdateProjectStatusRequest,
    store: ProjectStore = Depends(get_project_store),
    settings: Settings = Depends(get_app_settings)
):
    """Record the chosen service, transaction id and status on the stored row."""
    try:
        logger.info(
            "Updating project status",
            project_name=payload.project_name,
            new_status=payload.status,
            submission_id=payload.submission_id,
        )

        await store.update_status(payload)

        logger.info("Project status updated successfully", new_status=payload.status)
        return {"success": True, "message": "Project status updated successfully"}

    except ProjectNotFoundError as e:
        logger.warning("No stored project matches status update", email=payload.email)
        return error_response(str(e), 500, e, settings.debug)
    except Exception as e:
        logger.error("Error updating project status", error=str(e))
        return error_response(str(e) or "Failed to update project status", 500, e, settings.debug)
