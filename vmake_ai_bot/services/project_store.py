"""
Project store.
Persists one row per submitted project and records payment status against it.

Row layout (0-based column index in brackets):
    A[0] timestamp, B[1] name, C[2] email, D[3] phone, E[4] projectName,
    F[5] description, G[6] timeline, H[7] budget, I[8] location,
    J[9] serialized results, K[10] serviceType, L[11] transactionId,
    M[12] status, N[13] submissionId
"""

import json
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import structlog

from ..core.exceptions import ProjectNotFoundError, StoreError
from ..integrations.google.sheets_client import RowStore
from ..models.project import ProjectSubmission, StatusUpdate, StoredProject

logger = structlog.get_logger(__name__)

EMAIL_COLUMN = 2
RESULTS_COLUMN = 9
STATUS_FIRST_COLUMN = 10
SUBMISSION_ID_COLUMN = 13
ROW_WIDTH = 14


def new_submission_id() -> str:
    return uuid.uuid4().hex


def _cell(row: List[str], index: int) -> str:
    return row[index] if index < len(row) and row[index] is not None else ""


def _load_results(raw: str) -> Optional[Dict[str, Any]]:
    if not raw:
        return None
    try:
        results = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Skipping malformed results column", preview=raw[:80])
        return None
    return results if isinstance(results, dict) else None


class ProjectStore:
    """Append/query/update access to submitted projects in a RowStore."""

    def __init__(self, row_store: RowStore):
        self.row_store = row_store

    async def append(
        self,
        submission: ProjectSubmission,
        results: Optional[Dict[str, Any]] = None,
        submission_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Append a submission row.

        Args:
            submission: the intake answers
            results: {"partsList": ..., "analysis": ...} as returned by the AI service
            submission_id: key for later status updates; generated when missing

        Returns:
            {"updatedRange": ..., "submissionId": ...}
        """
        submission_id = submission_id or new_submission_id()
        row = [
            datetime.now(timezone.utc).isoformat(),
            submission.name,
            submission.email,
            submission.phone,
            submission.project_name,
            submission.description,
            submission.timeline,
            submission.budget,
            submission.location,
            json.dumps(results) if results is not None else "",
            "",
            "",
            "",
            submission_id,
        ]

        logger.info("Adding project to sheet", project_name=submission.project_name, submission_id=submission_id)
        try:
            response = await self.row_store.append_row(row)
        except Exception as e:
            logger.error("Error adding project to sheet", error=str(e))
            raise StoreError(f"Failed to add project to sheet: {e}") from e

        return {
            "updatedRange": (response or {}).get("updates", {}).get("updatedRange"),
            "submissionId": submission_id,
        }

    async def query(self) -> List[StoredProject]:
        """Return every stored project, skipping the header row."""
        rows = await self._read_rows("Failed to fetch projects")

        projects = []
        for row in rows[1:]:
            projects.append(StoredProject(
                timestamp=_cell(row, 0),
                name=_cell(row, 1),
                email=_cell(row, 2),
                phone=_cell(row, 3),
                project_name=_cell(row, 4),
                description=_cell(row, 5),
                timeline=_cell(row, 6),
                budget=_cell(row, 7),
                location=_cell(row, 8),
                results=_load_results(_cell(row, RESULTS_COLUMN)),
                service_type=_cell(row, 10),
                transaction_id=_cell(row, 11),
                status=_cell(row, 12),
                submission_id=_cell(row, SUBMISSION_ID_COLUMN),
            ))
        return projects

    async def update_status(self, update: StatusUpdate) -> Dict[str, Any]:
        """
        Overwrite serviceType, transactionId and status (columns K-M) of one row.

        The row is found by submission id when the update carries one,
        otherwise by the first row whose email matches.

        Raises:
            ProjectNotFoundError: no row matches
            StoreError: the backing store failed
        """
        rows = await self._read_rows("Failed to update project status")
        row_index = self._find_row(rows, update)
        if row_index is None:
            logger.warning("Project not found for status update", email=update.email, submission_id=update.submission_id)
            raise ProjectNotFoundError("Project not found")

        try:
            await self.row_store.update_cells(
                row_index,
                STATUS_FIRST_COLUMN,
                [update.service_type, update.transaction_id, update.status],
            )
        except Exception as e:
            logger.error("Error updating project status in sheet", error=str(e))
            raise StoreError(f"Failed to update project status: {e}") from e

        logger.info("Project status updated", row=row_index + 1, status=update.status)
        return {"success": True, "message": "Project status updated successfully"}

    async def _read_rows(self, failure: str) -> List[List[str]]:
        try:
            return await self.row_store.get_rows()
        except Exception as e:
            logger.error("Error reading projects from sheet", error=str(e))
            raise StoreError(f"{failure}: {e}") from e

    @staticmethod
    def _find_row(rows: List[List[str]], update: StatusUpdate) -> Optional[int]:
        if update.submission_id:
            for index, row in enumerate(rows):
                if _cell(row, SUBMISSION_ID_COLUMN) == update.submission_id:
                    return index

        if update.email:
            for index, row in enumerate(rows):
                if _cell(row, EMAIL_COLUMN) == update.email:
                    return index
        return None
