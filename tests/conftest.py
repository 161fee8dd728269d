"""
Pytest configuration and fixtures.
"""

import copy
import json
from typing import Any, Dict, List

import pytest
from fastapi.testclient import TestClient

from vmake_ai_bot.config.settings import Settings
from vmake_ai_bot.core.app import create_app
from vmake_ai_bot.integrations.completion_client import TextCompletionClient
from vmake_ai_bot.integrations.google.sheets_client import RowStore
from vmake_ai_bot.services.ai_service import ProjectAIService
from vmake_ai_bot.services.project_store import ProjectStore

HEADER_ROW = [
    "Timestamp", "Name", "Email", "Phone", "Project Name", "Description",
    "Timeline", "Budget", "Location", "Results", "Service Type",
    "Transaction ID", "Status", "Submission ID",
]

PARTS_LIST = {
    "parts": [
        {"name": "Arduino Uno", "quantity": 1, "price": 450, "description": "Main controller", "optional": False},
        {"name": "SG90 Servo", "quantity": 4, "price": 120, "description": "Leg joints", "optional": False},
        {"name": "OLED display", "quantity": 1, "price": 250, "description": "Status screen", "optional": True},
    ],
    "totalCost": 1180,
    "additionalNotes": ["Servos need a separate 5V supply"],
}

ANALYSIS = {
    "feasibility": "HIGH",
    "estimatedTime": "2 weeks",
    "complexity": "INTERMEDIATE",
    "challenges": [{"type": "TECHNICAL", "description": "Servo calibration"}],
    "recommendations": [{"category": "SAFETY", "description": "Fuse the battery pack"}],
    "safetyConsiderations": ["Disconnect power while wiring"],
    "prerequisiteKnowledge": ["Basic C++"],
    "estimatedCost": {"min": 1000, "max": 1500, "currency": "INR"},
}

SUBMISSION = {
    "name": "A",
    "email": "a@b.com",
    "phone": "1234567890",
    "projectName": "P",
    "description": "Ten+ char description",
    "timeline": "2 weeks",
    "budget": "500",
    "location": "X",
}


class FakeCompletionClient(TextCompletionClient):
    """Answers prompts by kind and records every prompt it saw."""

    provider = "fake"

    def __init__(self, parts_text: str = None, analysis_text: str = None, error: Exception = None):
        self.parts_text = parts_text if parts_text is not None else f"```json\n{json.dumps(PARTS_LIST)}\n```"
        self.analysis_text = analysis_text if analysis_text is not None else json.dumps(ANALYSIS)
        self.error = error
        self.prompts: List[str] = []
        self.closed = False

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        if "parts list" in prompt:
            return self.parts_text
        if "Analyze this project" in prompt:
            return self.analysis_text
        return "Hello World!"

    async def aclose(self) -> None:
        self.closed = True


class InMemoryRowStore(RowStore):
    """RowStore kept in a list of rows, header included."""

    def __init__(self, rows: List[List[str]] = None, error: Exception = None):
        self.rows = rows if rows is not None else [list(HEADER_ROW)]
        self.error = error
        self.updates: List[Dict[str, Any]] = []

    async def append_row(self, values: List[str]) -> Dict[str, Any]:
        if self.error:
            raise self.error
        self.rows.append(list(values))
        row_number = len(self.rows)
        return {"updates": {"updatedRange": f"Sheet1!A{row_number}:N{row_number}"}}

    async def get_rows(self) -> List[List[str]]:
        if self.error:
            raise self.error
        return copy.deepcopy(self.rows)

    async def update_cells(self, row_index: int, first_column: int, values: List[str]) -> Dict[str, Any]:
        if self.error:
            raise self.error
        row = self.rows[row_index]
        while len(row) < first_column + len(values):
            row.append("")
        row[first_column:first_column + len(values)] = values
        self.updates.append({"row_index": row_index, "first_column": first_column, "values": values})
        return {"updatedCells": len(values)}


@pytest.fixture
def settings():
    """Get test settings, isolated from any local .env file."""
    return Settings(
        _env_file=None,
        gemini_api_key="test-key",
        google_sheet_id="test-sheet",
        debug=False,
        ai_timeout_seconds=5,
    )


@pytest.fixture
def completion_client():
    return FakeCompletionClient()


@pytest.fixture
def ai_service(completion_client):
    return ProjectAIService(completion_client)


@pytest.fixture
def row_store():
    return InMemoryRowStore()


@pytest.fixture
def project_store(row_store):
    return ProjectStore(row_store)


@pytest.fixture
def app(settings, ai_service, project_store):
    return create_app(settings, ai_service=ai_service, project_store=project_store)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def submission():
    return dict(SUBMISSION)
