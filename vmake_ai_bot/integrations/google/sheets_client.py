"""
Row store backed by a Google Sheets tab.

The Sheets client library is synchronous, so each request is executed in a
worker thread to keep the event loop free.
"""

import asyncio
import json
import os
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import structlog
from google.oauth2 import service_account
from googleapiclient.discovery import build

from ...config.settings import Settings
from ...core.exceptions import StoreError

logger = structlog.get_logger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


def column_letter(index: int) -> str:
    """Convert a 0-based column index to its A1 letter (0 -> A, 26 -> AA)."""
    letters = ""
    index += 1
    while index:
        index, remainder = divmod(index - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


class RowStore(ABC):
    """A row-oriented table: append rows, read them all, overwrite cells."""

    @abstractmethod
    async def append_row(self, values: List[str]) -> Dict[str, Any]:
        """Append one row after the last non-empty row."""

    @abstractmethod
    async def get_rows(self) -> List[List[str]]:
        """Return every row, header included. Trailing empty cells may be omitted."""

    @abstractmethod
    async def update_cells(self, row_index: int, first_column: int, values: List[str]) -> Dict[str, Any]:
        """Overwrite consecutive cells of one row, starting at a 0-based column."""


class GoogleSheetsRowStore(RowStore):
    """RowStore over one tab of a Google spreadsheet."""

    def __init__(
        self,
        spreadsheet_id: str,
        sheet_name: str = "Sheet1",
        credentials: Optional[service_account.Credentials] = None,
        width: int = 14,
        value_input_option: str = "USER_ENTERED",
        service: Any = None,
    ):
        self.spreadsheet_id = spreadsheet_id
        self.sheet_name = sheet_name
        self.width = width
        self.value_input_option = value_input_option
        self._service = service or build("sheets", "v4", credentials=credentials, cache_discovery=False)
        logger.info("Google Sheets row store initialized", sheet_id=spreadsheet_id, sheet_name=sheet_name)

    @classmethod
    def from_settings(cls, settings: Settings, width: int = 14) -> "GoogleSheetsRowStore":
        if not settings.google_sheet_id:
            raise StoreError("GOOGLE_SHEET_ID is not defined in environment variables.")

        return cls(
            spreadsheet_id=settings.google_sheet_id,
            sheet_name=settings.google_sheet_name,
            credentials=load_credentials(settings),
            width=width,
        )

    @property
    def full_range(self) -> str:
        return f"{self.sheet_name}!A:{column_letter(self.width - 1)}"

    @property
    def _values(self):
        return self._service.spreadsheets().values()

    async def append_row(self, values: List[str]) -> Dict[str, Any]:
        request = self._values.append(
            spreadsheetId=self.spreadsheet_id,
            range=self.full_range,
            valueInputOption=self.value_input_option,
            body={"values": [values]},
        )
        response = await asyncio.to_thread(request.execute)
        logger.debug("Appended row to sheet", updated_range=response.get("updates", {}).get("updatedRange"))
        return response

    async def get_rows(self) -> List[List[str]]:
        request = self._values.get(spreadsheetId=self.spreadsheet_id, range=self.full_range)
        response = await asyncio.to_thread(request.execute)
        return response.get("values", [])

    async def update_cells(self, row_index: int, first_column: int, values: List[str]) -> Dict[str, Any]:
        row_number = row_index + 1
        last_column = first_column + len(values) - 1
        update_range = (
            f"{self.sheet_name}!{column_letter(first_column)}{row_number}:"
            f"{column_letter(last_column)}{row_number}"
        )
        request = self._values.update(
            spreadsheetId=self.spreadsheet_id,
            range=update_range,
            valueInputOption=self.value_input_option,
            body={"values": [values]},
        )
        response = await asyncio.to_thread(request.execute)
        logger.debug("Updated sheet cells", range=update_range)
        return response


def load_credentials(settings: Settings) -> service_account.Credentials:
    """
    Load service-account credentials.

    GOOGLE_CREDENTIALS (inline JSON) wins; otherwise the key file named by
    GOOGLE_CREDENTIALS_FILE is read.
    """
    try:
        if settings.google_credentials:
            info = json.loads(settings.google_credentials)
            return service_account.Credentials.from_service_account_info(info, scopes=SCOPES)

        if not os.path.exists(settings.google_credentials_file):
            raise StoreError(f"credentials.json not found at {settings.google_credentials_file}")

        return service_account.Credentials.from_service_account_file(
            settings.google_credentials_file, scopes=SCOPES
        )
    except StoreError:
        raise
    except Exception as e:
        logger.error("Error initializing Google auth", error=str(e))
        raise StoreError(f"Failed to initialize Google Sheets authentication: {e}") from e
