"""
Google Sheets integration.
"""

from .sheets_client import GoogleSheetsRowStore, RowStore

__all__ = ["GoogleSheetsRowStore", "RowStore"]
