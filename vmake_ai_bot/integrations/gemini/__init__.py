"""
Google Gemini integration.
"""

from .gemini_client import GeminiCompletionClient

__all__ = ["GeminiCompletionClient"]
