"""
VMake AI Bot - Project Planning Assistant

A lead-generation chatbot for electronics/robotics projects: collects the
project details, generates a parts list and feasibility analysis with Gemini,
stores the submission in Google Sheets and records the payment confirmation.
"""

__version__ = "1.0.0"
__author__ = "VMake Technologies"

from .core.app import create_app
from .client.conversation import ConversationEngine

__all__ = ["create_app", "ConversationEngine"]
