"""
Chat client: the conversation engine and the API client it talks through.
"""

from .api_client import VMakeApiClient
from .conversation import ChatMessage, ConversationEngine, ConversationPhase, ConversationState

__all__ = [
    "ChatMessage",
    "ConversationEngine",
    "ConversationPhase",
    "ConversationState",
    "VMakeApiClient"
]
