"""
Error taxonomy for the bot.

Gateway errors (AI and store) surface as 500 envelopes at the HTTP layer.
Client errors are raised by the API client and caught by the conversation
engine, which turns them into the error banner.
"""

from typing import Optional


class VMakeBotError(Exception):
    """Base class for every error raised by this package."""


class AnswerValidationError(VMakeBotError):
    """An intake answer failed its question's validator. Never leaves the client."""

    def __init__(self, question_id: str, message: str):
        super().__init__(message)
        self.question_id = question_id
        self.message = message


# AI gateway

class AIServiceError(VMakeBotError):
    """Base class for AI gateway failures."""


class GenerationError(AIServiceError):
    """The completion service call failed or timed out."""


class ParseError(AIServiceError):
    """The model's cleaned response was not the JSON document we asked for."""


class FormatError(AIServiceError):
    """The model's JSON parsed but has fields of the wrong shape."""


# Persistence gateway

class StoreError(VMakeBotError):
    """The backing row store failed or is not configured."""


class ProjectNotFoundError(StoreError):
    """No stored row matches the lookup key of a status update."""


# API client

class ApiClientError(VMakeBotError):
    """Base class for errors seen by the API client."""


class NetworkError(ApiClientError):
    """The request never got a response from the server."""


class ApiTimeoutError(ApiClientError):
    """The client gave up waiting for the server."""


class ServerResponseError(ApiClientError):
    """The server answered with a 4xx/5xx status or a failed envelope."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @property
    def is_server_error(self) -> bool:
        return self.status_code is not None and self.status_code >= 500
