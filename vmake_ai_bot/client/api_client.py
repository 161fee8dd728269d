"""
HTTP client for the VMake AI Bot API.

Every call raises one of:
    NetworkError        - nothing came back from the server
    ApiTimeoutError     - the client stopped waiting
    ServerResponseError - the server answered 4xx/5xx or {"success": false}
"""

import asyncio
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx
import structlog

from ..config.settings import get_settings
from ..core.exceptions import ApiTimeoutError, NetworkError, ServerResponseError
from .retry import idempotent

logger = structlog.get_logger(__name__)


class VMakeApiClient:
    """Async wrapper around the project endpoints."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        retry_attempts: Optional[int] = None,
        retry_base_delay: float = 1.0,
        retry_max_delay: float = 10.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        settings = get_settings()
        self.base_url = base_url or settings.api_base_url
        self.timeout = timeout if timeout is not None else settings.client_timeout_seconds
        self.retry_attempts = retry_attempts if retry_attempts is not None else settings.client_retry_attempts
        self.retry_base_delay = retry_base_delay
        self.retry_max_delay = retry_max_delay
        self.sleep = sleep

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    async def __aenter__(self) -> "VMakeApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    @idempotent
    async def health(self) -> Dict[str, Any]:
        return await self._request("GET", "/api/health", "Failed to connect to server", envelope=False)

    @idempotent
    async def test_gemini(self) -> Dict[str, Any]:
        return await self._request("GET", "/api/test-gemini", "Failed to connect to Gemini AI")

    async def process_project(self, project_data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/api/process-project", "Failed to process project", project_data)

    async def store_project(self, project_data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/api/store-project", "Failed to store project", project_data)

    async def verify_payment(self, transaction_id: str) -> Dict[str, Any]:
        return await self._request(
            "POST",
            "/api/verify-payment",
            "Failed to verify payment",
            {"transactionId": transaction_id},
        )

    async def update_project_status(self, project_data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request(
            "POST",
            "/api/update-project-status",
            "Failed to update project status",
            project_data,
        )

    async def _request(
        self,
        method: str,
        path: str,
        failure_message: str,
        payload: Optional[Dict[str, Any]] = None,
        envelope: bool = True,
    ) -> Dict[str, Any]:
        try:
            response = await self._client.request(method, path, json=payload)
        except httpx.TimeoutException as e:
            logger.error("API request timed out", path=path, timeout=self.timeout)
            raise ApiTimeoutError(f"{failure_message}: request timed out after {self.timeout:g}s") from e
        except httpx.RequestError as e:
            logger.error("API request failed before reaching the server", path=path, error=str(e))
            raise NetworkError(f"{failure_message}: {e}") from e

        data = self._json(response)

        if response.is_error:
            message = data.get("message") or failure_message
            logger.error("API error", path=path, status_code=response.status_code, message=message)
            raise ServerResponseError(message, response.status_code)

        if envelope and data.get("success") is False:
            raise ServerResponseError(data.get("message") or failure_message, response.status_code)

        return data

    @staticmethod
    def _json(response: httpx.Response) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}
