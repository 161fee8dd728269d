from typing import Optional

import structlog
from openai import AsyncOpenAI

from ..completion_client import TextCompletionClient
from ...config.settings import Settings

logger = structlog.get_logger(__name__)


class GeminiCompletionClient(TextCompletionClient):
    """Client for Google Gemini through its OpenAI-compatible endpoint."""

    provider = "gemini"

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str,
        temperature: float = 0.4,
        max_tokens: Optional[int] = None,
    ):
        if not api_key:
            raise ValueError("Gemini API key is required")

        self.client = AsyncOpenAI(api_key=api_key, base_url=base_url)
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        logger.info("Gemini client initialized", model=model)

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiCompletionClient":
        return cls(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            base_url=settings.gemini_base_url,
        )

    async def complete(self, prompt: str) -> str:
        kwargs = {}
        if self.max_tokens:
            kwargs["max_tokens"] = self.max_tokens

        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=self.temperature,
            **kwargs
        )

        text = response.choices[0].message.content or ""
        logger.debug("Received response from Gemini", response_length=len(text))
        return text

    async def aclose(self) -> None:
        await self.client.close()
