"""
Text-completion client interface.

The AI service only needs "prompt in, text out"; providers implement this
interface so they can be swapped (or faked in tests) without touching callers.
"""

from abc import ABC, abstractmethod


class TextCompletionClient(ABC):
    """A generative model that completes a single prompt."""

    provider: str = ""

    @abstractmethod
    async def complete(self, prompt: str) -> str:
        """Return the model's raw text for the prompt."""

    async def aclose(self) -> None:
        """Release any underlying connections."""
