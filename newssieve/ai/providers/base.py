"""
Base Text Oracle Interface
==========================

Abstract base class for the text-in/text-out AI providers used by the
classifier and the summarizer.
"""

import re
from abc import ABC, abstractmethod
from typing import Optional

from ...utils.exceptions import AIError, ErrorCode


REASONING_PATTERNS = (
    re.compile(r"<think>.*?</think>", re.IGNORECASE | re.DOTALL),
    re.compile(r"<thinking>.*?</thinking>", re.IGNORECASE | re.DOTALL),
)

SYSTEM_PROMPT = (
    "You are a precise news-processing assistant. Follow the instructions "
    "exactly and answer in the requested format only."
)


def strip_reasoning(text: Optional[str]) -> str:
    """Remove paired reasoning blocks some models emit before the answer."""
    if not text:
        return ""
    for pattern in REASONING_PATTERNS:
        text = pattern.sub("", text)
    return text.strip()


class TextOracle(ABC):
    """A chat model reduced to ``ask(prompt) -> text``."""

    provider_name = "oracle"

    def __init__(self, api_key: str, model_name: str, temperature: float = 0.7,
                 max_tokens: int = 8192, timeout: float = 60):
        """Initialize provider.

        Args:
            api_key: API key for the provider
            model_name: Model to use for requests
            temperature: Sampling temperature
            max_tokens: Maximum tokens in a reply
            timeout: Request timeout in seconds

        Raises:
            AIError: If the API key is empty
        """
        if not api_key:
            raise AIError(
                f"{self.provider_name} API key is required",
                provider=self.provider_name,
                error_code=ErrorCode.AI_INVALID_CREDENTIALS,
                recoverable=False,
            )
        self.api_key = api_key
        self.model_name = model_name
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout

    def ask(self, prompt: str) -> str:
        """Send ``prompt`` and return the reply text.

        Raises:
            AIError: On transport, quota, auth failure or an empty reply
        """
        reply = self._complete(prompt)
        if not reply or not reply.strip():
            raise AIError(
                f"Empty response from {self.provider_name}",
                provider=self.provider_name,
                error_code=ErrorCode.AI_EMPTY_RESPONSE,
            )
        return reply

    @abstractmethod
    def _complete(self, prompt: str) -> Optional[str]:
        """Provider-specific completion call returning raw reply text."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(model={self.model_name!r})"
